from ..extensions import db
from .base import TimestampMixin
from .skill import candidate_skills

SENIORITY_LEVELS = ("Junior", "Mid", "Senior")

# llm_analysis_status: pending -> processing -> completed | failed
ANALYSIS_PENDING = "pending"
ANALYSIS_PROCESSING = "processing"
ANALYSIS_COMPLETED = "completed"
ANALYSIS_FAILED = "failed"

# notification_status: pending -> sent
NOTIFICATION_PENDING = "pending"
NOTIFICATION_SENT = "sent"


class Candidate(db.Model, TimestampMixin):
    __tablename__ = "candidates"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(254), nullable=False, unique=True, index=True)
    phone = db.Column(db.String(40))
    seniority = db.Column(db.String(20), nullable=False)
    profile_summary = db.Column(db.Text)

    # ratings (only used by the "ratings" scoring variant)
    performance = db.Column(db.Integer)
    energy = db.Column(db.Integer)
    culture = db.Column(db.Integer)

    # written once at creation
    fit_score = db.Column(db.Integer, nullable=False, index=True)
    fit_score_classification = db.Column(db.String(40), nullable=False, index=True)

    llm_analysis_status = db.Column(db.String(20), nullable=False, default=ANALYSIS_PENDING, index=True)
    llm_analysis = db.Column(db.Text)
    llm_analysis_claimed_at = db.Column(db.DateTime)
    notification_status = db.Column(db.String(20), nullable=False, default=NOTIFICATION_PENDING, index=True)

    skills = db.relationship("Skill", secondary=candidate_skills, lazy="selectin", order_by="Skill.name")

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "seniority": self.seniority,
            "profile_summary": self.profile_summary,
            "performance": self.performance,
            "energy": self.energy,
            "culture": self.culture,
            "fit_score": self.fit_score,
            "fit_score_classification": self.fit_score_classification,
            "llm_analysis_status": self.llm_analysis_status,
            "llm_analysis": self.llm_analysis,
            "notification_status": self.notification_status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "skills": [{"name": s.name} for s in self.skills],
        }

    def __repr__(self) -> str:
        return f"<Candidate id={self.id} name={self.name!r}>"
