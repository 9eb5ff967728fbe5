from ..extensions import db

# Seed data. The first five carry explicit weights in the fit-score table.
DEFAULT_SKILLS = ["Next.js", "Supabase", "Docker", "TypeScript", "Node.js", "Python", "React", "PostgreSQL"]

candidate_skills = db.Table(
    "candidate_skills",
    db.Column("candidate_id", db.Integer, db.ForeignKey("candidates.id", ondelete="CASCADE"), primary_key=True),
    db.Column("skill_id", db.Integer, db.ForeignKey("skills.id", ondelete="CASCADE"), primary_key=True),
)


class Skill(db.Model):
    __tablename__ = "skills"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(80), nullable=False, unique=True)

    def to_dict(self):
        return {"id": self.id, "name": self.name}

    def __repr__(self) -> str:
        return f"<Skill id={self.id} name={self.name!r}>"


def seed_skills(names=DEFAULT_SKILLS):
    """Insert any missing skills by name and return how many were added."""
    existing = {s.name for s in Skill.query.all()}
    added = 0
    for name in names:
        if name not in existing:
            db.session.add(Skill(name=name))
            added += 1
    db.session.commit()
    return added
