from datetime import datetime, timezone
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from ..extensions import db
from ..models.candidate import Candidate


def format_report(rows, min_score, generated_at=None):
    generated_at = generated_at or datetime.now(timezone.utc)
    lines = [
        "--- High-fit candidates report ---",
        f"Date: {generated_at.isoformat()}",
        f"Candidates with score >= {min_score}:",
    ]
    lines += [f"  - Name: {r.name}, Email: {r.email}, Score: {r.fit_score}" for r in rows]
    return "\n".join(lines)


def generate_high_fit_report(min_score=None):
    """Log and return a summary of candidates at or above the high-fit score.

    Returns None when nobody qualifies or the query fails.
    """
    if min_score is None:
        min_score = current_app.config.get('REPORT_MIN_SCORE', 80)
    current_app.logger.info('[report] building high-fit report')
    try:
        rows = (db.session.query(Candidate.name, Candidate.email, Candidate.fit_score)
                .filter(Candidate.fit_score >= min_score)
                .order_by(Candidate.fit_score.desc(), Candidate.id.asc())
                .all())
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('[report] query for high-fit candidates failed')
        return None

    if not rows:
        current_app.logger.info('[report] no candidates with score >= %s', min_score)
        return None

    report = format_report(rows, min_score)
    current_app.logger.info('%s', report)
    return report
