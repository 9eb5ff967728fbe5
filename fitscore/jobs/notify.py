from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from ..extensions import db
from ..models.candidate import Candidate, NOTIFICATION_PENDING, NOTIFICATION_SENT
from ..services.mail import send_result


def process_candidate_notifications():
    """Send the result email to one pending candidate.

    The row stays 'pending' when sending or the status update fails, so the
    next cycle retries it. Returns the candidate id that was marked sent.
    """
    current_app.logger.info('[notify] checking candidates to notify')
    try:
        c = (Candidate.query
             .filter_by(notification_status=NOTIFICATION_PENDING)
             .order_by(Candidate.created_at.asc(), Candidate.id.asc())
             .first())
    except SQLAlchemyError:
        current_app.logger.exception('[notify] failed to fetch a pending candidate')
        db.session.rollback()
        return None
    if c is None:
        return None

    current_app.logger.info('[notify] sending result to candidate id=%s', c.id)
    try:
        send_result(c.email, c.name, c.fit_score_classification)
    except Exception:
        current_app.logger.exception('[notify] sending result to candidate id=%s failed, will retry', c.id)
        return None

    try:
        updated = (Candidate.query
                   .filter_by(id=c.id, notification_status=NOTIFICATION_PENDING)
                   .update({Candidate.notification_status: NOTIFICATION_SENT}, synchronize_session=False))
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('[notify] failed to mark candidate id=%s as sent', c.id)
        return None
    if not updated:
        current_app.logger.warning('[notify] candidate id=%s was already marked sent', c.id)
        return None
    current_app.logger.info('[notify] candidate id=%s notified', c.id)
    return c.id
