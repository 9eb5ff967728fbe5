from datetime import datetime, timedelta
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from ..extensions import db
from ..models.candidate import (
    Candidate,
    ANALYSIS_PENDING,
    ANALYSIS_PROCESSING,
    ANALYSIS_COMPLETED,
    ANALYSIS_FAILED,
)
from ..services import openai_wrap


def release_stale_claims(stale_after: int, now=None) -> int:
    """Put analyses stuck in 'processing' for over ``stale_after`` seconds back to 'pending'.

    A claim only goes stale when the worker died between claiming and
    finishing a record.
    """
    cutoff = (now or datetime.utcnow()) - timedelta(seconds=stale_after)
    released = (Candidate.query
                .filter(Candidate.llm_analysis_status == ANALYSIS_PROCESSING,
                        Candidate.llm_analysis_claimed_at < cutoff)
                .update({Candidate.llm_analysis_status: ANALYSIS_PENDING,
                         Candidate.llm_analysis_claimed_at: None},
                        synchronize_session=False))
    db.session.commit()
    if released:
        current_app.logger.warning('[analysis] released %s stale claim(s) older than %ss', released, stale_after)
    return released


def claim(candidate_id: int) -> bool:
    """Atomically move a candidate from 'pending' to 'processing'.

    Returns False when another worker got there first.
    """
    claimed = (Candidate.query
               .filter_by(id=candidate_id, llm_analysis_status=ANALYSIS_PENDING)
               .update({Candidate.llm_analysis_status: ANALYSIS_PROCESSING,
                        Candidate.llm_analysis_claimed_at: datetime.utcnow()},
                       synchronize_session=False))
    db.session.commit()
    return bool(claimed)


def _finish(candidate_id: int, status: str, text=None):
    try:
        (Candidate.query
         .filter_by(id=candidate_id, llm_analysis_status=ANALYSIS_PROCESSING)
         .update({Candidate.llm_analysis_status: status,
                  Candidate.llm_analysis: text},
                 synchronize_session=False))
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('[analysis] failed to store %s status for candidate id=%s', status, candidate_id)


def process_llm_analysis():
    """Claim one pending candidate and store an AI analysis of its profile.

    Returns the processed candidate id, or None when nothing was claimed.
    """
    stale_after = current_app.config.get('ANALYSIS_STALE_AFTER') or 0
    if stale_after > 0:
        try:
            release_stale_claims(stale_after)
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception('[analysis] stale claim recovery failed')

    current_app.logger.info('[analysis] checking candidates to analyse')
    try:
        c = (Candidate.query
             .filter_by(llm_analysis_status=ANALYSIS_PENDING)
             .order_by(Candidate.created_at.asc(), Candidate.id.asc())
             .first())
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('[analysis] failed to fetch a pending candidate')
        return None
    if c is None:
        return None

    candidate_id = c.id
    try:
        if not claim(candidate_id):
            current_app.logger.info('[analysis] candidate id=%s was claimed by another worker', candidate_id)
            return None
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('[analysis] failed to claim candidate id=%s', candidate_id)
        return None

    current_app.logger.info('[analysis] analysing candidate id=%s', candidate_id)
    try:
        text = openai_wrap.analyze_profile(c.name, c.seniority, [s.name for s in c.skills], c.profile_summary)
    except Exception:
        current_app.logger.exception('[analysis] analysis failed for candidate id=%s', candidate_id)
        _finish(candidate_id, ANALYSIS_FAILED)
        return candidate_id

    _finish(candidate_id, ANALYSIS_COMPLETED, text)
    current_app.logger.info('[analysis] candidate id=%s analysed', candidate_id)
    return candidate_id
