from datetime import datetime, timedelta

import pytest

from fitscore.extensions import db
from fitscore.jobs import analysis
from fitscore.jobs.analysis import process_llm_analysis, release_stale_claims
from fitscore.models.candidate import Candidate
from fitscore.services import openai_wrap
from fitscore.services.openai_wrap import AnalysisError


def _status(candidate_id):
    return db.session.get(Candidate, candidate_id, populate_existing=True).llm_analysis_status


def test_empty_queue_is_a_no_op(app, monkeypatch):
    def never(*a, **kw):
        raise AssertionError("analysis must not be called")
    monkeypatch.setattr(openai_wrap, "analyze_profile", never)
    assert process_llm_analysis() is None


def test_claims_then_completes(app, make_candidate, monkeypatch):
    c = make_candidate(profile_summary="Go and Kubernetes.")
    seen = {}

    def fake(name, seniority, skills, profile_summary):
        seen["status_during_call"] = _status(c.id)
        seen["summary"] = profile_summary
        return "Strong backend profile."
    monkeypatch.setattr(openai_wrap, "analyze_profile", fake)

    assert process_llm_analysis() == c.id
    assert seen == {"status_during_call": "processing", "summary": "Go and Kubernetes."}
    row = db.session.get(Candidate, c.id, populate_existing=True)
    assert row.llm_analysis_status == "completed"
    assert row.llm_analysis == "Strong backend profile."
    assert row.llm_analysis_claimed_at is not None


def test_failed_analysis_is_terminal(app, make_candidate, monkeypatch):
    c = make_candidate()

    def fail(*a, **kw):
        raise AnalysisError("quota")
    monkeypatch.setattr(openai_wrap, "analyze_profile", fail)

    assert process_llm_analysis() == c.id
    row = db.session.get(Candidate, c.id, populate_existing=True)
    assert row.llm_analysis_status == "failed"
    assert row.llm_analysis is None

    # failed records are never picked up again
    assert process_llm_analysis() is None
    assert _status(c.id) == "failed"


def test_processes_oldest_pending_first(app, make_candidate, monkeypatch):
    newer = make_candidate(created_at=datetime(2025, 5, 2))
    older = make_candidate(created_at=datetime(2025, 5, 1))
    make_candidate(created_at=datetime(2025, 4, 1), llm_analysis_status="completed")
    monkeypatch.setattr(openai_wrap, "analyze_profile", lambda *a: "ok")

    assert process_llm_analysis() == older.id
    assert _status(newer.id) == "pending"
    assert process_llm_analysis() == newer.id
    assert process_llm_analysis() is None


def test_lost_claim_skips_the_record(app, make_candidate, monkeypatch):
    c = make_candidate()
    monkeypatch.setattr(analysis, "claim", lambda candidate_id: False)

    def never(*a, **kw):
        raise AssertionError("analysis must not be called")
    monkeypatch.setattr(openai_wrap, "analyze_profile", never)

    assert process_llm_analysis() is None
    assert _status(c.id) == "pending"


def test_claim_only_moves_pending_rows(app, make_candidate):
    c = make_candidate()
    assert analysis.claim(c.id) is True
    assert analysis.claim(c.id) is False
    assert _status(c.id) == "processing"


def test_release_stale_claims(app, make_candidate):
    now = datetime(2025, 6, 1, 12, 0, 0)
    stale = make_candidate(llm_analysis_status="processing", llm_analysis_claimed_at=now - timedelta(hours=2))
    fresh = make_candidate(llm_analysis_status="processing", llm_analysis_claimed_at=now - timedelta(minutes=5))
    done = make_candidate(llm_analysis_status="completed", llm_analysis_claimed_at=now - timedelta(hours=5))

    assert release_stale_claims(3600, now=now) == 1
    assert _status(stale.id) == "pending"
    assert _status(fresh.id) == "processing"
    assert _status(done.id) == "completed"


def test_stale_recovery_only_runs_when_enabled(app, make_candidate, monkeypatch):
    c = make_candidate(llm_analysis_status="processing",
                       llm_analysis_claimed_at=datetime.utcnow() - timedelta(days=1))
    monkeypatch.setattr(openai_wrap, "analyze_profile", lambda *a: "recovered")

    assert process_llm_analysis() is None
    assert _status(c.id) == "processing"

    app.config["ANALYSIS_STALE_AFTER"] = 600
    assert process_llm_analysis() == c.id
    assert _status(c.id) == "completed"


def test_analyze_profile_requires_key(app):
    with pytest.raises(AnalysisError):
        openai_wrap.analyze_profile("Ana", "Mid", ["Docker"], "summary")
