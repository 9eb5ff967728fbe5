import os
import sys
from datetime import datetime, timedelta

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from fitscore import create_app
from fitscore.extensions import db
from fitscore.models.candidate import Candidate
from fitscore.models.skill import Skill, seed_skills

TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite://',
    'OPENAI_API_KEY': None,
    'SENDGRID_API_KEY': None,
    'FIT_SCORE_VARIANT': 'skills',
    'ANALYSIS_STALE_AFTER': 0,
    'REPORT_MIN_SCORE': 80,
    'NOTIFICATION_INTERVAL': 15,
    'ANALYSIS_INTERVAL': 15,
    'REPORT_INTERVAL': 300,
}


@pytest.fixture
def app_factory():
    def make(**overrides):
        return create_app({**TEST_CONFIG, **overrides})
    return make


@pytest.fixture
def app(app_factory):
    app = app_factory()
    with app.app_context():
        db.create_all()
        seed_skills()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def skill_ids(app):
    return {s.name: s.id for s in Skill.query.all()}


@pytest.fixture
def make_candidate(app):
    """Insert a candidate row directly, bypassing the API."""
    counter = {'n': 0}
    base = datetime(2025, 1, 1, 9, 0, 0)

    def make(**kwargs):
        counter['n'] += 1
        n = counter['n']
        values = {
            'name': f'Candidate {n}',
            'email': f'candidate{n}@acme.io',
            'seniority': 'Mid',
            'profile_summary': 'Backend developer.',
            'fit_score': 50,
            'fit_score_classification': 'Promising',
            'created_at': base + timedelta(minutes=n),
        }
        values.update(kwargs)
        c = Candidate(**values)
        db.session.add(c)
        db.session.commit()
        return c
    return make
