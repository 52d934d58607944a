"""Pytest configuration and fixtures."""

import datetime

import pytest

from app import create_app
from config import TestConfig
from extensions import db
from quiniela.catalog import DEFAULT_CATALOG

ADMIN_HEADERS = {"X-Admin-Pin": TestConfig.ADMIN_PIN}

# Two complete answer sheets that disagree on every question
FIRST_OPTIONS = {q.id: q.options[0] for q in DEFAULT_CATALOG}
SECOND_OPTIONS = {q.id: q.options[1] for q in DEFAULT_CATALOG}


@pytest.fixture
def app():
    app = create_app(TestConfig)
    ctx = app.app_context()
    ctx.push()
    yield app
    db.session.remove()
    db.drop_all()
    ctx.pop()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def service(app):
    return app.extensions["quiniela"]


@pytest.fixture
def make_participant(service):
    """Register a participant and optionally fill in answers."""
    def _make(nickname, answers=None, pin="1234"):
        participant = service.register_participant(nickname, pin)
        if answers:
            service.submit_predictions(participant["id"], answers)
        return participant
    return _make


def sheet(base, **overrides):
    """Copy of an answer sheet with some questions replaced, e.g. sheet(FIRST_OPTIONS, q5=None)."""
    answers = dict(base)
    for key, value in overrides.items():
        answers[int(key.lstrip("q"))] = value
    return answers


def participant_row(pid, nickname, predictions, created_at=None):
    return {
        "id": pid,
        "nickname": nickname,
        "created_at": created_at or datetime.datetime(2026, 2, 8, 12, 0, pid),
        "predictions": predictions,
    }
