"""Application factory checks."""

import pytest

from app import create_app
from config import TestConfig
from quiniela.catalog import CatalogQuestion, QuestionCatalog


class WrongWinnerConfig(TestConfig):
    WINNER_QUESTION_ID = 5


def test_winner_setting_must_match_catalog():
    with pytest.raises(ValueError):
        create_app(WrongWinnerConfig)


def test_catalog_needs_exactly_one_winner():
    two_winners = QuestionCatalog([
        CatalogQuestion(1, "A", ["x", "y"], "game"),
        CatalogQuestion(14, "B", ["x", "y"], "final", is_winner=True),
        CatalogQuestion(15, "C", ["x", "y"], "final", is_winner=True),
    ])
    with pytest.raises(ValueError):
        create_app(TestConfig, catalog=two_winners)

    no_winner = QuestionCatalog([CatalogQuestion(14, "B", ["x", "y"], "final")])
    with pytest.raises(ValueError):
        create_app(TestConfig, catalog=no_winner)


def test_questions_endpoint_agrees_with_scoring(app, client, service):
    winners = [q["id"] for q in client.get("/api/questions").get_json() if q["is_winner"]]
    assert winners == [service.winner_question_id]
