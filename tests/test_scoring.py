"""Unit tests for the scoring functions."""

from quiniela.services.scoring_service import (
    calculate_score,
    question_weight,
    score_breakdown,
)

from conftest import FIRST_OPTIONS, SECOND_OPTIONS, sheet

WINNER = 14


def test_question_weights():
    assert question_weight(14, WINNER) == 20
    assert question_weight(1, WINNER) == 10
    assert question_weight(17, WINNER) == 10


def test_no_correct_answers_scores_zero():
    assert calculate_score(FIRST_OPTIONS, {}, WINNER) == 0


def test_undeclared_question_never_scores():
    predictions = {1: "Seahawks", 2: None}
    correct = {1: "Seahawks"}
    assert calculate_score(predictions, correct, WINNER) == 10
    # question 2 has no declared answer, even a missing prediction gives nothing
    assert score_breakdown(predictions, correct, WINNER)["breakdown"] == {1: True}


def test_unanswered_question_is_wrong_even_when_declared():
    result = score_breakdown({1: None}, {1: "Seahawks"}, WINNER)
    assert result["score"] == 0
    assert result["possible_points"] == 10
    assert result["breakdown"] == {1: False}


def test_winner_question_is_worth_double():
    correct = {14: FIRST_OPTIONS[14], 15: FIRST_OPTIONS[15]}
    assert calculate_score(FIRST_OPTIONS, correct, WINNER) == 30
    assert calculate_score(SECOND_OPTIONS, correct, WINNER) == 0


def test_full_sheet_score():
    assert calculate_score(FIRST_OPTIONS, FIRST_OPTIONS, WINNER) == 16 * 10 + 20


def test_identical_sheets_score_equal():
    correct = sheet(SECOND_OPTIONS, q1=FIRST_OPTIONS[1], q14=FIRST_OPTIONS[14])
    a = calculate_score(dict(FIRST_OPTIONS), correct, WINNER)
    b = calculate_score(dict(FIRST_OPTIONS), correct, WINNER)
    assert a == b == 30


def test_declaring_a_matching_answer_adds_exactly_its_weight():
    correct = {1: FIRST_OPTIONS[1]}
    before_first = calculate_score(FIRST_OPTIONS, correct, WINNER)
    before_second = calculate_score(SECOND_OPTIONS, correct, WINNER)

    for question_id, weight in ((5, 10), (14, 20)):
        correct[question_id] = FIRST_OPTIONS[question_id]
        after_first = calculate_score(FIRST_OPTIONS, correct, WINNER)
        after_second = calculate_score(SECOND_OPTIONS, correct, WINNER)
        assert after_first == before_first + weight
        assert after_second >= before_second
        before_first, before_second = after_first, after_second


def test_unknown_question_ids_are_ignored():
    assert calculate_score({99: "x"}, {99: "y"}, WINNER) == 0
    assert calculate_score({99: "x"}, {}, WINNER) == 0


def test_breakdown_counts():
    correct = {1: FIRST_OPTIONS[1], 2: SECOND_OPTIONS[2], 14: FIRST_OPTIONS[14]}
    result = score_breakdown(FIRST_OPTIONS, correct, WINNER)
    assert result["score"] == 30
    assert result["correct_count"] == 2
    assert result["possible_points"] == 40
