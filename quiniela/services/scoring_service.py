DEFAULT_POINTS = 10
WINNER_POINTS = 20


def question_weight(question_id, winner_question_id):
    """Points a question is worth when answered correctly."""
    return WINNER_POINTS if question_id == winner_question_id else DEFAULT_POINTS


def is_correct(answer, correct_answer):
    # Undeclared questions are never correct, not even for an empty answer
    return correct_answer is not None and answer is not None and answer == correct_answer


def calculate_score(predictions, correct_answers, winner_question_id):
    """
    Score one participant.

    Args:
        predictions: mapping question_id -> answer (None when unanswered)
        correct_answers: mapping question_id -> declared correct answer
        winner_question_id: id of the double-weight question

    Returns:
        Integer score. Never raises for missing or unknown question ids.
    """
    return score_breakdown(predictions, correct_answers, winner_question_id)["score"]


def score_breakdown(predictions, correct_answers, winner_question_id):
    """
    Score one participant with a per-question breakdown.

    Only questions with a declared correct answer count towards
    possible_points. The breakdown maps every declared question to
    True/False and leaves undeclared ones out.
    """
    breakdown = {}
    earned = 0
    possible = 0
    for question_id, correct_answer in correct_answers.items():
        weight = question_weight(question_id, winner_question_id)
        possible += weight
        hit = is_correct(predictions.get(question_id), correct_answer)
        breakdown[question_id] = hit
        if hit:
            earned += weight

    return {
        "score": earned,
        "possible_points": possible,
        "correct_count": sum(1 for hit in breakdown.values() if hit),
        "breakdown": breakdown,
    }
