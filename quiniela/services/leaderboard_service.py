from .scoring_service import score_breakdown


def answered_count(predictions, question_ids):
    return sum(1 for qid in question_ids if predictions.get(qid) is not None)


def build_entry(participant, correct_answers, question_ids, winner_question_id):
    predictions = participant["predictions"]
    result = score_breakdown(predictions, correct_answers, winner_question_id)
    return {
        "id": participant["id"],
        "nickname": participant["nickname"],
        "score": result["score"],
        "correct_count": result["correct_count"],
        "answered_count": answered_count(predictions, question_ids),
        # Registration time is used as completion time on purpose
        "completed_at": participant["created_at"],
    }


def _sort_key(entry):
    return (-entry["score"], entry["completed_at"], entry["id"])


def calculate_leaderboard(participants, correct_answers, question_ids, winner_question_id):
    """
    Rank every participant who answered all catalog questions.

    Args:
        participants: iterable of dicts with id, nickname, created_at (datetime)
            and predictions (question_id -> answer or None)
        correct_answers: question_id -> declared correct answer
        question_ids: full list of catalog question ids
        winner_question_id: id of the double-weight question

    Returns:
        List of entries ordered by score desc, then completion time asc.
        Positions are 1-based and never shared.
    """
    question_ids = list(question_ids)
    total = len(question_ids)

    entries = []
    for participant in participants:
        entry = build_entry(participant, correct_answers, question_ids, winner_question_id)
        if entry["answered_count"] != total:
            continue
        entries.append(entry)

    entries.sort(key=_sort_key)

    for position, entry in enumerate(entries, start=1):
        entry["position"] = position
        entry["completed_at"] = entry["completed_at"].isoformat()
    return entries


def summarize(entries, correct_answers):
    return {
        "total_participants": len(entries),
        "answered_questions": len(correct_answers),
    }
