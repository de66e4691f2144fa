# tests/test_vote_aggregator.py

import pytest
from sqlalchemy.orm import Session, sessionmaker

from shared.enum.item_kind import ItemKind
from shared.enum.vote_value import VoteValue
from shared.exceptions import NotFoundError
from shared.models import Answer, Question
from voting.vote_aggregator import (
    VERIFIED_ANSWER_THRESHOLD,
    VoteAggregator,
    is_verified,
    recount_answers,
)
from voting.vote_ledger import VoteLedger


@pytest.mark.parametrize(
    "upvotes, expected",
    [(0, False), (9, False), (10, True), (11, True)],
)
def test_is_verified_threshold(upvotes: int, expected: bool):
    assert VERIFIED_ANSWER_THRESHOLD == 10
    assert is_verified(upvotes) is expected


def test_recompute_question_counters(
    session_factory: sessionmaker[Session], make_question
):
    question_id = make_question()

    with session_factory() as session:
        ledger = VoteLedger(session, ItemKind.QUESTION)
        for voter_id in range(1, 4):
            ledger.cast_vote(question_id, voter_id, VoteValue.UP)
        ledger.cast_vote(question_id, 9, VoteValue.DOWN)

        counts = VoteAggregator(session, ledger).recompute(question_id)
        session.commit()

        assert (counts.upvotes, counts.downvotes) == (3, 1)

    with session_factory() as session:
        question = session.get(Question, question_id)
        assert question is not None
        assert (question.upvotes, question.downvotes) == (3, 1)


def test_recompute_answer_verification_is_not_sticky(
    session_factory: sessionmaker[Session], make_question, make_answer
):
    answer_id = make_answer(make_question())

    with session_factory() as session:
        ledger = VoteLedger(session, ItemKind.ANSWER)
        aggregator = VoteAggregator(session, ledger)

        for voter_id in range(1, VERIFIED_ANSWER_THRESHOLD):
            ledger.cast_vote(answer_id, voter_id, VoteValue.UP)
        aggregator.recompute(answer_id)
        session.commit()

    with session_factory() as session:
        answer = session.get(Answer, answer_id)
        assert answer is not None
        assert answer.upvotes == 9
        assert answer.is_accepted is False

        ledger = VoteLedger(session, ItemKind.ANSWER)
        ledger.cast_vote(answer_id, 100, VoteValue.UP)
        VoteAggregator(session, ledger).recompute(answer_id)
        session.commit()

    with session_factory() as session:
        answer = session.get(Answer, answer_id)
        assert answer is not None
        assert (answer.upvotes, answer.is_accepted) == (10, True)

        ledger = VoteLedger(session, ItemKind.ANSWER)
        ledger.cast_vote(answer_id, 100, VoteValue.UP)
        VoteAggregator(session, ledger).recompute(answer_id)
        session.commit()

    with session_factory() as session:
        answer = session.get(Answer, answer_id)
        assert answer is not None
        assert (answer.upvotes, answer.is_accepted) == (9, False)


@pytest.mark.parametrize("kind", [ItemKind.QUESTION, ItemKind.ANSWER])
def test_recompute_missing_item_raises(session_factory: sessionmaker[Session], kind):
    with session_factory() as session:
        ledger = VoteLedger(session, kind)
        with pytest.raises(NotFoundError):
            VoteAggregator(session, ledger).recompute(999)


def test_recount_answers(session_factory: sessionmaker[Session], make_question, make_answer):
    question_id = make_question()
    for user_id in (2, 3, 4):
        make_answer(question_id, user_id=user_id)

    with session_factory() as session:
        assert recount_answers(session, question_id) == 3
        session.commit()

    with session_factory() as session:
        question = session.get(Question, question_id)
        assert question is not None
        assert question.answer_count == 3
