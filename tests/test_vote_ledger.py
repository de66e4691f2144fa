# tests/test_vote_ledger.py

from typing import List

import pytest
from sqlalchemy import func
from sqlalchemy.orm import Session, sessionmaker
from sqlmodel import select

from shared.enum.item_kind import ItemKind
from shared.enum.vote_outcome import VoteOutcome
from shared.enum.vote_value import VoteValue
from shared.models import AnswerVote, QuestionVote
from voting.vote_ledger import VoteLedger

UP = VoteValue.UP
DOWN = VoteValue.DOWN


def _row_count(session: Session, kind: ItemKind) -> int:
    model = QuestionVote if kind is ItemKind.QUESTION else AnswerVote
    return session.execute(select(func.count()).select_from(model)).scalar_one()


@pytest.fixture
def item_ids(make_question, make_answer):
    question_id = make_question()
    answer_id = make_answer(question_id)
    return {ItemKind.QUESTION: question_id, ItemKind.ANSWER: answer_id}


@pytest.mark.parametrize("kind", [ItemKind.QUESTION, ItemKind.ANSWER])
@pytest.mark.parametrize(
    "test_id, sequence, expected_outcomes, expected_final, expected_rows",
    [
        ("1_single_up", [UP], [VoteOutcome.CREATED], UP, 1),
        ("2_toggle_off", [UP, UP], [VoteOutcome.CREATED, VoteOutcome.REMOVED], None, 0),
        ("3_flip", [UP, DOWN], [VoteOutcome.CREATED, VoteOutcome.UPDATED], DOWN, 1),
        (
            "4_flip_then_toggle_off",
            [DOWN, UP, UP],
            [VoteOutcome.CREATED, VoteOutcome.UPDATED, VoteOutcome.REMOVED],
            None,
            0,
        ),
        (
            "5_toggle_off_then_again",
            [DOWN, DOWN, DOWN],
            [VoteOutcome.CREATED, VoteOutcome.REMOVED, VoteOutcome.CREATED],
            DOWN,
            1,
        ),
    ],
)
def test_toggle_protocol(
    session_factory: sessionmaker[Session],
    item_ids: dict,
    kind: ItemKind,
    test_id: str,
    sequence: List[VoteValue],
    expected_outcomes: List[VoteOutcome],
    expected_final,
    expected_rows: int,
):
    item_id = item_ids[kind]
    voter_id = 42

    with session_factory() as session:
        ledger = VoteLedger(session, kind)
        outcomes = [ledger.cast_vote(item_id, voter_id, value) for value in sequence]
        session.commit()

        assert outcomes == expected_outcomes, f"测试 '{test_id}' 失败：切换结果不符"
        assert ledger.get_vote_value(item_id, voter_id) == expected_final
        assert _row_count(session, kind) == expected_rows, (
            f"测试 '{test_id}' 失败：每个 (用户, 对象) 至多一条记录"
        )


@pytest.mark.parametrize("kind", [ItemKind.QUESTION, ItemKind.ANSWER])
def test_count_votes(session_factory: sessionmaker[Session], item_ids: dict, kind):
    item_id = item_ids[kind]

    with session_factory() as session:
        ledger = VoteLedger(session, kind)
        assert ledger.count_votes(item_id).upvotes == 0

        for voter_id in (1, 2, 3):
            ledger.cast_vote(item_id, voter_id, UP)
        ledger.cast_vote(item_id, 4, DOWN)
        # 用户 3 改投反对
        ledger.cast_vote(item_id, 3, DOWN)
        session.commit()

        counts = ledger.count_votes(item_id)
        assert (counts.upvotes, counts.downvotes) == (2, 2)
        assert counts.net_votes == 0


def test_flip_overwrites_in_place(session_factory: sessionmaker[Session], item_ids: dict):
    question_id = item_ids[ItemKind.QUESTION]

    with session_factory() as session:
        ledger = VoteLedger(session, ItemKind.QUESTION)
        ledger.cast_vote(question_id, 7, UP)
        created = ledger.find_vote(question_id, 7)
        assert created is not None
        vote_id = created.id

        ledger.cast_vote(question_id, 7, DOWN)
        flipped = ledger.find_vote(question_id, 7)
        assert flipped is not None
        assert flipped.id == vote_id
        assert flipped.vote_type == "downvote"


def test_delete_for_items(session_factory: sessionmaker[Session], item_ids: dict):
    answer_id = item_ids[ItemKind.ANSWER]

    with session_factory() as session:
        ledger = VoteLedger(session, ItemKind.ANSWER)
        ledger.cast_vote(answer_id, 1, UP)
        ledger.cast_vote(answer_id, 2, DOWN)

        assert ledger.delete_for_items([]) == 0
        assert ledger.delete_for_items([answer_id]) == 2
        assert ledger.count_votes(answer_id).upvotes == 0
