import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from shared.database import read_scope, transactional_scope
from shared.enum.item_kind import ItemKind
from shared.enum.vote_outcome import VoteOutcome
from shared.enum.vote_value import VoteValue
from shared.exceptions import ConstraintViolation, NotFoundError, ValidationError
from shared.models import Answer, Question
from voting.dto.vote_result import VoteResult
from voting.vote_aggregator import VoteAggregator, is_verified
from voting.vote_ledger import VoteLedger

logger = logging.getLogger(__name__)

# 投票切换的最大尝试次数（首次 + 一次重试）
MAX_TOGGLE_ATTEMPTS = 2


class VoteService:
    """
    投票流程的编排：切换投票记录、重新统计计数、重新判定回答认证状态，
    三步在同一事务中完成。
    """

    def __init__(self, session_factory: sessionmaker[Session]):
        self.session_factory = session_factory

    def cast_vote(
        self, kind: ItemKind, item_id: int, voter_id: int, value: VoteValue
    ) -> VoteResult:
        if item_id is None or voter_id is None:
            raise ValidationError("投票对象ID和投票者ID不能为空")
        try:
            value = VoteValue(value)
        except ValueError:
            raise ValidationError(f"无效的投票方向: {value}")

        with transactional_scope(self.session_factory) as session:
            self._ensure_item_exists(session, kind, item_id)
            ledger = VoteLedger(session, kind)
            outcome = self._toggle_with_retry(session, ledger, item_id, voter_id, value)
            counts = VoteAggregator(session, ledger).recompute(item_id)
            current_vote = ledger.get_vote_value(item_id, voter_id)

        logger.info(
            f"用户 {voter_id} 对 {kind.value} {item_id} 投票 {value.value} -> {outcome.value}，"
            f"当前 {counts.upvotes} 赞成 / {counts.downvotes} 反对"
        )
        return VoteResult(
            item_kind=kind,
            item_id=item_id,
            voter_id=voter_id,
            outcome=outcome,
            upvotes=counts.upvotes,
            downvotes=counts.downvotes,
            current_vote=current_vote,
            is_accepted=is_verified(counts.upvotes) if kind is ItemKind.ANSWER else None,
        )

    def get_user_vote(
        self, kind: ItemKind, item_id: int, voter_id: int
    ) -> Optional[VoteValue]:
        with read_scope(self.session_factory) as session:
            return VoteLedger(session, kind).get_vote_value(item_id, voter_id)

    def _ensure_item_exists(self, session: Session, kind: ItemKind, item_id: int):
        model = Question if kind is ItemKind.QUESTION else Answer
        if session.get(model, item_id) is None:
            logger.warning(f"投票失败: 未找到 {kind.value} {item_id}")
            raise NotFoundError(f"{kind.value} {item_id} 不存在")

    def _toggle_with_retry(
        self,
        session: Session,
        ledger: VoteLedger,
        item_id: int,
        voter_id: int,
        value: VoteValue,
    ) -> VoteOutcome:
        """
        在 SAVEPOINT 中执行一次切换；若因并发插入违反唯一约束，
        回滚到 SAVEPOINT 后重新读取并再试一次，仍失败则抛出 ConstraintViolation。
        """
        for attempt in range(1, MAX_TOGGLE_ATTEMPTS + 1):
            try:
                with session.begin_nested():
                    return ledger.cast_vote(item_id, voter_id, value)
            except IntegrityError as e:
                if attempt >= MAX_TOGGLE_ATTEMPTS:
                    logger.error(
                        f"用户 {voter_id} 对 {ledger.kind.value} {item_id} 的投票重试后仍冲突"
                    )
                    raise ConstraintViolation(
                        f"{ledger.kind.value} {item_id} 的投票发生并发冲突，请稍后重试"
                    ) from e
                logger.warning(
                    f"用户 {voter_id} 对 {ledger.kind.value} {item_id} 的投票发生唯一约束冲突，正在重试"
                )
        raise ConstraintViolation("投票未能完成")
