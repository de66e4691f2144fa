import logging
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import delete
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session
from sqlmodel import select

from shared.exceptions import ValidationError
from shared.models import QuestionTagLink, Tag

logger = logging.getLogger(__name__)


class TagIndex:
    """
    维护标签表和问题-标签关联表。
    所有方法都在调用方提供的会话（事务）内执行，本身不提交。
    """

    def __init__(self, session: Session):
        self.session = session

    @staticmethod
    def normalize(name: Optional[str]) -> str:
        """去除首尾空白，保留大小写；为空则抛出 ValidationError"""
        normalized = (name or "").strip()
        if not normalized:
            raise ValidationError("标签名不能为空")
        return normalized

    @staticmethod
    def normalize_all(names: Optional[Iterable[Optional[str]]]) -> List[str]:
        """规范化一组标签名：跳过空白项，按首次出现的顺序去重"""
        result: List[str] = []
        seen = set()
        for raw in names or []:
            name = (raw or "").strip()
            if name and name not in seen:
                seen.add(name)
                result.append(name)
        return result

    def ensure_tag(self, name: str) -> int:
        """
        获取或创建标签并返回其ID。
        已存在时 usage_count + 1，不存在时以 usage_count = 1 创建。
        """
        normalized = self.normalize(name)

        # 使用 INSERT ... ON CONFLICT DO UPDATE 一次性完成创建和计数
        insert_stmt = sqlite_insert(Tag).values(name=normalized, usage_count=1)
        upsert_stmt = insert_stmt.on_conflict_do_update(
            index_elements=["name"],
            set_={"usage_count": Tag.usage_count + 1},
        )
        self.session.execute(upsert_stmt)

        tag_id = self.session.execute(
            select(Tag.id).where(Tag.name == normalized)
        ).scalar_one()
        return tag_id

    def replace_tags(self, question_id: int, names: Optional[Iterable[Optional[str]]]):
        """
        全量替换问题的标签：先删除全部关联，再逐个 ensure_tag 并建立关联。
        不做差量比较，因此原本已关联的标签也会再次增加 usage_count。
        """
        self.clear_tags(question_id)

        normalized_names = self.normalize_all(names)
        for name in normalized_names:
            tag_id = self.ensure_tag(name)
            link_stmt = (
                sqlite_insert(QuestionTagLink)
                .values(question_id=question_id, tag_id=tag_id)
                .on_conflict_do_nothing()
            )
            self.session.execute(link_stmt)

        logger.debug(f"问题 {question_id} 的标签已替换为 {normalized_names}")

    def clear_tags(self, question_id: int):
        """删除问题的全部标签关联（标签本身及其计数保留）"""
        self.session.execute(
            delete(QuestionTagLink).where(QuestionTagLink.question_id == question_id)  # type: ignore
        )

    def get_tag_names(self, question_id: int) -> List[str]:
        """按名称排序返回问题的全部标签名"""
        statement = (
            select(Tag.name)
            .join(QuestionTagLink, QuestionTagLink.tag_id == Tag.id)  # type: ignore
            .where(QuestionTagLink.question_id == question_id)
            .order_by(Tag.name)
        )
        return list(self.session.execute(statement).scalars().all())

    def find_by_name(self, name: str) -> Optional[Tag]:
        statement = select(Tag).where(Tag.name == self.normalize(name))
        return self.session.execute(statement).scalars().first()

    def get_all_tags(self) -> Sequence[Tag]:
        """获取数据库中所有的标签。"""
        statement = select(Tag).order_by(Tag.name)
        return self.session.execute(statement).scalars().all()

    def get_trending_tags(self, limit: int = 10) -> Sequence[Tag]:
        """按累计使用次数降序返回热门标签"""
        statement = (
            select(Tag)
            .order_by(Tag.usage_count.desc(), Tag.name)  # type: ignore
            .limit(max(1, limit))
        )
        return self.session.execute(statement).scalars().all()
