import logging
from typing import List, Optional

from sqlalchemy.orm import Session, sessionmaker

from shared.database import read_scope
from shared.dto.tag_detail import TagDetail
from tag_system.tag_index import TagIndex

logger = logging.getLogger(__name__)


class TagService:
    """标签的只读查询。标签的创建和关联由问题的写操作通过 TagIndex 完成。"""

    def __init__(self, session_factory: sessionmaker[Session]):
        self.session_factory = session_factory

    def get_all_tags(self) -> List[TagDetail]:
        with read_scope(self.session_factory) as session:
            return [TagDetail.model_validate(tag) for tag in TagIndex(session).get_all_tags()]

    def get_trending_tags(self, limit: int = 10) -> List[TagDetail]:
        """按累计使用次数返回热门标签"""
        with read_scope(self.session_factory) as session:
            tags = TagIndex(session).get_trending_tags(limit)
            return [TagDetail.model_validate(tag) for tag in tags]

    def find_tag_by_name(self, name: str) -> Optional[TagDetail]:
        if not (name or "").strip():
            return None
        with read_scope(self.session_factory) as session:
            tag = TagIndex(session).find_by_name(name)
            return TagDetail.model_validate(tag) if tag else None

    def get_tag_names(self, question_id: int) -> List[str]:
        with read_scope(self.session_factory) as session:
            return TagIndex(session).get_tag_names(question_id)
