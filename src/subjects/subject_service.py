import logging
from typing import List, Optional

from sqlalchemy.orm import Session, sessionmaker
from sqlmodel import select

from shared.database import read_scope, transactional_scope
from shared.dto.subject_detail import SubjectDetail
from shared.exceptions import ConstraintViolation, ValidationError
from shared.models import Subject

logger = logging.getLogger(__name__)

SUBJECT_NAME_MAX_LENGTH = 100


class SubjectService:
    """学科目录"""

    def __init__(self, session_factory: sessionmaker[Session]):
        self.session_factory = session_factory

    def create_subject(
        self, name: str, description: Optional[str] = None
    ) -> SubjectDetail:
        name = (name or "").strip()
        if not name:
            raise ValidationError("学科名不能为空")
        if len(name) > SUBJECT_NAME_MAX_LENGTH:
            raise ValidationError(f"学科名不能超过 {SUBJECT_NAME_MAX_LENGTH} 个字符")

        try:
            with transactional_scope(self.session_factory) as session:
                subject = Subject(name=name, description=description)
                session.add(subject)
                session.flush()
                detail = SubjectDetail.model_validate(subject)
        except ConstraintViolation:
            logger.warning(f"创建学科失败: 学科 '{name}' 已存在")
            raise

        logger.info(f"创建学科 {detail.id}: {name}")
        return detail

    def find_subject_by_name(self, name: str) -> Optional[SubjectDetail]:
        name = (name or "").strip()
        if not name:
            return None
        with read_scope(self.session_factory) as session:
            subject = (
                session.execute(select(Subject).where(Subject.name == name))
                .scalars()
                .first()
            )
            return SubjectDetail.model_validate(subject) if subject else None

    def list_subjects(self) -> List[SubjectDetail]:
        with read_scope(self.session_factory) as session:
            subjects = session.execute(select(Subject).order_by(Subject.name)).scalars().all()
            return [SubjectDetail.model_validate(subject) for subject in subjects]
