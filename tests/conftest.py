# tests/conftest.py

import os
import sys
from typing import Generator

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../src")))

from bootstrap import build_store
from core.qa_store import QAStore
from shared.database import close_db, create_db_engine, create_session_factory, init_db
from shared.models import Answer, Question

# 使用内存数据库进行测试
TEST_DATABASE_URL = "sqlite://"


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """
    每个测试用例一个全新的内存数据库。
    """
    engine = create_db_engine(TEST_DATABASE_URL)
    init_db(engine)
    yield engine
    close_db(engine)


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return create_session_factory(engine)


@pytest.fixture
def store(engine: Engine) -> QAStore:
    config = {"db_url": TEST_DATABASE_URL, "search": {"default_page_size": 20}}
    return build_store(config, engine=engine)


@pytest.fixture
def make_question(session_factory: sessionmaker[Session]):
    """直接向数据库插入一个问题，绕过输入校验，返回其ID"""

    def _make(user_id: int = 1, title: str = "示例问题标题", **kwargs) -> int:
        with session_factory() as session:
            question = Question(
                user_id=user_id, title=title, content="示例问题的正文内容", **kwargs
            )
            session.add(question)
            session.commit()
            assert question.id is not None
            return question.id

    return _make


@pytest.fixture
def make_answer(session_factory: sessionmaker[Session]):
    def _make(question_id: int, user_id: int = 2, **kwargs) -> int:
        with session_factory() as session:
            answer = Answer(
                question_id=question_id, user_id=user_id, content="示例回答", **kwargs
            )
            session.add(answer)
            session.commit()
            assert answer.id is not None
            return answer.id

    return _make
