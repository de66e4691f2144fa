import logging
import os
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

# 确保表被导入，以便 SQLModel.metadata.create_all 能够工作
import shared.models  # noqa: F401
from shared.exceptions import ConstraintViolation, StoreError

logger = logging.getLogger(__name__)

DB_PATH = "data/database.db"
DATABASE_URL = f"sqlite:///{DB_PATH}"


def create_db_engine(database_url: str = DATABASE_URL, echo: bool = False) -> Engine:
    """
    根据连接串创建同步引擎。
    SQLite 内存库使用 StaticPool，使所有会话共享同一个连接。
    """
    url = make_url(database_url)
    engine_kwargs: dict = {"echo": echo}
    is_sqlite = url.get_backend_name() == "sqlite"
    in_memory = is_sqlite and url.database in (None, "", ":memory:")

    if is_sqlite:
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if in_memory:
            engine_kwargs["poolclass"] = StaticPool
        else:
            db_dir = os.path.dirname(url.database or "")
            if db_dir and not os.path.exists(db_dir):
                os.makedirs(db_dir)

    engine = create_engine(url, **engine_kwargs)
    if is_sqlite:
        _setup_sqlite_engine(engine, use_wal=not in_memory)
    return engine


def _setup_sqlite_engine(engine: Engine, use_wal: bool):
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        """
        为每个新的 SQLite 连接开启外键约束。
        同时关闭 pysqlite 自带的隐式 BEGIN，改由下面的 begin 事件显式发出，
        否则 SAVEPOINT 无法正常工作。
        """
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
            if use_wal:
                cursor.execute("PRAGMA journal_mode=WAL")
        finally:
            cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


def init_db(engine: Engine):
    """创建所有表（已存在的表不受影响）"""
    SQLModel.metadata.create_all(engine)
    logger.info("数据库表结构初始化完毕")


def close_db(engine: Engine):
    """
    关闭数据库引擎，释放连接池。
    """
    logger.info("正在关闭数据库连接池...")
    engine.dispose()
    logger.info("数据库连接池已关闭。")


@contextmanager
def transactional_scope(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    """
    在一个事务中执行多步写操作。
    正常退出时提交；任何异常都会回滚整个事务，并在返回前关闭会话、归还连接。
    SQLAlchemy 异常会被转换为 ConstraintViolation / StoreError，业务异常原样抛出。
    """
    session = session_factory()
    try:
        with session.begin():
            yield session
    except IntegrityError as e:
        logger.warning(f"事务因唯一约束冲突回滚: {e.orig}")
        raise ConstraintViolation(str(e.orig)) from e
    except SQLAlchemyError as e:
        logger.error("事务执行失败，已回滚", exc_info=True)
        raise StoreError(f"存储操作失败: {e}") from e
    finally:
        session.close()


@contextmanager
def read_scope(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    """
    只读操作使用的会话作用域，不开启显式事务。
    无论成功、空结果还是出错，退出时都会关闭会话。
    """
    session = session_factory()
    try:
        yield session
    except SQLAlchemyError as e:
        logger.error("只读查询失败", exc_info=True)
        raise StoreError(f"查询失败: {e}") from e
    finally:
        session.close()
