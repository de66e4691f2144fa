import copy
import json
import logging
import os
from typing import Any, Dict, Optional

from sqlalchemy.engine import Engine

from core.qa_store import QAStore
from questions.answer_service import AnswerService
from questions.question_service import QuestionService
from search.query_builder import FacetedQueryBuilder
from search.search_service import SearchService
from shared.database import DATABASE_URL, create_db_engine, create_session_factory, init_db
from subjects.subject_service import SubjectService
from tag_system.tag_service import TagService
from voting.vote_service import VoteService

logger = logging.getLogger(__name__)

CONFIG_PATH = "config.json"

DEFAULT_CONFIG: Dict[str, Any] = {
    "db_url": DATABASE_URL,
    "echo_sql": False,
    "log_level": "INFO",
    "search": {"default_page_size": 20},
}


def load_config(path: str = CONFIG_PATH) -> Dict[str, Any]:
    """
    读取 JSON 配置文件，缺失的键使用默认值。
    文件不存在时直接返回默认配置。
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if not os.path.exists(path):
        logger.warning(f"未找到配置文件 {path}，使用默认配置")
        return config

    with open(path, "r", encoding="utf-8") as f:
        loaded = json.load(f)

    for key, value in loaded.items():
        if isinstance(value, dict) and isinstance(config.get(key), dict):
            config[key].update(value)
        else:
            config[key] = value
    return config


def setup_logging(level: str = "INFO"):
    # 配置日志记录
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def build_store(config: Dict[str, Any], engine: Optional[Engine] = None) -> QAStore:
    """
    创建引擎、会话工厂以及全部服务，并通过构造函数注入组装成 QAStore。
    每个服务只创建一次。
    """
    if engine is None:
        engine = create_db_engine(
            config.get("db_url", DATABASE_URL), echo=bool(config.get("echo_sql", False))
        )
    init_db(engine)
    session_factory = create_session_factory(engine)

    # 1. 初始化核心服务
    question_service = QuestionService(session_factory)
    answer_service = AnswerService(session_factory)
    vote_service = VoteService(session_factory)
    search_service = SearchService(session_factory, FacetedQueryBuilder())
    subject_service = SubjectService(session_factory)
    tag_service = TagService(session_factory)

    # 2. 组装对外接口
    default_page_size = config.get("search", {}).get("default_page_size", 20)
    store = QAStore(
        question_service=question_service,
        answer_service=answer_service,
        vote_service=vote_service,
        search_service=search_service,
        subject_service=subject_service,
        tag_service=tag_service,
        default_page_size=default_page_size,
        engine=engine,
    )
    logger.info("问答存储服务已初始化")
    return store


def main(config_path: str = CONFIG_PATH):
    config = load_config(config_path)
    setup_logging(config.get("log_level", "INFO"))

    store = build_store(config)
    try:
        subjects = store.list_subjects()
        tags = store.get_trending_tags()
        logger.info(
            f"数据库已就绪: {config['db_url']}，"
            f"共 {len(subjects)} 个学科，热门标签: {[tag.name for tag in tags]}"
        )
    finally:
        store.close()
