# tests/test_search_service.py

from typing import Dict, Set

import pytest

from core.qa_store import QAStore
from search.qo.question_search import QuestionSearchCriteria
from shared.enum.sort_option import SortOption
from shared.enum.vote_value import VoteValue

CONTENT = "这是问题的详细描述内容。"


@pytest.fixture
def seeded_store(store: QAStore) -> Dict[str, int]:
    """
    提供一个填充了测试数据的存储，返回 {标题: 问题ID}。
    """
    subject = store.create_subject("数据库", "关系型数据库相关")
    questions = [
        ("How to join tables in SQL", ["java", "sql"], 1, subject.id),
        ("Java streams explained", ["java"], 2, None),
        ("Python SQL drivers", ["sql", "python"], 1, subject.id),
        ("Java and SQL together", ["java", "sql"], 3, None),
    ]
    ids = {}
    for title, tags, author_id, subject_id in questions:
        detail = store.save_question(author_id, title, CONTENT, tags, subject_id)
        ids[title] = detail.id

    store.mark_solved(ids["How to join tables in SQL"])
    store.save_answer(ids["Python SQL drivers"], 9, "可以使用 sqlite3 模块")
    store.cast_vote_on_question(ids["Java streams explained"], 5, VoteValue.UP)
    ids["__subject__"] = subject.id
    return ids


@pytest.mark.parametrize(
    "test_id, criteria_kwargs, use_subject, expected_titles",
    [
        (
            "1_tag_intersection",
            {"tags": ["java", "sql"]},
            False,
            {"How to join tables in SQL", "Java and SQL together"},
        ),
        (
            "2_tags_and_solved",
            {"tags": ["java", "sql"], "only_solved": True},
            False,
            {"How to join tables in SQL"},
        ),
        (
            "3_single_tag",
            {"tags": ["java"]},
            False,
            {"How to join tables in SQL", "Java streams explained", "Java and SQL together"},
        ),
        (
            "4_text_case_insensitive",
            {"search_text": "sql"},
            False,
            {"How to join tables in SQL", "Python SQL drivers", "Java and SQL together"},
        ),
        (
            "5_subject",
            {},
            True,
            {"How to join tables in SQL", "Python SQL drivers"},
        ),
        (
            "6_author",
            {"author_id": 1},
            False,
            {"How to join tables in SQL", "Python SQL drivers"},
        ),
        (
            "7_unanswered",
            {"only_unanswered": True},
            False,
            {"How to join tables in SQL", "Java streams explained", "Java and SQL together"},
        ),
        (
            "8_unanswered_and_solved",
            {"only_unanswered": True, "only_solved": True},
            False,
            {"How to join tables in SQL"},
        ),
        ("9_unknown_tag", {"tags": ["java", "haskell"]}, False, set()),
        (
            "10_text_and_tag",
            {"search_text": "java", "tags": ["sql"]},
            False,
            {"Java and SQL together"},
        ),
    ],
)
def test_search_scenarios(
    store: QAStore,
    seeded_store: Dict[str, int],
    test_id: str,
    criteria_kwargs: dict,
    use_subject: bool,
    expected_titles: Set[str],
):
    criteria = QuestionSearchCriteria(**criteria_kwargs)
    if use_subject:
        criteria.subject_id = seeded_store["__subject__"]

    results = store.search(criteria)
    returned_titles = {q.title for q in results}

    assert returned_titles == expected_titles, f"测试 '{test_id}' 失败"
    assert len(results) == len(returned_titles), f"测试 '{test_id}' 失败：结果重复"
    assert store.search_service.count(criteria) == len(expected_titles)


def test_search_results_carry_tags_and_subject(store: QAStore, seeded_store):
    results = store.search(QuestionSearchCriteria(search_text="Python"))
    assert len(results) == 1
    question = results[0]
    assert question.tags == ["python", "sql"]
    assert question.subject_name == "数据库"
    assert question.answer_count == 1
    assert question.net_votes == 0

    streams = store.search(QuestionSearchCriteria(search_text="streams"))[0]
    assert (streams.upvotes, streams.net_votes) == (1, 1)


@pytest.mark.parametrize(
    "sort_option, expected_first",
    [
        (SortOption.NEWEST, "Java and SQL together"),
        (SortOption.OLDEST, "How to join tables in SQL"),
        (SortOption.MOST_UPVOTED, "Java streams explained"),
        (SortOption.MOST_ANSWERED, "Python SQL drivers"),
    ],
)
def test_search_sorting(store: QAStore, seeded_store, sort_option, expected_first):
    results = store.search(QuestionSearchCriteria(sort_option=sort_option))
    assert len(results) == 4
    assert results[0].title == expected_first


def test_search_none_criteria_returns_empty(store: QAStore):
    assert store.search(None) == []

    page = store.search_page(None, 0, 10)
    assert page.items == []
    assert (page.total_count, page.total_pages, page.has_next) == (0, 0, False)


@pytest.mark.parametrize(
    "test_id, search_text, expected_titles",
    [
        ("1_percent_is_literal", "100%", {"Rate is 100% per day"}),
        ("2_underscore_is_literal", "max_size", {"Setting max_size option"}),
        ("3_backslash_is_literal", "C:\\temp", {"Path C:\\temp is missing"}),
    ],
)
def test_search_text_wildcards_match_literally(
    store: QAStore, test_id: str, search_text: str, expected_titles: Set[str]
):
    for title in (
        "Rate is 100% per day",
        "Rate is 1000 per day",
        "Setting max_size option",
        "Setting maxXsize option",
        "Path C:\\temp is missing",
        "Path C:temp is missing",
    ):
        store.save_question(1, title, CONTENT)

    results = store.search(QuestionSearchCriteria(search_text=search_text))
    assert {q.title for q in results} == expected_titles, f"测试 '{test_id}' 失败"


def test_search_page_beyond_end(store: QAStore):
    for i in range(12):
        store.save_question(1, f"Question number {i}", CONTENT, ["bulk"])

    page = store.search_page(QuestionSearchCriteria(tags=["bulk"]), page=5, page_size=10)

    assert page.items == []
    assert page.total_count == 12
    assert page.total_pages == 2
    assert page.has_previous is True
    assert page.has_next is False


def test_search_page_walks_all_items(store: QAStore):
    for i in range(12):
        store.save_question(1, f"Question number {i}", CONTENT, ["bulk"])

    criteria = QuestionSearchCriteria(tags=["bulk"], sort_option=SortOption.OLDEST)
    first = store.search_page(criteria, page=0, page_size=10)
    second = store.search_page(criteria, page=1, page_size=10)

    assert len(first.items) == 10
    assert first.has_next is True
    assert len(second.items) == 2
    assert second.has_next is False
    titles = [q.title for q in first.items + second.items]
    assert titles == [f"Question number {i}" for i in range(12)]
