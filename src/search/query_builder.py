from typing import Any, List, Tuple

from sqlalchemy import Select, and_, distinct, func, or_
from sqlalchemy.dialects import sqlite
from sqlmodel import select

from search.qo.question_search import QuestionSearchCriteria
from shared.enum.sort_option import SortOption
from shared.models import Question, QuestionTagLink, Subject, Tag
from tag_system.tag_index import TagIndex

# 每种排序方式对应固定的 ORDER BY 表达式，以 id 作为并列时的次序
SORT_EXPRESSIONS = {
    SortOption.NEWEST: (Question.created_at.desc(), Question.id.desc()),  # type: ignore
    SortOption.OLDEST: (Question.created_at.asc(), Question.id.asc()),  # type: ignore
    SortOption.MOST_UPVOTED: (Question.upvotes.desc(), Question.id.desc()),  # type: ignore
    SortOption.MOST_VIEWED: (Question.view_count.desc(), Question.id.desc()),  # type: ignore
    SortOption.MOST_ANSWERED: (Question.answer_count.desc(), Question.id.desc()),  # type: ignore
}

LIKE_ESCAPE = "\\"


def escape_like(text: str) -> str:
    """转义 LIKE 通配符，使关键词按字面子串匹配"""
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class FacetedQueryBuilder:
    """
    根据任意组合的搜索条件构建一条参数化查询。

    条件按固定顺序以 AND 连接：关键词、学科、作者、未回答、已解决、标签。
    指定标签时追加 GROUP BY + HAVING COUNT(DISTINCT tag.id) = 标签数，
    实现“必须拥有全部标签”而不是“拥有任一标签”。
    所有用户输入都作为绑定参数，不会拼接进 SQL 文本。

    同时勾选“仅未回答”和“仅已解决”时两个条件都会生效（结果可能为空），
    这里不做互斥校验。
    """

    def _filtered_statement(self, criteria: QuestionSearchCriteria) -> Select:
        tags = TagIndex.normalize_all(criteria.tags)

        # --- 步骤 1: 基础查询，左连接学科 ---
        statement = select(Question, Subject.name.label("subject_name")).outerjoin(  # type: ignore
            Subject, Question.subject_id == Subject.id  # type: ignore
        )

        # --- 步骤 2: 标签连接 ---
        if tags:
            statement = statement.join(
                QuestionTagLink, QuestionTagLink.question_id == Question.id  # type: ignore
            ).join(Tag, Tag.id == QuestionTagLink.tag_id)  # type: ignore

        # --- 步骤 3: 按固定顺序构建过滤器列表 ---
        filters = []
        search_text = (criteria.search_text or "").strip()
        if search_text:
            pattern = f"%{escape_like(search_text)}%"
            filters.append(
                or_(
                    Question.title.ilike(pattern, escape=LIKE_ESCAPE),  # type: ignore
                    Question.content.ilike(pattern, escape=LIKE_ESCAPE),  # type: ignore
                )
            )
        if criteria.subject_id is not None:
            filters.append(Question.subject_id == criteria.subject_id)
        if criteria.author_id is not None:
            filters.append(Question.user_id == criteria.author_id)
        if criteria.only_unanswered:
            filters.append(Question.answer_count == 0)
        if criteria.only_solved:
            filters.append(Question.is_solved.is_(True))  # type: ignore
        if tags:
            filters.append(Tag.name.in_(tags))  # type: ignore

        if filters:
            statement = statement.where(and_(*filters))

        # --- 步骤 4: 交集语义 ---
        if tags:
            statement = statement.group_by(Question.id, Subject.name).having(  # type: ignore
                func.count(distinct(Tag.id)) == len(tags)
            )

        return statement

    def build_statement(self, criteria: QuestionSearchCriteria) -> Select:
        """构建带排序和分页的完整查询"""
        # --- 步骤 5: 排序，最后是 LIMIT/OFFSET ---
        return (
            self._filtered_statement(criteria)
            .order_by(*SORT_EXPRESSIONS[criteria.sort_option])
            .limit(criteria.limit)
            .offset(criteria.offset)
        )

    def build_count_statement(self, criteria: QuestionSearchCriteria) -> Select:
        """构建统计总数的查询（不含排序和分页）"""
        subquery = self._filtered_statement(criteria).subquery("sub")
        return select(func.count()).select_from(subquery)

    def build(self, criteria: QuestionSearchCriteria) -> Tuple[str, List[Any]]:
        """返回 (查询文本, 按占位符顺序排列的参数列表)"""
        return self.render(self.build_statement(criteria))

    @staticmethod
    def render(statement: Select) -> Tuple[str, List[Any]]:
        """
        以 qmark 风格渲染语句。
        IN 列表在编译期展开，因此参数列表与文本中的 ? 一一对应。
        """
        compiled = statement.compile(
            dialect=sqlite.dialect(paramstyle="qmark"),
            compile_kwargs={"render_postcompile": True},
        )
        params = compiled.params
        positions = compiled.positiontup or []
        return str(compiled), [params[name] for name in positions]
