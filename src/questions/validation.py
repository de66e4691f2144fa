import re
from typing import List, Optional, Sequence

from shared.exceptions import ValidationError
from tag_system.tag_index import TagIndex

TITLE_MIN_LENGTH = 5
TITLE_MAX_LENGTH = 200
CONTENT_MIN_LENGTH = 10
CONTENT_MAX_LENGTH = 5000
ANSWER_MAX_LENGTH = 5000
MAX_TAGS = 10
TAG_MAX_LENGTH = 50
TAG_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9\-_+#.]+$")


def _require_id(value: Optional[int], field_name: str):
    if value is None:
        raise ValidationError(f"{field_name} 不能为空")


def validate_title(title: Optional[str]) -> str:
    title = (title or "").strip()
    if not title:
        raise ValidationError("标题不能为空")
    if len(title) < TITLE_MIN_LENGTH:
        raise ValidationError(f"标题至少需要 {TITLE_MIN_LENGTH} 个字符")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"标题不能超过 {TITLE_MAX_LENGTH} 个字符")
    return title


def validate_content(content: Optional[str]) -> str:
    content = (content or "").strip()
    if not content:
        raise ValidationError("内容不能为空")
    if len(content) < CONTENT_MIN_LENGTH:
        raise ValidationError(f"内容至少需要 {CONTENT_MIN_LENGTH} 个字符")
    if len(content) > CONTENT_MAX_LENGTH:
        raise ValidationError(f"内容不能超过 {CONTENT_MAX_LENGTH} 个字符")
    return content


def validate_tags(tags: Optional[Sequence[Optional[str]]]) -> List[str]:
    """
    规范化并校验标签列表，返回去重后的标签名。
    空白项会被忽略，不计入数量限制。
    """
    names = TagIndex.normalize_all(tags)
    if len(names) > MAX_TAGS:
        raise ValidationError(f"标签数量不能超过 {MAX_TAGS} 个")
    for name in names:
        if len(name) > TAG_MAX_LENGTH:
            raise ValidationError(f"标签 '{name}' 超过 {TAG_MAX_LENGTH} 个字符")
        if not TAG_NAME_PATTERN.match(name):
            raise ValidationError(
                f"标签 '{name}' 只能包含字母、数字以及 - _ + # . 字符"
            )
    return names


def validate_question_input(
    author_id: Optional[int],
    title: Optional[str],
    content: Optional[str],
    tags: Optional[Sequence[Optional[str]]],
):
    """校验提问/编辑的全部输入，返回 (标题, 内容, 标签) 的规范化结果"""
    _require_id(author_id, "作者ID")
    return validate_title(title), validate_content(content), validate_tags(tags)


def validate_answer_input(
    question_id: Optional[int], author_id: Optional[int], content: Optional[str]
) -> str:
    _require_id(question_id, "问题ID")
    _require_id(author_id, "作者ID")
    content = (content or "").strip()
    if not content:
        raise ValidationError("回答内容不能为空")
    if len(content) > ANSWER_MAX_LENGTH:
        raise ValidationError(f"回答内容不能超过 {ANSWER_MAX_LENGTH} 个字符")
    return content
