from enum import Enum


class ItemKind(str, Enum):
    """可被投票的对象类型"""

    QUESTION = "question"
    ANSWER = "answer"
