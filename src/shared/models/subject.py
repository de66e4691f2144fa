from typing import Optional

from sqlmodel import Field, SQLModel


class Subject(SQLModel, table=True):
    """学科分类，问题可选地归属于一个学科。"""

    __tablename__ = "subjects"  # type: ignore

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100, unique=True, index=True)
    description: Optional[str] = Field(default=None, max_length=500)
