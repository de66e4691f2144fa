"""qa baseline

Revision ID: 0001_qa_baseline
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_qa_baseline"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    tables = inspector.get_table_names()

    if "subjects" not in tables:
        op.create_table(
            "subjects",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(length=100), nullable=False),
            sa.Column("description", sa.String(length=500), nullable=True),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(op.f("ix_subjects_name"), "subjects", ["name"], unique=True)

    if "tags" not in tables:
        op.create_table(
            "tags",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(length=50), nullable=False),
            sa.Column("usage_count", sa.Integer(), nullable=False),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(op.f("ix_tags_name"), "tags", ["name"], unique=True)

    if "questions" not in tables:
        op.create_table(
            "questions",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("user_id", sa.BigInteger(), nullable=False),
            sa.Column("subject_id", sa.BigInteger(), nullable=True),
            sa.Column("title", sa.String(length=255), nullable=False),
            sa.Column("content", sa.Text(), nullable=False),
            sa.Column("upvotes", sa.Integer(), nullable=False),
            sa.Column("downvotes", sa.Integer(), nullable=False),
            sa.Column("answer_count", sa.Integer(), nullable=False),
            sa.Column("view_count", sa.Integer(), nullable=False),
            sa.Column("is_solved", sa.Boolean(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.Column("updated_at", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(["subject_id"], ["subjects.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
        )
        for column in ("user_id", "subject_id", "upvotes", "answer_count", "view_count", "is_solved", "created_at"):
            op.create_index(op.f(f"ix_questions_{column}"), "questions", [column], unique=False)

    if "question_tags" not in tables:
        op.create_table(
            "question_tags",
            sa.Column("question_id", sa.BigInteger(), nullable=False),
            sa.Column("tag_id", sa.BigInteger(), nullable=False),
            sa.ForeignKeyConstraint(["question_id"], ["questions.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["tag_id"], ["tags.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("question_id", "tag_id"),
        )

    if "answers" not in tables:
        op.create_table(
            "answers",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("question_id", sa.BigInteger(), nullable=False),
            sa.Column("user_id", sa.BigInteger(), nullable=False),
            sa.Column("content", sa.Text(), nullable=False),
            sa.Column("upvotes", sa.Integer(), nullable=False),
            sa.Column("downvotes", sa.Integer(), nullable=False),
            sa.Column("is_accepted", sa.Boolean(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.Column("updated_at", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(["question_id"], ["questions.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(op.f("ix_answers_question_id"), "answers", ["question_id"], unique=False)
        op.create_index(op.f("ix_answers_user_id"), "answers", ["user_id"], unique=False)

    if "question_votes" not in tables:
        op.create_table(
            "question_votes",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("user_id", sa.BigInteger(), nullable=False),
            sa.Column("question_id", sa.BigInteger(), nullable=False),
            sa.Column("vote_type", sa.String(length=10), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.Column("updated_at", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(["question_id"], ["questions.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("user_id", "question_id", name="uq_question_votes_user_question"),
        )
        op.create_index(op.f("ix_question_votes_user_id"), "question_votes", ["user_id"], unique=False)
        op.create_index(op.f("ix_question_votes_question_id"), "question_votes", ["question_id"], unique=False)

    if "answer_votes" not in tables:
        op.create_table(
            "answer_votes",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("answer_id", sa.BigInteger(), nullable=False),
            sa.Column("user_id", sa.BigInteger(), nullable=False),
            sa.Column("is_upvote", sa.Boolean(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.Column("updated_at", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(["answer_id"], ["answers.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("answer_id", "user_id", name="uq_answer_votes_answer_user"),
        )
        op.create_index(op.f("ix_answer_votes_answer_id"), "answer_votes", ["answer_id"], unique=False)
        op.create_index(op.f("ix_answer_votes_user_id"), "answer_votes", ["user_id"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("answer_votes")
    op.drop_table("question_votes")
    op.drop_table("answers")
    op.drop_table("question_tags")
    op.drop_table("questions")
    op.drop_table("tags")
    op.drop_table("subjects")
