"""add submission approval workflow

Revision ID: 7c5e2f18ab40
Revises: 3a91c0d4e2b7
Create Date: 2025-12-02 16:40:08.902117

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "7c5e2f18ab40"
down_revision: Union[str, None] = "3a91c0d4e2b7"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Approval state on submissions
    op.add_column(
        "quiz_submissions",
        sa.Column(
            "approval_status", sa.String(20), nullable=False, server_default="pending"
        ),
    )
    op.add_column(
        "quiz_submissions",
        sa.Column("approved_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
    )
    op.add_column(
        "quiz_submissions",
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.add_column(
        "quiz_submissions", sa.Column("rejection_reason", sa.Text(), nullable=True)
    )
    op.create_index(
        "idx_submissions_approval", "quiz_submissions", ["approval_status", "user_id"]
    )

    # One attempt per learner per quiz
    op.create_unique_constraint(
        "uq_quiz_submission_quiz_user", "quiz_submissions", ["quiz_id", "user_id"]
    )

    # Audit trail of rejections, kept after the submission is deleted
    op.create_table(
        "quiz_submission_rejection_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("submission_id", sa.Integer(), nullable=False),
        sa.Column("staff_user_id", sa.Integer(), nullable=False),
        sa.Column("employee_user_id", sa.Integer(), nullable=False),
        sa.Column("course_id", sa.Integer(), nullable=False),
        sa.Column("quiz_id", sa.Integer(), nullable=False),
        sa.Column("rejection_reason", sa.Text(), nullable=False),
        sa.Column(
            "rejected_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index(
        "ix_quiz_submission_rejection_logs_id",
        "quiz_submission_rejection_logs",
        ["id"],
    )
    op.create_index(
        "ix_quiz_submission_rejection_logs_submission_id",
        "quiz_submission_rejection_logs",
        ["submission_id"],
    )
    op.create_index(
        "ix_quiz_submission_rejection_logs_employee_user_id",
        "quiz_submission_rejection_logs",
        ["employee_user_id"],
    )
    op.create_index(
        "ix_quiz_submission_rejection_logs_course_id",
        "quiz_submission_rejection_logs",
        ["course_id"],
    )


def downgrade() -> None:
    op.drop_table("quiz_submission_rejection_logs")
    op.drop_constraint(
        "uq_quiz_submission_quiz_user", "quiz_submissions", type_="unique"
    )
    op.drop_index("idx_submissions_approval", table_name="quiz_submissions")
    op.drop_column("quiz_submissions", "rejection_reason")
    op.drop_column("quiz_submissions", "approved_at")
    op.drop_column("quiz_submissions", "approved_by")
    op.drop_column("quiz_submissions", "approval_status")
