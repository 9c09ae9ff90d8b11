"""add workflow and workflow_history tables

Revision ID: c4e1a7b92d10
Revises:
Create Date: 2026-10-19

Workflow is the current-state projection of a corrective/preventive action;
workflow_history is its append-only audit trail. Triggers block UPDATE and
DELETE on workflow_history at the database level (in addition to ORM guards).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "c4e1a7b92d10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _trigger_function_history() -> str:
    """Return SQL for trigger function that blocks workflow_history UPDATE/DELETE."""
    return """
    CREATE OR REPLACE FUNCTION prevent_workflow_history_mutation()
    RETURNS TRIGGER
    LANGUAGE plpgsql
    AS $$
    BEGIN
        RAISE EXCEPTION 'workflow_history rows are append-only and cannot be updated or deleted'
            USING ERRCODE = 'integrity_constraint_violation';
    END;
    $$
    """


def upgrade() -> None:
    op.create_table(
        "workflow",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column(
            "sequence_id",
            sa.Integer(),
            sa.Identity(always=True),
            nullable=False,
        ),
        sa.Column("deviation_id", sa.String(), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("responsible_id", sa.String(), nullable=False),
        sa.Column("nature", sa.String(length=32), nullable=False),
        sa.Column("deadline", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "status", sa.String(length=32), nullable=False, server_default="pending"
        ),
        sa.Column("response_notes", sa.Text(), nullable=True),
        sa.Column("evidence_photos", sa.JSON(), nullable=False),
        sa.Column("validator_notes", sa.Text(), nullable=True),
        sa.Column("validator_id", sa.String(), nullable=True),
        sa.Column("validated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("sequence_id", name="uq_workflow_sequence_id"),
        sa.CheckConstraint(
            "status IN ('pending', 'submitted_completed', 'submitted_blocked', "
            "'approved', 'returned')",
            name="workflow_status_check",
        ),
        sa.CheckConstraint(
            "nature IN ('corrective', 'preventive')",
            name="workflow_nature_check",
        ),
    )
    op.create_index("ix_workflow_deviation_id", "workflow", ["deviation_id"], unique=False)
    op.create_index(
        "ix_workflow_responsible_id", "workflow", ["responsible_id"], unique=False
    )
    op.create_index(
        "ix_workflow_status_responsible",
        "workflow",
        ["status", "responsible_id"],
        unique=False,
    )

    op.create_table(
        "workflow_history",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("workflow_id", sa.String(), nullable=False),
        sa.Column("action", sa.String(length=32), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("photos", sa.JSON(), nullable=False),
        sa.Column("performed_by", sa.String(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("clock_timestamp()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["workflow_id"], ["workflow.id"], ondelete="RESTRICT"
        ),
        sa.CheckConstraint(
            "action IN ('created', 'submitted_completed', 'submitted_blocked', "
            "'approved', 'returned', 'resubmitted')",
            name="workflow_history_action_check",
        ),
    )
    op.create_index(
        "ix_workflow_history_workflow_created",
        "workflow_history",
        ["workflow_id", "created_at"],
        unique=False,
    )

    op.execute(_trigger_function_history())
    op.execute(
        "CREATE TRIGGER prevent_workflow_history_update_delete "
        "BEFORE UPDATE OR DELETE ON workflow_history "
        "FOR EACH ROW EXECUTE PROCEDURE prevent_workflow_history_mutation()"
    )


def downgrade() -> None:
    op.execute(
        "DROP TRIGGER IF EXISTS prevent_workflow_history_update_delete ON workflow_history"
    )
    op.execute("DROP FUNCTION IF EXISTS prevent_workflow_history_mutation()")
    op.drop_index("ix_workflow_history_workflow_created", table_name="workflow_history")
    op.drop_table("workflow_history")
    op.drop_index("ix_workflow_status_responsible", table_name="workflow")
    op.drop_index("ix_workflow_responsible_id", table_name="workflow")
    op.drop_index("ix_workflow_deviation_id", table_name="workflow")
    op.drop_table("workflow")
