"""challenge lifecycle: categories, challenges, tiers, validations, audit logs

Revision ID: 20261019_0001
Revises: 
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "20261019_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "challenge_categories",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("key", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.String(length=1024), nullable=False, server_default=""),
        sa.Column("tier_system", sa.String(length=32), nullable=False, server_default="RARITY"),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index("ix_challenge_categories_key", "challenge_categories", ["key"], unique=True)

    op.create_table(
        "challenges",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=64), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False, server_default="tiered"),
        sa.Column("description_short", sa.String(length=512), nullable=False, server_default=""),
        sa.Column("description_long", sa.Text(), nullable=False, server_default=""),
        sa.Column("metric_type", sa.String(length=32), nullable=False, server_default="integer"),
        sa.Column("metric_source", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("metric_key", sa.String(length=128), nullable=False, server_default=""),
        sa.Column("metric_aggregation", sa.String(length=32), nullable=False, server_default="count"),
        sa.Column("metric_filters_json", sa.Text(), nullable=False, server_default="{}"),
        sa.Column("tiering_mode", sa.String(length=32), nullable=False, server_default="threshold"),
        sa.Column("tier_config_json", sa.Text(), nullable=False, server_default="{}"),
        sa.Column("is_cluster_based", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_test_only", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_visible_fe", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("state", sa.String(length=32), nullable=False, server_default="draft"),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_by", sa.String(length=128), nullable=False),
        sa.Column("updated_by", sa.String(length=128), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_challenges_code", "challenges", ["code"], unique=True)
    op.create_index("ux_challenges_code_lower", "challenges", [sa.text("lower(code)")], unique=True)
    op.create_index("ix_challenges_category", "challenges", ["category"])
    op.create_index("ix_challenges_state", "challenges", ["state"])

    op.create_table(
        "challenge_tiers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("challenge_id", sa.Integer(), sa.ForeignKey("challenges.id", ondelete="CASCADE"), nullable=False),
        sa.Column("tier_code", sa.String(length=64), nullable=False),
        sa.Column("display_name", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("threshold_value", sa.Float(), nullable=False),
        sa.Column("is_prestige", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("challenge_id", "tier_code", name="uq_challenge_tier_code"),
    )
    op.create_index("ix_challenge_tiers_challenge_id", "challenge_tiers", ["challenge_id"])

    op.create_table(
        "challenge_validations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("challenge_id", sa.Integer(), sa.ForeignKey("challenges.id", ondelete="CASCADE"), nullable=False),
        sa.Column("auto_checks_json", sa.Text(), nullable=False, server_default="{}"),
        sa.Column("manual_checks_json", sa.Text(), nullable=False, server_default="{}"),
        sa.Column("last_run_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_run_by", sa.String(length=128), nullable=True),
    )
    op.create_index("ix_challenge_validations_challenge_id", "challenge_validations", ["challenge_id"], unique=True)

    op.create_table(
        "challenge_audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("challenge_id", sa.Integer(), sa.ForeignKey("challenges.id"), nullable=False),
        sa.Column("actor", sa.String(length=128), nullable=False),
        sa.Column("action", sa.String(length=32), nullable=False),
        sa.Column("from_state", sa.String(length=32), nullable=True),
        sa.Column("to_state", sa.String(length=32), nullable=True),
        sa.Column("payload_json", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_challenge_audit_logs_challenge_id", "challenge_audit_logs", ["challenge_id"])
    op.create_index("ix_challenge_audit_logs_actor", "challenge_audit_logs", ["actor"])
    op.create_index("ix_challenge_audit_logs_action", "challenge_audit_logs", ["action"])
    op.create_index("ix_challenge_audit_logs_created_at", "challenge_audit_logs", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_challenge_audit_logs_created_at", table_name="challenge_audit_logs")
    op.drop_index("ix_challenge_audit_logs_action", table_name="challenge_audit_logs")
    op.drop_index("ix_challenge_audit_logs_actor", table_name="challenge_audit_logs")
    op.drop_index("ix_challenge_audit_logs_challenge_id", table_name="challenge_audit_logs")
    op.drop_table("challenge_audit_logs")

    op.drop_index("ix_challenge_validations_challenge_id", table_name="challenge_validations")
    op.drop_table("challenge_validations")

    op.drop_index("ix_challenge_tiers_challenge_id", table_name="challenge_tiers")
    op.drop_table("challenge_tiers")

    op.drop_index("ix_challenges_state", table_name="challenges")
    op.drop_index("ix_challenges_category", table_name="challenges")
    op.drop_index("ux_challenges_code_lower", table_name="challenges")
    op.drop_index("ix_challenges_code", table_name="challenges")
    op.drop_table("challenges")

    op.drop_index("ix_challenge_categories_key", table_name="challenge_categories")
    op.drop_table("challenge_categories")
