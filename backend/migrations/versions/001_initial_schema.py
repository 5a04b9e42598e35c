"""Initial schema: users, onboarding, profiles, swipes, matches, chat, referrals.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

Column types are portable (Uuid, JSON) so the migration runs on both
PostgreSQL and SQLite.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps(*, updated: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        )
    ]
    if updated:
        columns.append(
            sa.Column(
                "updated_at",
                sa.DateTime(timezone=True),
                server_default=sa.func.now(),
                nullable=False,
            )
        )
    return columns


def _user_fk(name: str, *, nullable: bool = False, **kwargs: object) -> sa.Column:
    return sa.Column(
        name,
        sa.Uuid(),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=nullable,
        **kwargs,
    )


def upgrade() -> None:
    # =========================================================================
    # Accounts
    # =========================================================================
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("role", sa.String(20), nullable=True),
        sa.Column("onboarded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "token_invalidated_before", sa.DateTime(timezone=True), nullable=True
        ),
        sa.Column(
            "swipe_undo_available",
            sa.Integer(),
            server_default="0",
            nullable=False,
        ),
        *_timestamps(),
        sa.CheckConstraint(
            "role IS NULL OR role IN ('candidate', 'hr')", name="ck_users_role"
        ),
    )

    op.create_table(
        "user_preferences",
        _user_fk("user_id", primary_key=True),
        sa.Column(
            "notifications_enabled",
            sa.Boolean(),
            server_default=sa.true(),
            nullable=False,
        ),
        sa.Column("dark_mode", sa.Boolean(), server_default=sa.false(), nullable=False),
        *_timestamps(),
    )

    # =========================================================================
    # Onboarding & profiles
    # =========================================================================
    op.create_table(
        "onboarding_sessions",
        _user_fk("user_id", primary_key=True),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("current_step", sa.Integer(), nullable=False),
        sa.Column("completed_steps", sa.JSON(), nullable=False),
        sa.Column("answers", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "role IN ('candidate', 'hr')", name="ck_onboarding_sessions_role"
        ),
        sa.CheckConstraint("current_step >= 0", name="ck_onboarding_sessions_step"),
    )

    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _user_fk("user_id", unique=True),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("company_type", sa.String(30), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("display_name", sa.String(255), nullable=True),
        sa.Column("headline", sa.String(255), nullable=True),
        sa.Column("photo_url", sa.Text(), nullable=True),
        sa.Column("is_published", sa.Boolean(), nullable=False),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("role IN ('candidate', 'hr')", name="ck_profiles_role"),
    )
    op.create_index("idx_profiles_feed", "profiles", ["role", "is_published"])

    # =========================================================================
    # Discovery
    # =========================================================================
    op.create_table(
        "swipes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _user_fk("swiper_id"),
        _user_fk("target_id"),
        sa.Column("direction", sa.String(10), nullable=False),
        *_timestamps(updated=False),
        sa.UniqueConstraint("swiper_id", "target_id", name="uq_swipes_pair"),
        sa.CheckConstraint(
            "direction IN ('like', 'pass')", name="ck_swipes_direction"
        ),
        sa.CheckConstraint("swiper_id != target_id", name="ck_swipes_not_self"),
    )
    op.create_index("idx_swipes_target", "swipes", ["target_id"])

    op.create_table(
        "matches",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _user_fk("user_a_id"),
        _user_fk("user_b_id"),
        sa.Column(
            "created_by_swipe_id",
            sa.Integer(),
            sa.ForeignKey("swipes.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(updated=False),
        sa.UniqueConstraint("user_a_id", "user_b_id", name="uq_matches_pair"),
        sa.CheckConstraint("user_a_id < user_b_id", name="ck_matches_ordered"),
    )
    op.create_index("idx_matches_user_b", "matches", ["user_b_id"])

    # =========================================================================
    # Chat & referrals
    # =========================================================================
    op.create_table(
        "chat_messages",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "match_id",
            sa.Uuid(),
            sa.ForeignKey("matches.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _user_fk("sender_id"),
        sa.Column("kind", sa.String(30), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        *_timestamps(updated=False),
        sa.CheckConstraint(
            "kind IN ('text', 'call_scheduled', 'email_sent', 'referral_requested')",
            name="ck_chat_messages_kind",
        ),
    )
    op.create_index("idx_chat_messages_match", "chat_messages", ["match_id", "id"])

    op.create_table(
        "referrals",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _user_fk("from_user_id"),
        _user_fk("to_user_id"),
        sa.Column(
            "match_id",
            sa.Uuid(),
            sa.ForeignKey("matches.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("job_id", sa.String(100), nullable=True),
        sa.Column("company_id", sa.String(100), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("day_key", sa.String(10), nullable=False),
        *_timestamps(updated=False),
        sa.CheckConstraint(
            "status IN ('pending', 'accepted', 'declined')",
            name="ck_referrals_status",
        ),
    )
    op.create_index(
        "idx_referrals_from_day", "referrals", ["from_user_id", "day_key"]
    )


def downgrade() -> None:
    op.drop_table("referrals")
    op.drop_table("chat_messages")
    op.drop_table("matches")
    op.drop_table("swipes")
    op.drop_table("profiles")
    op.drop_table("onboarding_sessions")
    op.drop_table("user_preferences")
    op.drop_table("users")
