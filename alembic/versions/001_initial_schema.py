"""Initial schema: profiles, quests, tower and patch notes.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _profile_fk() -> sa.Column:
    return sa.Column(
        "profile_id",
        sa.String(36),
        sa.ForeignKey("profiles.profile_id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    """Create all tables."""
    # --- profiles ---
    op.create_table(
        "profiles",
        sa.Column("profile_id", sa.String(36), primary_key=True),
        sa.Column("username", sa.String(64), nullable=False, unique=True),
        sa.Column("username_normalized", sa.String(64), nullable=False, unique=True),
        sa.Column("name", sa.String(128), nullable=False, server_default=""),
        sa.Column("avatar", sa.Text(), nullable=True),
        sa.Column("role", sa.String(32), nullable=False, server_default="developer"),
        sa.Column("headline", sa.String(256), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
    )
    op.execute(
        "ALTER TABLE profiles ADD CONSTRAINT ck_profiles_role "
        "CHECK (role IN ('developer', 'designer', 'marketer', 'founder', 'product-manager'))"
    )

    # --- player_stats ---
    op.create_table(
        "player_stats",
        sa.Column(
            "profile_id",
            sa.String(36),
            sa.ForeignKey("profiles.profile_id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("level", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("total_xp", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("current_xp", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("xp_to_next_level", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("consecutive_days", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_completed_date", sa.Date(), nullable=True),
        sa.Column("total_bricks", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("available_bricks", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("bricks_placed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
    )
    op.execute(
        "ALTER TABLE player_stats ADD CONSTRAINT ck_player_stats_bricks "
        "CHECK (available_bricks >= 0 AND available_bricks + bricks_placed = total_bricks)"
    )

    # --- daily_quests ---
    op.create_table(
        "daily_quests",
        sa.Column("quest_id", sa.BigInteger(), primary_key=True, autoincrement=True),
        _profile_fk(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("difficulty", sa.String(16), nullable=False, server_default="easy"),
        sa.Column("reward_xp", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("reward_bricks", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("confirmed", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("quest_date", sa.Date(), nullable=False),
        sa.Column("deadline", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
    )
    op.create_index("ix_daily_quests_profile_id", "daily_quests", ["profile_id"])
    op.create_index("ix_daily_quests_quest_date", "daily_quests", ["quest_date"])
    op.execute(
        "ALTER TABLE daily_quests ADD CONSTRAINT ck_daily_quests_difficulty "
        "CHECK (difficulty IN ('easy', 'medium', 'hard'))"
    )

    # --- quest_history ---
    op.create_table(
        "quest_history",
        sa.Column("history_id", sa.BigInteger(), primary_key=True, autoincrement=True),
        _profile_fk(),
        sa.Column("completion_date", sa.Date(), nullable=False),
        sa.Column("total_quests", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("completed_quests", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_bricks_earned", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_xp_earned", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("perfect_day", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.UniqueConstraint("profile_id", "completion_date", name="quest_history_profile_date_key"),
    )

    # --- tower_blocks ---
    op.create_table(
        "tower_blocks",
        sa.Column("block_id", sa.BigInteger(), primary_key=True, autoincrement=True),
        _profile_fk(),
        sa.Column("x_position", sa.Integer(), nullable=False),
        sa.Column("y_position", sa.Integer(), nullable=False),
        sa.Column("color", sa.String(7), nullable=False),
        sa.Column("build_date", sa.Date(), nullable=False),
        sa.Column("build_session_id", sa.String(64), nullable=True),
        sa.Column("is_confirmed", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.UniqueConstraint("profile_id", "x_position", "y_position", name="tower_blocks_profile_cell_key"),
    )
    op.create_index("ix_tower_blocks_profile_id", "tower_blocks", ["profile_id"])
    op.execute(
        "ALTER TABLE tower_blocks ADD CONSTRAINT ck_tower_blocks_color "
        "CHECK (color ~ '^#[0-9a-f]{6}$')"
    )

    # --- tower_building_sessions ---
    op.create_table(
        "tower_building_sessions",
        sa.Column("session_id", sa.String(64), primary_key=True),
        _profile_fk(),
        sa.Column("session_name", sa.String(128), nullable=False, server_default="Building Session"),
        sa.Column("blocks_data", sa.JSON(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("is_confirmed", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
    )

    # --- tower_stats ---
    op.create_table(
        "tower_stats",
        sa.Column(
            "profile_id",
            sa.String(36),
            sa.ForeignKey("profiles.profile_id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("total_blocks", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("confirmed_blocks", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("tower_height", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("tower_width", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_sessions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_built_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
    )

    # --- tower_history ---
    op.create_table(
        "tower_history",
        sa.Column("history_id", sa.BigInteger(), primary_key=True, autoincrement=True),
        _profile_fk(),
        sa.Column("action_type", sa.String(16), nullable=False),
        sa.Column("blocks_changed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_tower_history_profile_id", "tower_history", ["profile_id"])
    op.execute(
        "ALTER TABLE tower_history ADD CONSTRAINT ck_tower_history_action "
        "CHECK (action_type IN ('confirm', 'reset'))"
    )

    # --- patch_notes ---
    op.create_table(
        "patch_notes",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("version", sa.String(32), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("release_date", sa.Date(), nullable=False),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
    )
    op.create_index("ix_patch_notes_release_date", "patch_notes", ["release_date"])


def downgrade() -> None:
    """Drop all tables."""
    for table in (
        "patch_notes",
        "tower_history",
        "tower_stats",
        "tower_building_sessions",
        "tower_blocks",
        "quest_history",
        "daily_quests",
        "player_stats",
        "profiles",
    ):
        op.drop_table(table)
