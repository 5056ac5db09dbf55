"""depth chart baseline schema

Revision ID: 5c1e0a7d9b42
Revises:
Create Date: 2026-10-19 00:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "5c1e0a7d9b42"
down_revision = None
branch_labels = None
depends_on = None

CAPABILITIES = (
    "VIEW",
    "CREATE",
    "EDIT",
    "DELETE",
    "MANAGE_POSITIONS",
    "ASSIGN_PLAYER",
    "UNASSIGN_PLAYER",
)

HISTORY_ACTIONS = (
    "CREATE",
    "UPDATE",
    "DELETE",
    "ADD_POSITION",
    "UPDATE_POSITION",
    "REMOVE_POSITION",
    "ASSIGN",
    "UNASSIGN",
    "REORDER",
    "DUPLICATE",
    "SET_DEFAULT",
)


def upgrade() -> None:
    # teams
    op.create_table(
        "teams",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_teams_id", "teams", ["id"])

    # players (roster directory)
    op.create_table(
        "players",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "team_id",
            sa.Integer(),
            sa.ForeignKey("teams.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("first_name", sa.String(length=80), nullable=False),
        sa.Column("last_name", sa.String(length=80), nullable=False),
        sa.Column("position", sa.String(length=16), nullable=True),
        sa.Column("secondary_positions", sa.String(length=120), nullable=True),
        sa.Column("jersey_number", sa.String(length=8), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
    )
    op.create_index("ix_players_id", "players", ["id"])
    op.create_index("ix_players_team_id", "players", ["team_id"])

    # depth_charts (AUTOINCREMENT on charts, positions and assignments: history refers to their ids)
    op.create_table(
        "depth_charts",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "team_id",
            sa.Integer(),
            sa.ForeignKey("teams.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("effective_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(length=120), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_depth_charts_id", "depth_charts", ["id"])
    op.create_index("ix_depth_charts_team_id", "depth_charts", ["team_id"])

    # depth_chart_positions
    op.create_table(
        "depth_chart_positions",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "depth_chart_id",
            sa.Integer(),
            sa.ForeignKey("depth_charts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position_code", sa.String(length=16), nullable=False),
        sa.Column("position_name", sa.String(length=80), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("color", sa.String(length=16), nullable=True),
        sa.Column("icon", sa.String(length=40), nullable=True),
        sa.Column("max_players", sa.Integer(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.UniqueConstraint(
            "depth_chart_id", "position_code", name="uq_position_chart_code"
        ),  # inline UNIQUE (SQLite-safe)
        sqlite_autoincrement=True,
    )
    op.create_index("ix_depth_chart_positions_id", "depth_chart_positions", ["id"])
    op.create_index("ix_depth_chart_positions_depth_chart_id", "depth_chart_positions", ["depth_chart_id"])

    # depth_chart_assignments
    op.create_table(
        "depth_chart_assignments",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "position_id",
            sa.Integer(),
            sa.ForeignKey("depth_chart_positions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "player_id",
            sa.Integer(),
            sa.ForeignKey("players.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("depth_order", sa.Integer(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("assigned_at", sa.DateTime(), nullable=False),
        sa.Column("assigned_by", sa.String(length=120), nullable=True),
        sa.UniqueConstraint("position_id", "player_id", name="uq_assignment_position_player"),
        sa.UniqueConstraint("position_id", "depth_order", name="uq_assignment_position_order"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_depth_chart_assignments_id", "depth_chart_assignments", ["id"])
    op.create_index("ix_depth_chart_assignments_position_id", "depth_chart_assignments", ["position_id"])
    op.create_index("ix_depth_chart_assignments_player_id", "depth_chart_assignments", ["player_id"])

    # depth_chart_history (no FK: survives chart deletion)
    op.create_table(
        "depth_chart_history",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("depth_chart_id", sa.Integer(), nullable=False),
        sa.Column("action", sa.Enum(*HISTORY_ACTIONS, name="historyaction"), nullable=False),
        sa.Column("actor", sa.String(length=120), nullable=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.Column("summary", sa.String(length=255), nullable=True),
        sa.Column("detail", sa.JSON(), nullable=True),
    )
    op.create_index("ix_depth_chart_history_id", "depth_chart_history", ["id"])
    op.create_index("ix_depth_chart_history_depth_chart_id", "depth_chart_history", ["depth_chart_id"])
    op.create_index("ix_depth_chart_history_timestamp", "depth_chart_history", ["timestamp"])

    # user_capabilities
    op.create_table(
        "user_capabilities",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(length=120), nullable=False),
        sa.Column("capability", sa.Enum(*CAPABILITIES, name="capability"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("user_id", "capability", name="uq_user_capability"),
    )
    op.create_index("ix_user_capabilities_id", "user_capabilities", ["id"])
    op.create_index("ix_user_capabilities_user_id", "user_capabilities", ["user_id"])


def downgrade() -> None:
    # drop in reverse dependency order
    op.drop_index("ix_user_capabilities_user_id", table_name="user_capabilities")
    op.drop_index("ix_user_capabilities_id", table_name="user_capabilities")
    op.drop_table("user_capabilities")

    op.drop_index("ix_depth_chart_history_timestamp", table_name="depth_chart_history")
    op.drop_index("ix_depth_chart_history_depth_chart_id", table_name="depth_chart_history")
    op.drop_index("ix_depth_chart_history_id", table_name="depth_chart_history")
    op.drop_table("depth_chart_history")

    op.drop_index("ix_depth_chart_assignments_player_id", table_name="depth_chart_assignments")
    op.drop_index("ix_depth_chart_assignments_position_id", table_name="depth_chart_assignments")
    op.drop_index("ix_depth_chart_assignments_id", table_name="depth_chart_assignments")
    op.drop_table("depth_chart_assignments")

    op.drop_index("ix_depth_chart_positions_depth_chart_id", table_name="depth_chart_positions")
    op.drop_index("ix_depth_chart_positions_id", table_name="depth_chart_positions")
    op.drop_table("depth_chart_positions")

    op.drop_index("ix_depth_charts_team_id", table_name="depth_charts")
    op.drop_index("ix_depth_charts_id", table_name="depth_charts")
    op.drop_table("depth_charts")

    op.drop_index("ix_players_team_id", table_name="players")
    op.drop_index("ix_players_id", table_name="players")
    op.drop_table("players")

    op.drop_index("ix_teams_id", table_name="teams")
    op.drop_table("teams")
