# depth_charts/models.py
import enum
from datetime import date, datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy import (
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base


# -----------------------
# Enums
# -----------------------
class Capability(str, enum.Enum):
    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    MANAGE_POSITIONS = "manage_positions"
    ASSIGN_PLAYER = "assign_player"
    UNASSIGN_PLAYER = "unassign_player"


class HistoryAction(str, enum.Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    ADD_POSITION = "add_position"
    UPDATE_POSITION = "update_position"
    REMOVE_POSITION = "remove_position"
    ASSIGN = "assign"
    UNASSIGN = "unassign"
    REORDER = "reorder"
    DUPLICATE = "duplicate"
    SET_DEFAULT = "set_default"


class Team(Base):
    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    depth_charts = relationship("DepthChart", back_populates="team", cascade="all, delete-orphan")
    players = relationship("Player", back_populates="team", cascade="all, delete-orphan")


# --- Roster directory (read-only to the engine) ---
class Player(Base):
    __tablename__ = "players"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    team_id: Mapped[int] = mapped_column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), index=True)

    first_name: Mapped[str] = mapped_column(String(80), nullable=False)
    last_name: Mapped[str] = mapped_column(String(80), nullable=False)

    # primary position code, e.g. "SS"
    position: Mapped[str | None] = mapped_column(String(16), nullable=True)
    # comma separated codes, e.g. "2B,3B"
    secondary_positions: Mapped[str | None] = mapped_column(String(120), nullable=True)

    jersey_number: Mapped[str | None] = mapped_column(String(8), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")

    team = relationship("Team", back_populates="players")


class DepthChart(Base):
    __tablename__ = "depth_charts"
    # ids are never reused: history rows keep pointing at deleted charts
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    team_id: Mapped[int] = mapped_column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), index=True)

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    effective_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_by: Mapped[str | None] = mapped_column(String(120), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    team = relationship("Team", back_populates="depth_charts")
    positions = relationship(
        "Position",
        back_populates="depth_chart",
        cascade="all, delete-orphan",
        order_by="[Position.display_order, Position.id]",
    )

    @property
    def state(self) -> str:
        """Lifecycle label: draft -> populated -> default."""
        if self.is_default:
            return "default"
        if self.positions:
            return "populated"
        return "draft"


class Position(Base):
    __tablename__ = "depth_chart_positions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    depth_chart_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("depth_charts.id", ondelete="CASCADE"), index=True
    )

    position_code: Mapped[str] = mapped_column(String(16), nullable=False)
    position_name: Mapped[str | None] = mapped_column(String(80), nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    color: Mapped[str | None] = mapped_column(String(16), nullable=True)
    icon: Mapped[str | None] = mapped_column(String(40), nullable=True)
    max_players: Mapped[int | None] = mapped_column(Integer, nullable=True)  # null = unlimited
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    depth_chart = relationship("DepthChart", back_populates="positions")
    assignments = relationship(
        "Assignment",
        back_populates="position",
        cascade="all, delete-orphan",
        order_by="Assignment.depth_order",
    )

    __table_args__ = (
        UniqueConstraint("depth_chart_id", "position_code", name="uq_position_chart_code"),
        {"sqlite_autoincrement": True},
    )


class Assignment(Base):
    __tablename__ = "depth_chart_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    position_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("depth_chart_positions.id", ondelete="CASCADE"), index=True
    )
    player_id: Mapped[int] = mapped_column(Integer, ForeignKey("players.id", ondelete="CASCADE"), index=True)

    # 1-based rank within the position; 1 is the starter
    depth_order: Mapped[int] = mapped_column(Integer, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    assigned_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    assigned_by: Mapped[str | None] = mapped_column(String(120), nullable=True)

    position = relationship("Position", back_populates="assignments")
    player = relationship("Player")

    __table_args__ = (
        UniqueConstraint("position_id", "player_id", name="uq_assignment_position_player"),
        UniqueConstraint("position_id", "depth_order", name="uq_assignment_position_order"),
        {"sqlite_autoincrement": True},
    )


class HistoryEntry(Base):
    """
    Append-only audit row. `depth_chart_id` carries no foreign key:
    entries outlive the chart they describe.
    """

    __tablename__ = "depth_chart_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    depth_chart_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    action: Mapped[HistoryAction] = mapped_column(SAEnum(HistoryAction), nullable=False)
    actor: Mapped[str | None] = mapped_column(String(120), nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    summary: Mapped[str | None] = mapped_column(String(255), nullable=True)
    detail: Mapped[dict | None] = mapped_column(JSON, nullable=True)


# --- Capability grants consulted by the permission gate ---
class UserCapability(Base):
    __tablename__ = "user_capabilities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    capability: Mapped[Capability] = mapped_column(SAEnum(Capability), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "capability", name="uq_user_capability"),)
