from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from .models import Capability, HistoryAction


# -----------------------
# Errors
# -----------------------
class ErrorOut(BaseModel):
    kind: str
    message: str


# -----------------------
# Team / Roster
# -----------------------
class TeamCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)


class TeamOut(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class PlayerIn(BaseModel):
    team_id: int
    first_name: str = Field(..., min_length=1, max_length=80)
    last_name: str = Field(..., min_length=1, max_length=80)
    position: str | None = None
    secondary_positions: str | None = Field(None, description="Comma separated codes, e.g. '2B,3B'")
    jersey_number: str | None = None
    status: str = "active"


class PlayerOut(BaseModel):
    id: int
    team_id: int
    first_name: str
    last_name: str
    position: str | None = None
    secondary_positions: str | None = None
    jersey_number: str | None = None
    status: str

    model_config = ConfigDict(from_attributes=True)


class RecommendedPlayerOut(PlayerOut):
    fit: str


# -----------------------
# Positions
# -----------------------
class PositionIn(BaseModel):
    position_code: str = Field(..., min_length=1, max_length=16)
    position_name: str | None = Field(None, max_length=80)
    display_order: int | None = None
    color: str | None = Field(None, max_length=16)
    icon: str | None = Field(None, max_length=40)
    max_players: int | None = None
    description: str | None = None


class PositionUpdate(BaseModel):
    position_code: str | None = Field(None, min_length=1, max_length=16)
    position_name: str | None = Field(None, max_length=80)
    display_order: int | None = None
    color: str | None = Field(None, max_length=16)
    icon: str | None = Field(None, max_length=40)
    max_players: int | None = None
    description: str | None = None


# -----------------------
# Assignments
# -----------------------
class AssignmentIn(BaseModel):
    player_id: int
    depth_order: int | None = Field(None, description="1 = starter; omitted appends to the bottom")
    notes: str | None = None


class ReorderIn(BaseModel):
    depth_order: int


class PlayerBrief(BaseModel):
    id: int
    first_name: str
    last_name: str
    position: str | None = None
    jersey_number: str | None = None

    model_config = ConfigDict(from_attributes=True)


class AssignmentOut(BaseModel):
    id: int
    position_id: int
    player_id: int
    depth_order: int
    notes: str | None = None
    assigned_at: datetime
    assigned_by: str | None = None
    player: PlayerBrief | None = None

    model_config = ConfigDict(from_attributes=True)


class PositionOut(BaseModel):
    id: int
    depth_chart_id: int
    position_code: str
    position_name: str | None = None
    display_order: int
    color: str | None = None
    icon: str | None = None
    max_players: int | None = None
    description: str | None = None
    assignments: list[AssignmentOut] = []

    model_config = ConfigDict(from_attributes=True)


# -----------------------
# Depth charts
# -----------------------
class DepthChartCreate(BaseModel):
    team_id: int
    name: str = Field(..., max_length=120)
    description: str | None = None
    is_default: bool = False
    effective_date: date | None = None
    notes: str | None = None
    template: str | None = Field(None, description="'baseball' or 'baseball_full'")
    positions: list[PositionIn] = []


class DepthChartUpdate(BaseModel):
    name: str | None = Field(None, max_length=120)
    description: str | None = None
    effective_date: date | None = None
    notes: str | None = None


class DepthChartOut(BaseModel):
    id: int
    team_id: int
    name: str
    description: str | None = None
    is_default: bool
    effective_date: date | None = None
    notes: str | None = None
    state: str
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DepthChartDetail(DepthChartOut):
    positions: list[PositionOut] = []


# -----------------------
# History
# -----------------------
class HistoryEntryOut(BaseModel):
    id: int
    depth_chart_id: int
    action: HistoryAction
    actor: str | None = None
    timestamp: datetime
    summary: str | None = None
    detail: dict | None = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


# -----------------------
# Permissions
# -----------------------
class GrantIn(BaseModel):
    user_id: str = Field(..., min_length=1)
    capabilities: list[Capability]


class PermissionsOut(BaseModel):
    user_id: str
    capabilities: list[Capability]

    model_config = ConfigDict(use_enum_values=True)
