# depth_charts/logic/templates.py
from __future__ import annotations

from typing import Dict, List

# ---- Standard field positions (diamond layout) ----
FIELD_POSITIONS: List[dict] = [
    {"position_code": "P", "position_name": "Pitcher", "color": "#EF4444", "icon": "Shield", "display_order": 1},
    {"position_code": "C", "position_name": "Catcher", "color": "#3B82F6", "icon": "Shield", "display_order": 2},
    {"position_code": "1B", "position_name": "First Base", "color": "#10B981", "icon": "Target", "display_order": 3},
    {"position_code": "2B", "position_name": "Second Base", "color": "#F59E0B", "icon": "Target", "display_order": 4},
    {"position_code": "3B", "position_name": "Third Base", "color": "#8B5CF6", "icon": "Target", "display_order": 5},
    {"position_code": "SS", "position_name": "Shortstop", "color": "#6366F1", "icon": "Target", "display_order": 6},
    {"position_code": "LF", "position_name": "Left Field", "color": "#EC4899", "icon": "Zap", "display_order": 7},
    {"position_code": "CF", "position_name": "Center Field", "color": "#14B8A6", "icon": "Zap", "display_order": 8},
    {"position_code": "RF", "position_name": "Right Field", "color": "#F97316", "icon": "Zap", "display_order": 9},
    {"position_code": "DH", "position_name": "Designated Hitter", "color": "#06B6D4", "icon": "Heart", "display_order": 10},
]

# Sections hold players who are not on the field.
SECTION_POSITIONS: List[dict] = [
    {"position_code": "BENCH", "position_name": "Bench", "color": "#6B7280", "icon": "Users", "display_order": 20, "max_players": 99},
    {"position_code": "BULLPEN", "position_name": "Bullpen", "color": "#8B5CF6", "icon": "Shield", "display_order": 21, "max_players": 99},
    {"position_code": "INJURED", "position_name": "Injured", "color": "#EF4444", "icon": "AlertCircle", "display_order": 22, "max_players": 99},
]

TEMPLATES: Dict[str, List[dict]] = {
    "baseball": FIELD_POSITIONS,
    "baseball_full": FIELD_POSITIONS + SECTION_POSITIONS,
}


def template_positions(name: str) -> List[dict]:
    """Fresh copies of a named template's position rows (KeyError if unknown)."""
    return [dict(row) for row in TEMPLATES[name.strip().lower()]]
