# smoke.py: end-to-end walkthrough for the Depth Chart API
# Run the server with ALLOW_DEV_SEED=1 so capabilities can be granted.
import json
import uuid

import requests

BASE = "http://127.0.0.1:8000"
USER = "smoke-coach"
HEADERS = {"X-User-Id": USER}


def post(path, data=None, headers=None):
    r = requests.post(BASE + path, json=data, headers={**HEADERS, **(headers or {})})
    r.raise_for_status()
    return r.json()


def patch(path, data):
    r = requests.patch(BASE + path, json=data, headers=HEADERS)
    r.raise_for_status()
    return r.json()


def delete(path):
    r = requests.delete(BASE + path, headers=HEADERS)
    r.raise_for_status()
    return r.json()


def get(path):
    r = requests.get(BASE + path, headers=HEADERS)
    r.raise_for_status()
    return r.json()


print("=== 0) grant capabilities ===")
post(
    "/permissions/grant",
    {
        "user_id": USER,
        "capabilities": [
            "view",
            "create",
            "edit",
            "delete",
            "manage_positions",
            "assign_player",
            "unassign_player",
        ],
    },
)
print(get("/permissions/me"))

print("=== 1) team and roster ===")
team = post("/teams/", {"name": f"Smoke Sox {uuid.uuid4().hex[:6]}"})
team_id = team["id"]
roster = post(
    "/players/seed",
    [
        {"team_id": team_id, "first_name": "Luis", "last_name": "Arroyo", "position": "SS", "jersey_number": "7"},
        {"team_id": team_id, "first_name": "Mia", "last_name": "Chen", "position": "SS", "jersey_number": "9"},
        {
            "team_id": team_id,
            "first_name": "Nate",
            "last_name": "Ford",
            "position": "2B",
            "secondary_positions": "SS,3B",
            "jersey_number": "11",
        },
        {"team_id": team_id, "first_name": "Olga", "last_name": "Diaz", "position": "C", "jersey_number": "22"},
    ],
)
by_jersey = {p["jersey_number"]: p["id"] for p in roster}
print("players", by_jersey)

print("=== 2) create chart from template ===")
chart = post("/depth-charts", {"team_id": team_id, "name": "Opening Day", "template": "baseball", "is_default": True})
chart_id = chart["id"]
ss = next(p for p in chart["positions"] if p["position_code"] == "SS")
print("chart", chart_id, "state", chart["state"], "positions", [p["position_code"] for p in chart["positions"]])

print("=== 3) recommendations for SS ===")
for row in get(f"/depth-charts/{chart_id}/positions/{ss['id']}/recommended-players"):
    print(f"  #{row['jersey_number']} {row['last_name']} ({row['fit']})")

print("=== 4) fill SS ===")
post(f"/positions/{ss['id']}/assignments", {"player_id": by_jersey["7"]})
post(f"/positions/{ss['id']}/assignments", {"player_id": by_jersey["9"]})
top = post(f"/positions/{ss['id']}/assignments", {"player_id": by_jersey["11"], "depth_order": 1})
print("inserted at", top["depth_order"])

print("=== 5) reorder and unassign ===")
ranking = patch(f"/assignments/{top['id']}/order", {"depth_order": 3})
print("after move", [(a["player"]["jersey_number"], a["depth_order"]) for a in ranking])
print(delete(f"/assignments/{ranking[0]['id']}"))

print("=== 6) duplicate ===")
copy = post(f"/depth-charts/{chart_id}/duplicate", headers={"Idempotency-Key": f"smoke-{chart_id}"})
again = post(f"/depth-charts/{chart_id}/duplicate", headers={"Idempotency-Key": f"smoke-{chart_id}"})
assert copy["id"] == again["id"], "idempotent duplicate returned a different chart"
print("copy", copy["id"], copy["name"])

print("=== 7) outputs ===")
detail = get(f"/depth-charts/{chart_id}")
available = get(f"/depth-charts/{chart_id}/available-players")
history = get(f"/depth-charts/{chart_id}/history")
selected = get(f"/teams/{team_id}/depth-charts/selected")

ss_now = next(p for p in detail["positions"] if p["position_code"] == "SS")
print("\n-- SS --\n", json.dumps([(a["player_id"], a["depth_order"]) for a in ss_now["assignments"]]))
print("\n-- available --\n", json.dumps([p["last_name"] for p in available]))
print("\n-- history --\n", json.dumps([(h["action"], h["summary"]) for h in history], indent=2))
print("\n-- selected --\n", selected["id"], selected["name"])
