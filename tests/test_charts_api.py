from conftest import history_count, position_by_code


def test_create_chart_from_template(client, coach, team_id):
    r = client.post(
        "/depth-charts",
        json={"team_id": team_id, "name": "Spring Lineup", "template": "baseball"},
        headers=coach,
    )
    assert r.status_code == 201, r.text
    chart = r.json()
    codes = [p["position_code"] for p in chart["positions"]]
    assert codes == ["P", "C", "1B", "2B", "3B", "SS", "LF", "CF", "RF", "DH"]
    assert chart["state"] == "populated"
    assert chart["is_default"] is False
    assert chart["created_by"] == "coach"
    assert all(p["assignments"] == [] for p in chart["positions"])

    hist = client.get(f"/depth-charts/{chart['id']}/history", headers=coach).json()
    assert [h["action"] for h in hist] == ["create"]
    assert hist[0]["actor"] == "coach"


def test_create_chart_full_template_has_sections(client, coach, team_id, make_chart):
    chart = make_chart(team_id, template="baseball_full")
    bench = position_by_code(chart, "BENCH")
    assert bench["max_players"] == 99
    assert chart["positions"][-1]["position_code"] == "INJURED"


def test_create_chart_with_explicit_positions(client, coach, team_id, make_chart):
    chart = make_chart(
        team_id,
        positions=[
            {"position_code": "ss", "position_name": "Shortstop"},
            {"position_code": "cf", "max_players": 2},
        ],
    )
    assert [p["position_code"] for p in chart["positions"]] == ["SS", "CF"]
    assert [p["display_order"] for p in chart["positions"]] == [1, 2]
    assert position_by_code(chart, "CF")["max_players"] == 2


def test_empty_chart_is_draft(client, coach, team_id, make_chart):
    chart = make_chart(team_id, name="Blank")
    assert chart["positions"] == []
    assert chart["state"] == "draft"


def test_create_chart_rejections(client, coach, team_id):
    r = client.post("/depth-charts", json={"team_id": team_id, "name": "   "}, headers=coach)
    assert r.status_code == 422
    assert r.json()["kind"] == "validation"

    r = client.post("/depth-charts", json={"team_id": team_id, "name": "X", "template": "cricket"}, headers=coach)
    assert r.status_code == 422

    r = client.post(
        "/depth-charts",
        json={"team_id": team_id, "name": "X", "positions": [{"position_code": "SS"}, {"position_code": "ss"}]},
        headers=coach,
    )
    assert r.status_code == 422
    assert "SS" in r.json()["message"]

    r = client.post("/depth-charts", json={"team_id": 999999, "name": "X"}, headers=coach)
    assert r.status_code == 404
    assert r.json()["kind"] == "not_found"

    # none of the rejected requests left a chart behind
    r = client.get(f"/teams/{team_id}/depth-charts", headers=coach)
    assert r.json() == []


def test_request_shape_errors_use_validation_kind(client, coach):
    r = client.post("/depth-charts", json={"name": "no team"}, headers=coach)
    assert r.status_code == 422
    js = r.json()
    assert js["kind"] == "validation"
    assert "team_id" in js["message"]


def test_get_missing_chart_is_not_found(client, coach):
    r = client.get("/depth-charts/987654", headers=coach)
    assert r.status_code == 404
    assert r.json() == {"kind": "not_found", "message": "Depth chart 987654 not found"}


def test_update_chart(client, coach, team_id, make_chart):
    chart = make_chart(team_id, name="Week 1")
    r = client.patch(
        f"/depth-charts/{chart['id']}",
        json={"name": "Week 2", "effective_date": "2026-04-01", "notes": "road trip"},
        headers=coach,
    )
    assert r.status_code == 200, r.text
    js = r.json()
    assert js["name"] == "Week 2"
    assert js["effective_date"] == "2026-04-01"
    assert js["notes"] == "road trip"

    hist = client.get(f"/depth-charts/{chart['id']}/history", headers=coach).json()
    assert hist[-1]["action"] == "update"
    assert hist[-1]["detail"]["before"]["name"] == "Week 1"
    assert hist[-1]["detail"]["after"]["effective_date"] == "2026-04-01"

    r = client.patch(f"/depth-charts/{chart['id']}", json={}, headers=coach)
    assert r.status_code == 422
    r = client.patch(f"/depth-charts/{chart['id']}", json={"name": ""}, headers=coach)
    assert r.status_code == 422
    assert history_count(client, coach, chart["id"]) == 2


def test_set_default_leaves_exactly_one(client, coach, team_id, make_chart):
    a = make_chart(team_id, name="A", is_default=True)
    b = make_chart(team_id, name="B")
    c = make_chart(team_id, name="C", is_default=True)

    def defaults():
        rows = client.get(f"/teams/{team_id}/depth-charts", headers=coach).json()
        return [row["id"] for row in rows if row["is_default"]]

    # creating C as default cleared A
    assert defaults() == [c["id"]]

    r = client.post(f"/depth-charts/{b['id']}/default", headers=coach)
    assert r.status_code == 200, r.text
    assert r.json()["state"] == "default"
    assert defaults() == [b["id"]]

    hist = client.get(f"/depth-charts/{b['id']}/history", headers=coach).json()
    assert hist[-1]["action"] == "set_default"
    assert hist[-1]["detail"]["cleared_default_chart_ids"] == [c["id"]]
    assert a["id"] not in defaults()


def test_selected_chart_prefers_default_then_earliest(client, coach, team_id, make_chart):
    r = client.get(f"/teams/{team_id}/depth-charts/selected", headers=coach)
    assert r.status_code == 404

    first = make_chart(team_id, name="First")
    second = make_chart(team_id, name="Second", template="baseball")

    r = client.get(f"/teams/{team_id}/depth-charts/selected", headers=coach)
    assert r.status_code == 200
    assert r.json()["id"] == first["id"]

    client.post(f"/depth-charts/{second['id']}/default", headers=coach)
    r = client.get(f"/teams/{team_id}/depth-charts/selected", headers=coach)
    assert r.json()["id"] == second["id"]
    assert len(r.json()["positions"]) == 10


def test_list_charts_in_creation_order(client, coach, team_id, make_chart):
    ids = [make_chart(team_id, name=n)["id"] for n in ("One", "Two", "Three")]
    rows = client.get(f"/teams/{team_id}/depth-charts", headers=coach).json()
    assert [row["id"] for row in rows] == ids

    r = client.get("/teams/999999/depth-charts", headers=coach)
    assert r.status_code == 404


def test_delete_default_conflicts_while_others_exist(client, coach, team_id, make_chart):
    main = make_chart(team_id, name="Main", is_default=True)
    other = make_chart(team_id, name="Other")

    r = client.delete(f"/depth-charts/{main['id']}", headers=coach)
    assert r.status_code == 409
    assert r.json()["kind"] == "conflict"
    assert client.get(f"/depth-charts/{main['id']}", headers=coach).status_code == 200

    r = client.delete(f"/depth-charts/{other['id']}", headers=coach)
    assert r.status_code == 200
    assert r.json() == {"ok": True, "deleted_chart_id": other["id"]}

    # last chart standing may go even though it is the default
    r = client.delete(f"/depth-charts/{main['id']}", headers=coach)
    assert r.status_code == 200


def test_history_survives_chart_deletion(client, coach, team_id, make_chart, seed_players):
    (p,) = seed_players(team_id, [{"first_name": "Gone", "last_name": "Soon", "position": "SS"}])
    chart = make_chart(team_id, name="Temp", positions=[{"position_code": "SS"}])
    ss = position_by_code(chart, "SS")
    client.post(f"/positions/{ss['id']}/assignments", json={"player_id": p["id"]}, headers=coach)

    r = client.delete(f"/depth-charts/{chart['id']}", headers=coach)
    assert r.status_code == 200

    assert client.get(f"/depth-charts/{chart['id']}", headers=coach).status_code == 404
    hist = client.get(f"/depth-charts/{chart['id']}/history", headers=coach).json()
    assert [h["action"] for h in hist] == ["create", "assign", "delete"]
    deleted = hist[-1]["detail"]["positions"]
    assert deleted == [
        {"position_id": ss["id"], "position_code": "SS", "assignments": [{"player_id": p["id"], "depth_order": 1}]}
    ]

    # roster is untouched by chart deletion
    players = client.get(f"/teams/{team_id}/players").json()
    assert [row["id"] for row in players] == [p["id"]]


def test_history_limit(client, coach, team_id, make_chart):
    chart = make_chart(team_id, name="Limited")
    for i in range(3):
        client.patch(f"/depth-charts/{chart['id']}", json={"notes": f"n{i}"}, headers=coach)
    hist = client.get(f"/depth-charts/{chart['id']}/history?limit=2", headers=coach).json()
    assert [h["action"] for h in hist] == ["create", "update"]


def test_new_chart_after_delete_starts_with_clean_history(client, coach, team_id, make_chart):
    old = make_chart(team_id, name="Old")
    client.patch(f"/depth-charts/{old['id']}", json={"notes": "retired"}, headers=coach)
    assert client.delete(f"/depth-charts/{old['id']}", headers=coach).status_code == 200

    fresh = make_chart(team_id, name="Brand New", positions=[{"position_code": "SS"}])
    assert fresh["id"] != old["id"]
    hist = client.get(f"/depth-charts/{fresh['id']}/history", headers=coach).json()
    assert [h["action"] for h in hist] == ["create"]

    # position ids are not recycled either; history details refer to them
    old_positions = [
        h["detail"].get("position_id")
        for h in client.get(f"/depth-charts/{old['id']}/history", headers=coach).json()
    ]
    assert fresh["positions"][0]["id"] not in old_positions
    assert [h["action"] for h in client.get(f"/depth-charts/{old['id']}/history", headers=coach).json()] == [
        "create",
        "update",
        "delete",
    ]


def test_chart_name_length_limit(client, coach, team_id, make_chart):
    r = client.post("/depth-charts", json={"team_id": team_id, "name": "N" * 121}, headers=coach)
    assert r.status_code == 422
    assert r.json()["kind"] == "validation"

    chart = make_chart(team_id, name="N" * 120)
    r = client.patch(f"/depth-charts/{chart['id']}", json={"name": "N" * 121}, headers=coach)
    assert r.status_code == 422
    assert history_count(client, coach, chart["id"]) == 1
