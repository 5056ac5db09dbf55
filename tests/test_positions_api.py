from conftest import history_count, position_by_code


def test_add_position_appends_display_order(client, coach, team_id, make_chart):
    chart = make_chart(team_id, positions=[{"position_code": "P"}, {"position_code": "C"}])
    r = client.post(
        f"/depth-charts/{chart['id']}/positions",
        json={"position_code": "dh", "position_name": "Designated Hitter", "color": "#06B6D4"},
        headers=coach,
    )
    assert r.status_code == 201, r.text
    js = r.json()
    assert js["position_code"] == "DH"
    assert js["display_order"] == 3
    assert js["depth_chart_id"] == chart["id"]

    detail = client.get(f"/depth-charts/{chart['id']}", headers=coach).json()
    assert [p["position_code"] for p in detail["positions"]] == ["P", "C", "DH"]


def test_positions_render_by_display_order(client, coach, team_id, make_chart):
    chart = make_chart(team_id)
    for code, order in (("RF", 9), ("P", 1), ("SS", 6)):
        client.post(
            f"/depth-charts/{chart['id']}/positions",
            json={"position_code": code, "display_order": order},
            headers=coach,
        )
    detail = client.get(f"/depth-charts/{chart['id']}", headers=coach).json()
    assert [p["position_code"] for p in detail["positions"]] == ["P", "SS", "RF"]


def test_duplicate_position_code_rejected(client, coach, team_id, make_chart):
    chart = make_chart(team_id, positions=[{"position_code": "SS"}])
    before = history_count(client, coach, chart["id"])

    r = client.post(f"/depth-charts/{chart['id']}/positions", json={"position_code": " ss "}, headers=coach)
    assert r.status_code == 422
    assert r.json()["kind"] == "validation"
    assert history_count(client, coach, chart["id"]) == before

    r = client.post("/depth-charts/999999/positions", json={"position_code": "C"}, headers=coach)
    assert r.status_code == 404


def test_same_code_allowed_in_different_charts(client, coach, team_id, make_chart):
    a = make_chart(team_id, name="A", positions=[{"position_code": "SS"}])
    b = make_chart(team_id, name="B", positions=[{"position_code": "SS"}])
    assert position_by_code(a, "SS")["id"] != position_by_code(b, "SS")["id"]


def test_update_position(client, coach, team_id, make_chart):
    chart = make_chart(team_id, positions=[{"position_code": "LF"}, {"position_code": "CF"}])
    lf = position_by_code(chart, "LF")

    r = client.patch(
        f"/positions/{lf['id']}",
        json={"position_name": "Left Field", "max_players": 3, "icon": "Zap"},
        headers=coach,
    )
    assert r.status_code == 200, r.text
    js = r.json()
    assert js["position_name"] == "Left Field"
    assert js["max_players"] == 3

    # renaming onto an existing code in the same chart is rejected
    r = client.patch(f"/positions/{lf['id']}", json={"position_code": "cf"}, headers=coach)
    assert r.status_code == 422

    r = client.patch(f"/positions/{lf['id']}", json={"position_code": "lf2"}, headers=coach)
    assert r.status_code == 200
    assert r.json()["position_code"] == "LF2"

    r = client.patch(f"/positions/{lf['id']}", json={}, headers=coach)
    assert r.status_code == 422

    r = client.patch(f"/positions/{lf['id']}", json={"max_players": 0}, headers=coach)
    assert r.status_code == 422

    hist = client.get(f"/depth-charts/{chart['id']}/history", headers=coach).json()
    assert [h["action"] for h in hist] == ["create", "update_position", "update_position"]


def test_max_players_caps_assignments(client, coach, team_id, make_chart, seed_players):
    players = seed_players(
        team_id,
        [{"first_name": f"F{i}", "last_name": f"L{i}", "position": "C"} for i in range(3)],
    )
    chart = make_chart(team_id, positions=[{"position_code": "C", "max_players": 2}])
    c = position_by_code(chart, "C")

    for p in players[:2]:
        r = client.post(f"/positions/{c['id']}/assignments", json={"player_id": p["id"]}, headers=coach)
        assert r.status_code == 201, r.text

    r = client.post(f"/positions/{c['id']}/assignments", json={"player_id": players[2]["id"]}, headers=coach)
    assert r.status_code == 409
    assert r.json()["kind"] == "conflict"

    # cannot shrink the cap below the current occupancy
    r = client.patch(f"/positions/{c['id']}", json={"max_players": 1}, headers=coach)
    assert r.status_code == 409

    r = client.patch(f"/positions/{c['id']}", json={"max_players": None}, headers=coach)
    assert r.status_code == 200
    r = client.post(f"/positions/{c['id']}/assignments", json={"player_id": players[2]["id"]}, headers=coach)
    assert r.status_code == 201


def test_remove_position_drops_its_assignments(client, coach, team_id, make_chart, seed_players):
    (p,) = seed_players(team_id, [{"first_name": "Rae", "last_name": "Field", "position": "RF"}])
    chart = make_chart(team_id, positions=[{"position_code": "RF"}, {"position_code": "CF"}])
    rf = position_by_code(chart, "RF")
    client.post(f"/positions/{rf['id']}/assignments", json={"player_id": p["id"]}, headers=coach)

    r = client.delete(f"/positions/{rf['id']}", headers=coach)
    assert r.status_code == 200
    assert r.json() == {"ok": True, "deleted_position_id": rf["id"], "depth_chart_id": chart["id"]}

    detail = client.get(f"/depth-charts/{chart['id']}", headers=coach).json()
    assert [pos["position_code"] for pos in detail["positions"]] == ["CF"]

    hist = client.get(f"/depth-charts/{chart['id']}/history", headers=coach).json()
    assert hist[-1]["action"] == "remove_position"
    assert hist[-1]["detail"]["assignments"] == [{"player_id": p["id"], "depth_order": 1}]

    # player is free again
    avail = client.get(f"/depth-charts/{chart['id']}/available-players", headers=coach).json()
    assert [row["id"] for row in avail] == [p["id"]]

    r = client.delete(f"/positions/{rf['id']}", headers=coach)
    assert r.status_code == 404
