from datetime import date

from fastapi.testclient import TestClient

from app.main import app
from app.services.sessions import store

client = TestClient(app)
API = "/api/v1"
TODAY = date.today().isoformat()


def open_session():
    r = client.post(f"{API}/auth/session")
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


def start_draft(headers, train_no="G2", seat_class="second_class"):
    r = client.post(f"{API}/orders/draft", json={"train_no": train_no, "date": TODAY, "seat_class": seat_class},
                    headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_requires_session_token():
    assert client.get(f"{API}/passengers").status_code == 401
    r = client.get(f"{API}/passengers", headers={"Authorization": "Bearer garbage"})
    assert r.status_code == 401


def test_passenger_crud():
    h = open_session()
    r = client.get(f"{API}/passengers", headers=h)
    assert [p["name"] for p in r.json()] == ["张三", "李四"]

    r = client.post(f"{API}/passengers", json={"name": "王五", "national_id": "11010119900101123X",
                                              "phone": "13912345678", "passenger_class": "Student"}, headers=h)
    assert r.status_code == 201, r.text
    pid = r.json()["id"]

    r = client.put(f"{API}/passengers/{pid}", json={"name": "王小五", "national_id": "11010119900101123X",
                                                   "phone": "13912345678", "passenger_class": "Child"}, headers=h)
    assert r.status_code == 200
    assert r.json()["passenger_class"] == "Child"

    assert client.delete(f"{API}/passengers/{pid}", headers=h).status_code == 200
    r = client.put(f"{API}/passengers/{pid}", json={"name": "x", "national_id": "11010119900101123X",
                                                   "phone": "13912345678"}, headers=h)
    assert r.status_code == 404
    assert r.json()["error"] == "not_found"


def test_invalid_passenger_reports_fields():
    h = open_session()
    r = client.post(f"{API}/passengers", json={"name": "", "national_id": "123", "phone": "1"}, headers=h)
    assert r.status_code == 422
    body = r.json()
    assert body["error"] == "invalid_passenger"
    assert set(body["fields"]) == {"name", "national_id", "phone"}
    assert len(client.get(f"{API}/passengers", headers=h).json()) == 2


def test_sessions_are_isolated():
    a, b = open_session(), open_session()
    client.post(f"{API}/passengers", json={"name": "王五", "national_id": "11010119900101123X",
                                          "phone": "13912345678"}, headers=a)
    assert len(client.get(f"{API}/passengers", headers=a).json()) == 3
    assert len(client.get(f"{API}/passengers", headers=b).json()) == 2


def test_compose_and_submit_order():
    h = open_session()
    draft = start_draft(h)
    assert draft["tickets"] == [] and draft["total_price"] == 0

    draft = client.post(f"{API}/orders/draft/passengers/1", json={}, headers=h).json()
    [line] = draft["tickets"]
    assert line["price"] == 553 and line["ticket_type"] == "Adult ticket"

    r = client.put(f"{API}/orders/draft/passengers/1/seat-class", json={"seat_class": "first_class"}, headers=h)
    assert r.json()["tickets"][0]["price"] == 933
    assert r.json()["total_price"] == 933

    client.post(f"{API}/orders/draft/passengers/2", headers=h)
    r = client.post(f"{API}/orders", headers=h)
    assert r.status_code == 200, r.text
    order = r.json()
    assert order["order_id"].startswith("ORDER_")
    assert order["total_price"] == 933 + 553
    assert order["train"]["train_no"] == "G2"

    # draft consumed
    assert client.get(f"{API}/orders/draft", headers=h).status_code == 409

    r = client.get(f"{API}/orders/{order['order_id']}", headers=h)
    assert r.status_code == 200
    assert r.json()["status"] == "submitted"
    assert [t["passenger_name"] for t in r.json()["tickets"]] == ["张三", "李四"]

    # other sessions cannot read it
    assert client.get(f"{API}/orders/{order['order_id']}", headers=open_session()).status_code == 404


def test_submit_errors():
    h = open_session()
    assert client.post(f"{API}/orders", headers=h).json()["error"] == "no_active_draft"
    start_draft(h)
    r = client.post(f"{API}/orders", headers=h)
    assert r.status_code == 422
    assert r.json()["error"] == "no_passenger_selected"

    r = client.put(f"{API}/orders/draft/passengers/2/seat-class", json={"seat_class": "business"}, headers=h)
    assert r.status_code == 409
    assert r.json()["error"] == "not_selected"


def test_failed_submission_keeps_draft():
    h = open_session()
    start_draft(h)
    client.post(f"{API}/orders/draft/passengers/1", headers=h)

    session = next(iter(store._sessions.values()))

    class Broken:
        async def send(self, order):
            raise ConnectionError("down")

    session.submitter.gateway = Broken()
    r = client.post(f"{API}/orders", headers=h)
    assert r.status_code == 502
    assert r.json()["error"] == "submission_failed"
    assert len(client.get(f"{API}/orders/draft", headers=h).json()["tickets"]) == 1


def test_removing_passenger_drops_its_line():
    h = open_session()
    start_draft(h)
    client.post(f"{API}/orders/draft/passengers/1", headers=h)
    client.delete(f"{API}/passengers/1", headers=h)
    assert client.get(f"{API}/orders/draft", headers=h).json()["tickets"] == []


def test_draft_for_unknown_train():
    h = open_session()
    r = client.post(f"{API}/orders/draft", json={"train_no": "X999", "date": TODAY}, headers=h)
    assert r.status_code == 404
    assert r.json()["error"] == "train_not_found"
