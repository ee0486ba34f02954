"""HTTP tests for the lesson booking API using FastAPI's TestClient."""

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from lesson_booking_api.app.core.config import Settings
from lesson_booking_api.app.core.exceptions import StoreUnavailable
from lesson_booking_api.app.main import create_app
from tests.conftest import LESSONS, ORDERS
from tests.fakes import InMemoryDocumentStore, RacingStore, StuckLessonStore, StuckOrderStore

ORDER_BODY = {"id": "math101", "bookedSpaces": 2, "name": "Jane", "phoneNum": "07123"}


class UnavailableStore(InMemoryDocumentStore):
    async def find(self, collection, filter):
        raise StoreUnavailable("Document store unavailable during find")

    async def insert_one(self, collection, record):
        raise StoreUnavailable("Document store unavailable during insert_one")


@pytest.fixture
def broken_client(app_settings):
    with TestClient(create_app(store=UnavailableStore(), app_settings=app_settings)) as test_client:
        yield test_client


def test_list_lessons(client, math_lesson):
    response = client.get("/lessons")

    assert response.status_code == 200
    (lesson,) = response.json()
    assert lesson["_id"] == str(math_lesson)
    assert lesson["id"] == "math101"
    assert lesson["availableSpaces"] == 10


def test_list_lessons_keeps_extra_fields(client, store):
    store.seed(LESSONS, {"id": 7, "topic": "Chess", "availableSpaces": 2, "image": "images/chess.png"})

    (lesson,) = client.get("/lessons").json()
    assert lesson["image"] == "images/chess.png"


def test_list_lessons_omits_fields_missing_from_document(client, store):
    store.seed(LESSONS, {"id": 7, "topic": "Chess", "availableSpaces": 2})

    (lesson,) = client.get("/lessons").json()
    assert set(lesson) == {"_id", "id", "topic", "availableSpaces"}


def test_reconciled_lesson_hides_locking_fields(client, math_lesson):
    client.put(f"/collections/products/{math_lesson}")

    for path in ("/lessons", "/search"):
        (lesson,) = client.get(path).json()
        assert lesson["availableSpaces"] == 5
        assert "version" not in lesson
        assert "reconciledOrderIds" not in lesson


def test_list_lessons_store_error(broken_client):
    response = broken_client.get("/lessons")

    assert response.status_code == 500
    assert response.json()["detail"] == "Error retrieving lessons from database."


def test_create_order(client, store):
    response = client.post("/collections/order", json=ORDER_BODY)

    assert response.status_code == 200
    body = response.json()
    assert body["acknowledged"] is True
    stored = store.get(ORDERS, ObjectId(body["insertedId"]))
    assert stored["fulfilled"] is False
    assert stored["bookedSpaces"] == 2


def test_create_order_missing_field(client, store):
    response = client.post("/collections/order", json={"id": "math101", "name": "Jane"})

    assert response.status_code == 400
    assert "required" in response.json()["detail"]
    assert store.writes == []


def test_create_order_without_body(client, store):
    response = client.post("/collections/order")

    assert response.status_code == 400
    assert store.writes == []


def test_create_order_wrong_collection(client, store):
    response = client.post("/collections/products", json=ORDER_BODY)

    assert response.status_code == 400
    assert "Invalid collection name" in response.json()["detail"]
    assert store.writes == []


def test_create_order_malformed_body(client):
    response = client.post("/collections/order", json={**ORDER_BODY, "bookedSpaces": "lots"})
    assert response.status_code == 400


def test_create_order_store_error(broken_client):
    response = broken_client.post("/collections/order", json=ORDER_BODY)
    assert response.status_code == 500


def test_reconcile_lesson(client, store, math_lesson):
    response = client.put(f"/collections/products/{math_lesson}")

    assert response.status_code == 200
    assert response.json() == {
        "message": "Lesson and orders successfully updated.",
        "newAvailableSpaces": 5,
    }
    assert store.get(LESSONS, math_lesson)["availableSpaces"] == 5


def test_reconcile_twice_reports_nothing_to_do(client, math_lesson):
    client.put(f"/collections/products/{math_lesson}")
    response = client.put(f"/collections/products/{math_lesson}")

    assert response.status_code == 404
    assert response.json()["detail"] == "No unfulfilled orders found for this lesson."


def test_reconcile_unknown_lesson(client):
    response = client.put(f"/collections/products/{ObjectId()}")

    assert response.status_code == 404
    assert response.json()["detail"] == "Lesson not found."


def test_reconcile_malformed_id(client):
    response = client.put("/collections/products/not-an-id")
    assert response.status_code == 400


def _reconcile_math_on(store, settings):
    (lesson_id,) = store.seed(LESSONS, {"id": "math101", "topic": "Math", "availableSpaces": 10})
    store.seed(
        ORDERS,
        {"id": "math101", "bookedSpaces": 3, "name": "Ann", "phoneNum": "0711", "fulfilled": False},
        {"id": "math101", "bookedSpaces": 2, "name": "Bob", "phoneNum": "0722", "fulfilled": False},
    )
    with TestClient(create_app(store=store, app_settings=settings)) as test_client:
        return test_client.put(f"/collections/products/{lesson_id}")


def test_reconcile_order_write_failure(app_settings):
    response = _reconcile_math_on(StuckOrderStore(), app_settings)

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to update orders."


def test_reconcile_lesson_write_failure():
    settings = Settings(
        lessons_collection=LESSONS, orders_collection=ORDERS, optimistic_locking=False, static_dir="", images_dir=""
    )

    response = _reconcile_math_on(StuckLessonStore(), settings)

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to update lesson."


def test_reconcile_persistent_conflict(app_settings):
    response = _reconcile_math_on(RacingStore(races=10), app_settings)

    assert response.status_code == 409
    assert "modified concurrently" in response.json()["detail"]


def test_order_then_reconcile(client, store):
    (lesson_id,) = store.seed(LESSONS, {"id": "yoga", "topic": "Yoga", "availableSpaces": 8})
    client.post("/collections/order", json={**ORDER_BODY, "id": "yoga", "bookedSpaces": 3})
    client.post("/collections/order", json={**ORDER_BODY, "id": "yoga", "bookedSpaces": 1})

    response = client.put(f"/collections/products/{lesson_id}")

    assert response.json()["newAvailableSpaces"] == 4


def test_search(client, store):
    store.seed(
        LESSONS,
        {"id": 1, "topic": "Math", "location": "London", "price": 100, "availableSpaces": 5},
        {"id": 2, "topic": "Art", "location": "Oxford", "price": 80, "availableSpaces": 10},
        {"id": 3, "topic": "Music", "location": "Bristol", "price": 90, "availableSpaces": 3},
    )

    response = client.get("/search", params={"q": "10"})

    assert response.status_code == 200
    assert sorted(lesson["topic"] for lesson in response.json()) == ["Art", "Math"]


def test_search_store_error(broken_client):
    assert broken_client.get("/search", params={"q": "x"}).status_code == 500


def test_unknown_path(client):
    response = client.get("/does/not/exist")

    assert response.status_code == 404
    assert response.text == "Resource not found"
