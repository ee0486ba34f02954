import pytest
from fastapi.testclient import TestClient

from lesson_booking_api.app.core.config import Settings
from lesson_booking_api.app.main import create_app
from lesson_booking_api.app.services.fulfillment_service import FulfillmentService
from lesson_booking_api.app.services.lesson_repository import LessonRepository
from lesson_booking_api.app.services.order_repository import OrderRepository
from tests.fakes import InMemoryDocumentStore

LESSONS = "products"
ORDERS = "order"


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def lessons(store):
    return LessonRepository(store, LESSONS)


@pytest.fixture
def orders(store):
    return OrderRepository(store, ORDERS)


@pytest.fixture
def service(lessons, orders):
    return FulfillmentService(lessons, orders)


@pytest.fixture
def math_lesson(store):
    """Lesson with 10 spaces, two pending orders (3 + 2) and one fulfilled."""
    (lesson_id,) = store.seed(
        LESSONS,
        {"id": "math101", "topic": "Math", "location": "London", "price": 100, "availableSpaces": 10},
    )
    store.seed(
        ORDERS,
        {"id": "math101", "bookedSpaces": 3, "name": "Ann", "phoneNum": "0711", "fulfilled": False},
        {"id": "math101", "bookedSpaces": 2, "name": "Bob", "phoneNum": "0722", "fulfilled": False},
        {"id": "math101", "bookedSpaces": 4, "name": "Cat", "phoneNum": "0733", "fulfilled": True},
        {"id": "art201", "bookedSpaces": 1, "name": "Dan", "phoneNum": "0744", "fulfilled": False},
    )
    return lesson_id


@pytest.fixture
def app_settings():
    return Settings(lessons_collection=LESSONS, orders_collection=ORDERS, static_dir="", images_dir="")


@pytest.fixture
def client(store, app_settings):
    with TestClient(create_app(store=store, app_settings=app_settings)) as test_client:
        yield test_client
