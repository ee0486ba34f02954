"""
FastAPI dependencies.

The document store and settings are attached to ``app.state`` by
``create_app``; these helpers build repositories and the fulfillment
service on top of them for each request.
"""

from fastapi import Depends, Request

from ..core.config import Settings
from ..core.db import DocumentStore
from ..core.exceptions import StoreUnavailable
from ..services.fulfillment_service import FulfillmentService
from ..services.lesson_repository import LessonRepository
from ..services.order_repository import OrderRepository


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> DocumentStore:
    store = request.app.state.store
    if store is None:
        raise StoreUnavailable("Document store is not connected")
    return store


def get_lesson_repository(
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> LessonRepository:
    return LessonRepository(store, settings.lessons_collection)


def get_order_repository(
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> OrderRepository:
    return OrderRepository(store, settings.orders_collection)


def get_fulfillment_service(
    lessons: LessonRepository = Depends(get_lesson_repository),
    orders: OrderRepository = Depends(get_order_repository),
    settings: Settings = Depends(get_settings),
) -> FulfillmentService:
    return FulfillmentService(
        lessons,
        orders,
        optimistic_locking=settings.optimistic_locking,
        max_attempts=settings.reconcile_max_attempts,
        clamp_available_spaces=settings.clamp_available_spaces,
    )
