import pytest

from booking_config import Settings
from booking_controller import BookingController
from tests.helpers import TODAY, WEBAPP_URL, FakeStoreClient


@pytest.fixture()
def settings() -> Settings:
    return Settings(webapp_url=WEBAPP_URL)


@pytest.fixture()
def store() -> FakeStoreClient:
    return FakeStoreClient()


@pytest.fixture()
def controller(store, settings) -> BookingController:
    return BookingController(store, settings, today=lambda: TODAY)
