"""Shared fakes and builders for unit tests."""

from datetime import date

from booking_logic import Booking, parse_time
from sheets_client import StoreResult

WEBAPP_URL = "https://script.google.com/macros/s/test/exec"
TODAY = date(2026, 10, 17)


def make_booking(time_from: str, time_to: str, room: str = "Phòng Tin cậy (G)", booked_by: str = "An", purpose: str = "Họp team") -> Booking:
    return Booking(room, parse_time(time_from), parse_time(time_to), booked_by, purpose)


class FakeStoreClient:
    """Records calls and answers from queued results (or raises queued errors)."""

    def __init__(self):
        self.list_calls = []
        self.add_calls = []
        self.list_results = []
        self.add_results = []

    def _next(self, queue, default):
        item = queue.pop(0) if queue else default
        if isinstance(item, Exception):
            raise item
        return item

    def list_bookings(self, room, date):
        self.list_calls.append((room, date))
        return self._next(self.list_results, StoreResult(success=True, bookings=[]))

    def add_booking(self, room, date, time_from, time_to, booked_by, purpose):
        self.add_calls.append((room, date, time_from, time_to, booked_by, purpose))
        return self._next(self.add_results, StoreResult(success=True))


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=None):
        self._payload = payload
        self.status_code = status_code
        self.text = text

    def json(self):
        if self.text is not None:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    """Stand-in for ``requests.Session`` that replays queued responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": dict(params or {}), "timeout": timeout})
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item
