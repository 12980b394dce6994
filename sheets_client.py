# sheets_client.py
# Thin client for the spreadsheet web app that stores bookings.
# Both calls are plain GET requests with query parameters.

import logging
from dataclasses import dataclass, field

import requests

from booking_logic import Booking

logger = logging.getLogger(__name__)


class StoreConnectionError(Exception):
    """The web app could not be reached or answered with something unusable."""


@dataclass
class StoreResult:
    success: bool
    bookings: list[Booking] = field(default_factory=list)
    message: str | None = None


class SheetsBookingClient:
    def __init__(self, webapp_url: str, timeout: float | None = None, session: requests.Session | None = None):
        self.webapp_url = webapp_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def _call(self, params: dict) -> dict:
        action = params.get("action")
        logger.debug("GET %s action=%s room=%s date=%s", self.webapp_url, action, params.get("room"), params.get("date"))
        try:
            resp = self.session.get(self.webapp_url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Request %s failed: %s", action, e)
            raise StoreConnectionError(str(e)) from e

        if resp.status_code >= 400:
            logger.warning("Request %s returned HTTP %s", action, resp.status_code)
            raise StoreConnectionError(f"HTTP {resp.status_code}")

        try:
            payload = resp.json()
        except ValueError as e:
            logger.warning("Request %s returned a non-JSON body", action)
            raise StoreConnectionError(f"invalid JSON response: {e}") from e
        if not isinstance(payload, dict):
            raise StoreConnectionError("invalid JSON response: expected an object")
        return payload

    def list_bookings(self, room: str, date: str) -> StoreResult:
        payload = self._call({"action": "getBookings", "room": room, "date": date})
        if not payload.get("success"):
            return StoreResult(success=False, message=payload.get("message"))

        rows = payload.get("bookings") or []
        try:
            bookings = [Booking.from_payload(row) for row in rows]
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            logger.warning("Malformed booking row for %s on %s: %s", room, date, e)
            raise StoreConnectionError(f"malformed booking data: {e}") from e
        logger.info("Loaded %d booking(s) for %s on %s", len(bookings), room, date)
        return StoreResult(success=True, bookings=bookings)

    def add_booking(self, room: str, date: str, time_from: str, time_to: str, booked_by: str, purpose: str) -> StoreResult:
        payload = self._call({
            "action": "addBooking",
            "room": room,
            "date": date,
            "timeFrom": time_from,
            "timeTo": time_to,
            "bookedBy": booked_by,
            "purpose": purpose,
        })
        if payload.get("success"):
            logger.info("Booked %s on %s %s-%s for %s", room, date, time_from, time_to, booked_by)
            return StoreResult(success=True, message=payload.get("message"))
        logger.info("Booking %s on %s %s-%s rejected: %s", room, date, time_from, time_to, payload.get("message"))
        return StoreResult(success=False, message=payload.get("message"))
