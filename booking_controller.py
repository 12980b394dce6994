# booking_controller.py
# State behind the booking form: the draft, the day's bookings for the
# selected room, the loading flag and the single status message.

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable

import pandas as pd

from booking_logic import MSG_SLOT_TAKEN, Booking, BookingDraft, find_conflicts, parse_time, validate_draft
from booking_config import Settings
from sheets_client import SheetsBookingClient, StoreConnectionError, StoreResult

logger = logging.getLogger(__name__)

MSG_BOOKED = "Đặt phòng thành công!"
MSG_BOOK_FAILED = "Đặt phòng thất bại!"
MSG_LOAD_FAILED = "Không thể tải dữ liệu"
PREFIX_CONNECTION_ERROR = "Lỗi kết nối: "
PREFIX_ERROR = "Lỗi: "

BOOKING_COLUMNS = ["room", "date", "time_from", "time_to", "booked_by", "purpose"]


@dataclass(frozen=True)
class Message:
    kind: str  # "error" | "success"
    text: str


@dataclass(frozen=True)
class FetchTicket:
    room: str
    date: str


class BookingController:
    def __init__(self, client: SheetsBookingClient, settings: Settings, today: Callable[[], date] | None = None):
        self.client = client
        self.settings = settings
        self._today = today or (lambda: datetime.now(settings.tzinfo).date())
        self.draft = BookingDraft(
            selected_date=self.today().isoformat(),
            time_from=settings.default_time_from,
            time_to=settings.default_time_to,
        )
        self.bookings: list[Booking] = []
        self.message: Message | None = None
        self._in_flight = 0

    def today(self) -> date:
        return self._today()

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    @property
    def has_selection(self) -> bool:
        return bool(self.draft.selected_room and self.draft.selected_date)

    def set_message(self, kind: str, text: str) -> None:
        self.message = Message(kind, text)

    def clear_message(self) -> None:
        self.message = None

    # -----------------------------
    # DRAFT EDITS
    # -----------------------------
    def update_field(self, name: str, value: str) -> None:
        if not hasattr(self.draft, name):
            raise AttributeError(f"BookingDraft has no field {name!r}")
        old = getattr(self.draft, name)
        setattr(self.draft, name, value)
        if name in ("selected_room", "selected_date") and value != old:
            # the list always belongs to the current room/day
            self.bookings = []
            if self.has_selection:
                self.refresh_bookings()

    # -----------------------------
    # LISTING
    # -----------------------------
    def begin_fetch(self) -> FetchTicket:
        self._in_flight += 1
        return FetchTicket(self.draft.selected_room, self.draft.selected_date)

    def complete_fetch(self, ticket: FetchTicket, result: StoreResult | None = None, error: Exception | None = None) -> bool:
        """
        Apply a finished list request. Returns False when the response was
        discarded because room or date changed after `ticket` was issued.
        """
        self._in_flight = max(0, self._in_flight - 1)

        current = FetchTicket(self.draft.selected_room, self.draft.selected_date)
        if ticket != current:
            logger.info("Dropping stale bookings for %s on %s (now %s on %s)",
                        ticket.room, ticket.date, current.room, current.date)
            return False

        if error is not None:
            self.set_message("error", PREFIX_CONNECTION_ERROR + str(error))
        elif result is not None and result.success:
            self.bookings = list(result.bookings)
        else:
            self.set_message("error", (result.message if result else None) or MSG_LOAD_FAILED)
        return True

    def refresh_bookings(self) -> None:
        ticket = self.begin_fetch()
        try:
            result = self.client.list_bookings(ticket.room, ticket.date)
        except StoreConnectionError as e:
            self.complete_fetch(ticket, error=e)
            return
        self.complete_fetch(ticket, result=result)

    # -----------------------------
    # SUBMIT
    # -----------------------------
    def submit(self) -> bool:
        d = self.draft
        err = validate_draft(d, self.bookings, self.settings.business_hours)
        if err:
            if err == MSG_SLOT_TAKEN:
                clash = find_conflicts(parse_time(d.time_from), parse_time(d.time_to), self.bookings)
                logger.info("Slot %s-%s in %s on %s clashes with %s",
                            d.time_from, d.time_to, d.selected_room, d.selected_date,
                            ", ".join(f"{b.from_label}-{b.to_label}" for b in clash))
            self.set_message("error", err)
            return False

        self._in_flight += 1
        self.clear_message()
        try:
            result = self.client.add_booking(
                d.selected_room, d.selected_date, d.time_from, d.time_to,
                d.booked_by.strip(), d.purpose.strip(),
            )
        except StoreConnectionError as e:
            self.set_message("error", PREFIX_ERROR + str(e))
            return False
        finally:
            self._in_flight -= 1

        if not result.success:
            self.set_message("error", result.message or MSG_BOOK_FAILED)
            return False

        self.set_message("success", MSG_BOOKED)
        d.reset_after_submit(self.settings.default_time_from, self.settings.default_time_to)
        self.refresh_bookings()
        return True

    # -----------------------------
    # DISPLAY
    # -----------------------------
    def bookings_frame(self) -> pd.DataFrame:
        rows = [
            {
                "room": b.room or self.draft.selected_room,
                "date": self.draft.selected_date,
                "time_from": b.from_label,
                "time_to": b.to_label,
                "booked_by": b.booked_by,
                "purpose": b.purpose,
            }
            for b in sorted(self.bookings, key=lambda b: (b.time_from, b.time_to))
        ]
        return pd.DataFrame(rows, columns=BOOKING_COLUMNS)
