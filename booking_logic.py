# booking_logic.py
# Booking records, time helpers, slot availability and submission checks.

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Iterable

MSG_FILL_ALL_FIELDS = "Vui lòng điền đầy đủ thông tin!"
MSG_INVALID_TIME = "Thời gian không hợp lệ, vui lòng nhập theo dạng HH:MM!"
MSG_END_AFTER_START = "Thời gian kết thúc phải sau thời gian bắt đầu!"
MSG_OUTSIDE_HOURS = "Chỉ được đặt phòng trong khung giờ {start} - {end}!"
MSG_SLOT_TAKEN = "Khung giờ này đã được đặt!"

_TIME_FORMATS = ("%H:%M", "%H:%M:%S")

# -----------------------------
# TIME UTILS
# -----------------------------
def parse_time(s: str) -> int:
    """'HH:MM' (or 'HH:MM:SS') -> minutes since midnight, 0..1439."""
    text = (s or "").strip()
    for fmt in _TIME_FORMATS:
        try:
            t = datetime.strptime(text, fmt).time()
        except ValueError:
            continue
        return t.hour * 60 + t.minute
    raise ValueError(f"not a HH:MM time: {s!r}")

def fmt_minutes(minutes: int) -> str:
    if not 0 <= minutes < 24 * 60:
        raise ValueError(f"minutes out of range: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"

# -----------------------------
# DATA MODEL
# -----------------------------
@dataclass(frozen=True)
class Booking:
    room: str
    time_from: int
    time_to: int
    booked_by: str
    purpose: str

    @classmethod
    def from_payload(cls, row: dict) -> "Booking":
        # wire rows use the web app's camelCase keys
        return cls(
            room=str(row.get("room", "")),
            time_from=parse_time(str(row["timeFrom"])),
            time_to=parse_time(str(row["timeTo"])),
            booked_by=str(row.get("bookedBy", "")),
            purpose=str(row.get("purpose", "")),
        )

    @property
    def from_label(self) -> str:
        return fmt_minutes(self.time_from)

    @property
    def to_label(self) -> str:
        return fmt_minutes(self.time_to)


@dataclass
class BookingDraft:
    selected_room: str = ""
    selected_date: str = ""
    time_from: str = ""
    time_to: str = ""
    booked_by: str = ""
    purpose: str = ""

    def missing_fields(self) -> list[str]:
        return [f.name for f in fields(self) if not str(getattr(self, f.name) or "").strip()]

    def reset_after_submit(self, default_from: str, default_to: str) -> None:
        # room and date stay selected so the list can be refreshed
        self.time_from = default_from
        self.time_to = default_to
        self.booked_by = ""
        self.purpose = ""

# -----------------------------
# BOOKING LOGIC
# -----------------------------
def overlaps(s1: int, e1: int, s2: int, e2: int) -> bool:
    # half-open ranges: 09:00-10:00 and 10:00-11:00 do not overlap
    return s1 < e2 and e1 > s2

def find_conflicts(time_from: int, time_to: int, bookings: Iterable[Booking]) -> list[Booking]:
    return [b for b in bookings if overlaps(time_from, time_to, b.time_from, b.time_to)]

def is_slot_available(time_from: int, time_to: int, bookings: Iterable[Booking]) -> bool:
    return not find_conflicts(time_from, time_to, bookings)

def validate_draft(
    draft: BookingDraft,
    bookings: Iterable[Booking],
    business_hours: tuple[str, str] | None = None,
) -> str | None:
    """
    Return the message to show for a draft that must not be sent, or None.
    Checks run in order: required fields, time format, ordering,
    optional business hours, then availability against `bookings`.
    """
    if draft.missing_fields():
        return MSG_FILL_ALL_FIELDS

    try:
        start = parse_time(draft.time_from)
        end = parse_time(draft.time_to)
    except ValueError:
        return MSG_INVALID_TIME

    if start >= end:
        return MSG_END_AFTER_START

    if business_hours is not None:
        open_at, close_at = parse_time(business_hours[0]), parse_time(business_hours[1])
        if start < open_at or end > close_at:
            return MSG_OUTSIDE_HOURS.format(start=business_hours[0], end=business_hours[1])

    if not is_slot_available(start, end, bookings):
        return MSG_SLOT_TAKEN
    return None
