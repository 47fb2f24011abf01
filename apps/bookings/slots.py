"""Time slot availability.

Slots start at the day's opening time and step by ``slot_duration`` while
they begin before closing time. A CONFIRMED booking occupies every slot
that starts within ``buffer_time`` before it, or before it ends plus the
buffer.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

from django.utils import timezone  # type: ignore

from apps.core.exceptions import DomainError

from .models import Booking, BookingSettings


class SlotUnavailableError(DomainError):
    pass


def _to_minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def _to_slot(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def day_of_week(day: date) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return (day.weekday() + 1) % 7


def generate_slots(open_time: str, close_time: str, step: int) -> list[str]:
    start, end = _to_minutes(open_time), _to_minutes(close_time)
    return [_to_slot(minute) for minute in range(start, end, max(step, 1))]


def is_bookable_date(day: date, config: BookingSettings, today: date | None = None) -> bool:
    today = today or timezone.localdate()
    if day < today:
        return False
    if day > today + timedelta(days=config.advance_booking_days):
        return False
    if day == today and not config.allow_same_day_booking:
        return False
    return True


def get_available_slots(
    day: date,
    *,
    exclude_booking_id: int | None = None,
    now: datetime | None = None,
) -> list[str]:
    config = BookingSettings.load()
    now = timezone.localtime(now) if now else timezone.localtime()
    if not is_bookable_date(day, config, today=now.date()):
        return []

    hours = config.hours_for(day_of_week(day))
    if not hours or not hours.get("is_open"):
        return []

    slots = generate_slots(hours["open_time"], hours["close_time"], config.slot_duration)

    confirmed = Booking.objects.filter(date=day, status=Booking.Status.CONFIRMED).exclude(time_slot="")
    if exclude_booking_id is not None:
        confirmed = confirmed.exclude(pk=exclude_booking_id)
    booked = [_to_minutes(slot) for slot in confirmed.values_list("time_slot", flat=True)]

    buffer = config.buffer_time
    duration = config.slot_duration

    def is_free(slot: str) -> bool:
        minute = _to_minutes(slot)
        return not any(b - buffer <= minute < b + duration + buffer for b in booked)

    available = [slot for slot in slots if is_free(slot)]
    if day == now.date():
        current = now.hour * 60 + now.minute
        available = [slot for slot in available if _to_minutes(slot) > current]
    return available


def ensure_slot_available(day: date, time_slot: str, *, exclude_booking_id: int | None = None) -> None:
    if time_slot not in get_available_slots(day, exclude_booking_id=exclude_booking_id):
        raise SlotUnavailableError(f"The {time_slot} slot on {day:%d/%m/%Y} is not available.")
