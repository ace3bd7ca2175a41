"""tr-TR display helpers for prices, dates and message timestamps."""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal

# Turkey has stayed on UTC+3 all year since 2016.
TURKEY_TZ = timezone(timedelta(hours=3), "TRT")

MONTHS = (
    "Ocak", "Şubat", "Mart", "Nisan", "Mayıs", "Haziran",
    "Temmuz", "Ağustos", "Eylül", "Ekim", "Kasım", "Aralık",
)
MONTHS_SHORT = (
    "Oca", "Şub", "Mar", "Nis", "May", "Haz",
    "Tem", "Ağu", "Eyl", "Eki", "Kas", "Ara",
)
WEEKDAYS = ("Pazartesi", "Salı", "Çarşamba", "Perşembe", "Cuma", "Cumartesi", "Pazar")


def format_price(amount: Decimal | float | int) -> str:
    """``12500`` -> ``₺12.500`` (no decimals, dot as thousands separator)."""
    whole = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return "₺" + f"{int(whole):,}".replace(",", ".")


def to_local(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(TURKEY_TZ)


def format_date_long(value: datetime | date) -> str:
    if isinstance(value, datetime):
        value = to_local(value).date()
    return f"{value.day} {MONTHS[value.month - 1]} {value.year}"


def format_day_separator(value: datetime, now: datetime) -> str:
    local = to_local(value)
    label = f"{local.day} {MONTHS[local.month - 1]}"
    if local.year != to_local(now).year:
        label += f" {local.year}"
    return label


def format_message_time(value: datetime, now: datetime) -> str:
    local = to_local(value)
    diff_days = (now - value).days
    time_str = local.strftime("%H:%M")
    if diff_days <= 0:
        return time_str
    if diff_days == 1:
        return f"Dün {time_str}"
    if diff_days < 7:
        return f"{WEEKDAYS[local.weekday()]} {time_str}"
    return f"{local.day} {MONTHS_SHORT[local.month - 1]} {time_str}"


def same_local_day(a: datetime, b: datetime) -> bool:
    return to_local(a).date() == to_local(b).date()
