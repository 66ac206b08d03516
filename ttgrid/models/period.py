from __future__ import annotations

from typing import List

DAYS: List[str] = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday"]

PERIOD_LABELS: List[str] = [
    "9:00 - 9:45",
    "9:45 - 10:30",
    "10:45 - 11:30",
    "11:30 - 12:15",
    "12:30 - 1:15",
    "1:15 - 2:00",
    "2:15 - 3:00",
    "3:00 - 3:45",
]

PERIODS_PER_DAY = len(PERIOD_LABELS)
SLOT_COUNT = len(DAYS) * PERIODS_PER_DAY  # 40


def day_of(slot_index: int) -> int:
    return slot_index // PERIODS_PER_DAY


def period_of(slot_index: int) -> int:
    return slot_index % PERIODS_PER_DAY


def slot_index(day: int, period: int) -> int:
    return day * PERIODS_PER_DAY + period


def is_valid_slot(slot: int) -> bool:
    return 0 <= slot < SLOT_COUNT


def same_day(first: int, last: int) -> bool:
    return day_of(first) == day_of(last)


def period_label(period: int) -> str:
    if 0 <= period < PERIODS_PER_DAY:
        return PERIOD_LABELS[period]
    return f"Slot {period}"


def slot_label(slot: int) -> str:
    return f"{DAYS[day_of(slot)]} {period_label(period_of(slot))}"
