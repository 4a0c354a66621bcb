"""Calendar arithmetic for mesocycle schedules.

A mesocycle runs for ``duration_in_weeks * 7`` calendar days starting at its
start date. The days are grouped into microcycles of ``microcycle_length``
days; offsets listed in ``rest_days`` are rest days, every other offset maps
to a training-day template by its position among the non-rest offsets.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Iterable, Sequence, Union


@dataclass(frozen=True)
class MesocycleSchedule:
    start_date: date
    duration_in_weeks: int
    microcycle_length: int
    rest_days: frozenset[int]
    training_day_ids: tuple[int, ...]

    @classmethod
    def build(
        cls,
        start_date: date,
        duration_in_weeks: int,
        microcycle_length: int,
        rest_days: Iterable[int],
        training_day_ids: Sequence[int],
    ) -> "MesocycleSchedule":
        return cls(
            start_date=start_date,
            duration_in_weeks=duration_in_weeks,
            microcycle_length=microcycle_length,
            rest_days=frozenset(rest_days),
            training_day_ids=tuple(training_day_ids),
        )

    @property
    def total_days(self) -> int:
        return self.duration_in_weeks * 7

    @property
    def end_date(self) -> date:
        """Last calendar day of the plan (inclusive)."""
        return self.start_date + timedelta(days=self.total_days - 1)

    @property
    def microcycle_count(self) -> int:
        return -(-self.total_days // self.microcycle_length)

    def training_offsets(self) -> list[int]:
        return [offset for offset in range(self.microcycle_length) if offset not in self.rest_days]


class OutOfRangeReason(str, Enum):
    BEFORE_START = "before_start"
    AFTER_END = "after_end"


@dataclass(frozen=True)
class ResolvedDay:
    date: date
    day_index: int
    day_number: int
    microcycle_number: int
    is_training_day: bool
    training_day_id: int | None
    training_day_number: int | None
    is_future_session: bool


@dataclass(frozen=True)
class OutOfRange:
    requested_date: date
    reason: OutOfRangeReason


DayResolution = Union[ResolvedDay, OutOfRange]


@dataclass(frozen=True)
class CalendarDay:
    date: date
    microcycle_number: int
    day_number: int
    is_planned_training_day: bool
    is_current: bool


def _template_for_offset(schedule: MesocycleSchedule, offset: int) -> tuple[int | None, int | None]:
    if offset in schedule.rest_days:
        return None, None
    position = schedule.training_offsets().index(offset)
    if position >= len(schedule.training_day_ids):
        return None, None
    return schedule.training_day_ids[position], position + 1


def resolve_day(
    schedule: MesocycleSchedule,
    requested_date: date | None = None,
    today: date | None = None,
) -> DayResolution:
    today = today or date.today()
    requested_date = requested_date or today

    day_index = (requested_date - schedule.start_date).days
    if day_index < 0:
        return OutOfRange(requested_date=requested_date, reason=OutOfRangeReason.BEFORE_START)
    if day_index >= schedule.total_days:
        return OutOfRange(requested_date=requested_date, reason=OutOfRangeReason.AFTER_END)

    microcycle_number = day_index // schedule.microcycle_length + 1
    offset = day_index % schedule.microcycle_length
    training_day_id, training_day_number = _template_for_offset(schedule, offset)

    return ResolvedDay(
        date=requested_date,
        day_index=day_index,
        day_number=offset + 1,
        microcycle_number=microcycle_number,
        is_training_day=training_day_id is not None,
        training_day_id=training_day_id,
        training_day_number=training_day_number,
        is_future_session=requested_date > today,
    )


def microcycle_bounds(schedule: MesocycleSchedule, microcycle_number: int) -> tuple[date, date]:
    first = schedule.start_date + timedelta(days=(microcycle_number - 1) * schedule.microcycle_length)
    return first, first + timedelta(days=schedule.microcycle_length - 1)


def last_microcycle_bounds(schedule: MesocycleSchedule) -> tuple[date, date]:
    return microcycle_bounds(schedule, schedule.microcycle_count)


def occurrence_date(schedule: MesocycleSchedule, microcycle_number: int, day_number: int) -> date | None:
    """Calendar date of a given (microcycle, day) slot, or None when it falls past the plan end."""
    day_index = (microcycle_number - 1) * schedule.microcycle_length + (day_number - 1)
    if microcycle_number < 1 or day_index >= schedule.total_days:
        return None
    return schedule.start_date + timedelta(days=day_index)


def calendar_days(schedule: MesocycleSchedule, current: date | None = None) -> list[CalendarDay]:
    days = []
    for day_index in range(schedule.total_days):
        day = schedule.start_date + timedelta(days=day_index)
        offset = day_index % schedule.microcycle_length
        days.append(
            CalendarDay(
                date=day,
                microcycle_number=day_index // schedule.microcycle_length + 1,
                day_number=offset + 1,
                is_planned_training_day=offset not in schedule.rest_days,
                is_current=day == current,
            )
        )
    return days
