from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Protocol, Sequence


class SetPerformance(str, Enum):
    INCREASED = "increased"
    DECREASED = "decreased"
    SAME = "same"
    NO_DATA = "no_data"


class PerformedSet(Protocol):
    number: int
    weight: float | None
    reps_completed: int | None
    completed: bool


class PerformedExercise(Protocol):
    exercise_id: int
    sets: Sequence[PerformedSet]


def set_volume(performed: PerformedSet) -> float:
    return (performed.weight or 0) * (performed.reps_completed or 0)


def classify_set(previous: PerformedSet | None, current: PerformedSet) -> SetPerformance:
    """Compare two performances of the same set by volume (weight x reps)."""
    if previous is None or not previous.completed or not current.completed:
        return SetPerformance.NO_DATA

    previous_volume = set_volume(previous)
    current_volume = set_volume(current)
    if current_volume > previous_volume:
        return SetPerformance.INCREASED
    if current_volume < previous_volume:
        return SetPerformance.DECREASED
    return SetPerformance.SAME


def classify_exercise_sets(
    previous: PerformedExercise | None, current: PerformedExercise
) -> list[tuple[PerformedSet, SetPerformance]]:
    previous_by_number = {s.number: s for s in previous.sets} if previous is not None else {}
    return [(s, classify_set(previous_by_number.get(s.number), s)) for s in current.sets]


@dataclass(frozen=True)
class SessionSummary:
    sets: int
    total_volume: float
    progressions: int


def summarize_session(
    current: Iterable[PerformedExercise],
    previous: Iterable[PerformedExercise] = (),
) -> SessionSummary:
    # Exercises are matched by catalog identity, not by position
    previous_by_exercise = {e.exercise_id: e for e in previous}
    sets = 0
    total_volume = 0.0
    progressions = 0
    for exercise in current:
        for performed, performance in classify_exercise_sets(previous_by_exercise.get(exercise.exercise_id), exercise):
            sets += 1
            total_volume += set_volume(performed)
            if performance is SetPerformance.INCREASED:
                progressions += 1
    return SessionSummary(sets=sets, total_volume=total_volume, progressions=progressions)
