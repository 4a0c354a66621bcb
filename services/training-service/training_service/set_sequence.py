"""Ordinal bookkeeping shared by template sets and session sets.

Set numbers inside an exercise always run 1..n without gaps.
"""

from __future__ import annotations

from typing import Any, MutableSequence, Sequence

DEFAULT_REP_RANGE_LOWER_BOUND = 5
DEFAULT_REP_RANGE_UPPER_BOUND = 8
DEFAULT_RIR = 0

PRESCRIPTION_FIELDS = ("rep_range_lower_bound", "rep_range_upper_bound", "rir", "weight")


def next_set_values(existing: Sequence[Any]) -> dict:
    """Number and prescription for a set appended after ``existing``."""
    if not existing:
        return {
            "number": 1,
            "rep_range_lower_bound": DEFAULT_REP_RANGE_LOWER_BOUND,
            "rep_range_upper_bound": DEFAULT_REP_RANGE_UPPER_BOUND,
            "rir": DEFAULT_RIR,
            "weight": None,
        }
    last = max(existing, key=lambda s: s.number)
    values = {field: getattr(last, field) for field in PRESCRIPTION_FIELDS}
    values["number"] = last.number + 1
    return values


def remove_and_renumber(sets: MutableSequence[Any], target: Any) -> None:
    """Drop ``target`` from ``sets`` and shift every later set down by one."""
    removed_number = target.number
    sets.remove(target)
    for item in sets:
        if item.number > removed_number:
            item.number -= 1
