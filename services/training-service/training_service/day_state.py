"""Lifecycle of a single plan day.

The state of a day is derived on every request from the mesocycle status, the
calendar resolution and the persisted session; it is never stored. The flags
exposed to clients (``completed``, ``read_only``, ``can_finish``,
``is_update``) are projections of the state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable


class DayState(str, Enum):
    NOT_STARTED = "not_started"
    OUT_OF_RANGE = "out_of_range"
    ACTIVE_REST_DAY = "active_rest_day"
    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    READY_TO_FINISH = "ready_to_finish"
    COMPLETED = "completed"
    COMPLETED_EDITABLE = "completed_editable"
    MESOCYCLE_COMPLETED = "mesocycle_completed"


class SessionAction(str, Enum):
    ADD_SET = "add_set"
    REMOVE_SET = "remove_set"
    UPDATE_SET = "update_set"
    LOG_SET = "log_set"
    FINISH = "finish"
    REOPEN = "reopen"


SET_ACTIONS = frozenset(
    {SessionAction.ADD_SET, SessionAction.REMOVE_SET, SessionAction.UPDATE_SET, SessionAction.LOG_SET}
)
LOGGABLE_STATES = frozenset(
    {DayState.PLANNED, DayState.IN_PROGRESS, DayState.READY_TO_FINISH, DayState.COMPLETED_EDITABLE}
)


class InvalidTransition(Exception):
    def __init__(self, state: DayState, action: SessionAction, reason: str | None = None):
        self.state = state
        self.action = action
        self.reason = reason or f"Cannot {action.value.replace('_', ' ')} while the day is {state.value.replace('_', ' ')}"
        super().__init__(self.reason)


def derive_day_state(
    *,
    mesocycle_status: str | None,
    is_out_of_range: bool = False,
    is_training_day: bool = False,
    session_status: str | None = None,
    set_completion: Iterable[bool] = (),
) -> DayState:
    if mesocycle_status is None or mesocycle_status == "draft":
        return DayState.NOT_STARTED
    if mesocycle_status == "completed":
        return DayState.MESOCYCLE_COMPLETED
    if is_out_of_range:
        return DayState.OUT_OF_RANGE
    if not is_training_day:
        return DayState.ACTIVE_REST_DAY
    if session_status == "completed":
        return DayState.COMPLETED
    if session_status == "reopened":
        return DayState.COMPLETED_EDITABLE

    flags = list(set_completion)
    done = sum(1 for flag in flags if flag)
    # A day without sets has nothing left to log
    if done == len(flags):
        return DayState.READY_TO_FINISH
    if done:
        return DayState.IN_PROGRESS
    return DayState.PLANNED


def transition(
    state: DayState,
    action: SessionAction,
    *,
    is_future_session: bool = False,
    all_sets_completed: bool = False,
) -> DayState:
    """Return the state reached by applying ``action`` or raise :class:`InvalidTransition`.

    Set mutations leave the state unchanged here; the caller re-derives it
    from the new completion flags once the mutation is applied.
    """
    if is_future_session:
        raise InvalidTransition(state, action, "Future sessions cannot be changed")

    if action in SET_ACTIONS:
        if state in LOGGABLE_STATES:
            return state
        raise InvalidTransition(state, action)

    if action is SessionAction.FINISH:
        if state is DayState.READY_TO_FINISH:
            return DayState.COMPLETED
        if state is DayState.COMPLETED_EDITABLE:
            if all_sets_completed:
                return DayState.COMPLETED
            raise InvalidTransition(state, action, "Every set must be completed before updating the session")
        if state in (DayState.PLANNED, DayState.IN_PROGRESS):
            raise InvalidTransition(state, action, "Every set must be completed before finishing the session")
        raise InvalidTransition(state, action)

    if action is SessionAction.REOPEN and state is DayState.COMPLETED:
        return DayState.COMPLETED_EDITABLE

    raise InvalidTransition(state, action)


@dataclass(frozen=True)
class DayFlags:
    completed: bool
    read_only: bool
    can_finish: bool
    is_update: bool
    is_future_session: bool


def project_flags(state: DayState, *, is_future_session: bool = False) -> DayFlags:
    read_only = is_future_session or state not in LOGGABLE_STATES
    return DayFlags(
        completed=state in (DayState.COMPLETED, DayState.COMPLETED_EDITABLE),
        read_only=read_only,
        can_finish=not read_only and state in (DayState.READY_TO_FINISH, DayState.COMPLETED_EDITABLE),
        is_update=state is DayState.COMPLETED_EDITABLE,
        is_future_session=is_future_session,
    )
