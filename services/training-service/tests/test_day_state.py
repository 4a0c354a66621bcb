import pytest

from training_service.day_state import (
    DayState,
    InvalidTransition,
    SessionAction,
    derive_day_state,
    project_flags,
    transition,
)


@pytest.mark.parametrize(
    "kwargs, expected",
    [
        ({"mesocycle_status": None}, DayState.NOT_STARTED),
        ({"mesocycle_status": "draft"}, DayState.NOT_STARTED),
        ({"mesocycle_status": "completed", "is_training_day": True}, DayState.MESOCYCLE_COMPLETED),
        ({"mesocycle_status": "active", "is_out_of_range": True}, DayState.OUT_OF_RANGE),
        ({"mesocycle_status": "active", "is_training_day": False}, DayState.ACTIVE_REST_DAY),
        (
            {"mesocycle_status": "active", "is_training_day": True, "set_completion": [False, False]},
            DayState.PLANNED,
        ),
        (
            {"mesocycle_status": "active", "is_training_day": True, "set_completion": [True, False]},
            DayState.IN_PROGRESS,
        ),
        (
            {"mesocycle_status": "active", "is_training_day": True, "set_completion": [True, True]},
            DayState.READY_TO_FINISH,
        ),
        (
            {"mesocycle_status": "active", "is_training_day": True, "session_status": "completed"},
            DayState.COMPLETED,
        ),
        (
            {"mesocycle_status": "active", "is_training_day": True, "session_status": "reopened"},
            DayState.COMPLETED_EDITABLE,
        ),
    ],
)
def test_derive_day_state(kwargs, expected):
    assert derive_day_state(**kwargs) is expected


def test_training_day_without_sets_can_be_finished():
    assert derive_day_state(mesocycle_status="active", is_training_day=True) is DayState.READY_TO_FINISH
    assert derive_day_state(mesocycle_status="active", is_training_day=True, set_completion=[False]) is DayState.PLANNED


@pytest.mark.parametrize(
    "state", [DayState.PLANNED, DayState.IN_PROGRESS, DayState.READY_TO_FINISH, DayState.COMPLETED_EDITABLE]
)
def test_set_mutations_allowed_while_loggable(state):
    for action in (SessionAction.ADD_SET, SessionAction.REMOVE_SET, SessionAction.UPDATE_SET, SessionAction.LOG_SET):
        assert transition(state, action) is state


@pytest.mark.parametrize(
    "state",
    [
        DayState.NOT_STARTED,
        DayState.OUT_OF_RANGE,
        DayState.ACTIVE_REST_DAY,
        DayState.COMPLETED,
        DayState.MESOCYCLE_COMPLETED,
    ],
)
def test_set_mutations_rejected_outside_loggable_states(state):
    with pytest.raises(InvalidTransition):
        transition(state, SessionAction.LOG_SET)


def test_future_session_rejects_every_action():
    for action in SessionAction:
        with pytest.raises(InvalidTransition) as exc_info:
            transition(DayState.PLANNED, action, is_future_session=True)
        assert exc_info.value.reason == "Future sessions cannot be changed"


def test_finish_requires_every_set_completed():
    assert transition(DayState.READY_TO_FINISH, SessionAction.FINISH) is DayState.COMPLETED
    with pytest.raises(InvalidTransition) as exc_info:
        transition(DayState.IN_PROGRESS, SessionAction.FINISH)
    assert exc_info.value.reason == "Every set must be completed before finishing the session"


def test_update_from_completed_editable():
    assert (
        transition(DayState.COMPLETED_EDITABLE, SessionAction.FINISH, all_sets_completed=True)
        is DayState.COMPLETED
    )
    with pytest.raises(InvalidTransition):
        transition(DayState.COMPLETED_EDITABLE, SessionAction.FINISH, all_sets_completed=False)


def test_reopen_only_from_completed():
    assert transition(DayState.COMPLETED, SessionAction.REOPEN) is DayState.COMPLETED_EDITABLE
    with pytest.raises(InvalidTransition):
        transition(DayState.IN_PROGRESS, SessionAction.REOPEN)


def test_flags_are_projections_of_state():
    flags = project_flags(DayState.READY_TO_FINISH)
    assert flags.can_finish and not flags.read_only and not flags.completed

    flags = project_flags(DayState.COMPLETED)
    assert flags.completed and flags.read_only and not flags.can_finish

    flags = project_flags(DayState.COMPLETED_EDITABLE)
    assert flags.completed and flags.is_update and flags.can_finish

    flags = project_flags(DayState.READY_TO_FINISH, is_future_session=True)
    assert flags.read_only and not flags.can_finish and flags.is_future_session
