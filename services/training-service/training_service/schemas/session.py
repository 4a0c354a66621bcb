from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from ..day_state import DayState
from ..set_performance import SetPerformance
from .exercises import ExerciseSummary
from .mesocycle import check_rep_range


class SessionSetResponse(BaseModel):
    id: int | None = None
    number: int
    rep_range_lower_bound: int
    rep_range_upper_bound: int
    rir: int
    weight: float | None = None
    completed: bool = False
    reps_completed: int | None = None
    performance: SetPerformance = SetPerformance.NO_DATA


class SessionExerciseResponse(BaseModel):
    id: int | None = None
    number: int
    notes: str | None = None
    exercise: ExerciseSummary
    sets: list[SessionSetResponse] = Field(default_factory=list)


class SessionResponse(BaseModel):
    id: int | None = None
    run_id: int
    training_day_id: int
    microcycle_number: int
    day_number: int
    date: date
    status: str
    completed_at: datetime | None = None
    feedback: str | None = None
    exercises: list[SessionExerciseResponse] = Field(default_factory=list)


class DayFlagsResponse(BaseModel):
    completed: bool
    read_only: bool
    can_finish: bool
    is_update: bool
    is_future_session: bool

    model_config = ConfigDict(from_attributes=True)


class MesocycleRef(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class CalendarDayResponse(BaseModel):
    date: date
    microcycle_number: int
    day_number: int
    is_planned_training_day: bool
    is_current: bool

    model_config = ConfigDict(from_attributes=True)


class CalendarResponse(BaseModel):
    start_date: date
    end_date: date
    last_microcycle_start: date
    last_microcycle_end: date
    days: list[CalendarDayResponse] = Field(default_factory=list)


class CurrentDayResponse(BaseModel):
    state: DayState
    date: date
    mesocycle: MesocycleRef | None = None
    out_of_range_reason: str | None = None
    microcycle_number: int | None = None
    day_number: int | None = None
    label: str | None = None
    is_training_day: bool = False
    flags: DayFlagsResponse
    session: SessionResponse | None = None
    calendar: CalendarResponse | None = None


class SessionSetUpdate(BaseModel):
    rep_range_lower_bound: int | None = Field(default=None, ge=1, le=100)
    rep_range_upper_bound: int | None = Field(default=None, ge=1, le=100)
    rir: int | None = Field(default=None, ge=0, le=10)
    weight: float | None = Field(default=None, ge=0)
    completed: bool | None = None
    reps_completed: int | None = Field(default=None, ge=0, le=200)

    @field_validator("rep_range_upper_bound")
    @classmethod
    def _check_rep_range(cls, upper: int | None, info: ValidationInfo) -> int | None:
        return check_rep_range(upper, info)

    @property
    def logs_performance(self) -> bool:
        return bool({"completed", "reps_completed"} & self.model_fields_set)


class SessionFinish(BaseModel):
    feedback: str | None = Field(default=None, max_length=1000)


class SessionSummaryResponse(BaseModel):
    session_id: int
    sets: int
    total_volume: float
    progressions: int
