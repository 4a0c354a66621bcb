from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from .exercises import ExerciseSummary

REP_RANGE_MESSAGE = "The upper bound must be greater than or equal to the lower bound."


class MesocycleStatus(str, Enum):
    draft = "draft"
    active = "active"
    completed = "completed"


def check_rep_range(upper: int | None, info: ValidationInfo) -> int | None:
    lower = info.data.get("rep_range_lower_bound")
    if upper is not None and lower is not None and upper < lower:
        raise ValueError(REP_RANGE_MESSAGE)
    return upper


class TrainingDaySetCreate(BaseModel):
    rep_range_lower_bound: int = Field(default=5, ge=1, le=100)
    rep_range_upper_bound: int = Field(default=8, ge=1, le=100)
    rir: int = Field(default=0, ge=0, le=10)
    weight: float | None = Field(default=None, ge=0)

    @field_validator("rep_range_upper_bound")
    @classmethod
    def _check_rep_range(cls, upper: int | None, info: ValidationInfo) -> int | None:
        return check_rep_range(upper, info)


class TrainingDaySetUpdate(BaseModel):
    rep_range_lower_bound: int | None = Field(default=None, ge=1, le=100)
    rep_range_upper_bound: int | None = Field(default=None, ge=1, le=100)
    rir: int | None = Field(default=None, ge=0, le=10)
    weight: float | None = Field(default=None, ge=0)

    @field_validator("rep_range_upper_bound")
    @classmethod
    def _check_rep_range(cls, upper: int | None, info: ValidationInfo) -> int | None:
        return check_rep_range(upper, info)


class TrainingDayExerciseCreate(BaseModel):
    exercise_id: int
    notes: str | None = Field(default=None, max_length=500)
    sets: list[TrainingDaySetCreate] = Field(default_factory=list, max_length=20)


class TrainingDayExerciseUpdate(BaseModel):
    notes: str | None = Field(default=None, max_length=500)


class TrainingDayCreate(BaseModel):
    label: str = Field(..., min_length=1, max_length=50)
    exercises: list[TrainingDayExerciseCreate] = Field(default_factory=list)


class TrainingDayUpdate(BaseModel):
    label: str = Field(..., min_length=1, max_length=50)


class ExerciseOrderUpdate(BaseModel):
    """Training-day exercise ids in their new order."""

    exercise_ids: list[int] = Field(..., min_length=1)


class MesocycleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    goal: str | None = Field(default=None, max_length=500)
    duration_in_weeks: int = Field(..., ge=1, le=16)
    training_days_per_week: int = Field(..., ge=1, le=7)
    rest_days: list[int] | None = Field(
        default=None,
        description="0-based rest offsets inside a microcycle; defaults to the trailing days of a 7-day week",
    )
    training_days: list[TrainingDayCreate] = Field(..., min_length=1, max_length=7)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("The name is required.")
        return value


class MesocycleStart(BaseModel):
    start_date: date | None = None


class TrainingDaySetResponse(BaseModel):
    id: int
    number: int
    rep_range_lower_bound: int
    rep_range_upper_bound: int
    rir: int
    weight: float | None = None

    model_config = ConfigDict(from_attributes=True)


class TrainingDayExerciseResponse(BaseModel):
    id: int
    number: int
    notes: str | None = None
    exercise: ExerciseSummary
    sets: list[TrainingDaySetResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class TrainingDayResponse(BaseModel):
    id: int
    number: int
    label: str
    exercises: list[TrainingDayExerciseResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class MesocycleRunResponse(BaseModel):
    id: int
    mesocycle_id: int
    start_date: date
    end_date: date | None = None

    model_config = ConfigDict(from_attributes=True)


class MesocycleListItem(BaseModel):
    id: int
    name: str
    goal: str | None = None
    duration_in_weeks: int
    training_days_per_week: int
    status: MesocycleStatus
    start_date: date | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MesocycleResponse(MesocycleListItem):
    microcycle_length: int
    rest_days: list[int] = Field(default_factory=list)
    training_days: list[TrainingDayResponse] = Field(default_factory=list)
    runs: list[MesocycleRunResponse] = Field(default_factory=list)


class RunSessionResponse(BaseModel):
    id: int
    date: date
    microcycle_number: int
    day_number: int
    training_day_id: int
    label: str | None = None
    status: str
    completed_at: datetime | None = None
    feedback: str | None = None
    sets: int
    total_volume: float
    progressions: int


class MesocycleRunDetailResponse(MesocycleRunResponse):
    mesocycle_name: str
    sessions: list[RunSessionResponse] = Field(default_factory=list)
