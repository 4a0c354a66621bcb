from pydantic import BaseModel, ConfigDict, Field, field_validator


class MuscleGroupResponse(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class ExerciseSummary(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class ExerciseResponse(ExerciseSummary):
    user_id: str | None = None
    shared: bool = False
    muscle_groups: list[MuscleGroupResponse] = Field(default_factory=list)


class ExerciseListResponse(BaseModel):
    query: str | None = None
    no_results: bool = False
    exercises: list[ExerciseResponse] = Field(default_factory=list)


class ExerciseCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    primary_muscle_group_id: int
    other_muscle_group_ids: list[int] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = " ".join(value.split())
        if not value:
            raise ValueError("The name is required.")
        return value


class ExerciseDeleteRequest(BaseModel):
    exercise_ids: list[int] = Field(..., min_length=1)


class ExerciseDeleteResponse(BaseModel):
    deleted: int
