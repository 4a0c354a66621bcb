from .exercises import (
    ExerciseCreate,
    ExerciseDeleteRequest,
    ExerciseDeleteResponse,
    ExerciseListResponse,
    ExerciseResponse,
    ExerciseSummary,
    MuscleGroupResponse,
)
from .mesocycle import (
    ExerciseOrderUpdate,
    MesocycleCreate,
    MesocycleListItem,
    MesocycleResponse,
    MesocycleRunDetailResponse,
    MesocycleRunResponse,
    MesocycleStart,
    RunSessionResponse,
    TrainingDayCreate,
    TrainingDayExerciseCreate,
    TrainingDayExerciseResponse,
    TrainingDayExerciseUpdate,
    TrainingDayResponse,
    TrainingDaySetCreate,
    TrainingDaySetResponse,
    TrainingDaySetUpdate,
    TrainingDayUpdate,
)
from .notification import NotificationResponse
from .session import (
    CalendarDayResponse,
    CalendarResponse,
    CurrentDayResponse,
    DayFlagsResponse,
    MesocycleRef,
    SessionExerciseResponse,
    SessionFinish,
    SessionResponse,
    SessionSetResponse,
    SessionSetUpdate,
    SessionSummaryResponse,
)
