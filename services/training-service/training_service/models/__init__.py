from .base import Base, utcnow
from .exercises import Exercise, MuscleGroup, exercise_muscle_groups
from .mesocycle import Mesocycle, MesocycleRun, TrainingDay, TrainingDayExercise, TrainingDaySet
from .notifications import Notification
from .sessions import SessionExercise, SessionSet, TrainingSession

__all__ = [
    "Base",
    "Exercise",
    "Mesocycle",
    "MesocycleRun",
    "MuscleGroup",
    "Notification",
    "SessionExercise",
    "SessionSet",
    "TrainingDay",
    "TrainingDayExercise",
    "TrainingDaySet",
    "TrainingSession",
    "exercise_muscle_groups",
    "utcnow",
]
