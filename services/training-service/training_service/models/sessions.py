from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class TrainingSession(Base):
    """A training day as it was (or will be) performed on one calendar date of a run."""

    __tablename__ = "training_sessions"
    __table_args__ = (
        UniqueConstraint("run_id", "microcycle_number", "day_number", name="uq_training_sessions_run_slot"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False, index=True)
    run_id = Column(Integer, ForeignKey("mesocycle_runs.id", ondelete="CASCADE"), nullable=False, index=True)
    training_day_id = Column(Integer, ForeignKey("training_days.id", ondelete="CASCADE"), nullable=False, index=True)
    microcycle_number = Column(Integer, nullable=False)
    day_number = Column(Integer, nullable=False)
    date = Column(Date, nullable=False)
    status = Column(String(16), nullable=False, default="open")  # open | completed | reopened
    completed_at = Column(DateTime, nullable=True)
    feedback = Column(Text, nullable=True)
    # exercise_id -> set count last carried forward to the next occurrence
    propagated_set_counts = Column(JSON, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    exercises = relationship(
        "SessionExercise",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="SessionExercise.number",
        lazy="selectin",
    )

    @property
    def all_sets(self):
        return [s for exercise in self.exercises for s in exercise.sets]

    def __repr__(self):
        return (
            f"<TrainingSession(id={self.id}, run_id={self.run_id}, "
            f"microcycle={self.microcycle_number}, day={self.day_number}, status={self.status})>"
        )


class SessionExercise(Base):
    __tablename__ = "session_exercises"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("training_sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_id = Column(Integer, ForeignKey("exercises.id", ondelete="RESTRICT"), nullable=False, index=True)
    number = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)

    session = relationship("TrainingSession", back_populates="exercises")
    exercise = relationship("Exercise", lazy="selectin")
    sets = relationship(
        "SessionSet",
        back_populates="session_exercise",
        cascade="all, delete-orphan",
        order_by="SessionSet.number",
        lazy="selectin",
    )


class SessionSet(Base):
    __tablename__ = "session_sets"

    id = Column(Integer, primary_key=True, index=True)
    session_exercise_id = Column(
        Integer, ForeignKey("session_exercises.id", ondelete="CASCADE"), nullable=False, index=True
    )
    number = Column(Integer, nullable=False)
    rep_range_lower_bound = Column(Integer, nullable=False)
    rep_range_upper_bound = Column(Integer, nullable=False)
    rir = Column(Integer, nullable=False, default=0)
    weight = Column(Float, nullable=True)
    completed = Column(Boolean, nullable=False, default=False)
    reps_completed = Column(Integer, nullable=True)

    session_exercise = relationship("SessionExercise", back_populates="sets")
