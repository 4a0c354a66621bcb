from sqlalchemy import JSON, Column, Date, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class Mesocycle(Base):
    __tablename__ = "mesocycles"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_mesocycles_user_name"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    goal = Column(Text, nullable=True)
    duration_in_weeks = Column(Integer, nullable=False)
    training_days_per_week = Column(Integer, nullable=False)
    microcycle_length = Column(Integer, nullable=False)
    # 0-based offsets inside a microcycle
    rest_days = Column(JSON, nullable=False, default=list)
    status = Column(String(16), nullable=False, default="draft", index=True)  # draft | active | completed
    start_date = Column(Date, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    training_days = relationship(
        "TrainingDay",
        back_populates="mesocycle",
        cascade="all, delete-orphan",
        order_by="TrainingDay.number",
        lazy="selectin",
    )
    runs = relationship(
        "MesocycleRun",
        back_populates="mesocycle",
        cascade="all, delete-orphan",
        order_by="MesocycleRun.start_date.desc()",
        lazy="selectin",
    )

    @property
    def open_run(self):
        return next((run for run in self.runs if run.end_date is None), None)

    def __repr__(self):
        return f"<Mesocycle(id={self.id}, name='{self.name}', status={self.status})>"


class MesocycleRun(Base):
    __tablename__ = "mesocycle_runs"

    id = Column(Integer, primary_key=True, index=True)
    mesocycle_id = Column(Integer, ForeignKey("mesocycles.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(255), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)

    mesocycle = relationship("Mesocycle", back_populates="runs")
    sessions = relationship(
        "TrainingSession",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TrainingSession.date",
    )

    def __repr__(self):
        return (
            f"<MesocycleRun(id={self.id}, mesocycle_id={self.mesocycle_id}, "
            f"start_date={self.start_date}, end_date={self.end_date})>"
        )


class TrainingDay(Base):
    __tablename__ = "training_days"

    id = Column(Integer, primary_key=True, index=True)
    mesocycle_id = Column(Integer, ForeignKey("mesocycles.id", ondelete="CASCADE"), nullable=False, index=True)
    number = Column(Integer, nullable=False)
    label = Column(String(50), nullable=False)

    mesocycle = relationship("Mesocycle", back_populates="training_days")
    exercises = relationship(
        "TrainingDayExercise",
        back_populates="training_day",
        cascade="all, delete-orphan",
        order_by="TrainingDayExercise.number",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<TrainingDay(id={self.id}, number={self.number}, label='{self.label}')>"


class TrainingDayExercise(Base):
    __tablename__ = "training_day_exercises"

    id = Column(Integer, primary_key=True, index=True)
    training_day_id = Column(Integer, ForeignKey("training_days.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_id = Column(Integer, ForeignKey("exercises.id", ondelete="RESTRICT"), nullable=False, index=True)
    number = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)

    training_day = relationship("TrainingDay", back_populates="exercises")
    exercise = relationship("Exercise", lazy="selectin")
    sets = relationship(
        "TrainingDaySet",
        back_populates="training_day_exercise",
        cascade="all, delete-orphan",
        order_by="TrainingDaySet.number",
        lazy="selectin",
    )


class TrainingDaySet(Base):
    __tablename__ = "training_day_sets"

    id = Column(Integer, primary_key=True, index=True)
    training_day_exercise_id = Column(
        Integer, ForeignKey("training_day_exercises.id", ondelete="CASCADE"), nullable=False, index=True
    )
    number = Column(Integer, nullable=False)
    rep_range_lower_bound = Column(Integer, nullable=False)
    rep_range_upper_bound = Column(Integer, nullable=False)
    rir = Column(Integer, nullable=False, default=0)
    weight = Column(Float, nullable=True)

    training_day_exercise = relationship("TrainingDayExercise", back_populates="sets")
