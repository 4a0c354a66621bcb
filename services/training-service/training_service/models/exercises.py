from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Table, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base, utcnow

exercise_muscle_groups = Table(
    "exercise_muscle_groups",
    Base.metadata,
    Column("exercise_id", Integer, ForeignKey("exercises.id", ondelete="CASCADE"), primary_key=True),
    Column("muscle_group_id", Integer, ForeignKey("muscle_groups.id", ondelete="CASCADE"), primary_key=True),
)


class MuscleGroup(Base):
    __tablename__ = "muscle_groups"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(64), unique=True, nullable=False)

    def __repr__(self):
        return f"<MuscleGroup(id={self.id}, name='{self.name}')>"


class Exercise(Base):
    __tablename__ = "exercises"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_exercises_user_name"),)

    id = Column(Integer, primary_key=True, index=True)
    # NULL for the shared catalog
    user_id = Column(String(255), nullable=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    shared = Column(Boolean, nullable=False, default=False)
    primary_muscle_group_id = Column(Integer, ForeignKey("muscle_groups.id", ondelete="RESTRICT"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    primary_muscle_group = relationship("MuscleGroup", lazy="selectin")
    other_muscle_groups = relationship(
        "MuscleGroup",
        secondary=exercise_muscle_groups,
        order_by="MuscleGroup.name",
        lazy="selectin",
    )

    @property
    def muscle_groups(self) -> list[MuscleGroup]:
        groups = [self.primary_muscle_group] if self.primary_muscle_group is not None else []
        return groups + [g for g in self.other_muscle_groups if g not in groups]

    def __repr__(self):
        return f"<Exercise(id={self.id}, name='{self.name}', shared={self.shared})>"
