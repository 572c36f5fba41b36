import uuid
from datetime import datetime

from . import db

NAME_MAX_LENGTH = 100


def _uuid() -> str:
    return str(uuid.uuid4())


class Exercise(db.Model):
    __tablename__ = "exercises"
    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    name = db.Column(db.String(NAME_MAX_LENGTH), nullable=False, unique=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    # catalog rows are shared; removal relies on the ON DELETE CASCADE key
    workout_exercises = db.relationship(
        "WorkoutExercise",
        back_populates="exercise",
        passive_deletes=True,
    )


class Workout(db.Model):
    __tablename__ = "workouts"
    id = db.Column(db.String(36), primary_key=True, default=_uuid)

    # identity provider's user id, never taken from request data
    user_id = db.Column(db.String(255), nullable=False, index=True)
    name = db.Column(db.String(NAME_MAX_LENGTH))
    started_at = db.Column(db.DateTime, nullable=False, index=True)
    completed_at = db.Column(db.DateTime)  # None while in progress
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    workout_exercises = db.relationship(
        "WorkoutExercise",
        back_populates="workout",
        cascade="all, delete-orphan",
        order_by="WorkoutExercise.order.asc()",
    )


class WorkoutExercise(db.Model):
    __tablename__ = "workout_exercises"
    __table_args__ = (
        db.UniqueConstraint("workout_id", "order", name="uq_workout_exercises_workout_order"),
    )
    id = db.Column(db.String(36), primary_key=True, default=_uuid)

    workout_id = db.Column(
        db.String(36), db.ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    exercise_id = db.Column(
        db.String(36), db.ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False
    )
    order = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)

    workout = db.relationship("Workout", back_populates="workout_exercises")
    exercise = db.relationship("Exercise", back_populates="workout_exercises")
    sets = db.relationship(
        "WorkoutSet",
        back_populates="workout_exercise",
        cascade="all, delete-orphan",
        order_by="WorkoutSet.set_number.asc()",
    )


class WorkoutSet(db.Model):
    __tablename__ = "sets"
    id = db.Column(db.String(36), primary_key=True, default=_uuid)

    workout_exercise_id = db.Column(
        db.String(36),
        db.ForeignKey("workout_exercises.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    set_number = db.Column(db.Integer, nullable=False)
    weight = db.Column(db.Numeric(10, 2), nullable=False)
    reps = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)

    workout_exercise = db.relationship("WorkoutExercise", back_populates="sets")
