from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from . import db
from .errors import ValidationError, WorkoutExerciseNotFoundError, WorkoutNotFoundError
from .identity import require_user
from .logger import log_event
from .models import Exercise, Workout, WorkoutExercise, WorkoutSet
from .validation import (
    DATE_RE,
    validate_create_workout,
    validate_exercise_name,
    validate_set,
    validate_update_workout,
    validate_workout_exercise,
)


@dataclass
class SetDetail:
    id: str
    set_number: int
    weight: Decimal
    reps: int


@dataclass
class ExerciseDetail:
    id: str
    workout_exercise_id: str
    name: str
    order: int
    sets: list[SetDetail] = field(default_factory=list)


@dataclass
class WorkoutDetail:
    id: str
    user_id: str
    name: str | None
    started_at: datetime
    completed_at: datetime | None
    exercises: list[ExerciseDetail] = field(default_factory=list)


def _as_date(day) -> date:
    if isinstance(day, datetime):
        return day.date()
    if isinstance(day, date):
        return day
    if isinstance(day, str):
        raw = day.strip()
        try:
            if DATE_RE.match(raw):
                return date.fromisoformat(raw)
            # toISOString() style, e.g. 2025-06-04T22:00:00.000Z
            if raw.endswith("Z"):
                raw = raw[:-1] + "+00:00"
            if "T" in raw:
                return datetime.fromisoformat(raw).date()
        except ValueError:
            pass
    raise ValidationError([{"field": "date", "message": "Invalid date format"}])


def day_bounds(day) -> tuple[datetime, datetime]:
    """Inclusive first and last instant of the calendar day."""
    day = _as_date(day)
    return datetime.combine(day, time.min), datetime.combine(day, time.max)


def _commit() -> None:
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise


def _owned_workout_query(user_id: str, workout_id: str):
    return Workout.query.filter(Workout.id == workout_id, Workout.user_id == user_id)


def _get_owned_workout(user_id: str, workout_id: str) -> Workout:
    workout = _owned_workout_query(user_id, workout_id).one_or_none()
    if workout is None:
        log_event(f"WORKOUT_NOT_FOUND user={user_id} workout_id={workout_id!r}")
        raise WorkoutNotFoundError()
    return workout


# ── Reads ──

def list_workouts_for_day(user_id: str | None, day) -> list[WorkoutDetail]:
    user_id = require_user(user_id)
    start, end = day_bounds(day)

    workouts = (
        Workout.query.filter(
            Workout.user_id == user_id,
            Workout.started_at >= start,
            Workout.started_at <= end,
        )
        .order_by(Workout.started_at.asc(), Workout.created_at.asc())
        .all()
    )
    if not workouts:
        return []

    details = {
        w.id: WorkoutDetail(
            id=w.id,
            user_id=w.user_id,
            name=w.name,
            started_at=w.started_at,
            completed_at=w.completed_at,
        )
        for w in workouts
    }

    links = (
        db.session.query(WorkoutExercise, Exercise)
        .join(Exercise, WorkoutExercise.exercise_id == Exercise.id)
        .filter(WorkoutExercise.workout_id.in_(list(details)))
        .order_by(WorkoutExercise.workout_id, WorkoutExercise.order.asc())
        .all()
    )
    exercises = {}
    for link, exercise in links:
        item = ExerciseDetail(
            id=exercise.id,
            workout_exercise_id=link.id,
            name=exercise.name,
            order=link.order,
        )
        exercises[link.id] = item
        details[link.workout_id].exercises.append(item)

    if exercises:
        sets = (
            WorkoutSet.query.filter(WorkoutSet.workout_exercise_id.in_(list(exercises)))
            .order_by(WorkoutSet.workout_exercise_id, WorkoutSet.set_number.asc())
            .all()
        )
        for s in sets:
            exercises[s.workout_exercise_id].sets.append(
                SetDetail(id=s.id, set_number=s.set_number, weight=s.weight, reps=s.reps)
            )

    return [details[w.id] for w in workouts]


def get_workout_by_id(user_id: str | None, workout_id: str) -> Workout | None:
    user_id = require_user(user_id)
    return _owned_workout_query(user_id, workout_id).one_or_none()


def list_exercises() -> list[Exercise]:
    return Exercise.query.order_by(Exercise.name.asc()).all()


# ── Workout mutations ──

def create_workout(user_id: str | None, data: dict) -> Workout:
    user_id = require_user(user_id)
    values = validate_create_workout(data).unwrap()

    workout = Workout(user_id=user_id, name=values["name"], started_at=values["started_at"])
    db.session.add(workout)
    _commit()

    log_event(f"CREATE_WORKOUT user={user_id} workout_id={workout.id}")
    return workout


def update_workout(user_id: str | None, workout_id: str, data: dict) -> Workout:
    user_id = require_user(user_id)
    values = validate_update_workout(data).unwrap()
    workout = _get_owned_workout(user_id, workout_id)

    started = values.get("started_at", workout.started_at)
    completed = values.get("completed_at", workout.completed_at)
    if completed is not None and completed < started:
        raise ValidationError(
            [{"field": "completedAt", "message": "Completion time must not precede the start time"}]
        )

    for key, value in values.items():
        setattr(workout, key, value)
    _commit()

    log_event(f"UPDATE_WORKOUT user={user_id} workout_id={workout.id} fields={sorted(values)}")
    return workout


def complete_workout(user_id: str | None, workout_id: str, completed_at: datetime | None = None) -> Workout:
    completed_at = completed_at or datetime.now().replace(microsecond=0)
    workout = update_workout(user_id, workout_id, {"completed_at": completed_at})

    log_event(f"COMPLETE_WORKOUT user={user_id} workout_id={workout.id} completed_at={completed_at.isoformat()}")
    return workout


def delete_workout(user_id: str | None, workout_id: str) -> str:
    user_id = require_user(user_id)
    workout = _get_owned_workout(user_id, workout_id)

    deleted_id = workout.id
    db.session.delete(workout)
    _commit()

    log_event(f"DELETE_WORKOUT user={user_id} workout_id={deleted_id}")
    return deleted_id


# ── Exercises and sets ──

def get_or_create_exercise(name: str) -> Exercise:
    name = validate_exercise_name(name).unwrap()["name"]

    exercise = Exercise.query.filter_by(name=name).one_or_none()
    if exercise is not None:
        return exercise

    exercise = Exercise(name=name)
    db.session.add(exercise)
    try:
        db.session.commit()
    except IntegrityError:
        # created concurrently by another request
        db.session.rollback()
        return Exercise.query.filter_by(name=name).one()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    return exercise


def add_exercise_to_workout(user_id: str | None, workout_id: str, data: dict) -> WorkoutExercise:
    user_id = require_user(user_id)
    values = validate_workout_exercise(data).unwrap()
    workout = _get_owned_workout(user_id, workout_id)

    order = values["order"]
    if order is None:
        current = (
            db.session.query(func.max(WorkoutExercise.order))
            .filter(WorkoutExercise.workout_id == workout.id)
            .scalar()
        )
        order = (current or 0) + 1
    elif WorkoutExercise.query.filter_by(workout_id=workout.id, order=order).first() is not None:
        raise ValidationError([{"field": "order", "message": "Position already used in this workout"}])

    exercise = get_or_create_exercise(values["name"])
    link = WorkoutExercise(workout_id=workout.id, exercise_id=exercise.id, order=order)
    db.session.add(link)
    _commit()

    log_event(
        f"ADD_EXERCISE user={user_id} workout_id={workout.id} "
        f"exercise_id={exercise.id} order={order}"
    )
    return link


def add_set(user_id: str | None, workout_exercise_id: str, data: dict) -> WorkoutSet:
    user_id = require_user(user_id)
    values = validate_set(data).unwrap()

    link = (
        WorkoutExercise.query.join(Workout, WorkoutExercise.workout_id == Workout.id)
        .filter(WorkoutExercise.id == workout_exercise_id, Workout.user_id == user_id)
        .one_or_none()
    )
    if link is None:
        log_event(f"WORKOUT_EXERCISE_NOT_FOUND user={user_id} workout_exercise_id={workout_exercise_id!r}")
        raise WorkoutExerciseNotFoundError()

    set_number = values["set_number"]
    if set_number is None:
        current = (
            db.session.query(func.max(WorkoutSet.set_number))
            .filter(WorkoutSet.workout_exercise_id == link.id)
            .scalar()
        )
        set_number = (current or 0) + 1

    workout_set = WorkoutSet(
        workout_exercise_id=link.id,
        set_number=set_number,
        weight=values["weight"],
        reps=values["reps"],
    )
    db.session.add(workout_set)
    _commit()

    log_event(
        f"ADD_SET user={user_id} workout_exercise_id={link.id} "
        f"set_number={set_number} weight={values['weight']} reps={values['reps']}"
    )
    return workout_set
