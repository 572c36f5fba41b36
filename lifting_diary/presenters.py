from datetime import datetime

from .models import Workout, WorkoutExercise, WorkoutSet
from .workouts import WorkoutDetail


def workout_duration_minutes(started_at: datetime, completed_at: datetime | None) -> int | None:
    if completed_at is None:
        return None
    return int((completed_at - started_at).total_seconds() // 60)


def format_duration(started_at: datetime, completed_at: datetime | None) -> str:
    minutes = workout_duration_minutes(started_at, completed_at)
    if minutes is None:
        return "In progress"
    if minutes < 60:
        return f"{minutes} min"
    hours, rest = divmod(minutes, 60)
    return f"{hours}h {rest}m"


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def workout_to_dict(workout: Workout) -> dict:
    return {
        "id": workout.id,
        "userId": workout.user_id,
        "name": workout.name,
        "startedAt": _iso(workout.started_at),
        "completedAt": _iso(workout.completed_at),
        "createdAt": _iso(workout.created_at),
        "updatedAt": _iso(workout.updated_at),
        "duration": format_duration(workout.started_at, workout.completed_at),
    }


def workout_detail_to_dict(detail: WorkoutDetail) -> dict:
    return {
        "id": detail.id,
        "name": detail.name,
        "startedAt": _iso(detail.started_at),
        "completedAt": _iso(detail.completed_at),
        "duration": format_duration(detail.started_at, detail.completed_at),
        "exercises": [
            {
                "id": ex.id,
                "workoutExerciseId": ex.workout_exercise_id,
                "name": ex.name,
                "order": ex.order,
                "sets": [
                    {"id": s.id, "setNumber": s.set_number, "weight": str(s.weight), "reps": s.reps}
                    for s in ex.sets
                ],
            }
            for ex in detail.exercises
        ],
    }


def workout_exercise_to_dict(link: WorkoutExercise) -> dict:
    return {
        "id": link.id,
        "workoutId": link.workout_id,
        "exerciseId": link.exercise_id,
        "name": link.exercise.name,
        "order": link.order,
    }


def set_to_dict(workout_set: WorkoutSet) -> dict:
    return {
        "id": workout_set.id,
        "workoutExerciseId": workout_set.workout_exercise_id,
        "setNumber": workout_set.set_number,
        "weight": str(workout_set.weight),
        "reps": workout_set.reps,
    }
