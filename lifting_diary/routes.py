# lifting_diary/routes.py

from datetime import date

from flask import Blueprint, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from . import workouts
from .errors import DiaryError, ValidationError, WorkoutNotFoundError
from .identity import current_user_id
from .logger import log_event
from .presenters import (
    set_to_dict,
    workout_detail_to_dict,
    workout_exercise_to_dict,
    workout_to_dict,
)

bp = Blueprint("main", __name__)


@bp.errorhandler(DiaryError)
def handle_diary_error(error: DiaryError):
    body = {"ok": False, "error": error.message}
    if isinstance(error, ValidationError):
        body["issues"] = error.issues
    return jsonify(body), error.status_code


@bp.errorhandler(SQLAlchemyError)
def handle_db_error(error: SQLAlchemyError):
    log_event(f"{request.method} {request.path} db_error err={type(error).__name__}")
    return jsonify({"ok": False, "error": "Server error"}), 500


def _payload() -> dict:
    # JSON body, or form fields for plain HTML forms
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


@bp.get("/dashboard")
def dashboard():
    raw_date = (request.args.get("date") or "").strip()
    day = raw_date or date.today()

    items = workouts.list_workouts_for_day(current_user_id(), day)
    return jsonify({
        "ok": True,
        "date": workouts.day_bounds(day)[0].date().isoformat(),
        "workouts": [workout_detail_to_dict(w) for w in items],
    })


@bp.get("/exercises")
def exercises():
    items = workouts.list_exercises()
    return jsonify({"ok": True, "exercises": [{"id": e.id, "name": e.name} for e in items]})


@bp.post("/workouts")
def create_workout():
    workout = workouts.create_workout(current_user_id(), _payload())
    return jsonify({"ok": True, "workout": workout_to_dict(workout)}), 201


@bp.get("/workouts/<workout_id>")
def workout_page(workout_id: str):
    workout = workouts.get_workout_by_id(current_user_id(), workout_id)
    if workout is None:
        raise WorkoutNotFoundError()
    return jsonify({"ok": True, "workout": workout_to_dict(workout)})


@bp.patch("/workouts/<workout_id>")
def update_workout(workout_id: str):
    workout = workouts.update_workout(current_user_id(), workout_id, _payload())
    return jsonify({"ok": True, "workout": workout_to_dict(workout)})


@bp.post("/workouts/<workout_id>/complete")
def complete_workout(workout_id: str):
    data = _payload()
    user_id = current_user_id()
    if data.get("completedAt"):
        workout = workouts.update_workout(user_id, workout_id, {"completedAt": data["completedAt"]})
    else:
        workout = workouts.complete_workout(user_id, workout_id)
    return jsonify({"ok": True, "workout": workout_to_dict(workout)})


@bp.delete("/workouts/<workout_id>")
def delete_workout(workout_id: str):
    deleted_id = workouts.delete_workout(current_user_id(), workout_id)
    return jsonify({"ok": True, "id": deleted_id})


@bp.post("/workouts/<workout_id>/exercises")
def add_exercise(workout_id: str):
    link = workouts.add_exercise_to_workout(current_user_id(), workout_id, _payload())
    return jsonify({"ok": True, "exercise": workout_exercise_to_dict(link)}), 201


@bp.post("/workout-exercises/<workout_exercise_id>/sets")
def add_set(workout_exercise_id: str):
    workout_set = workouts.add_set(current_user_id(), workout_exercise_id, _payload())
    return jsonify({"ok": True, "set": set_to_dict(workout_set)}), 201
