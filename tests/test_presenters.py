from datetime import datetime
from decimal import Decimal

from lifting_diary.presenters import format_duration, workout_detail_to_dict, workout_duration_minutes
from lifting_diary.workouts import ExerciseDetail, SetDetail, WorkoutDetail

START = datetime(2025, 6, 4, 8, 0)


def test_duration_in_progress():
    assert workout_duration_minutes(START, None) is None
    assert format_duration(START, None) == "In progress"


def test_duration_under_an_hour():
    assert format_duration(START, datetime(2025, 6, 4, 8, 45, 59)) == "45 min"


def test_duration_over_an_hour():
    assert format_duration(START, datetime(2025, 6, 4, 9, 0)) == "1h 0m"
    assert format_duration(START, datetime(2025, 6, 4, 10, 7)) == "2h 7m"


def test_detail_serialisation():
    detail = WorkoutDetail(
        id="w1",
        user_id="u1",
        name=None,
        started_at=START,
        completed_at=datetime(2025, 6, 4, 8, 30),
        exercises=[
            ExerciseDetail(
                id="e1",
                workout_exercise_id="we1",
                name="Squat",
                order=1,
                sets=[SetDetail(id="s1", set_number=1, weight=Decimal("135.50"), reps=5)],
            )
        ],
    )
    data = workout_detail_to_dict(detail)
    assert data["duration"] == "30 min"
    assert data["startedAt"] == "2025-06-04T08:00:00"
    assert data["exercises"][0]["sets"] == [{"id": "s1", "setNumber": 1, "weight": "135.50", "reps": 5}]
