from datetime import datetime
from decimal import Decimal

import pytest

from lifting_diary.errors import ValidationError
from lifting_diary.validation import (
    parse_datetime,
    validate_create_workout,
    validate_exercise_name,
    validate_set,
    validate_update_workout,
    validate_workout_exercise,
)


@pytest.mark.parametrize("raw, expected", [
    ("2025-06-04T08:00", datetime(2025, 6, 4, 8, 0)),
    ("2025-06-04T08:00:30", datetime(2025, 6, 4, 8, 0, 30)),
    (datetime(2025, 6, 4, 8, 0), datetime(2025, 6, 4, 8, 0)),
    ("2025-06-04", None),
    ("2025-02-30T10:00", None),
    ("04/06/2025 08:00", None),
    (20250604, None),
])
def test_parse_datetime(raw, expected):
    assert parse_datetime(raw) == expected


def test_create_workout_result():
    result = validate_create_workout({"name": "  Leg Day  ", "startedAt": "2025-06-04T08:00"})
    assert result.ok
    assert result.value == {"name": "Leg Day", "started_at": datetime(2025, 6, 4, 8, 0)}


def test_create_workout_name_is_optional():
    result = validate_create_workout({"name": None, "started_at": "2025-06-04T08:00"})
    assert result.ok and result.value["name"] is None


def test_create_workout_collects_all_issues():
    result = validate_create_workout({"name": "x" * 101})
    assert not result.ok
    assert {issue["field"] for issue in result.issues} == {"name", "startedAt"}
    with pytest.raises(ValidationError) as exc:
        result.unwrap()
    assert exc.value.issues == result.issues


def test_update_only_returns_present_fields():
    assert validate_update_workout({}).value == {}
    assert validate_update_workout({"completedAt": None}).value == {"completed_at": None}
    result = validate_update_workout({"startedAt": "2025-06-04T09:00", "completedAt": "2025-06-04T08:00"})
    assert not result.ok
    assert result.issues[0]["field"] == "completedAt"


@pytest.mark.parametrize("raw", [None, "", "   ", "y" * 101, 42])
def test_exercise_name_rejected(raw):
    assert not validate_exercise_name(raw).ok


def test_workout_exercise_order():
    assert validate_workout_exercise({"name": "Squat"}).value == {"name": "Squat", "order": None}
    assert validate_workout_exercise({"name": "Squat", "order": "3"}).value["order"] == 3
    assert not validate_workout_exercise({"name": "Squat", "order": 0}).ok


def test_set_values():
    result = validate_set({"weight": "135.5", "reps": "5", "setNumber": 2})
    assert result.ok
    assert result.value == {"weight": Decimal("135.5"), "reps": 5, "set_number": 2}


@pytest.mark.parametrize("data, field", [
    ({"weight": "heavy", "reps": 5}, "weight"),
    ({"weight": "NaN", "reps": 5}, "weight"),
    ({"weight": -5, "reps": 5}, "weight"),
    ({"weight": True, "reps": 5}, "weight"),
    ({"weight": 100}, "reps"),
    ({"weight": 100, "reps": 0}, "reps"),
    ({"weight": 100, "reps": 5.5}, "reps"),
    ({"weight": 100, "reps": True}, "reps"),
    ({"weight": 100, "reps": 5, "setNumber": -1}, "setNumber"),
])
def test_set_rejected(data, field):
    result = validate_set(data)
    assert not result.ok
    assert [issue["field"] for issue in result.issues] == [field]


@pytest.mark.parametrize("weight", ["135.125", "0.001", "1e400", "100000000", 10**9])
def test_weight_must_fit_the_column(weight):
    result = validate_set({"weight": weight, "reps": 5})
    assert not result.ok
    assert [issue["field"] for issue in result.issues] == ["weight"]


def test_weight_is_normalised_to_two_places():
    assert validate_set({"weight": "99999999.99", "reps": 1}).value["weight"] == Decimal("99999999.99")
    assert str(validate_set({"weight": 135, "reps": 5}).value["weight"]) == "135.00"


@pytest.mark.parametrize("data, field", [
    ({"weight": 100, "reps": 10**20}, "reps"),
    ({"weight": 100, "reps": 2**31}, "reps"),
    ({"weight": 100, "reps": 5, "setNumber": str(10**20)}, "setNumber"),
])
def test_set_integers_are_bounded(data, field):
    result = validate_set(data)
    assert not result.ok
    assert [issue["field"] for issue in result.issues] == [field]


def test_order_is_bounded():
    assert not validate_workout_exercise({"name": "Squat", "order": 10**20}).ok
    assert validate_workout_exercise({"name": "Squat", "order": 2**31 - 1}).ok
