import re
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from .errors import ValidationError
from .models import NAME_MAX_LENGTH

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
# what an HTML datetime-local input submits, seconds optional
DATETIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2})?$")

# sqlite and postgres INTEGER
INT_MAX = 2**31 - 1
# sets.weight is NUMERIC(10, 2)
WEIGHT_MAX = Decimal(10) ** 8
WEIGHT_STEP = Decimal("0.01")


@dataclass
class ValidationResult:
    ok: bool
    value: dict = field(default_factory=dict)
    issues: list[dict] = field(default_factory=list)

    def unwrap(self) -> dict:
        if not self.ok:
            raise ValidationError(self.issues)
        return self.value


def _result(value: dict, issues: list[dict]) -> ValidationResult:
    if issues:
        return ValidationResult(ok=False, issues=issues)
    return ValidationResult(ok=True, value=value)


def _issue(field_name: str, message: str) -> dict:
    return {"field": field_name, "message": message}


def _pick(data: dict, *keys: str) -> tuple[bool, Any]:
    for key in keys:
        if key in data:
            return True, data[key]
    return False, None


def parse_datetime(raw) -> datetime | None:
    """Return a naive datetime, or None when ``raw`` is not well formed."""
    if isinstance(raw, datetime):
        return raw
    if not isinstance(raw, str):
        return None
    raw = raw.strip()
    if not DATETIME_RE.match(raw):
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        # 2025-02-30T10:00 passes the pattern
        return None


def _check_workout_name(raw, issues: list[dict]) -> str | None:
    if raw is None:
        return None
    if not isinstance(raw, str):
        issues.append(_issue("name", "Name must be a string"))
        return None
    name = raw.strip()
    if len(name) > NAME_MAX_LENGTH:
        issues.append(_issue("name", f"Name must be at most {NAME_MAX_LENGTH} characters"))
    return name or None


def _check_datetime(raw, field_name: str, issues: list[dict]) -> datetime | None:
    value = parse_datetime(raw)
    if value is None:
        issues.append(_issue(field_name, "Invalid datetime format"))
    return value


def _check_positive_int(raw, field_name: str, issues: list[dict]) -> int | None:
    # bool is an int subclass; "True" reps is not a number
    if isinstance(raw, bool):
        issues.append(_issue(field_name, "Must be a whole number"))
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if not re.fullmatch(r"[+-]?\d+", raw):
            issues.append(_issue(field_name, "Must be a whole number"))
            return None
        raw = int(raw)
    if not isinstance(raw, int):
        issues.append(_issue(field_name, "Must be a whole number"))
        return None
    if raw < 1:
        issues.append(_issue(field_name, "Must be at least 1"))
        return None
    if raw > INT_MAX:
        issues.append(_issue(field_name, f"Must be at most {INT_MAX}"))
        return None
    return raw


def validate_create_workout(data: dict) -> ValidationResult:
    issues: list[dict] = []
    value = {"name": _check_workout_name(data.get("name"), issues)}

    present, raw_started = _pick(data, "startedAt", "started_at")
    if not present or raw_started in (None, ""):
        issues.append(_issue("startedAt", "Start time is required"))
    else:
        value["started_at"] = _check_datetime(raw_started, "startedAt", issues)
    return _result(value, issues)


def validate_update_workout(data: dict) -> ValidationResult:
    """Partial update: only keys present in ``data`` end up in the result."""
    issues: list[dict] = []
    value: dict = {}

    if "name" in data:
        value["name"] = _check_workout_name(data["name"], issues)

    present, raw_started = _pick(data, "startedAt", "started_at")
    if present:
        value["started_at"] = _check_datetime(raw_started, "startedAt", issues)

    present, raw_completed = _pick(data, "completedAt", "completed_at")
    if present:
        # null reopens the workout
        value["completed_at"] = (
            None if raw_completed in (None, "") else _check_datetime(raw_completed, "completedAt", issues)
        )

    started, completed = value.get("started_at"), value.get("completed_at")
    if started and completed and completed < started:
        issues.append(_issue("completedAt", "Completion time must not precede the start time"))
    return _result(value, issues)


def validate_exercise_name(raw) -> ValidationResult:
    issues: list[dict] = []
    name = raw.strip() if isinstance(raw, str) else ""
    if not name:
        issues.append(_issue("name", "Exercise name is required"))
    elif len(name) > NAME_MAX_LENGTH:
        issues.append(_issue("name", f"Name must be at most {NAME_MAX_LENGTH} characters"))
    return _result({"name": name}, issues)


def validate_workout_exercise(data: dict) -> ValidationResult:
    name_result = validate_exercise_name(data.get("name"))
    issues = list(name_result.issues)
    value = {"name": name_result.value.get("name"), "order": None}
    if data.get("order") not in (None, ""):
        value["order"] = _check_positive_int(data["order"], "order", issues)
    return _result(value, issues)


def validate_set(data: dict) -> ValidationResult:
    issues: list[dict] = []
    value: dict = {"set_number": None}

    raw_weight = data.get("weight")
    weight = None
    if isinstance(raw_weight, (int, float, str, Decimal)) and not isinstance(raw_weight, bool):
        try:
            weight = Decimal(str(raw_weight).strip())
        except InvalidOperation:
            weight = None
    if weight is None or not weight.is_finite():
        issues.append(_issue("weight", "Weight must be a number"))
    elif weight < 0:
        issues.append(_issue("weight", "Weight must not be negative"))
    elif weight >= WEIGHT_MAX:
        issues.append(_issue("weight", f"Weight must be less than {WEIGHT_MAX:,}"))
    elif weight.quantize(WEIGHT_STEP) != weight:
        issues.append(_issue("weight", "Weight allows at most 2 decimal places"))
    else:
        value["weight"] = weight.quantize(WEIGHT_STEP)

    if data.get("reps") is None:
        issues.append(_issue("reps", "Reps are required"))
    else:
        value["reps"] = _check_positive_int(data["reps"], "reps", issues)

    present, raw_number = _pick(data, "setNumber", "set_number")
    if present and raw_number not in (None, ""):
        value["set_number"] = _check_positive_int(raw_number, "setNumber", issues)
    return _result(value, issues)
