class DiaryError(Exception):
    status_code = 500
    message = "Server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class UnauthorizedError(DiaryError):
    status_code = 401
    message = "Unauthorized"


class NotFoundError(DiaryError):
    """Raised for missing rows and for rows owned by another user alike."""

    status_code = 404
    message = "Not found"


class WorkoutNotFoundError(NotFoundError):
    message = "Workout not found"


class WorkoutExerciseNotFoundError(NotFoundError):
    message = "Workout exercise not found"


class ValidationError(DiaryError):
    status_code = 400
    message = "Validation failed"

    def __init__(self, issues: list[dict]):
        super().__init__()
        self.issues = issues
