from typing import List, Optional

from sommelier.schemas.violation import Violation


class SommelierError(Exception):
    """Base class for every failure the core reports to its callers."""

    user_message = "Something went wrong."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.user_message)


class EmptyInputError(SommelierError):
    user_message = "Please enter an access code."


class InvalidCredentialsError(SommelierError):
    # Unknown codes and unreachable stores share this message
    user_message = "Invalid access code."


class MenuValidationError(SommelierError):
    user_message = "Invalid data format."

    def __init__(self, violations: List[Violation]):
        self.violations = list(violations)
        summary = "; ".join(f"{v.loc}: {v.message}" for v in self.violations)
        super().__init__(f"{self.user_message} {summary}".strip())


class IndexOutOfRangeError(SommelierError, IndexError):
    user_message = "No such menu entry."


class PersistenceError(SommelierError):
    user_message = "Failed to update menu."


class StaleMenuError(SommelierError):
    user_message = "The menu was changed elsewhere. Reload it before saving again."

    def __init__(self, expected_version: int, current_version: int):
        self.expected_version = expected_version
        self.current_version = current_version
        super().__init__(
            f"{self.user_message} (expected version {expected_version}, found {current_version})"
        )


class SessionCorruptionError(SommelierError):
    user_message = "Stored session is invalid."


class InvariantViolationError(SommelierError):
    user_message = "Menu data is inconsistent."
