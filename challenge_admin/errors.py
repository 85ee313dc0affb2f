"""Failures raised by the challenge lifecycle core.

Every failure carries a stable ``code`` for API clients and a ``retryable``
flag. Only ``Conflict`` and ``StorageUnavailable`` are worth retrying, and
only after the caller has re-read the challenge.
"""

from typing import Optional, Sequence


class LifecycleError(Exception):
    code = "lifecycle_error"
    retryable = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "retryable": self.retryable}


class NotFound(LifecycleError):
    code = "not_found"


class Conflict(LifecycleError):
    code = "conflict"
    retryable = True

    def __init__(self, challenge_id: int, expected_version: int, actual_version: Optional[int] = None) -> None:
        if actual_version is None:
            message = f"challenge {challenge_id} changed since version {expected_version}; re-read and retry"
        else:
            message = (
                f"challenge {challenge_id} is at version {actual_version}, "
                f"not {expected_version}; re-read and retry"
            )
        super().__init__(message)
        self.challenge_id = challenge_id
        self.expected_version = expected_version
        self.actual_version = actual_version

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["expected_version"] = self.expected_version
        data["actual_version"] = self.actual_version
        return data


class IllegalTransition(LifecycleError):
    code = "illegal_transition"

    def __init__(self, from_state: str, to_state: str, allowed: Sequence[str] = ()) -> None:
        super().__init__(
            f"cannot transition from '{from_state}' to '{to_state}'; allowed from '{from_state}': {list(allowed)}"
        )
        self.from_state = from_state
        self.to_state = to_state
        self.allowed = list(allowed)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["from_state"] = self.from_state
        data["to_state"] = self.to_state
        data["allowed"] = self.allowed
        return data


class PreconditionFailed(LifecycleError):
    code = "precondition_failed"

    def __init__(self, from_state: str, to_state: str, failed_checks: Sequence[str]) -> None:
        super().__init__(
            f"cannot transition from '{from_state}' to '{to_state}': failed checks {', '.join(failed_checks)}"
        )
        self.from_state = from_state
        self.to_state = to_state
        self.failed_checks = list(failed_checks)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["failed_checks"] = self.failed_checks
        return data


class IllegalInCurrentState(LifecycleError):
    code = "illegal_in_current_state"

    def __init__(self, challenge_id: int, state: str, operation: str = "edit") -> None:
        super().__init__(f"cannot {operation} challenge {challenge_id} while it is '{state}'")
        self.challenge_id = challenge_id
        self.state = state

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["state"] = self.state
        return data


class ValidationFailed(LifecycleError):
    code = "validation_failed"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["field"] = self.field
        return data


class StorageUnavailable(LifecycleError):
    code = "storage_unavailable"
    retryable = True
