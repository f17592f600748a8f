"""
Explicit results for expected, data-driven failures.

Missing observations are a normal state for a freshly admitted patient, not an
exceptional one, so the engine reports them as values instead of raising.
"""

from typing import Generic, TypeVar

ValueT = TypeVar("ValueT")
ErrorT = TypeVar("ErrorT", bound=BaseException)


class InsufficientDataError(ValueError):
    """Raised (or returned) when a patient lacks the observations a step needs."""

    def __init__(self, patient_id: str, missing: list[str]) -> None:
        self.patient_id = patient_id
        self.missing = missing
        super().__init__(f"Patient {patient_id} has no {' or '.join(missing)} recorded")


class Result(Generic[ValueT, ErrorT]):
    """Either a value or an error, never both."""

    def __init__(self, value: ValueT | None = None, error: ErrorT | None = None) -> None:
        if value is not None and error is not None:
            raise ValueError("Result cannot have both value and error")
        if value is None and error is None:
            raise ValueError("Result must have either value or error")
        self._value: ValueT | None = value
        self._error: ErrorT | None = error

    @classmethod
    def ok(cls, value: ValueT) -> "Result[ValueT, ErrorT]":
        return cls(value=value)

    @classmethod
    def err(cls, error: ErrorT) -> "Result[ValueT, ErrorT]":
        return cls(error=error)

    def is_ok(self) -> bool:
        return self._error is None

    def is_err(self) -> bool:
        return self._error is not None

    def unwrap(self) -> ValueT:
        if self._error is not None:
            raise self._error
        return self._value  # type: ignore

    def unwrap_err(self) -> ErrorT:
        if self._error is None:
            raise ValueError("Called unwrap_err() on an Ok value")
        return self._error
