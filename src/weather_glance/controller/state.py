"""Tagged per-concern request state and stale-result sequencing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Literal, TypeVar

T = TypeVar("T")

RequestStatus = Literal["idle", "loading", "success", "failure"]
FailureKind = Literal["transport", "malformed", "missing_credential", "unknown"]

UNKNOWN_ERROR_MESSAGE = "Unknown error"


@dataclass(frozen=True, slots=True)
class RequestState(Generic[T]):
    """One of ``idle | loading | success(payload) | failure(message)``.

    Build instances through the classmethods so that payload and message are
    only ever set for the status that owns them.
    """

    status: RequestStatus = "idle"
    payload: T | None = None
    message: str | None = None
    failure_kind: FailureKind | None = None

    @classmethod
    def idle(cls) -> RequestState[T]:
        return cls()

    @classmethod
    def loading(cls) -> RequestState[T]:
        return cls(status="loading")

    @classmethod
    def success(cls, payload: T) -> RequestState[T]:
        return cls(status="success", payload=payload)

    @classmethod
    def failure(
        cls, message: str | None, kind: FailureKind = "unknown"
    ) -> RequestState[T]:
        return cls(
            status="failure",
            message=message or UNKNOWN_ERROR_MESSAGE,
            failure_kind=kind,
        )

    @property
    def is_idle(self) -> bool:
        return self.status == "idle"

    @property
    def is_loading(self) -> bool:
        return self.status == "loading"

    @property
    def is_success(self) -> bool:
        return self.status == "success"

    @property
    def is_failure(self) -> bool:
        return self.status == "failure"


class RequestSequencer:
    """Monotonic request tags; only the latest tag may apply its result."""

    def __init__(self) -> None:
        self._latest = 0

    @property
    def latest(self) -> int:
        return self._latest

    def issue(self) -> int:
        self._latest += 1
        return self._latest

    def invalidate(self) -> None:
        """Make every outstanding tag stale without issuing a request."""
        self._latest += 1

    def is_current(self, token: int) -> bool:
        return token == self._latest
