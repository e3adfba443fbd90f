from __future__ import annotations

from typing import Literal

RecurrenceErrorKind = Literal["config"]


class RecurrenceError(Exception):
    kind: RecurrenceErrorKind
    field: str | None

    def __init__(
        self,
        kind: RecurrenceErrorKind,
        message: str,
        field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.field = field

    @classmethod
    def config(cls, message: str, field: str | None = None) -> RecurrenceError:
        return cls("config", message, field)
