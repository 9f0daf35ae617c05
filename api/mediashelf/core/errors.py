"""Caller-facing error types shared by the aggregation and lookup layers."""

from __future__ import annotations


class UsageError(ValueError):
    """Raised when a caller passes arguments the service cannot interpret."""


class UnknownMediaTypeError(UsageError):
    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Unknown media type: {value}. Valid types are: books, movies, games, musics")


class UnknownFieldError(UsageError):
    def __init__(self, media_type: object, field_name: str, valid: list[str]) -> None:
        self.media_type = media_type
        self.field_name = field_name
        self.valid = valid
        super().__init__(
            f"Unknown field {field_name!r} for {media_type}. Valid fields are: {', '.join(valid)}"
        )
