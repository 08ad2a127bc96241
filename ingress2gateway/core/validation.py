"""
Structured field errors.

Annotation parse and validation problems are collected, not raised: a pass
records a :class:`FieldError` against the offending annotation path and moves
on to the next object.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FieldErrorType(str, Enum):
    INVALID = "FieldValueInvalid"
    NOT_SUPPORTED = "FieldValueNotSupported"
    REQUIRED = "FieldValueRequired"


@dataclass(frozen=True)
class FieldPath:
    """Dotted path to a field; map keys render as ``[key]``."""

    segments: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, *segments: str) -> FieldPath:
        return cls(tuple(segments))

    def child(self, *segments: str) -> FieldPath:
        return FieldPath(self.segments + tuple(segments))

    def key(self, key: str) -> FieldPath:
        if not self.segments:
            return FieldPath((f"[{key}]",))
        return FieldPath(self.segments[:-1] + (f"{self.segments[-1]}[{key}]",))

    def __str__(self) -> str:
        return ".".join(self.segments)


@dataclass(frozen=True)
class FieldError:
    type: FieldErrorType
    path: FieldPath
    value: Any
    message: str

    def __str__(self) -> str:
        if self.value is None:
            return f"{self.path}: {self.type.value}: {self.message}"
        return f"{self.path}: {self.type.value}: {self.value!r}: {self.message}"


def invalid(path: FieldPath, value: Any, message: str) -> FieldError:
    return FieldError(FieldErrorType.INVALID, path, value, message)


def not_supported(path: FieldPath, value: Any, supported: list[str]) -> FieldError:
    return FieldError(
        FieldErrorType.NOT_SUPPORTED,
        path,
        value,
        "supported values: " + ", ".join(f'"{s}"' for s in supported),
    )


def required(path: FieldPath, message: str) -> FieldError:
    return FieldError(FieldErrorType.REQUIRED, path, None, message)
