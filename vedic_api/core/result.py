# vedic_api/core/result.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from vedic_api.core.errors import AuthError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Err:
    error: AuthError

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]
