"""Tagged success/failure values returned by collaborator adapters."""

from dataclasses import dataclass
from typing import Generic, Literal, Optional, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful adapter call."""
    data: T
    status_code: Optional[int] = None
    ok: Literal[True] = True


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed adapter call with a tag from a closed set."""
    err: E
    status_code: Optional[int] = None
    ok: Literal[False] = False


Result = Union[Ok[T], Err[E]]
