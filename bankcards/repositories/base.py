from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One slice of a limit/offset listing plus the total row count."""
    items: list[T]
    total: int
    limit: int
    offset: int
