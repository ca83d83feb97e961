from __future__ import annotations

from typing import List, Sequence, TypeVar

T = TypeVar("T")


def chunk_by_size(items: Sequence[T], *, size: int) -> List[List[T]]:
    if size <= 0:
        raise ValueError("size must be positive")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]
