"""
Deterministic shuffling for the daily answer.

The permutation depends only on the input order and the seed string, so the
same playlist reshuffles identically on every process and every platform.
Randomness comes from SHA-256 in counter mode over the seed bytes rather than
the ``random`` module, whose algorithms are not guaranteed across versions.
"""
import hashlib
from typing import Iterator, List, Sequence, TypeVar

T = TypeVar("T")

_WORD_BYTES = 8
_WORD_MAX = 1 << (8 * _WORD_BYTES)


def _seed_stream(seed: str) -> Iterator[int]:
    seed_bytes = seed.encode("utf-8")
    counter = 0
    while True:
        block = hashlib.sha256(seed_bytes + counter.to_bytes(8, "big")).digest()
        for offset in range(0, len(block), _WORD_BYTES):
            yield int.from_bytes(block[offset:offset + _WORD_BYTES], "big")
        counter += 1


def _uniform_below(stream: Iterator[int], bound: int) -> int:
    # Rejection sampling keeps the draw unbiased for bounds that don't divide 2**64.
    limit = _WORD_MAX - (_WORD_MAX % bound)
    while True:
        value = next(stream)
        if value < limit:
            return value % bound


def seeded_shuffle(items: Sequence[T], seed: str) -> List[T]:
    """
    Return a new list holding a seed-determined permutation of ``items``.

    Fisher-Yates walking from the last index down; the input is never mutated.
    """
    shuffled = list(items)
    stream = _seed_stream(seed)
    for i in range(len(shuffled) - 1, 0, -1):
        j = _uniform_below(stream, i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def select_daily_index(full_days_since_epoch: int, total_count: int) -> int:
    if total_count <= 0:
        raise ValueError(f"total_count must be positive, got {total_count}")
    # Python's % is floored, so pre-epoch days still land in [0, total_count).
    return full_days_since_epoch % total_count
