import random
from collections.abc import MutableSequence
from typing import TypeVar

T = TypeVar("T")


def shuffle(items: MutableSequence[T], rng: random.Random | None = None) -> MutableSequence[T]:
    """
    Fisher-Yates shuffle, in place.
    Pass a seeded ``random.Random`` for reproducible order; the input is
    returned for convenience.
    """
    source = rng or random
    for i in range(len(items) - 1, 0, -1):
        j = source.randrange(i + 1)
        items[i], items[j] = items[j], items[i]
    return items
