"""
Cryptographic Random Source
============================

Every random decision KeyForge makes goes through :class:`RandomSource`,
which draws exclusively from the operating system CSPRNG via
:func:`secrets.randbelow`. The :mod:`random` module is never used.

``shuffle`` and ``sample`` are Fisher-Yates variants driven by
``uniform_int`` so that each permutation (or each ``k``-subset ordering)
is equally likely.

References:
    - Knuth, D. E. (1997). The Art of Computer Programming, Vol. 2,
      Algorithm 3.4.2P.
    - Python ``secrets`` module documentation.
"""

from __future__ import annotations

import secrets
from typing import MutableSequence, Sequence, TypeVar

from keyforge.core.errors import EmptyInputError, RangeError

T = TypeVar("T")


class RandomSource:
    """CSPRNG-backed uniform selection primitives.

    Stateless; a single instance may be shared freely between threads.
    """

    def uniform_int(self, n: int) -> int:
        """Return a uniform integer in ``[0, n)``.

        Raises:
            RangeError: If *n* is not a positive integer.
        """
        if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
            raise RangeError(f"upper bound must be a positive integer, got {n!r}")
        return secrets.randbelow(n)

    def choose(self, seq: Sequence[T]) -> T:
        """Return a uniformly chosen element of *seq*."""
        if len(seq) == 0:
            raise EmptyInputError("cannot choose from an empty sequence")
        return seq[self.uniform_int(len(seq))]

    def shuffle(self, items: MutableSequence[T]) -> None:
        """Shuffle *items* in place (Fisher-Yates, descending)."""
        for i in range(len(items) - 1, 0, -1):
            j = self.uniform_int(i + 1)
            items[i], items[j] = items[j], items[i]

    def sample(self, seq: Sequence[T], k: int) -> list[T]:
        """Return ``min(k, len(seq))`` elements taken from distinct indices.

        Partial Fisher-Yates over an index list: only the first ``k``
        positions are settled, so the cost is O(len(seq)) for the index
        copy plus O(k) swaps.

        Raises:
            EmptyInputError: If *seq* is empty.
            RangeError: If *k* is less than 1.
        """
        if len(seq) == 0:
            raise EmptyInputError("cannot sample from an empty sequence")
        if isinstance(k, bool) or not isinstance(k, int) or k < 1:
            raise RangeError(f"sample size must be a positive integer, got {k!r}")

        indices = list(range(len(seq)))
        take = min(k, len(indices))
        for i in range(take):
            j = i + self.uniform_int(len(indices) - i)
            indices[i], indices[j] = indices[j], indices[i]
        return [seq[idx] for idx in indices[:take]]
