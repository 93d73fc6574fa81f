"""
Sorting signed permutations by reversals.

A signed permutation of length n holds every number 0..n-1 exactly once, each
with a sign. A signed reversal (i, j) with i <= j reverses the elements at
positions i..j (inclusive) and flips each of their signs. The goal is the
signed identity +0, +1, ..., +(n-1).

The greedy strategy implemented here fixes one position at a time: after
step i the first i elements are +0 .. +(i-1). Bringing number i to position i
takes one reversal, correcting its sign takes at most one more, so at most 2n
reversals are needed (not necessarily the minimum). Example, with the
reversed span in brackets:

     [-0]  +1   -3   +2
      +0   +1  [-3   +2]
      +0   +1  [-2]  +3
      +0   +1   +2   +3
"""

from typing import Iterable, List, Optional, Tuple

SignedNumber = Tuple[int, bool]   # (number, sign) with True meaning '+'
Reversal = Tuple[int, int]


class SignedPermutation:
    """Signed permutation that can be transformed into the identity by reversals."""

    def __init__(self, permutation: Iterable[SignedNumber]):
        """
        Args:
            permutation: Sequence of (number, sign) pairs in which every number
                0..n-1 appears exactly once

        Raises:
            ValueError: If the numbers do not form a permutation of 0..n-1
        """
        self.permutation: List[SignedNumber] = [(int(number), bool(sign)) for number, sign in permutation]
        n = len(self.permutation)
        if sorted(number for number, _ in self.permutation) != list(range(n)):
            raise ValueError("Signed permutation must contain every number 0..n-1 exactly once")

        # indices[number] = current position of number
        self.indices: List[int] = [0] * n
        for position, (number, _) in enumerate(self.permutation):
            self.indices[number] = position

    def __len__(self):
        return len(self.permutation)

    def __str__(self):
        return " ".join(f"{'+' if sign else '-'}{number}" for number, sign in self.permutation)

    def get_element_at(self, i: int) -> SignedNumber:
        return self.permutation[i]

    def is_identity_permutation(self) -> bool:
        """Check whether the permutation is +0, +1, ..., +(n-1)."""
        return all(number == position and sign
                   for position, (number, sign) in enumerate(self.permutation))

    def next_reversal(self) -> Optional[Reversal]:
        """
        Compute the next reversal towards the identity.

        Returns:
            (i, j) with i <= j, or None if the permutation already is the identity
        """
        for i, (number, sign) in enumerate(self.permutation):
            if number != i:
                j = self.indices[i]
                return min(i, j), max(i, j)
            if not sign:
                return i, i
        return None

    def perform_reversal(self, step: Reversal):
        """
        Reverse positions step[0]..step[1] (inclusive) and flip their signs.

        Raises:
            ValueError: If the bounds are out of range or step[0] > step[1]
        """
        lo, hi = step
        if lo > hi:
            raise ValueError(f"Reversal bounds must satisfy i <= j, got ({lo}, {hi})")
        if lo < 0 or hi >= len(self.permutation):
            raise ValueError(f"Reversal ({lo}, {hi}) outside permutation of length {len(self.permutation)}")

        segment = [(number, not sign) for number, sign in reversed(self.permutation[lo:hi + 1])]
        self.permutation[lo:hi + 1] = segment
        for position in range(lo, hi + 1):
            self.indices[self.permutation[position][0]] = position

    def sort_by_reversals(self) -> List[Reversal]:
        """
        Apply reversals until the permutation is the identity.

        Returns:
            The reversals in the order they were applied (at most 2n)
        """
        reversals: List[Reversal] = []
        step = self.next_reversal()
        while step is not None:
            self.perform_reversal(step)
            reversals.append(step)
            step = self.next_reversal()
        return reversals
