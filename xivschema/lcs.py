"""Longest common subsequence of two strings."""

from __future__ import annotations

__all__ = ["longest_common_subsequence"]


def longest_common_subsequence(a: str, b: str) -> str:
    """Return the longest common subsequence of ``a`` and ``b``."""
    table = [[0] * (len(b) + 1) for _ in range(len(a) + 1)]

    for i, char_a in enumerate(a, start=1):
        row, previous = table[i], table[i - 1]
        for j, char_b in enumerate(b, start=1):
            if char_a == char_b:
                row[j] = previous[j - 1] + 1
            elif previous[j] > row[j - 1]:
                row[j] = previous[j]
            else:
                row[j] = row[j - 1]

    chars: list[str] = []
    i, j = len(a), len(b)
    while i > 0 and j > 0:
        if a[i - 1] == b[j - 1]:
            chars.append(a[i - 1])
            i -= 1
            j -= 1
        elif table[i - 1][j] > table[i][j - 1]:
            i -= 1
        else:
            j -= 1

    return "".join(reversed(chars))