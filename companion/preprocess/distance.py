"""
Levenshtein edit distance and nearest-candidate lookup used by typo correction.
"""
from typing import Iterable, Optional, Tuple


def edit_distance(a: str, b: str, limit: Optional[int] = None) -> int:
    """
    Minimum single-character inserts, deletes and substitutions turning a into b.
    With a limit, stops as soon as the distance must exceed it and returns limit + 1.
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    if limit is not None and abs(len(a) - len(b)) > limit:
        return limit + 1

    # Two rolling rows of the DP table
    prev = list(range(len(b) + 1))
    for i in range(1, len(a) + 1):
        curr = [i] + [0] * len(b)
        for j in range(1, len(b) + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            curr[j] = min(
                curr[j - 1] + 1,      # insertion
                prev[j] + 1,          # deletion
                prev[j - 1] + cost,   # substitution
            )
        # row minimum never decreases further down the table
        if limit is not None and min(curr) > limit:
            return limit + 1
        prev = curr
    if limit is not None:
        return min(prev[len(b)], limit + 1)
    return prev[len(b)]


def is_transposition(a: str, b: str) -> bool:
    """True when b is a with exactly one pair of adjacent letters swapped ("tierd" / "tired")."""
    if len(a) != len(b) or a == b:
        return False
    diffs = [i for i in range(len(a)) if a[i] != b[i]]
    return (
        len(diffs) == 2
        and diffs[1] == diffs[0] + 1
        and a[diffs[0]] == b[diffs[1]]
        and a[diffs[1]] == b[diffs[0]]
    )


def closest_candidate(word: str, candidates: Iterable, max_distance: int) -> Optional[Tuple[object, int]]:
    """
    Return (candidate, distance) for the nearest candidate within max_distance, or None.
    Candidates expose `.match`; the first one seen at the smallest distance wins,
    so callers control tie-breaks through iteration order.
    """
    best = None
    best_distance = max_distance + 1
    for candidate in candidates:
        # length difference is a lower bound on the distance
        if abs(len(word) - len(candidate.match)) >= best_distance:
            continue
        distance = edit_distance(word, candidate.match, limit=best_distance - 1)
        if distance < best_distance:
            best = candidate
            best_distance = distance
            if distance == 0:
                break
    if best is None:
        return None
    return (best, best_distance)
