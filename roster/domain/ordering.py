"""
Roster ordering.

Text compares case-insensitively, ignores accents and treats digit runs as
numbers, so "Unit 9" sorts before "Unit 10".
"""
import re
import unicodedata
from functools import cmp_to_key
from typing import Any, Callable, Iterable, TypeVar

from .policy import RosterPolicy

T = TypeVar("T")

_DIGITS = re.compile(r"(\d+)")


def natural_key(value: str) -> tuple:
    folded = unicodedata.normalize("NFKD", value or "")
    folded = "".join(ch for ch in folded if not unicodedata.combining(ch)).casefold()
    return tuple(
        (0, int(part), "") if part.isdigit() else (1, 0, part)
        for part in _DIGITS.split(folded)
        if part
    )


def compare_text(a: str, b: str) -> int:
    left, right = natural_key(a), natural_key(b)
    return (left > right) - (left < right)


def rank_position(policy: RosterPolicy, member) -> int:
    """Index of the member's rank in the catalog; unknown ranks sort lowest, at -1."""
    index = policy.rank_index(member.community_rank)
    return -1 if index is None else index


def default_compare(policy: RosterPolicy) -> Callable[[Any, Any], int]:
    """Community rank descending, then department, then name."""

    def compare(a, b) -> int:
        ra, rb = rank_position(policy, a), rank_position(policy, b)
        if ra != rb:
            return rb - ra
        by_department = compare_text(a.department, b.department)
        if by_department:
            return by_department
        return compare_text(a.name, b.name)

    return compare


def sort_members(
    members: Iterable[T],
    policy: RosterPolicy,
    value_of: Callable[[T], str | int] | None = None,
    *,
    descending: bool = False,
) -> list[T]:
    """
    Sort by an explicit key, falling back to the default order on ties.

    The direction applies to the explicit key only; tied members keep the
    default order whichever way the key runs.
    """
    fallback = default_compare(policy)
    if value_of is None:
        return sorted(members, key=cmp_to_key(fallback))

    direction = -1 if descending else 1

    def compare(a, b) -> int:
        av, bv = value_of(a), value_of(b)
        if isinstance(av, int) and isinstance(bv, int):
            result = (av > bv) - (av < bv)
        else:
            result = compare_text(str(av), str(bv))
        if result == 0:
            return fallback(a, b)
        return result * direction

    return sorted(members, key=cmp_to_key(compare))
