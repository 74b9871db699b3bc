from __future__ import annotations

from moments.domain.table.entities import SEATED_MOMENT_NAME, SEATED_MOMENT_NUMBER

# The first and last courses of a tasting menu are each served as a pair of
# moments, so a menu with n courses is announced as n + 2 moments.
PAIRED_ENDPOINTS_MIN_COURSES = 2


def served_moment_count(total_moments: int) -> int:
    if total_moments < PAIRED_ENDPOINTS_MIN_COURSES:
        return total_moments
    return total_moments + 2


def moment_label(moment_number: int, total_moments: int) -> str:
    if moment_number == SEATED_MOMENT_NUMBER:
        return SEATED_MOMENT_NAME
    if moment_number < 1 or moment_number > total_moments:
        raise ValueError(f"moment {moment_number} is outside 1..{total_moments}")
    if total_moments < PAIRED_ENDPOINTS_MIN_COURSES:
        return str(moment_number)
    if moment_number == 1:
        return "1&2"
    if moment_number == total_moments:
        return f"{total_moments + 1}&{total_moments + 2}"
    return str(moment_number + 1)
