"""
Query pipeline: filtered, searched and sorted view of the raw roster.

Pure functions only. The input roster is never mutated and equal inputs always
produce the same ordering.
"""

import locale
import re
from functools import cmp_to_key
from typing import Iterable, List, Optional

from student_roster.schemas.student import ALL_OPTION, FilterCriteria, StudentRecord


INTEGER_PATTERN = re.compile(r'^[+-]?\d+$')

SEARCH_FIELDS = ('student_id', 'student_name', 'roll_no', 'phone_number', 'father_name')


def parse_roll_number(roll_no: Optional[str]) -> Optional[int]:
    """Integer value of a roll number, or ``None`` when it is not an integer."""
    if roll_no is None:
        return None
    text = str(roll_no).strip()
    if not INTEGER_PATTERN.match(text):
        return None
    return int(text)


def compare_roll_numbers(a: Optional[str], b: Optional[str]) -> int:
    """
    Numeric comparison when both sides are integers, locale-aware string
    comparison otherwise. Strings are compared case-insensitively first, so the
    order does not depend on letter case even under the C locale.
    """
    num_a = parse_roll_number(a)
    num_b = parse_roll_number(b)
    if num_a is not None and num_b is not None:
        return (num_a > num_b) - (num_a < num_b)
    text_a = a or ''
    text_b = b or ''
    return locale.strcoll(text_a.casefold(), text_b.casefold()) or locale.strcoll(text_a, text_b)


def _compare_records(a: StudentRecord, b: StudentRecord) -> int:
    return compare_roll_numbers(a.roll_no, b.roll_no)


def matches_search(record: StudentRecord, term: str) -> bool:
    needle = term.lower()
    for name in SEARCH_FIELDS:
        value = getattr(record, name, None)
        if value and needle in str(value).lower():
            return True
    return False


def apply_filters(roster: Iterable[StudentRecord], criteria: Optional[FilterCriteria] = None) -> List[StudentRecord]:
    """
    Compute the view for ``criteria``.

    Order of application: class filter, section filter, free-text search,
    then a stable sort by roll number.
    """
    criteria = criteria or FilterCriteria()
    view = list(roster)

    if criteria.class_name != ALL_OPTION:
        view = [s for s in view if s.class_name == criteria.class_name]

    if criteria.section != ALL_OPTION:
        view = [s for s in view if s.section == criteria.section]

    if criteria.search_term:
        view = [s for s in view if matches_search(s, criteria.search_term)]

    return sorted(view, key=cmp_to_key(_compare_records))
