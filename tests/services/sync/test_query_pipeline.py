"""
Tests for filtering, searching and roll-number sorting.
"""

import pytest

from student_roster.schemas.student import FilterCriteria, StudentRecord
from student_roster.services.sync.query_pipeline import (
    apply_filters, compare_roll_numbers, matches_search, parse_roll_number
)


def _student(roll_no, **kwargs):
    values = dict(student_id=f"S-{roll_no}", student_name=f"Student {roll_no}", roll_no=roll_no)
    values.update(kwargs)
    return StudentRecord(**values)


class TestRollNumbers:
    """Test roll number parsing and comparison."""

    @pytest.mark.parametrize("value,expected", [
        ("101", 101),
        ("056", 56),
        (" 7 ", 7),
        ("-3", -3),
        ("12A", None),
        ("", None),
        (None, None),
    ])
    def test_parse_roll_number(self, value, expected):
        assert parse_roll_number(value) == expected

    def test_numeric_comparison(self):
        assert compare_roll_numbers("9", "56") < 0
        assert compare_roll_numbers("56", "101") < 0
        assert compare_roll_numbers("056", "56") == 0

    def test_string_fallback(self):
        assert compare_roll_numbers("2", "A1") < 0
        assert compare_roll_numbers("B2", "A1") > 0

    def test_string_fallback_ignores_case(self):
        assert compare_roll_numbers("a1", "B1") < 0
        assert compare_roll_numbers("b2", "A9") > 0

    def test_case_only_difference_is_deterministic(self):
        assert compare_roll_numbers("A1", "a1") * compare_roll_numbers("a1", "A1") < 0

    def test_mixed_case_view_order(self):
        roster = [_student("B1"), _student("a1"), _student("c3")]

        view = apply_filters(roster)

        assert [s.roll_no for s in view] == ["a1", "B1", "c3"]

    def test_sorted_numerically_not_lexically(self):
        roster = [_student("101"), _student("9"), _student("56")]

        view = apply_filters(roster)

        assert [s.roll_no for s in view] == ["9", "56", "101"]

    def test_mixed_roll_numbers_are_deterministic(self):
        roster = [_student("A1"), _student("2"), _student("10"), _student("")]

        first = apply_filters(roster)
        second = apply_filters(list(reversed(roster)))

        assert [s.roll_no for s in first][:3] == ["", "2", "10"]
        assert first[-1].roll_no == "A1"
        assert [s.roll_no for s in second] == [s.roll_no for s in first]


class TestFilters:
    """Test class, section and search filters."""

    def test_class_filter(self, seed_records):
        view = apply_filters(seed_records, FilterCriteria(class_name="V"))

        assert len(view) == 1
        assert view[0].student_name == "Ravi Sharma"
        assert view[0].roll_no == "101"

    def test_all_options_pass_everything(self, seed_records):
        view = apply_filters(seed_records, FilterCriteria(class_name="all", section="All"))

        assert [s.roll_no for s in view] == ["056", "101", "205", "301"]

    def test_section_filter(self, seed_records):
        view = apply_filters(seed_records, FilterCriteria(section="MAHA"))

        assert [s.student_name for s in view] == ["Aarav Patel", "Ravi Sharma"]

    def test_search_is_case_insensitive_substring(self, seed_records):
        view = apply_filters(seed_records, FilterCriteria(search_term="KUMAR"))

        assert [s.student_name for s in view] == ["Deepak Kumar"]

    @pytest.mark.parametrize("term,expected", [
        ("S002", "Priya Singh"),
        ("205", "Priya Singh"),
        ("ram kumar", "Deepak Kumar"),
    ])
    def test_search_fields(self, seed_records, term, expected):
        view = apply_filters(seed_records, FilterCriteria(search_term=term))

        assert expected in [s.student_name for s in view]

    def test_search_ignores_other_fields(self):
        record = _student("1", email_id="kumar@example.com")

        assert not matches_search(record, "kumar")

    def test_filters_combine(self, seed_records):
        view = apply_filters(seed_records, FilterCriteria(class_name="XII", section="NONE", search_term="deepak"))
        assert len(view) == 1

        view = apply_filters(seed_records, FilterCriteria(class_name="V", search_term="deepak"))
        assert view == []

    def test_input_is_not_mutated(self, seed_records):
        original = list(seed_records)

        apply_filters(seed_records, FilterCriteria(class_name="IX"))

        assert seed_records == original
