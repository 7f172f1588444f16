import pytest

from conftest import form_for
from schemas.enums import SubjectKey
from services.validator import validate_attendance, validate_form, validate_grade_point


@pytest.mark.parametrize("value", [1, 1.25, "1.50", "2.00", 3.0, 5, "5.00", 2.7500001])
def test_valid_grade_points(value):
    assert validate_grade_point(value)


@pytest.mark.parametrize("value", [4.00, 0, 3.5, "abc", "", None, True, float("nan"), 10 ** 400])
def test_invalid_grade_points(value):
    assert not validate_grade_point(value)


@pytest.mark.parametrize("value", [0, 100, 55.5, "87"])
def test_valid_attendance(value):
    assert validate_attendance(value)


@pytest.mark.parametrize("value", [-0.1, 100.01, "ninety", None, False, 10 ** 400])
def test_invalid_attendance(value):
    assert not validate_attendance(value)


def test_form_passes_with_all_fields():
    result = validate_form(form_for(grade="1.75", attendance="2.00", attendance_percent="91"))
    assert result.ok
    assert result.errors == []
    assert list(result.data.subject_grades) == list(SubjectKey)
    assert all(v == 1.75 for v in result.data.subject_grades.values())
    assert result.data.attendance_grade_point == 2.00
    assert result.data.attendance_raw_percent == 91.0


def test_empty_form_reports_one_error_per_required_field():
    result = validate_form({})
    assert not result.ok
    assert result.data is None
    assert [e.field for e in result.errors] == [
        "grade_client_tech",
        "grade_networking",
        "grade_web_design",
        "grade_system_integration",
        "grade_programming",
        "attendance",
    ]
    assert result.errors[1].message == "Networking 2 grade is required"
    assert result.errors[-1].message == "Attendance is required"


def test_invalid_fields_are_all_collected():
    form = form_for(attendance="4.00", attendance_percent="120")
    form["grade_web_design"] = "4.00"
    result = validate_form(form)
    assert not result.ok
    assert {e.field: e.message for e in result.errors} == {
        "grade_web_design": "Principles of Web Design must be one of the valid grade points",
        "attendance": "Attendance must be one of the valid grade points",
        "attendance_percent": "Attendance percent must be between 0 and 100",
    }


def test_attendance_percent_is_optional():
    result = validate_form(form_for())
    assert result.ok
    assert result.data.attendance_raw_percent is None


def test_huge_integer_is_a_field_error_not_a_crash():
    form = form_for(attendance_percent=10 ** 400)
    form["grade_networking"] = 10 ** 400
    result = validate_form(form)
    assert not result.ok
    assert [e.field for e in result.errors] == ["grade_networking", "attendance_percent"]
