from datetime import timedelta

import pytest
from pydantic import ValidationError

from conftest import BASE_TIME, subject_grades
from schemas.enums import EvaluationStatus, SubjectKey
from services.evaluation_engine import (
    classify_status,
    compute_final_grade,
    evaluate,
    graduation_probability,
    needs_retake,
)


# ==========================================================
# 최종 평점
# ==========================================================
@pytest.mark.parametrize(
    "grades, attendance",
    [
        ((1.25, 1.50, 2.00, 2.75, 3.00), 1.75),
        ((1.00, 1.00, 1.00, 1.00, 5.00), 1.00),
        ((3.00, 3.00, 3.00, 3.00, 2.50), 2.50),
        ((5.00, 5.00, 5.00, 5.00, 5.00), 5.00),
    ],
)
def test_final_grade_is_mean_of_six_values(grades, attendance):
    result = evaluate(subject_grades(*grades), attendance)
    assert result.final_grade == pytest.approx((sum(grades) + attendance) / 6)
    assert compute_final_grade(grades, attendance) == pytest.approx(result.final_grade)


# ==========================================================
# 상태 분류 (경계값 + 공백 구간)
# ==========================================================
@pytest.mark.parametrize(
    "final_grade, expected",
    [
        (1.00, EvaluationStatus.EXCELLENT),
        (1.9999, EvaluationStatus.EXCELLENT),
        (2.00, EvaluationStatus.PASSED),
        (2.75, EvaluationStatus.PASSED),
        (2.80, EvaluationStatus.INVALID),
        (3.00, EvaluationStatus.INVALID),
        (3.0001, EvaluationStatus.FAILED),
        (5.00, EvaluationStatus.FAILED),
        (0.99, EvaluationStatus.INVALID),
    ],
)
def test_classify_status(final_grade, expected):
    assert classify_status(final_grade) is expected


# ==========================================================
# 졸업 가능성
# ==========================================================
@pytest.mark.parametrize(
    "final_grade, expected",
    [
        (1.50, 100.0),     # 100 + 15 + 6.25 → 100
        (2.00, 100.0),     # 100 + 6.25 → 100
        (2.50, 100.0),     # 100 - 5 + 6.25 → 100
        (2.80, 86.25),     # 100 - 20 + 6.25
        (3.00, 86.25),
        (3.50, 56.25),     # 100 - 50 + 6.25
        (5.00, 56.25),
    ],
)
def test_graduation_probability(final_grade, expected):
    assert graduation_probability(final_grade) == pytest.approx(expected)


def test_graduation_probability_semester_bonus_is_capped():
    assert graduation_probability(3.50, semesters_completed=0) == pytest.approx(50.0)
    assert graduation_probability(3.50, semesters_completed=20) == pytest.approx(60.0)


# ==========================================================
# 재수강 여부
# ==========================================================
def test_needs_retake_only_looks_at_subjects():
    assert needs_retake([1.00, 1.00, 1.00, 1.00, 5.00])
    assert not needs_retake([3.00, 3.00, 3.00, 3.00, 3.00])

    result = evaluate(subject_grades(1.00), 5.00)
    assert result.needs_retake is False
    assert result.final_grade == pytest.approx(10 / 6)
    assert result.status is EvaluationStatus.EXCELLENT


# ==========================================================
# evaluate 전체 흐름
# ==========================================================
def test_evaluate_one_failing_subject():
    result = evaluate(subject_grades(1.00, 1.00, 1.00, 1.00, 5.00), 1.00)
    assert result.needs_retake is True
    assert result.final_grade == pytest.approx(10 / 6)
    assert result.status is EvaluationStatus.EXCELLENT
    assert result.subject_grades[SubjectKey.PROGRAMMING].description == "Failing (<60%)"


def test_evaluate_all_two():
    result = evaluate(subject_grades(2.00), 2.00)
    assert result.final_grade == pytest.approx(2.00)
    assert result.status is EvaluationStatus.PASSED
    assert result.graduation_probability == pytest.approx(100.0)
    assert result.needs_retake is False
    assert result.attendance_description == "Good (80-84%)"


def test_evaluate_gap_is_recorded_as_invalid():
    result = evaluate(subject_grades(3.00, 3.00, 3.00, 3.00, 2.50), 2.50)
    assert result.final_grade == pytest.approx(17 / 6)
    assert result.status is EvaluationStatus.INVALID
    assert result.graduation_probability == pytest.approx(86.25)


def test_evaluate_all_failing():
    result = evaluate(subject_grades(5.00), 5.00)
    assert result.status is EvaluationStatus.FAILED
    assert result.graduation_probability == pytest.approx(56.25)
    assert result.needs_retake is True


def test_subject_records_follow_subject_order():
    shuffled = dict(reversed(list(subject_grades(1.00, 1.25, 1.50, 1.75, 2.00).items())))
    result = evaluate(shuffled, 1.00)
    assert list(result.subject_grades) == list(SubjectKey)
    record = result.subject_grades[SubjectKey.WEB_DESIGN]
    assert record.grade_point == 1.50
    assert record.label == "Principles of Web Design"
    assert record.description == "Very Good (90-94%)"
    assert record.approx_percent == 92.0


def test_raw_attendance_defaults_to_scale_percent():
    assert evaluate(subject_grades(2.00), 2.00).attendance_raw_percent == 82.0
    assert evaluate(subject_grades(2.00), 2.00, 93.5).attendance_raw_percent == 93.5


def test_evaluate_is_deterministic_apart_from_timestamp():
    first = evaluate(subject_grades(1.25, 2.50, 3.00, 1.75, 2.00), 2.25, now=BASE_TIME)
    second = evaluate(subject_grades(1.25, 2.50, 3.00, 1.75, 2.00), 2.25, now=BASE_TIME + timedelta(hours=1))
    assert first.timestamp != second.timestamp
    for field in ("final_grade", "status", "graduation_probability", "needs_retake"):
        assert getattr(first, field) == getattr(second, field)


def test_result_is_immutable():
    result = evaluate(subject_grades(2.00), 2.00)
    with pytest.raises(ValidationError):
        result.final_grade = 1.0


@pytest.mark.parametrize(
    "grades",
    [
        {SubjectKey.NETWORKING: 2.00},
        {**subject_grades(2.00), "extra": 2.00},
    ],
)
def test_wrong_subject_set_is_rejected(grades):
    with pytest.raises(ValueError):
        evaluate(grades, 2.00)
