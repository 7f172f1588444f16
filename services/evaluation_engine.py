"""
services/evaluation_engine.py

- 검증된 5과목 평점 + 출석 평점 → EvaluationResult
- 입력은 services/validator.py 를 통과했다고 가정하며 값 자체는 다시 검증하지 않습니다.
  (과목 구성이 다르면 호출 계약 위반 → ValueError)

분류 규칙 (final_grade 는 낮을수록 좋음):
- 3.00 초과            → FAILED
- 2.00 이상 2.75 이하  → PASSED
- 1.00 이상 2.00 미만  → EXCELLENT
- 그 외 (2.75 초과 3.00 이하 포함) → INVALID
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, Mapping, Optional

from schemas.enums import EvaluationStatus, SubjectKey
from schemas.evaluation import EvaluationResult, GradeRecord
from services import grade_scale
from services.grade_scale import FAILING_GRADE_POINT, SUBJECTS

logger = logging.getLogger(__name__)

# 3학년 기준 이수 학기 수 (사용자 입력 아님)
SEMESTERS_COMPLETED = 5
TOTAL_SEMESTERS = 8


def compute_final_grade(subject_grades: Iterable[float], attendance_grade_point: float) -> float:
    values = [float(g) for g in subject_grades] + [float(attendance_grade_point)]
    return sum(values) / len(values)


def classify_status(final_grade: float) -> EvaluationStatus:
    if final_grade > 3.00:
        return EvaluationStatus.FAILED
    elif 2.00 <= final_grade <= 2.75:
        return EvaluationStatus.PASSED
    elif 1.00 <= final_grade < 2.00:
        return EvaluationStatus.EXCELLENT
    return EvaluationStatus.INVALID


def graduation_probability(final_grade: float, semesters_completed: int = SEMESTERS_COMPLETED) -> float:
    """
    졸업 가능성(%) 휴리스틱 — 학습 모델이 아닌 고정 가감 규칙
    - 100에서 시작, 평점 구간별 감점 / 2.00 미만이면 +15
    - 이수 학기 보너스: min(학기/8*10, 10) → 5학기 기준 +6.25
    - 결과는 0~100 으로 제한
    """
    probability = 100.0

    if final_grade > 3.0:
        probability -= 50
    elif final_grade > 2.75:
        probability -= 20
    elif final_grade > 2.0:
        probability -= 5

    if final_grade < 2.0:
        probability += 15

    probability += min(semesters_completed / TOTAL_SEMESTERS * 10, 10)

    return max(0.0, min(100.0, probability))


def needs_retake(subject_grades: Iterable[float]) -> bool:
    """과목 중 하나라도 5.00(낙제)이면 재수강 대상. 출석 평점은 보지 않음"""
    return any(round(float(g), 2) == FAILING_GRADE_POINT for g in subject_grades)


def evaluate(
    subject_grades: Mapping[SubjectKey, float],
    attendance_grade_point: float,
    attendance_raw_percent: Optional[float] = None,
    now: Optional[datetime] = None,
) -> EvaluationResult:
    keys = {SubjectKey(k) for k in subject_grades}
    if keys != set(SUBJECTS) or len(subject_grades) != len(SUBJECTS):
        raise ValueError(f"expected grades for exactly {len(SUBJECTS)} subjects: {[k.value for k in SUBJECTS]}")

    grades = {SubjectKey(k): float(v) for k, v in subject_grades.items()}
    ordered = [grades[key] for key in SUBJECTS]

    final_grade = compute_final_grade(ordered, attendance_grade_point)
    status = classify_status(final_grade)
    if status is EvaluationStatus.INVALID:
        logger.warning(f"final grade {final_grade:.4f} matches no status rule, recorded as INVALID")

    if attendance_raw_percent is None:
        attendance_raw_percent = grade_scale.approx_percent(attendance_grade_point)

    result = EvaluationResult(
        subject_grades={
            key: GradeRecord(subject_key=key, grade_point=grades[key]) for key in SUBJECTS
        },
        attendance_grade_point=float(attendance_grade_point),
        attendance_raw_percent=float(attendance_raw_percent),
        final_grade=final_grade,
        status=status,
        graduation_probability=graduation_probability(final_grade),
        needs_retake=needs_retake(ordered),
        timestamp=now or datetime.now(timezone.utc),
    )
    logger.info(
        f"evaluation computed: final_grade={final_grade:.2f} status={status.value} "
        f"retake={result.needs_retake}"
    )
    return result
