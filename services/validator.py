"""
services/validator.py

- 입력 검증 (부수효과 없는 판별 함수)
- validate_form: 폼 원본(dict)의 6개 필수 항목(5과목 + 출석 평점)과 선택 항목(출석률)을 검사하고
  실패한 필드마다 에러 메시지를 하나씩 모아서 반환합니다.
  하나라도 실패하면 data 는 None → 평가 엔진을 호출하지 않습니다.
"""

import math
from typing import Any, List, Mapping, Optional

from schemas.evaluation import EvaluationInput, FieldError, FormValidation
from services.grade_scale import GRADE_POINTS, SUBJECTS

ATTENDANCE_FIELD = "attendance"
ATTENDANCE_PERCENT_FIELD = "attendance_percent"


def grade_field(subject_key) -> str:
    """과목 키 → 폼 필드명 (예: grade_networking)"""
    return f"grade_{getattr(subject_key, 'value', subject_key)}"


def _to_number(x: Any) -> Optional[float]:
    # bool 은 int 의 하위 타입이라 숫자로 취급하지 않음
    if x is None or isinstance(x, bool):
        return None
    if isinstance(x, str):
        x = x.strip()
        if not x:
            return None
    try:
        value = float(x)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def validate_grade_point(x: Any) -> bool:
    value = _to_number(x)
    return value is not None and round(value, 2) in GRADE_POINTS


def validate_attendance(x: Any) -> bool:
    """출석률(%) 검사: 숫자이고 0 이상 100 이하"""
    value = _to_number(x)
    return value is not None and 0 <= value <= 100


def _is_missing(form: Mapping[str, Any], field: str) -> bool:
    value = form.get(field)
    return value is None or (isinstance(value, str) and not value.strip())


def validate_form(form: Mapping[str, Any]) -> FormValidation:
    errors: List[FieldError] = []
    grades = {}

    # ✅ 과목별 평점
    for key, label in SUBJECTS.items():
        field = grade_field(key)
        if _is_missing(form, field):
            errors.append(FieldError(field=field, message=f"{label} grade is required"))
            continue
        if not validate_grade_point(form[field]):
            errors.append(FieldError(field=field, message=f"{label} must be one of the valid grade points"))
            continue
        grades[key] = round(_to_number(form[field]), 2)

    # ✅ 출석 평점 (최종 평점 계산의 6번째 값)
    attendance = None
    if _is_missing(form, ATTENDANCE_FIELD):
        errors.append(FieldError(field=ATTENDANCE_FIELD, message="Attendance is required"))
    elif not validate_grade_point(form[ATTENDANCE_FIELD]):
        errors.append(FieldError(field=ATTENDANCE_FIELD, message="Attendance must be one of the valid grade points"))
    else:
        attendance = round(_to_number(form[ATTENDANCE_FIELD]), 2)

    # ✅ 출석률 원본 (선택, 통계용)
    raw_percent = None
    if not _is_missing(form, ATTENDANCE_PERCENT_FIELD):
        if validate_attendance(form[ATTENDANCE_PERCENT_FIELD]):
            raw_percent = _to_number(form[ATTENDANCE_PERCENT_FIELD])
        else:
            errors.append(FieldError(
                field=ATTENDANCE_PERCENT_FIELD,
                message="Attendance percent must be between 0 and 100",
            ))

    if errors:
        return FormValidation(errors=errors)

    return FormValidation(
        data=EvaluationInput(
            subject_grades=grades,
            attendance_grade_point=attendance,
            attendance_raw_percent=raw_percent,
        )
    )
