"""
services/grade_scale.py

- 평점(grade point) → 설명 라벨 / 대략적인 백분율 / 표시 구간 환산표
- 유효 평점은 10개 고정값만 인정하며, 소수 둘째 자리 반올림 후 정확히 일치하는 값만 매칭합니다.
  (구간 매칭 없음. 4.00 같은 값은 "Invalid Grade")
- 대략적인 백분율은 화면 표시용이며 최종 평점 계산에는 사용하지 않습니다.
"""

from types import MappingProxyType
from typing import NamedTuple, Optional, Tuple

from schemas.enums import GradeBand, SubjectKey


class GradeScaleEntry(NamedTuple):
    value: float
    label: str
    approx_percent: float
    band: GradeBand


INVALID_LABEL = "Invalid Grade"
FAILING_GRADE_POINT = 5.00

# ✅ 성적 환산표 (1.00 최고 → 3.00 최저 통과, 5.00 낙제)
GRADE_SCALE: Tuple[GradeScaleEntry, ...] = (
    GradeScaleEntry(1.00, "Excellent (99-100%)", 99.5, GradeBand.HIGH),
    GradeScaleEntry(1.25, "Very Good (95-98%)", 96.5, GradeBand.HIGH),
    GradeScaleEntry(1.50, "Very Good (90-94%)", 92.0, GradeBand.HIGH),
    GradeScaleEntry(1.75, "Good (85-89%)", 87.0, GradeBand.MID),
    GradeScaleEntry(2.00, "Good (80-84%)", 82.0, GradeBand.MID),
    GradeScaleEntry(2.25, "Satisfactory (75-79%)", 77.0, GradeBand.MID),
    GradeScaleEntry(2.50, "Satisfactory (70-74%)", 72.0, GradeBand.MID),
    GradeScaleEntry(2.75, "Passing (65-69%)", 67.0, GradeBand.LOW),
    GradeScaleEntry(3.00, "Passing (60-64%)", 62.0, GradeBand.LOW),
    GradeScaleEntry(FAILING_GRADE_POINT, "Failing (<60%)", 40.0, GradeBand.FAILING),
)

GRADE_POINTS: Tuple[float, ...] = tuple(e.value for e in GRADE_SCALE)

# ✅ 과목 목록 (순서가 곧 계약)
SUBJECTS = MappingProxyType({
    SubjectKey.CLIENT_TECH: "Client Technologies",
    SubjectKey.NETWORKING: "Networking 2",
    SubjectKey.WEB_DESIGN: "Principles of Web Design",
    SubjectKey.SYSTEM_INTEGRATION: "System Integration",
    SubjectKey.PROGRAMMING: "Integrative Programming Technologies 2",
})


def _find(grade_point) -> Optional[GradeScaleEntry]:
    try:
        rounded = round(float(grade_point), 2)
    except (TypeError, ValueError, OverflowError):
        return None
    for entry in GRADE_SCALE:
        if entry.value == rounded:
            return entry
    return None


def lookup(grade_point) -> Tuple[str, float]:
    """평점 → (라벨, 대략적인 백분율). 환산표에 없는 값은 ("Invalid Grade", 0.0)"""
    entry = _find(grade_point)
    if entry is None:
        return INVALID_LABEL, 0.0
    return entry.label, entry.approx_percent


def describe(grade_point) -> str:
    return lookup(grade_point)[0]


def approx_percent(grade_point) -> float:
    return lookup(grade_point)[1]


def band(grade_point) -> GradeBand:
    entry = _find(grade_point)
    return entry.band if entry else GradeBand.UNKNOWN


def subject_label(key) -> str:
    return SUBJECTS[SubjectKey(key)]
