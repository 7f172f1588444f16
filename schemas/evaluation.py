"""
schemas/evaluation.py

- 평가 결과/이력 관련 스키마 (Pydantic v2)
- 모든 모델은 frozen(불변)이며, JSON 직렬화 시 camelCase 별칭을 사용합니다.
  저장 파일의 필드명: subjectGrades, attendanceGradePoint, attendanceRawPercent,
  finalGrade, status, graduationProbability, needsRetake, timestamp
- description/approxPercent/band 는 gradePoint 로부터 항상 다시 계산합니다(저장값 무시).
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel

from schemas.enums import EvaluationStatus, GradeBand, SubjectKey
from services import grade_scale


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


# =========================================================
# 1) 과목별 성적
# =========================================================

class GradeRecord(CamelModel):
    subject_key: SubjectKey
    grade_point: float

    @computed_field  # type: ignore[misc]
    @property
    def description(self) -> str:
        return grade_scale.describe(self.grade_point)

    @computed_field  # type: ignore[misc]
    @property
    def label(self) -> str:
        """과목 표시명 (예: Networking 2)"""
        return grade_scale.subject_label(self.subject_key)

    @computed_field(alias="approxPercent")  # type: ignore[misc]
    @property
    def approx_percent(self) -> float:
        return grade_scale.approx_percent(self.grade_point)

    @computed_field  # type: ignore[misc]
    @property
    def band(self) -> GradeBand:
        return grade_scale.band(self.grade_point)


# =========================================================
# 2) 평가 결과 (이력 1건)
# =========================================================

class EvaluationResult(CamelModel):
    """
    평가 1회 결과
    - subject_grades: 과목 순서대로 5개 (SUBJECTS 순서)
    - final_grade: 5과목 + 출석 평점 6개 값의 단순 평균 (반올림은 표시 시점에만)
    - attendance_raw_percent: 통계(평균 출석률)용 원본 백분율
    """
    subject_grades: Dict[SubjectKey, GradeRecord]
    attendance_grade_point: float
    attendance_raw_percent: float = Field(..., ge=0, le=100)
    final_grade: float
    status: EvaluationStatus
    graduation_probability: float = Field(..., ge=0, le=100)
    needs_retake: bool
    timestamp: datetime

    @model_validator(mode="after")
    def _check_subjects(self):
        # 과목 5개, SUBJECTS 순서, 키와 GradeRecord.subject_key 일치
        if list(self.subject_grades) != list(grade_scale.SUBJECTS):
            raise ValueError("subjectGrades must hold exactly the 5 subjects in order")
        for key, record in self.subject_grades.items():
            if record.subject_key != key:
                raise ValueError(f"subjectGrades[{key.value}] holds a record for {record.subject_key.value}")
        return self

    @computed_field(alias="attendanceDescription")  # type: ignore[misc]
    @property
    def attendance_description(self) -> str:
        return grade_scale.describe(self.attendance_grade_point)


# =========================================================
# 3) 이력 통계 / 초기화 결과
# =========================================================

class HistoryStats(CamelModel):
    total: int = 0
    excellent_count: int = 0
    passed_count: int = 0
    failed_count: int = 0
    avg_final_grade: float = 0.0
    avg_attendance: float = 0.0


class ClearResult(CamelModel):
    success: bool
    message: str


# =========================================================
# 4) 입력 검증
# =========================================================

class FieldError(CamelModel):
    field: str
    message: str


class EvaluationInput(CamelModel):
    """검증을 통과한 입력 (평가 엔진에 그대로 전달)"""
    subject_grades: Dict[SubjectKey, float]
    attendance_grade_point: float
    attendance_raw_percent: Optional[float] = None


class FormValidation(CamelModel):
    errors: List[FieldError] = Field(default_factory=list)
    data: Optional[EvaluationInput] = None

    @property
    def ok(self) -> bool:
        return not self.errors and self.data is not None
