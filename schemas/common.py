"""
schemas/common.py

- 프로젝트 전반에서 재사용할 공용 스키마 모음
- Pydantic v2 기준
- 포함 내용:
  1) 에러 응답 표준: ErrorDetail, ErrorResponse
  2) 라우터 응답 헬퍼: ok(), fail()
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, Field, ConfigDict

from schemas.evaluation import FieldError


# =========================================================
# 1) 에러 응답 표준
# =========================================================

class ErrorDetail(BaseModel):
    """에러 코드/메시지를 담는 최소 단위"""
    code: str = Field(..., description="에러 식별 코드 (예: VALIDATION_ERROR, STORAGE_ERROR)")
    message: str = Field(..., description="사람이 읽을 수 있는 에러 메시지")
    fields: Optional[List[FieldError]] = Field(
        default=None, description="필드별 검증 에러 (입력 검증 실패 시에만)"
    )

class ErrorResponse(BaseModel):
    """
    전역 에러 핸들러에서 내려주는 표준 에러 응답
    - middlewares/error_handler.py 에서 이 스키마로 리턴
    """
    success: bool = False
    error: ErrorDetail
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="응답 생성 시각 (UTC)"
    )
    latency_ms: Optional[int] = Field(
        default=None, ge=0, description="요청 처리에 걸린 시간(ms)"
    )

    model_config = ConfigDict(extra="ignore")


# =========================================================
# 2) 라우터 응답 헬퍼 ({"success": ..., "data"/"error": ...})
# =========================================================

def ok(data: Any, **extra) -> dict:
    return {"success": True, "data": data, **extra}


def fail(code: str, message: str, fields: Optional[List[FieldError]] = None) -> dict:
    detail = ErrorDetail(code=code, message=message, fields=fields)
    return {"success": False, "error": detail.model_dump(mode="json", by_alias=True, exclude_none=True)}
