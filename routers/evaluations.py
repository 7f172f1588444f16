import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, Response

from config.settings import settings
from schemas.common import fail, ok
from services import evaluation_engine
from services.grade_scale import GRADE_SCALE, SUBJECTS
from services.history_store import HISTORY_CAPACITY, HistoryStore, HistoryStoreError, aggregate_stats
from services.validator import ATTENDANCE_FIELD, ATTENDANCE_PERCENT_FIELD, grade_field, validate_form

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/evaluations", tags=["evaluations"])

# ==========================================================
# [공통] 이력 저장소 (프로세스당 1개 → Lock 공유)
# ==========================================================
_store = HistoryStore(settings.HISTORY_FILE)

def get_store() -> HistoryStore:
    return _store


def _dump(model) -> dict:
    return model.model_dump(mode="json", by_alias=True)


# ==========================================================
# [1단계] 정적 조회 라우터
# ==========================================================

# ✅ [SCALE] 성적 환산표 + 과목 목록 (입력 폼 선택지 구성용)
@router.get("/scale")
def get_grade_scale():
    return ok({
        "subjects": [
            {"key": key.value, "label": label, "field": grade_field(key)}
            for key, label in SUBJECTS.items()
        ],
        "gradeScale": [
            {
                "gradePoint": e.value,
                "label": e.label,
                "approxPercent": e.approx_percent,
                "band": e.band.value,
            }
            for e in GRADE_SCALE
        ],
        "attendanceField": ATTENDANCE_FIELD,
        "attendancePercentField": ATTENDANCE_PERCENT_FIELD,
    })

# ✅ [HISTORY] 평가 이력 (최신순)
@router.get("/history")
def read_history(
    limit: Optional[int] = Query(None, ge=1, le=HISTORY_CAPACITY, description="최근 N건만 조회"),
    store: HistoryStore = Depends(get_store),
):
    records = store.load_all()
    if limit is not None:
        records = records[:limit]
    return ok([_dump(r) for r in records], total=len(records))

# ✅ [LATEST] 가장 최근 평가 1건
@router.get("/latest")
def read_latest(response: Response, store: HistoryStore = Depends(get_store)):
    record = store.latest()
    if record is None:
        response.status_code = 404
        return fail("NOT_FOUND", "No evaluations recorded yet")
    return ok(_dump(record))

# ✅ [STATS] 이력 통계 (상태별 건수, 평균 평점, 평균 출석률)
@router.get("/stats")
def read_stats(store: HistoryStore = Depends(get_store)):
    return ok(_dump(aggregate_stats(store.load_all())))


# ==========================================================
# [2단계] 평가 / 초기화
# ==========================================================

# ✅ [CREATE] 평가 실행 + 이력 저장
# - 필드별 검증 실패가 하나라도 있으면 평가하지 않음 (422)
# - 저장 실패 시에도 계산 결과는 반환 (persisted=False)
@router.post("")
def create_evaluation(
    response: Response,
    form: Dict[str, Any] = Body(..., description="grade_<subject>, attendance, attendance_percent(선택)"),
    store: HistoryStore = Depends(get_store),
):
    validation = validate_form(form)
    if not validation.ok:
        response.status_code = 422
        return fail("VALIDATION_ERROR", "Please fix the highlighted fields", list(validation.errors))

    data = validation.data
    result = evaluation_engine.evaluate(
        data.subject_grades,
        data.attendance_grade_point,
        data.attendance_raw_percent,
    )

    response.status_code = 201
    try:
        store.append(result)
    except HistoryStoreError as e:
        logger.error(f"evaluation computed but not persisted: {e}")
        return ok(_dump(result), persisted=False, warning=str(e))
    return ok(_dump(result), persisted=True)

# ✅ [DELETE] 이력 전체 삭제 (성공/실패를 결과로 반환)
@router.delete("/history")
def clear_history(store: HistoryStore = Depends(get_store)):
    return _dump(store.clear())
