"""
services/history_store.py

- 평가 이력 저장소 (JSON 파일 1개, 최신순, 최대 100건)
- append 는 읽기 → 맨 앞 삽입 → 100건 초과분 삭제 → 저장 순서로 동작합니다.
  같은 프로세스 안에서는 Lock 으로 단일 writer 를 보장하지만,
  여러 프로세스가 동시에 쓰면 마지막 저장이 이깁니다(유실 가능, 허용된 제약).
- 파일이 없거나 읽을 수 없거나 깨졌으면 "이력 없음"으로 취급합니다(예외 없음).
"""

import json
import logging
import os
import tempfile
import threading
from typing import Iterable, List, Optional

from pydantic import TypeAdapter, ValidationError

from schemas.enums import EvaluationStatus
from schemas.evaluation import ClearResult, EvaluationResult, HistoryStats

logger = logging.getLogger(__name__)

HISTORY_CAPACITY = 100

_records_adapter = TypeAdapter(List[EvaluationResult])


class HistoryStoreError(Exception):
    """이력 파일 저장 실패"""


class HistoryStore:
    def __init__(self, path: str, capacity: int = HISTORY_CAPACITY):
        self.path = path
        self.capacity = capacity
        self._lock = threading.Lock()

    # ==========================================================
    # 읽기
    # ==========================================================
    def load_all(self) -> List[EvaluationResult]:
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                payload = json.load(f)
            return _records_adapter.validate_python(payload)
        except (OSError, ValueError, ValidationError) as e:
            # json.JSONDecodeError 는 ValueError 의 하위 타입
            logger.warning(f"history file unreadable, treated as empty: {self.path} ({e})")
            return []

    def latest(self) -> Optional[EvaluationResult]:
        records = self.load_all()
        return records[0] if records else None

    # ==========================================================
    # 쓰기
    # ==========================================================
    def append(self, record: EvaluationResult) -> List[EvaluationResult]:
        with self._lock:
            records = [record] + self.load_all()
            records = records[: self.capacity]
            self._save(records)
        return records

    def clear(self) -> ClearResult:
        with self._lock:
            try:
                self._save([])
            except HistoryStoreError as e:
                return ClearResult(success=False, message=str(e))
        logger.info(f"history cleared: {self.path}")
        return ClearResult(success=True, message="History cleared successfully")

    def _save(self, records: List[EvaluationResult]) -> None:
        data = _records_adapter.dump_python(records, mode="json", by_alias=True)
        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            # 임시 파일에 먼저 쓰고 교체 → 중간에 실패해도 기존 파일은 온전함
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".history-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.exception(f"failed to write history file: {self.path}")
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise HistoryStoreError(f"Could not save history: {e}") from e


# ==========================================================
# 통계
# ==========================================================
def aggregate_stats(records: Iterable[EvaluationResult]) -> HistoryStats:
    """INVALID 는 total/평균에는 포함, 상태별 카운트에는 미포함"""
    records = list(records)
    total = len(records)
    if total == 0:
        return HistoryStats()

    counts = {status: 0 for status in EvaluationStatus}
    for r in records:
        counts[r.status] += 1

    return HistoryStats(
        total=total,
        excellent_count=counts[EvaluationStatus.EXCELLENT],
        passed_count=counts[EvaluationStatus.PASSED],
        failed_count=counts[EvaluationStatus.FAILED],
        avg_final_grade=sum(r.final_grade for r in records) / total,
        avg_attendance=sum(r.attendance_raw_percent for r in records) / total,
    )
