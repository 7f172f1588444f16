import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)

# 이 시간(ms)을 넘는 요청은 WARNING 으로 기록 (이력 파일 100건 읽기/쓰기 기준 여유값)
SLOW_REQUEST_MS = 500


def elapsed_ms(request: Request) -> int:
    """요청 시작 시각(request.state.started_at) 기준 경과 시간. 시작 기록이 없으면 0"""
    started = getattr(request.state, "started_at", None)
    if started is None:
        return 0
    return int((time.perf_counter() - started) * 1000)


class TimingMiddleware(BaseHTTPMiddleware):
    """
    요청 처리 시간 측정
    - 시작 시각을 request.state 에 남겨 에러 핸들러도 latency_ms 를 채울 수 있게 함
    - 응답 헤더 X-Latency-Ms 추가, 느린 요청은 WARNING
    """

    async def dispatch(self, request: Request, call_next):
        request.state.started_at = time.perf_counter()
        response = await call_next(request)

        latency = elapsed_ms(request)
        response.headers["X-Latency-Ms"] = str(latency)
        if latency > SLOW_REQUEST_MS:
            logger.warning(f"slow request {request.method} {request.url.path}: {latency}ms")
        return response
