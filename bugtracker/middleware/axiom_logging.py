"""API 요청 로깅 미들웨어 — stdlib 로거 + Axiom.

Request logging middleware.
Every API call is logged on the ``bugtracker.access`` logger; when Axiom is
configured the same event is also ingested into the Axiom dataset.
Logged: method, path, query params, request body, status code, duration and
the error message of failed responses. Large text fields are truncated.
"""

import json
import logging
import time
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from bugtracker.config import settings

access_logger = logging.getLogger("bugtracker.access")

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}

_MAX_FIELD_LENGTH = 500


def _truncate(data: Any, depth: int = 0) -> Any:
    """로그 크기 제한 — Truncate long strings (e.g. stepsToReproduce) recursively."""
    if depth > 5:
        return "..."
    if isinstance(data, str) and len(data) > _MAX_FIELD_LENGTH:
        return data[:_MAX_FIELD_LENGTH] + "...(truncated)"
    if isinstance(data, dict):
        return {k: _truncate(v, depth + 1) for k, v in data.items()}
    if isinstance(data, list):
        return [_truncate(item, depth + 1) for item in data[:20]]
    return data


def _error_message(body: bytes) -> str:
    """오류 응답 본문에서 사유 추출 — {success:false, message, errors?} envelope."""
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return body.decode("utf-8", errors="replace")[:_MAX_FIELD_LENGTH]
    if not isinstance(payload, dict):
        return str(payload)[:_MAX_FIELD_LENGTH]
    message = str(payload.get("message", payload))
    if payload.get("errors"):
        message = f"{message}: {'; '.join(map(str, payload['errors']))}"
    return message[:_MAX_FIELD_LENGTH]


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 로깅하는 미들웨어.

    Middleware that logs every API request and response.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in _SKIP_PATHS:
            return await call_next(request)

        start_time = time.time()
        method = request.method
        path = request.url.path

        request_body: Any = None
        if method in ("POST", "PUT", "PATCH"):
            body_bytes = await request.body()
            if body_bytes:
                try:
                    request_body = _truncate(json.loads(body_bytes))
                except (json.JSONDecodeError, UnicodeDecodeError):
                    request_body = "(non-json body)"

        error_detail: str | None = None
        status_code: int = 500
        try:
            response = await call_next(request)
            status_code = response.status_code

            if status_code >= 400:
                resp_body = b""
                async for chunk in response.body_iterator:
                    resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                error_detail = _error_message(resp_body)

                # 소비한 body를 다시 응답으로 반환 — Re-wrap consumed body
                response = Response(
                    content=resp_body,
                    status_code=status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            error_detail = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            log_event: dict[str, Any] = {
                "method": method,
                "path": path,
                "status_code": status_code,
                "duration_ms": round((time.time() - start_time) * 1000, 2),
            }
            if request.query_params:
                log_event["query_params"] = dict(request.query_params)
            if request_body is not None:
                log_event["request_body"] = request_body
            if error_detail:
                log_event["error"] = error_detail

            access_logger.info(
                "%s %s -> %d (%.2f ms)", method, path, status_code, log_event["duration_ms"],
                extra={"event": log_event},
            )
            self._ship(log_event)

        return response

    def _ship(self, log_event: dict[str, Any]) -> None:
        if self._client is None:
            return
        try:
            self._client.ingest_events(self._dataset, [log_event])
        except Exception:
            # 로깅 실패가 요청 처리에 영향주지 않도록 — Never break a request on log failure
            access_logger.warning("Axiom ingest failed", exc_info=True)
