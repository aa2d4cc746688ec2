"""
delete_client.handler — Delete client REST API Lambda.

Routes:
    DELETE /clients/{ci}   delete the client from every client table, emit ClientDeleted
    GET    /               liveness text

The service is bootstrapped on the first invocation of an execution
environment and reused across warm starts. If the secrets cannot be fetched
the invocation fails and no route is dispatched.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import unquote

from aws_lambda_powertools import Logger, Tracer
from aws_lambda_powertools.logging import correlation_paths
from client_store import DeleteClientService, StorageError, bootstrap

logger = Logger(service="delete-client")
tracer = Tracer()

_HEALTH_TEXT = "Delete Client Service Running"
_CLIENTS_PATH_PREFIX = "/clients/"
_CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}

# Bootstrapped once per execution environment, reused across warm starts
_service: DeleteClientService | None = None


def get_service() -> DeleteClientService:
    """Bootstrap on first use. SecretFetchError propagates and leaves no service behind."""
    global _service
    if _service is None:
        _service = bootstrap()
    return _service


def _response(status_code: int, body: dict[str, Any]) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json", **_CORS_HEADERS},
        "body": json.dumps(body),
    }


def _text_response(status_code: int, text: str) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "text/plain", **_CORS_HEADERS},
        "body": text,
    }


def _error(status_code: int, summary: str, *, code: str, **details: Any) -> dict[str, Any]:
    return _response(status_code, {"message": summary, "error": {"code": code, **details}})


def _http_method(event: dict[str, Any]) -> str:
    method = event.get("httpMethod")
    if not method:
        method = event.get("requestContext", {}).get("http", {}).get("method")
    return str(method or "").upper()


def _request_path(event: dict[str, Any]) -> str:
    path = event.get("path")
    if not path:
        path = event.get("requestContext", {}).get("http", {}).get("path")
    return str(path or "").rstrip("/")


def _path_ci(event: dict[str, Any], path: str) -> str | None:
    path_params = event.get("pathParameters") or {}
    raw = path_params.get("ci") if isinstance(path_params, dict) else None
    if raw is None and path.startswith(_CLIENTS_PATH_PREFIX):
        raw = unquote(path.removeprefix(_CLIENTS_PATH_PREFIX))
    if raw is None:
        return None
    ci = str(raw).strip()
    if not ci or "/" in ci:
        return None
    return ci


def _handle_delete(service: DeleteClientService, *, ci: str) -> dict[str, Any]:
    result = service.orchestrator.delete_client(ci)
    if result.succeeded:
        return _response(200, {"message": "Client deleted"})

    cause = result.cause
    return _error(
        500,
        "Error deleting client",
        code="STORAGE_ERROR",
        table=result.table,
        message=str(cause.cause if isinstance(cause, StorageError) else cause),
    )


@logger.inject_lambda_context(
    correlation_id_path=correlation_paths.API_GATEWAY_REST, clear_state=True
)
@tracer.capture_lambda_handler
def lambda_handler(event: dict[str, Any], _context: Any) -> dict[str, Any]:
    service = get_service()

    method = _http_method(event)
    path = _request_path(event)

    # Bootstrap gates the health check too; a process without secrets never serves.
    if method == "GET" and path == "":
        return _text_response(200, _HEALTH_TEXT)

    if method == "DELETE" and (path.startswith(_CLIENTS_PATH_PREFIX) or path == "/clients"):
        ci = _path_ci(event, path)
        if ci is None:
            return _error(
                400,
                "Error deleting client",
                code="BAD_REQUEST",
                message="ci must be a single non-empty path segment",
            )
        logger.append_keys(ci=ci)
        try:
            return _handle_delete(service, ci=ci)
        except Exception as exc:
            logger.exception("Unhandled delete client error")
            return _error(500, "Error deleting client", code="INTERNAL_ERROR", message=str(exc))

    return _error(
        405, "Unsupported route", code="METHOD_NOT_ALLOWED", message=f"{method} {path or '/'}"
    )
