"""FastAPI application exposing scoring and verification endpoints."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from fastapi import APIRouter, Body, Depends, FastAPI, HTTPException, Request, status
from pydantic import ValidationError

from sifter import __version__
from sifter.core.errors import SifterError
from sifter.core.logging_config import get_logger
from sifter.domain.verification import Submission
from sifter.scoring.batch import BatchItem
from sifter.service import SifterService

log = get_logger(__name__)
router = APIRouter()

T = TypeVar("T")


def get_service(request: Request) -> SifterService:
    return request.app.state.service


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _server_error(action: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"{action} failed")


def _guarded(action: str, fn: Callable[[], T]) -> T:
    try:
        return fn()
    except HTTPException:
        raise
    except ValidationError:
        raise _bad_request(f"Invalid {action.lower()} request.") from None
    except SifterError as exc:
        raise _bad_request(str(exc)) from exc
    except Exception as exc:
        log.exception("%s failed", action)
        raise _server_error(action) from exc


def _metrics_from(payload: dict[str, Any]) -> dict[str, Any]:
    metrics = payload.get("metrics", {})
    if not isinstance(metrics, dict):
        raise _bad_request("Invalid metrics. Expected an object of metric scores.")
    return metrics


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/analyze")
def analyze(
    payload: dict[str, Any] = Body(...),
    service: SifterService = Depends(get_service),
) -> dict[str, Any]:
    log.info("Handling incoming request for /analyze endpoint")
    text = payload.get("input")
    if not isinstance(text, str) or not text.strip():
        raise _bad_request("Invalid input. Expected a string.")
    metrics = _metrics_from(payload)
    return _guarded("Analysis", lambda: service.analyze(text, metrics))


@router.post("/batch")
def batch(
    payload: dict[str, Any] = Body(...),
    service: SifterService = Depends(get_service),
) -> dict[str, Any]:
    log.info("Handling incoming request for /batch endpoint")
    csv_text = payload.get("csv")
    projects = payload.get("projects")
    limit = service.settings.batch_max_projects
    if not isinstance(csv_text, str) and not isinstance(projects, list):
        raise _bad_request("Invalid batch. Expected 'csv' text or a 'projects' list.")
    if isinstance(projects, list) and len(projects) > limit:
        raise _bad_request(f"Batch exceeds the limit of {limit} projects.")

    def build() -> list[BatchItem]:
        if isinstance(csv_text, str):
            return service.parse_batch(csv_text)
        return [BatchItem.model_validate(item) for item in projects]

    return _guarded("Batch", lambda: service.batch(build()).model_dump())


@router.post("/verify")
async def verify(
    payload: dict[str, Any] = Body(...),
    service: SifterService = Depends(get_service),
) -> dict[str, Any]:
    log.info("Handling incoming request for /verify endpoint")
    raw = payload.get("submission")
    if not isinstance(raw, dict):
        raise _bad_request("Invalid submission. Expected an object.")
    mode = payload.get("mode")
    if mode is not None and not isinstance(mode, str):
        raise _bad_request("Invalid mode. Expected a string.")
    submission = _guarded("Verification", lambda: Submission.model_validate(raw))
    try:
        run = await service.verify(submission, mode)
    except SifterError as exc:
        raise _bad_request(str(exc)) from exc
    except Exception as exc:
        log.exception("Verification failed")
        raise _server_error("Verification") from exc
    return run.model_dump(mode="json")


def create_app(service: SifterService | None = None) -> FastAPI:
    app = FastAPI(
        title="Sifter API",
        description="Composite risk scoring and submission verification for crypto projects.",
        version=__version__,
    )
    app.state.service = service or SifterService.from_settings()
    app.include_router(router)
    return app


app = create_app()
