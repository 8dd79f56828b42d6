# deployinfo/api/routes/ops.py
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel
from pydantic_core import PydanticSerializationError

from deployinfo.core.logging import get_logger
from deployinfo.core.settings import VersionSettings, get_version_settings
from deployinfo.schemas.ops import HealthResponse, InfoResponse
from deployinfo.utils.tz import rfc3339_utc, utc_now
from deployinfo.version import VersionSource, resolve_version

router = APIRouter(tags=["ops"])


def get_version_source(
    settings: Annotated[VersionSettings, Depends(get_version_settings)],
) -> VersionSource:
    return VersionSource(override=settings.VERSION, path=settings.VERSION_FILE)


def _json(model: BaseModel) -> Response | None:
    try:
        body = model.model_dump_json()
    except (PydanticSerializationError, TypeError, ValueError) as exc:
        get_logger().error(
            "response.encode_failed", model=type(model).__name__, error=str(exc)
        )
        return None
    return Response(content=body, media_type="application/json")


def _encode_error() -> JSONResponse:
    return JSONResponse(
        {"detail": "Internal server error"},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


@router.get("/info", response_model=InfoResponse)
def info(source: Annotated[VersionSource, Depends(get_version_source)]):
    payload = InfoResponse(
        version=resolve_version(source),
        deployed_at=rfc3339_utc(utc_now()),
    )
    response = _json(payload)
    if response is None:
        return _encode_error()
    get_logger().info("info.served", version=payload.version)
    return response


@router.get("/health", response_model=HealthResponse)
def health():
    response = _json(HealthResponse())
    if response is None:
        return _encode_error()
    return response
