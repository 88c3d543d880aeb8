"""
Health check endpoint.

Answers on the root path with a constant body. It does not touch any
backend, so it stays green even when every bucket is unreachable or none
are configured. Load balancers only need to know the process is serving.
"""

from fastapi import APIRouter, status
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get(
    "/",
    response_class=PlainTextResponse,
    status_code=status.HTTP_200_OK,
    summary="Liveness check",
    description="Returns 200 OK if the process is running. Does not check backends.",
)
async def health_check() -> PlainTextResponse:
    return PlainTextResponse("OK")
