"""
Object endpoint.

Every path other than ``/`` is treated as an object key, whatever the
method. Nothing is ever written; a POST reads just like a GET. The key is the
path with its leading ``/`` removed and is passed to the backends as-is:

    GET /images/logo.png  ->  key "images/logo.png"

The first bucket holding the key wins. Clients only ever see the object
bytes with a 200, or a plain-text 404.
"""

import logging

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import PlainTextResponse

from ...core.resolution.models import Found
from ...core.resolution.resolver import ResolutionCancelled, key_from_path, resolve
from ..dependencies import BucketListDep

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND_BODY = "Not Found"

# Every method reads; writes are never forwarded to a bucket
OBJECT_METHODS = ["GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]


def not_found() -> PlainTextResponse:
    return PlainTextResponse(NOT_FOUND_BODY, status_code=status.HTTP_404_NOT_FOUND)


@router.api_route(
    "/{object_path:path}",
    methods=OBJECT_METHODS,
    summary="Fetch an object",
    description="Looks the key up in each configured bucket in priority order.",
    responses={
        200: {"description": "Raw object bytes"},
        404: {"description": "No bucket holds this key"},
    },
)
async def get_object(request: Request, bucket_list: BucketListDep) -> Response:
    """
    Resolve the request path against the bucket list.

    Any method lands here except GET on ``/``, which the health route
    answers. The body is returned without a content type; the gateway
    doesn't guess what the bytes are.
    """
    try:
        # scope["path"] is already percent-decoded; boto3 re-encodes the key
        key = key_from_path(request.scope["path"])
    except ValueError:
        # Non-GET on the root path: there is no key to look up
        return not_found()

    try:
        result = await resolve(key, bucket_list, is_cancelled=request.is_disconnected)
    except ResolutionCancelled:
        logger.debug("Client disconnected during lookup", extra={"key": key})
        return not_found()

    if isinstance(result, Found):
        return Response(content=result.data, status_code=status.HTTP_200_OK)

    return not_found()
