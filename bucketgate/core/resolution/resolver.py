"""
Ordered fallback lookup across backends.

The resolver asks each backend in priority order and stops at the first
one that has the object. Backends are never queried in parallel: a later
bucket only sees a request after every earlier bucket has answered.
"""

import logging
from typing import Awaitable, Callable, Optional

from .models import BucketList, Found, LookupResult, Miss, MissReason

logger = logging.getLogger(__name__)


CancelCheck = Callable[[], Awaitable[bool]]


class ResolutionCancelled(Exception):
    """Raised when the caller went away before all backends were tried."""
    pass


def key_from_path(path: str) -> str:
    """
    Turn a request path into an object key.

    Strips exactly one leading separator, so ``/a/b.txt`` becomes
    ``a/b.txt`` and ``//x`` becomes ``/x``. The root path is served by the
    health route and must not get here.
    """
    if not path.startswith("/") or path == "/":
        raise ValueError(f"Cannot derive an object key from path {path!r}")
    return path[1:]


async def resolve(
    key: str,
    backends: BucketList,
    *,
    is_cancelled: Optional[CancelCheck] = None,
) -> LookupResult:
    """
    Return the first backend hit for ``key``, or a Miss.

    Args:
        key: Object key, already stripped of its leading separator
        backends: Backends in priority order (never mutated)
        is_cancelled: Optional async check run before each backend
            attempt. When it returns True no further backend is started.

    Returns:
        Found from the first backend that has the object. Otherwise the
        Miss from the last backend tried, or a plain NOT_FOUND miss when
        there are no backends.

    Raises:
        ResolutionCancelled: is_cancelled reported True
    """
    result: LookupResult = Miss(MissReason.NOT_FOUND, "no backends configured")

    for index, backend in enumerate(backends):
        if is_cancelled is not None and await is_cancelled():
            raise ResolutionCancelled(
                f"Lookup for {key!r} abandoned before backend {index}"
            )

        result = await backend.get_object(key)

        if isinstance(result, Found):
            logger.debug(
                "Resolved key",
                extra={
                    "key": key,
                    "backend": backend.name,
                    "priority": index,
                    "size_bytes": result.size,
                }
            )
            return result

    return result
