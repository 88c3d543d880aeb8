"""
FastAPI dependency injection.

The bucket list is built once in the application factory and stored on
``app.state``. Routes receive it through a dependency instead of reading
a module global, which means:
- Tests can hand the app any list of fake backends
- Two app instances never share backends by accident
- Nothing a route receives can be mutated
"""

from typing import Annotated

from fastapi import Depends, Request

from ..core.resolution.models import BucketList


def get_bucket_list(request: Request) -> BucketList:
    """Provide the shared, read-only bucket list."""
    return request.app.state.bucket_list


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
BucketListDep = Annotated[BucketList, Depends(get_bucket_list)]
