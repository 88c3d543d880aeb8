"""
Domain models for object resolution.

These models describe what a lookup can return and the ordered set of
backends a lookup walks through. They have no dependencies on boto3,
FastAPI, or configuration. A backend is anything that can answer
``get_object`` with a LookupResult.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Protocol, Union


class MissReason(Enum):
    """
    Why a backend did not return an object.

    The HTTP layer never looks at this. Every reason renders as the same
    404, but keeping it lets tests and logs tell a missing object apart
    from a misconfigured backend.
    """
    NOT_FOUND = "not_found"
    ACCESS_DENIED = "access_denied"
    BACKEND_ERROR = "backend_error"      # Service answered with another error code
    TRANSPORT_ERROR = "transport_error"  # Never got a usable answer
    EMPTY_BODY = "empty_body"
    UNEXPECTED_ERROR = "unexpected_error"


@dataclass(frozen=True)
class Found:
    """An object body, fully read into memory."""
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class Miss:
    """
    No object from this backend.

    Frozen because results are values. Two misses for the same reason
    with the same detail are the same miss.
    """
    reason: MissReason = MissReason.NOT_FOUND
    detail: str = ""


LookupResult = Union[Found, Miss]


class StorageBackend(Protocol):
    """
    Interface for one object-storage bucket.

    Implementations must never raise for a per-request failure: absent
    objects, auth errors and network errors all come back as Miss.
    """

    name: str

    async def get_object(self, key: str) -> LookupResult:
        """Read one object by key."""
        ...


class BucketList:
    """
    Ordered, read-only sequence of backends.

    Order is search priority: index 0 is consulted first. Built once at
    startup and shared by every request, so there is no way to add,
    remove, or reorder entries after construction.
    """

    __slots__ = ("_backends",)

    def __init__(self, backends: Iterable[StorageBackend] = ()) -> None:
        object.__setattr__(self, "_backends", tuple(backends))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("BucketList is immutable")

    def __iter__(self) -> Iterator[StorageBackend]:
        return iter(self._backends)

    def __len__(self) -> int:
        return len(self._backends)

    def __getitem__(self, index: int) -> StorageBackend:
        return self._backends[index]

    def __repr__(self) -> str:
        names = ", ".join(backend.name for backend in self._backends)
        return f"BucketList([{names}])"

    @property
    def names(self) -> list[str]:
        return [backend.name for backend in self._backends]
