"""
S3-compatible storage backend.

Each backend wraps one bucket on one endpoint with its own credentials.
It answers a single question - "do you have this key?" - and never raises
for a per-request failure. Whatever goes wrong (absent object, bad
credentials, unreachable endpoint) comes back as a Miss carrying the
reason, so the resolver can move on to the next bucket.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Optional

import boto3
from anyio import to_thread
from botocore import UNSIGNED
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ...core.resolution.models import BucketList, Found, LookupResult, Miss, MissReason

logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"

_NOT_FOUND_CODES = frozenset({"NoSuchKey", "NotFound", "NoSuchBucket", "404"})
_ACCESS_DENIED_CODES = frozenset({
    "AccessDenied",
    "AllAccessDisabled",
    "ExpiredToken",
    "InvalidAccessKeyId",
    "SignatureDoesNotMatch",
    "403",
})


class StorageError(Exception):
    """Raised when a storage backend cannot be constructed."""
    pass


@dataclass(frozen=True)
class StorageConfig:
    """
    Connection details for one S3-compatible bucket.

    endpoint_url switches the client to a custom endpoint (MinIO, R2, ...)
    where region is only the signing region. Without it, region must be
    a real AWS region.
    """
    bucket_name: str
    region: str = DEFAULT_REGION
    endpoint_url: Optional[str] = None
    access_key_id: str = ""
    secret_access_key: str = ""

    @property
    def is_anonymous(self) -> bool:
        return not self.access_key_id and not self.secret_access_key


@lru_cache()
def known_regions() -> frozenset[str]:
    """Every S3 region botocore knows about, across all partitions."""
    session = boto3.session.Session()
    regions: set[str] = set()
    for partition in session.get_available_partitions():
        regions.update(session.get_available_regions("s3", partition_name=partition))
    return frozenset(regions)


def resolve_region(config: StorageConfig) -> str:
    """
    Pick the region name the client is created with.

    Custom endpoints take the configured name as-is. Named regions that
    botocore doesn't recognise fall back to us-east-1.
    """
    if config.endpoint_url is not None:
        return config.region

    if config.region in known_regions():
        return config.region

    logger.warning(
        "Unknown region, falling back to default",
        extra={
            "bucket": config.bucket_name,
            "region": config.region,
            "fallback": DEFAULT_REGION,
        }
    )
    return DEFAULT_REGION


def classify_client_error(error: ClientError) -> MissReason:
    """Map an S3 error code to the reason recorded on the Miss."""
    code = str(error.response.get("Error", {}).get("Code", ""))
    if code in _NOT_FOUND_CODES:
        return MissReason.NOT_FOUND
    if code in _ACCESS_DENIED_CODES:
        return MissReason.ACCESS_DENIED
    return MissReason.BACKEND_ERROR


class S3Backend:
    """
    One bucket behind the S3 API.

    Uses boto3 because every backend we target speaks the S3 protocol.
    boto3 clients are thread-safe, so a single client is shared by all
    concurrent requests. Its connection pool lives inside the client.

    boto3 is synchronous. Calls run in a worker thread so a slow bucket
    never blocks the event loop, and a cancelled request stops waiting
    on the thread instead of holding the loop hostage.
    """

    def __init__(self, config: StorageConfig) -> None:
        self._config = config
        self.name = config.bucket_name

        boto_config = Config(
            signature_version=UNSIGNED if config.is_anonymous else "s3v4",
            # One request per lookup; the next bucket is the fallback
            retries={"max_attempts": 1, "mode": "standard"},
            s3={"addressing_style": "path" if config.endpoint_url else "auto"},
        )

        try:
            self._s3_client = boto3.session.Session().client(
                "s3",
                endpoint_url=config.endpoint_url,
                aws_access_key_id=None if config.is_anonymous else config.access_key_id,
                aws_secret_access_key=None if config.is_anonymous else config.secret_access_key,
                region_name=resolve_region(config),
                config=boto_config,
            )
        except (BotoCoreError, ValueError) as e:
            raise StorageError(
                f"Could not create client for bucket {config.bucket_name!r}: {e}"
            ) from e

        logger.info(
            "Initialized S3 storage backend",
            extra={
                "bucket": config.bucket_name,
                "region": self._s3_client.meta.region_name,
                "endpoint": self._s3_client.meta.endpoint_url,
                "anonymous": config.is_anonymous,
            }
        )

    @property
    def client(self):
        """The underlying boto3 client."""
        return self._s3_client

    def __repr__(self) -> str:
        return f"S3Backend(bucket={self.name!r}, endpoint={self._s3_client.meta.endpoint_url!r})"

    async def get_object(self, key: str) -> LookupResult:
        """
        Fetch an object, reading the whole body into memory.

        Returns Found with the body, or Miss with the reason the object
        couldn't be returned. Never raises for request-level failures.
        """
        try:
            return await to_thread.run_sync(
                self._fetch, key, abandon_on_cancel=True
            )
        except ClientError as e:
            return Miss(classify_client_error(e), str(e))
        except BotoCoreError as e:
            return Miss(MissReason.TRANSPORT_ERROR, str(e))
        except Exception as e:
            return Miss(MissReason.UNEXPECTED_ERROR, f"{type(e).__name__}: {e}")

    def _fetch(self, key: str) -> LookupResult:
        response = self._s3_client.get_object(Bucket=self.name, Key=key)

        body = response.get("Body")
        if body is None:
            return Miss(MissReason.EMPTY_BODY, f"No body returned for {key!r}")

        try:
            data = body.read()
        finally:
            body.close()

        return Found(data)


# ---------------------------------------------------------------------------
# Factory Functions
# ---------------------------------------------------------------------------

def create_backend(config: StorageConfig) -> S3Backend:
    """
    Create one storage backend.

    Raises:
        StorageError: The client could not be built from this config
    """
    return S3Backend(config)


def build_bucket_list(configs: Iterable[StorageConfig]) -> BucketList:
    """
    Build every backend eagerly, keeping configuration order.

    Called once at startup. Any backend that can't be built aborts the
    whole list so a broken config never starts half-working.
    """
    bucket_list = BucketList(create_backend(config) for config in configs)

    logger.info(
        "Built bucket list",
        extra={"count": len(bucket_list), "buckets": bucket_list.names}
    )

    return bucket_list
