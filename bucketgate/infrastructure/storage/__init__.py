"""
Object storage backends.

Supports AWS S3 and any S3-compatible endpoint (R2, MinIO, Ceph) via boto3.
"""

from .client import S3Backend, StorageError, build_bucket_list, create_backend

__all__ = ["S3Backend", "StorageError", "build_bucket_list", "create_backend"]
