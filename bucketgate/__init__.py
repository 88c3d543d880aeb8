"""
bucketgate - serve objects from an ordered list of S3-compatible buckets.

This package contains the complete application:
- core: Framework-agnostic resolution logic
- infrastructure: S3 storage backends
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
