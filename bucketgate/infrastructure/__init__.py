"""
Infrastructure layer - external service integrations.

- storage: S3-compatible object storage backends (boto3)

These wrappers translate between boto3 responses and our lookup results.
"""
