"""AWS adapters."""

from docchat.boundary.aws.s3_client import S3ObjectStore

__all__ = ["S3ObjectStore"]
