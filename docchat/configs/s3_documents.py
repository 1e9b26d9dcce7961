"""
S3 documents bucket configuration.

Settings for raw upload storage and signed download URL issuance.
`endpoint_url` lets the same client talk to MinIO or LocalStack.

Dependencies: pydantic_settings
System role: Object storage configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class S3DocumentsSettings(BaseSettings):
    """Settings for S3 documents bucket operations."""

    model_config = SettingsConfigDict(
        env_prefix="S3_DOCUMENTS_",
        case_sensitive=False,
        extra="ignore",
    )

    bucket: str = Field(
        default="docchat-documents",
        description="S3 bucket holding uploaded files",
    )
    region: str = Field(default="us-east-1", description="AWS region for S3 bucket")
    endpoint_url: str | None = Field(
        default=None,
        description="Custom S3 endpoint (MinIO, LocalStack); None uses AWS",
    )
