"""Storage configuration schemas for oss-adapter."""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class OssStorageConfig(BaseModel):
    """Configuration block for an Aliyun OSS disk."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    driver: Literal["oss"] = "oss"
    access_id: str = Field(..., description="AccessKey ID")
    access_key: str = Field(..., description="AccessKey secret")
    endpoint: str = Field(..., description="OSS endpoint host or URL")
    bucket: str = Field(..., description="Bucket name")
    prefix: Optional[str] = Field(
        default=None, description="Root prefix prepended to every key"
    )
    cname: Optional[str] = Field(
        default=None, description="Custom domain used for generated URLs"
    )
    security_token: Optional[str] = Field(
        default=None, description="STS security token"
    )
    options: Dict[str, Any] = Field(
        default_factory=dict, description="Default request options"
    )
