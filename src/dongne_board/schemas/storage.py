"""Image upload schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dongne_board.core.settings import settings

# Room for a "data:<mime>;base64," prefix in front of the encoded bytes.
DATA_URL_HEADER_ALLOWANCE = 64


def max_encoded_length(max_bytes: int) -> int:
    """Longest base64 string that can decode to at most ``max_bytes``."""
    return -(-max_bytes // 3) * 4 + DATA_URL_HEADER_ALLOWANCE


class ImageUpload(BaseModel):
    """Base64 image payload, optionally prefixed with a data URL header."""

    base64: str = Field(..., min_length=1)
    mime_type: str = Field(..., description='e.g. "image/jpeg", "image/png"')

    model_config = ConfigDict(extra="forbid")

    @field_validator("base64")
    @classmethod
    def validate_encoded_size(cls, v: str) -> str:
        if len(v) > max_encoded_length(settings.max_upload_bytes):
            raise ValueError("Image exceeds the upload size limit")
        return v


class StoredObject(BaseModel):
    url: str
    key: str
