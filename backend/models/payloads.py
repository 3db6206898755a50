from typing import Union, Sequence
from pydantic import BaseModel, ConfigDict, Field, field_validator

from exceptions import ValidationException

DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"

class ImagePayload(BaseModel):
    """Screenshot bytes as uploaded by the extension."""
    model_config = ConfigDict(frozen=True)

    data: bytes
    mime_type: str = DEFAULT_IMAGE_MIME_TYPE

    @field_validator("data")
    @classmethod
    def require_content(cls, v: bytes) -> bytes:
        if not v:
            raise ValidationException("image", "image payload is empty")
        return v

class InlineImagePart(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: bytes
    mime_type: str = DEFAULT_IMAGE_MIME_TYPE

    @classmethod
    def from_payload(cls, payload: ImagePayload) -> "InlineImagePart":
        return cls(data=payload.data, mime_type=payload.mime_type)

class TextPart(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str = Field(..., min_length=1)

PromptPart = Union[InlineImagePart, TextPart]
PromptParts = Sequence[PromptPart]
