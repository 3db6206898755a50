from .payloads import (
    ImagePayload,
    InlineImagePart,
    TextPart,
    PromptPart,
    PromptParts,
    DEFAULT_IMAGE_MIME_TYPE,
)
from .claims import ClaimExtraction
from .evidence import EvidenceItem, EvidenceBundle
from .verdicts import VerificationVerdict, VerificationResult

__all__ = [
    "ImagePayload",
    "InlineImagePart",
    "TextPart",
    "PromptPart",
    "PromptParts",
    "DEFAULT_IMAGE_MIME_TYPE",

    "ClaimExtraction",

    "EvidenceItem",
    "EvidenceBundle",

    "VerificationVerdict",
    "VerificationResult",
]
