from pydantic import BaseModel, ConfigDict, Field

class ClaimExtraction(BaseModel):
    """Output of the extraction stage.

    Both fields are trimmed and must be non-blank. ``question`` is expected
    to be self-contained (no "this post" or "the image"); that is asked of
    the model, not checked here.
    """
    model_config = ConfigDict(strict=True, extra="ignore", str_strip_whitespace=True)

    extracted_claim: str = Field(..., min_length=1)
    question: str = Field(..., min_length=1)
