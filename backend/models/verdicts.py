from pydantic import BaseModel, ConfigDict, Field

class VerificationVerdict(BaseModel):
    """Synthesis output. The model writes the explanation under ``response``."""
    model_config = ConfigDict(strict=True, extra="ignore", populate_by_name=True)

    validity: bool
    explanation: str = Field(..., alias="response")

class VerificationResult(BaseModel):
    """Complete response from /verify-new endpoint."""
    question: str
    claim: str
    validity: bool
    response: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "question": "Was the 1969 moon landing faked?",
                "claim": "The moon landing was faked",
                "validity": False,
                "response": "Multiple independent sources confirm the landing took place [1][2].",
            }
        }
    )
