from typing import List, Optional
from pydantic import BaseModel, Field

class EvidenceItem(BaseModel):
    """One search hit. ``rank`` is the 1-based citation index."""
    rank: int = Field(..., ge=1)
    title: str
    snippet: str
    source_url: str

class EvidenceBundle(BaseModel):
    items: List[EvidenceItem] = Field(default_factory=list)
    summary: Optional[str] = None
