from .llm import GenerativeTextClient
from .search import EvidenceSearchClient
from .evidence import format_evidence_block, cited_ranks, unknown_citations
from .verification_service import (
    ClaimVerificationPipeline,
    PipelineRun,
    PipelineStage,
    build_synthesis_prompt,
)

__all__ = [
    "GenerativeTextClient",
    "EvidenceSearchClient",
    "format_evidence_block",
    "cited_ranks",
    "unknown_citations",
    "ClaimVerificationPipeline",
    "PipelineRun",
    "PipelineStage",
    "build_synthesis_prompt",
]
