import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from config import logger
from config.constants import PIPELINE_CONFIG
from exceptions import SnapfactException, UnexpectedPipelineError, VerificationFailed
from middleware.context import get_request_id
from models import (
    ClaimExtraction,
    EvidenceBundle,
    ImagePayload,
    InlineImagePart,
    TextPart,
    VerificationResult,
    VerificationVerdict,
)
from prompts import EXTRACTION_PROMPT, SYNTHESIS_PROMPT
from utils.parsing import parse_model_output
from .evidence import format_evidence_block, unknown_citations
from .llm import GenerativeTextClient
from .search import EvidenceSearchClient


class PipelineStage(str, Enum):
    EXTRACTING = "extracting"
    SEARCHING = "searching"
    SYNTHESIZING = "synthesizing"
    DONE = "done"
    FAILED = "failed"


_TRANSITIONS: Dict[PipelineStage, FrozenSet[PipelineStage]] = {
    PipelineStage.EXTRACTING: frozenset({PipelineStage.SEARCHING, PipelineStage.FAILED}),
    PipelineStage.SEARCHING: frozenset({PipelineStage.SYNTHESIZING, PipelineStage.FAILED}),
    PipelineStage.SYNTHESIZING: frozenset({PipelineStage.DONE, PipelineStage.FAILED}),
    PipelineStage.DONE: frozenset(),
    PipelineStage.FAILED: frozenset(),
}


@dataclass
class PipelineRun:
    """Per-request state. Never shared between invocations."""
    request_id: Optional[str] = None
    stage: PipelineStage = PipelineStage.EXTRACTING
    history: List[PipelineStage] = field(default_factory=lambda: [PipelineStage.EXTRACTING])
    started_at: float = field(default_factory=time.monotonic)

    def advance(self, target: PipelineStage) -> None:
        if target not in _TRANSITIONS[self.stage]:
            raise RuntimeError(f"Illegal pipeline transition {self.stage.value} -> {target.value}")
        logger.info("[%s] %s -> %s", self.request_id, self.stage.value, target.value)
        self.stage = target
        self.history.append(target)

    @property
    def elapsed(self) -> float:
        return round(time.monotonic() - self.started_at, 2)


def build_synthesis_prompt(claim: str, bundle: EvidenceBundle) -> str:
    return SYNTHESIS_PROMPT.format(
        claim=claim,
        evidence=format_evidence_block(bundle),
        summary=bundle.summary or PIPELINE_CONFIG.SUMMARY_PLACEHOLDER,
    )


class ClaimVerificationPipeline:
    """Screenshot -> claim -> web evidence -> verdict.

    Stages run strictly in sequence. Any failure aborts the run and is
    re-raised as VerificationFailed; a partial result is never returned.
    """

    def __init__(self, llm: GenerativeTextClient, search: EvidenceSearchClient):
        self.llm = llm
        self.search = search

    async def verify(self, image: ImagePayload) -> VerificationResult:
        run = PipelineRun(request_id=get_request_id())

        try:
            extraction = await self._extract_claim(image)
            run.advance(PipelineStage.SEARCHING)

            bundle = await self._gather_evidence(extraction.question)
            run.advance(PipelineStage.SYNTHESIZING)

            verdict = await self._synthesize_verdict(extraction.extracted_claim, bundle)
            run.advance(PipelineStage.DONE)
        except SnapfactException as e:
            raise self._fail(run, e) from e
        except Exception as e:
            logger.exception("[%s] Unexpected error in %s", run.request_id, run.stage.value)
            raise self._fail(run, UnexpectedPipelineError(e)) from e

        logger.info(
            "[%s] Verification completed for claim '%s...' in %s seconds.",
            run.request_id, extraction.extracted_claim[:50], run.elapsed
        )
        return VerificationResult(
            question=extraction.question,
            claim=extraction.extracted_claim,
            validity=verdict.validity,
            response=verdict.explanation,
        )

    def _fail(self, run: PipelineRun, error: SnapfactException) -> VerificationFailed:
        failed_stage = run.stage
        run.advance(PipelineStage.FAILED)
        logger.error(
            "[%s] Verification failed in %s after %ss: %s %s",
            run.request_id, failed_stage.value, run.elapsed, type(error).__name__, error.details
        )
        return VerificationFailed(failed_stage.value, error)

    async def _extract_claim(self, image: ImagePayload) -> ClaimExtraction:
        parts = [InlineImagePart.from_payload(image), TextPart(text=EXTRACTION_PROMPT)]
        text = await self.llm.generate(parts)
        extraction = parse_model_output(text, ClaimExtraction)
        logger.info("Extracted question: %s", extraction.question)
        return extraction

    async def _gather_evidence(self, question: str) -> EvidenceBundle:
        return await self.search.search(question, include_answer_summary=True)

    async def _synthesize_verdict(self, claim: str, bundle: EvidenceBundle) -> VerificationVerdict:
        prompt = build_synthesis_prompt(claim, bundle)
        text = await self.llm.generate([TextPart(text=prompt)])
        verdict = parse_model_output(text, VerificationVerdict)

        if stray := unknown_citations(verdict.explanation, bundle):
            logger.warning(
                "Verdict cites evidence that was not supplied: %s (supplied %d items)",
                sorted(stray), len(bundle.items)
            )
        return verdict
