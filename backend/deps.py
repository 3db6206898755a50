from services import ClaimVerificationPipeline, EvidenceSearchClient, GenerativeTextClient


def get_verification_pipeline() -> ClaimVerificationPipeline:
    _llm = GenerativeTextClient()
    _search = EvidenceSearchClient()
    return ClaimVerificationPipeline(_llm, _search)
