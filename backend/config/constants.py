from dataclasses import dataclass

@dataclass(frozen=True)
class LLMConfig:
    REQUEST_TIMEOUT: float = 60.0

@dataclass(frozen=True)
class SearchConfig:
    """Tavily search configuration."""
    REQUEST_TIMEOUT: float = 30.0
    MAX_RESULTS: int = 5
    SEARCH_DEPTH: str = "basic"

@dataclass(frozen=True)
class PipelineConfig:
    IMAGE_MIME_TYPE: str = "image/jpeg"
    SUMMARY_PLACEHOLDER: str = "No summary available"
    # Wall-clock budget for one /verify-new request.
    REQUEST_TIMEOUT: float = 60.0

LLM_CONFIG = LLMConfig()
SEARCH_CONFIG = SearchConfig()
PIPELINE_CONFIG = PipelineConfig()
