import re
from typing import Set

from models import EvidenceBundle, EvidenceItem

_CITATION = re.compile(r"\[(\d+)\]")


def format_evidence_item(item: EvidenceItem) -> str:
    return f"[{item.rank}] {item.title}\n{item.snippet}\nSource: {item.source_url}"


def format_evidence_block(bundle: EvidenceBundle) -> str:
    """Render evidence as numbered citation blocks separated by blank lines."""
    return "\n\n".join(format_evidence_item(item) for item in bundle.items)


def cited_ranks(text: str) -> Set[int]:
    """Bracketed citation indices referenced in ``text``."""
    return {int(m) for m in _CITATION.findall(text or "")}


def unknown_citations(text: str, bundle: EvidenceBundle) -> Set[int]:
    supplied = {item.rank for item in bundle.items}
    return cited_ranks(text) - supplied
