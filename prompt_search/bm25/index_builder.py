"""
BM25 index builder - weighted term frequencies per prompt.

Each prompt field is tokenized separately and every occurrence counts
`FIELD_WEIGHTS[field]` times, so a title hit is worth three content hits.
Document length is the weighted token count; the average length and the
document frequencies are computed once per corpus pass.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Set

from ..models import Prompt
from .tokenizer import tokenize

logger = logging.getLogger(__name__)

FIELD_WEIGHTS: Dict[str, float] = {
    "title": 3.0,
    "description": 2.0,
    "tags": 1.5,
    "content": 1.0,
}


@dataclass
class IndexedPrompt:
    prompt: Prompt
    term_frequencies: Dict[str, float]
    field_terms: Dict[str, Set[str]]
    length: float


@dataclass
class SearchIndex:
    entries: List[IndexedPrompt] = field(default_factory=list)
    document_frequencies: Dict[str, int] = field(default_factory=dict)
    avgdl: float = 0.0
    field_weights: Dict[str, float] = field(default_factory=lambda: dict(FIELD_WEIGHTS))

    @property
    def size(self) -> int:
        return len(self.entries)


def _field_text(prompt: Prompt, name: str) -> str:
    if name == "tags":
        return " ".join(prompt.tags or [])
    return getattr(prompt, name, "") or ""


def build_prompt_index(
    corpus: Optional[Sequence[Prompt]],
    field_weights: Optional[Mapping[str, float]] = None,
) -> SearchIndex:
    """
    Build a BM25 index over a prompt corpus.

    Args:
        corpus: Prompts in registry order (None is treated as empty)
        field_weights: Per-field multipliers (default: FIELD_WEIGHTS)

    Returns:
        SearchIndex whose entries keep corpus order

    Example:
        >>> index = build_prompt_index([Prompt(id="p", title="Fix bugs",
        ...     description="Debug it", category="debugging")])
        >>> index.entries[0].term_frequencies
        {'fix': 3.0, 'bug': 3.0, 'debug': 2.0}
    """
    weights = dict(field_weights or FIELD_WEIGHTS)
    entries: List[IndexedPrompt] = []
    document_frequencies: Dict[str, int] = defaultdict(int)
    total_length = 0.0

    for prompt in corpus or []:
        term_frequencies: Dict[str, float] = defaultdict(float)
        field_terms: Dict[str, Set[str]] = {}
        length = 0.0

        for name, weight in weights.items():
            tokens = tokenize(_field_text(prompt, name))
            field_terms[name] = set(tokens)
            for term in tokens:
                term_frequencies[term] += weight
            length += weight * len(tokens)

        for term in term_frequencies:
            document_frequencies[term] += 1

        entries.append(IndexedPrompt(
            prompt=prompt,
            term_frequencies=dict(term_frequencies),
            field_terms=field_terms,
            length=length,
        ))
        total_length += length

    avgdl = total_length / len(entries) if entries else 0.0

    logger.debug(
        f"Built prompt index: {len(entries)} prompts, "
        f"{len(document_frequencies)} unique terms, avgdl={avgdl:.2f}"
    )

    return SearchIndex(
        entries=entries,
        document_frequencies=dict(document_frequencies),
        avgdl=avgdl,
        field_weights=weights,
    )
