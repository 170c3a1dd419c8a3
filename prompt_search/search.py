"""
Prompt search: BM25 ranking with optional synonym expansion and filters.

All functions are pure: they read the corpus (or a prebuilt index) and
return freshly allocated results. Callers that search the same corpus
repeatedly can build the index once with `build_prompt_index` and pass it in.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .bm25.index_builder import SearchIndex, build_prompt_index
from .bm25.scorer import BM25
from .bm25.stemmer import stem
from .bm25.synonyms import SynonymMap, default_synonyms
from .bm25.tokenizer import split_words
from .models import Prompt, ScoredResult

logger = logging.getLogger(__name__)

# Synonym-only query terms count half as much as words the user typed
SYNONYM_DISCOUNT = 0.5

DEFAULT_SEARCH_LIMIT = 20


def _query_terms(
    query: Optional[str],
    expand_synonyms: bool,
    synonyms: Optional[SynonymMap],
) -> Tuple[List[str], Dict[str, float]]:
    """Stemmed, de-duplicated query terms plus per-term weights."""
    words = list(dict.fromkeys(split_words(query or "")))
    original_terms = [stem(w) for w in words]
    weights: Dict[str, float] = {term: 1.0 for term in original_terms}

    if expand_synonyms and words:
        synonym_map = synonyms if synonyms is not None else default_synonyms
        for word in synonym_map.expand(words)[len(words):]:
            for term in (stem(w) for w in split_words(word)):
                weights.setdefault(term, SYNONYM_DISCOUNT)

    return list(weights), weights


def score_prompts(
    query: Optional[str],
    corpus: Optional[Sequence[Prompt]] = None,
    expand_synonyms: bool = False,
    synonyms: Optional[SynonymMap] = None,
    index: Optional[SearchIndex] = None,
    scorer: Optional[BM25] = None,
) -> List[ScoredResult]:
    """
    Score every prompt in the corpus against a query.

    Args:
        query: Free-text query (None is treated as empty)
        corpus: Prompts to score; ignored when `index` is given
        expand_synonyms: Add synonym terms at SYNONYM_DISCOUNT weight
        synonyms: Synonym table (default: DEFAULT_SYNONYMS)
        index: Prebuilt index for the corpus
        scorer: BM25 instance (default: k1=1.2, b=0.75)

    Returns:
        One ScoredResult per prompt, in corpus order. Zero scores included.
    """
    if index is None:
        index = build_prompt_index(corpus)
    scorer = scorer or BM25()

    terms, weights = _query_terms(query, expand_synonyms, synonyms)

    results: List[ScoredResult] = []
    for entry in index.entries:
        score = scorer.score(
            query_terms=terms,
            doc_term_frequencies=entry.term_frequencies,
            doc_length=entry.length,
            document_frequencies=index.document_frequencies,
            corpus_size=index.size,
            avgdl=index.avgdl,
            term_weights=weights,
        )
        matched_fields = [
            name for name, field_terms in entry.field_terms.items()
            if score > 0 and any(term in field_terms for term in terms)
        ]
        results.append(ScoredResult(prompt=entry.prompt, score=score, matched_fields=matched_fields))

    return results


def rank(results: Sequence[ScoredResult]) -> List[ScoredResult]:
    """Sort by score descending; equal scores keep their input order."""
    return sorted(results, key=lambda r: r.score, reverse=True)


def search_prompts(
    query: Optional[str],
    corpus: Optional[Sequence[Prompt]] = None,
    limit: Optional[int] = DEFAULT_SEARCH_LIMIT,
    category: Optional[str] = None,
    tags: Optional[Sequence[str]] = None,
    expand_synonyms: bool = True,
    synonyms: Optional[SynonymMap] = None,
    index: Optional[SearchIndex] = None,
) -> List[ScoredResult]:
    """
    Search prompts by relevance.

    Zero-score prompts are dropped. `category` must match exactly; `tags`
    matches when the prompt carries any of them.

    Returns:
        Matching prompts sorted by score (descending), at most `limit`
    """
    scored = score_prompts(
        query,
        corpus,
        expand_synonyms=expand_synonyms,
        synonyms=synonyms,
        index=index,
    )

    wanted_tags = set(tags or [])
    matches = [
        r for r in scored
        if r.score > 0
        and (not category or r.prompt.category == category)
        and (not wanted_tags or wanted_tags.intersection(r.prompt.tags))
    ]

    ranked = rank(matches)
    if limit is not None:
        ranked = ranked[:max(limit, 0)]

    logger.debug(f"Search '{query}': {len(matches)} matches, returning {len(ranked)}")
    return ranked


def quick_search(
    query: Optional[str],
    corpus: Optional[Sequence[Prompt]] = None,
    limit: int = 5,
    index: Optional[SearchIndex] = None,
) -> List[Prompt]:
    """Lightweight search for autocomplete: no synonyms, prompts only."""
    if not query or not query.strip():
        return []
    return [
        r.prompt for r in search_prompts(query, corpus, limit=limit, expand_synonyms=False, index=index)
    ]
