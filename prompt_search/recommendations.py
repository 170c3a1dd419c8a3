"""
Prompt recommendations.

Three entry points:
- get_related_recommendations: prompts similar to one source prompt
  (tag overlap + normalized BM25 + category/author/featured boosts)
- get_recommendations_from_history: prompts similar to what a user viewed,
  saved or ran, shaped by declared preferences
- get_for_you_recommendations: assembles history from separate
  viewed/saved/runs lists and delegates to the history builder

Weights below are tuning defaults. Every returned result has a positive
score and at least one human-readable reason.
"""

import logging
import math
from typing import Dict, List, Optional, Sequence, Set, Tuple, Union

from .bm25.index_builder import SearchIndex
from .models import (
    Prompt,
    RecommendationPreferences,
    RecommendationResult,
    RecommendationSignal,
    SignalKind,
    UserSignals,
)
from .search import score_prompts

logger = logging.getLogger(__name__)

TAG_OVERLAP_WEIGHT = 0.6
BM25_WEIGHT = 0.4
CATEGORY_BOOST = 0.5
AUTHOR_BOOST = 0.2
FEATURED_BOOST = 0.15

# save > run > view
SIGNAL_WEIGHTS: Dict[str, float] = {
    "save": 2.0,
    "run": 1.5,
    "view": 1.0,
}

SIGNAL_REASONS: Dict[str, str] = {
    "save": "Similar to your saved prompts",
    "run": "Similar to prompts you ran",
    "view": "Similar to prompts you viewed",
}

PREFERRED_TAG_WEIGHT = 0.75
PREFERRED_CATEGORY_WEIGHT = 1.0
FEATURED_PICK_SCORE = 1.0

DEFAULT_RECOMMENDATION_LIMIT = 5

HistoryEntry = Union[Prompt, RecommendationSignal]


def _lower_set(values: Optional[Sequence[str]]) -> Set[str]:
    return {v.lower() for v in values or [] if v}


def _shared_tags(source: Prompt, candidate: Prompt) -> List[str]:
    source_tags = _lower_set(source.tags)
    shared = []
    seen = set()
    for tag in candidate.tags or []:
        key = tag.lower()
        if key in source_tags and key not in seen:
            seen.add(key)
            shared.append(tag)
    return shared


def _structural_similarity(source: Prompt, candidate: Prompt) -> Tuple[float, List[str]]:
    """Tag overlap, same category and same author, with reasons."""
    score = 0.0
    reasons: List[str] = []

    shared = _shared_tags(source, candidate)
    if shared:
        score += len(shared) * TAG_OVERLAP_WEIGHT
        noun = "tag" if len(shared) == 1 else "tags"
        reasons.append(f"Shares {len(shared)} {noun}: {', '.join(shared)}")

    if source.category and candidate.category == source.category:
        score += CATEGORY_BOOST
        reasons.append(f"Same category: {candidate.category}")

    if source.author and candidate.author == source.author:
        score += AUTHOR_BOOST
        reasons.append(f"Same author: {candidate.author}")

    return score, reasons


def _rank(results: List[RecommendationResult], limit: Optional[int]) -> List[RecommendationResult]:
    ranked = sorted(results, key=lambda r: r.score, reverse=True)
    if limit is not None:
        ranked = ranked[:max(limit, 0)]
    return ranked


def get_related_recommendations(
    source: Optional[Prompt],
    corpus: Optional[Sequence[Prompt]],
    limit: Optional[int] = DEFAULT_RECOMMENDATION_LIMIT,
    exclude_ids: Optional[Sequence[str]] = None,
    min_score: float = 0.0,
    index: Optional[SearchIndex] = None,
) -> List[RecommendationResult]:
    """
    Recommend prompts related to a single source prompt.

    score = shared_tags × 0.6 + normalized_bm25 × 0.4
            + same category 0.5 + same author 0.2
            + featured 0.15 (only for already-related prompts)

    BM25 uses "title description" of the source as the query, without
    synonym expansion, normalized by the best candidate score.

    Args:
        source: Reference prompt (never included in results)
        corpus: All prompts
        limit: Max results (None = no limit)
        exclude_ids: Prompt ids to leave out
        min_score: Results must score at least this (and always > 0)
        index: Prebuilt index for `corpus`

    Returns:
        RecommendationResult list, best first
    """
    if source is None or not (corpus or index):
        return []

    excluded = {source.id, *(exclude_ids or [])}

    query = f"{source.title or ''} {source.description or ''}"
    scored = score_prompts(query, corpus, expand_synonyms=False, index=index)
    candidates = [r for r in scored if r.prompt.id not in excluded]

    finite = [r.score for r in candidates if math.isfinite(r.score)]
    max_score = max(finite) if finite else 0.0
    if max_score <= 0:
        max_score = 1.0

    results: List[RecommendationResult] = []
    for hit in candidates:
        candidate = hit.prompt
        bm25 = hit.score / max_score if math.isfinite(hit.score) else 0.0

        structural, reasons = _structural_similarity(source, candidate)
        score = structural + bm25 * BM25_WEIGHT

        if bm25 > 0 and not reasons:
            reasons.append("Similar title and description")

        if score > 0 and candidate.featured:
            score += FEATURED_BOOST
            reasons.append("Featured prompt")

        if score <= 0 or score < min_score:
            continue

        results.append(RecommendationResult(prompt=candidate, score=score, reasons=reasons))

    ranked = _rank(results, limit)
    logger.debug(f"Related to '{source.id}': {len(results)} candidates, returning {len(ranked)}")
    return ranked


def _normalize_history(history: Optional[Sequence[HistoryEntry]]) -> List[Tuple[Prompt, str]]:
    normalized = []
    for entry in history or []:
        if isinstance(entry, RecommendationSignal):
            kind = entry.kind if entry.kind in SIGNAL_WEIGHTS else "view"
            normalized.append((entry.prompt, kind))
        elif entry is not None:
            normalized.append((entry, "view"))
    return normalized


def _is_excluded_by_preferences(candidate: Prompt, preferences: RecommendationPreferences) -> bool:
    if candidate.category and candidate.category.lower() in _lower_set(preferences.exclude_categories):
        return True
    return bool(_lower_set(candidate.tags) & _lower_set(preferences.exclude_tags))


def get_recommendations_from_history(
    history: Optional[Sequence[HistoryEntry]],
    corpus: Optional[Sequence[Prompt]],
    limit: Optional[int] = DEFAULT_RECOMMENDATION_LIMIT,
    exclude_ids: Optional[Sequence[str]] = None,
    preferences: Optional[RecommendationPreferences] = None,
) -> List[RecommendationResult]:
    """
    Recommend prompts from interaction history and declared preferences.

    Each history entry is a Prompt (treated as a view) or a
    RecommendationSignal. Its structural similarity to a candidate (plus the
    featured boost) is scaled by SIGNAL_WEIGHTS[kind] and summed. Preferred
    tags/categories add weight; excluded ones remove the candidate outright.
    A featured candidate matched only through preferences gets the boost once.

    With no history and no preferred tags/categories, only featured prompts
    are returned ("Featured pick").
    """
    signals = _normalize_history(history)
    preferences = preferences or RecommendationPreferences()

    excluded = {prompt.id for prompt, _ in signals}
    excluded.update(exclude_ids or [])

    cold_start = not signals and not preferences.has_positive()
    preferred_tags = _lower_set(preferences.tags)
    preferred_categories = _lower_set(preferences.categories)

    results: List[RecommendationResult] = []
    for candidate in corpus or []:
        if candidate.id in excluded or _is_excluded_by_preferences(candidate, preferences):
            continue

        if cold_start:
            if candidate.featured:
                results.append(RecommendationResult(
                    prompt=candidate, score=FEATURED_PICK_SCORE, reasons=["Featured pick"],
                ))
            continue

        score = 0.0
        reasons: List[str] = []
        contributing: Set[str] = set()

        for prompt, kind in signals:
            similarity, _ = _structural_similarity(prompt, candidate)
            if similarity > 0:
                if candidate.featured:
                    similarity += FEATURED_BOOST
                score += similarity * SIGNAL_WEIGHTS[kind]
                contributing.add(kind)

        for kind in ("save", "run", "view"):
            if kind in contributing:
                reasons.append(SIGNAL_REASONS[kind])

        matched_tags = [t for t in candidate.tags or [] if t.lower() in preferred_tags]
        if matched_tags:
            score += len(matched_tags) * PREFERRED_TAG_WEIGHT
            reasons.append(f"Matches your preferred tags: {', '.join(matched_tags)}")

        if candidate.category and candidate.category.lower() in preferred_categories:
            score += PREFERRED_CATEGORY_WEIGHT
            reasons.append(f"Matches your preferred category: {candidate.category}")

        if score > 0 and candidate.featured:
            if not contributing:
                score += FEATURED_BOOST
            reasons.append("Featured prompt")

        if score > 0:
            results.append(RecommendationResult(prompt=candidate, score=score, reasons=reasons))

    ranked = _rank(results, limit)
    logger.debug(
        f"History recommendations: {len(signals)} signals, cold_start={cold_start}, "
        f"{len(results)} candidates, returning {len(ranked)}"
    )
    return ranked


def build_history(signals: Optional[UserSignals]) -> List[RecommendationSignal]:
    """Flatten viewed/saved/runs lists into kind-tagged signals."""
    if signals is None:
        return []
    history: List[RecommendationSignal] = []
    groups: Tuple[Tuple[List[Prompt], SignalKind], ...] = (
        (signals.viewed, "view"),
        (signals.saved, "save"),
        (signals.runs, "run"),
    )
    for prompts, kind in groups:
        history.extend(RecommendationSignal(prompt=p, kind=kind) for p in prompts or [])
    return history


def get_for_you_recommendations(
    signals: Optional[UserSignals],
    corpus: Optional[Sequence[Prompt]],
    limit: Optional[int] = DEFAULT_RECOMMENDATION_LIMIT,
    exclude_ids: Optional[Sequence[str]] = None,
) -> List[RecommendationResult]:
    """Single "for you" entry point over viewed/saved/runs + preferences."""
    return get_recommendations_from_history(
        build_history(signals),
        corpus,
        limit=limit,
        exclude_ids=exclude_ids,
        preferences=signals.preferences if signals else None,
    )
