"""Prompt catalog search and recommendations."""

from .models import (
    Prompt,
    RecommendationPreferences,
    RecommendationResult,
    RecommendationSignal,
    ScoredResult,
    UserSignals,
)
from .search import quick_search, score_prompts, search_prompts
from .recommendations import (
    get_for_you_recommendations,
    get_recommendations_from_history,
    get_related_recommendations,
)

__all__ = [
    "Prompt",
    "RecommendationPreferences",
    "RecommendationResult",
    "RecommendationSignal",
    "ScoredResult",
    "UserSignals",
    "quick_search",
    "score_prompts",
    "search_prompts",
    "get_for_you_recommendations",
    "get_recommendations_from_history",
    "get_related_recommendations",
]
