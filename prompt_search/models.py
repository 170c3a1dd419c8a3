"""
Plain data types shared by search, recommendations and the HTTP layer.

Everything here converts to JSON-safe dicts via `to_dict()`.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Literal, Optional

SignalKind = Literal["view", "save", "run"]


@dataclass
class Prompt:
    """A catalog prompt. Treated as read-only by the engine."""
    id: str
    title: str
    description: str
    category: str
    tags: List[str] = field(default_factory=list)
    content: str = ""
    author: str = ""
    version: str = "1.0.0"
    created: str = ""
    featured: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ScoredResult:
    """Single search hit"""
    prompt: Prompt
    score: float
    matched_fields: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "prompt": self.prompt.to_dict(),
            "score": self.score,
            "matched_fields": list(self.matched_fields),
        }


@dataclass
class RecommendationResult:
    """Recommended prompt with the heuristics that fired for it"""
    prompt: Prompt
    score: float
    reasons: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "prompt": self.prompt.to_dict(),
            "score": self.score,
            "reasons": list(self.reasons),
        }


@dataclass
class RecommendationSignal:
    """One user interaction with a prompt"""
    prompt: Prompt
    kind: SignalKind = "view"


@dataclass
class RecommendationPreferences:
    tags: List[str] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)
    exclude_tags: List[str] = field(default_factory=list)
    exclude_categories: List[str] = field(default_factory=list)

    def has_positive(self) -> bool:
        """True when the user asked for specific tags or categories."""
        return bool(self.tags or self.categories)


@dataclass
class UserSignals:
    """Separate interaction lists as collected by a client."""
    viewed: List[Prompt] = field(default_factory=list)
    saved: List[Prompt] = field(default_factory=list)
    runs: List[Prompt] = field(default_factory=list)
    preferences: Optional[RecommendationPreferences] = None
