"""
Query synonym expansion.

A `SynonymMap` wraps a plain `token -> [synonyms]` table and expands query
words in both directions: "fix" pulls in "debug", and "debug" pulls back
"fix". Expansion is a single hop; synonyms of synonyms are not followed.

The table is injected by the caller. `DEFAULT_SYNONYMS` holds the catalog
vocabulary used when nothing else is supplied.
"""

from typing import Dict, Iterable, List, Mapping, Optional

DEFAULT_SYNONYMS: Dict[str, List[str]] = {
    # Abbreviations
    "fix": ["debug", "repair", "resolve", "patch"],
    "docs": ["documentation", "readme", "guide", "manual"],
    "cli": ["terminal", "command-line", "shell", "console"],
    "api": ["endpoint", "interface", "rest"],
    "perf": ["performance", "speed", "optimize", "latency"],
    "ui": ["interface", "frontend", "design"],
    # Concepts
    "brainstorm": ["ideate", "ideas", "ideation"],
    "improve": ["enhance", "optimize", "refine"],
    "refactor": ["restructure", "cleanup", "reorganize"],
    "test": ["testing", "tests", "coverage", "spec"],
    "debug": ["troubleshoot", "diagnose"],
    "bug": ["defect", "issue", "error"],
    "review": ["audit", "critique", "inspect"],
    # Actions
    "add": ["create", "insert", "new"],
    "remove": ["delete", "drop"],
    "update": ["modify", "change", "edit"],
    "write": ["author", "draft", "compose"],
    # Domain terms
    "agent": ["ai", "bot", "assistant"],
    "prompt": ["instruction", "template"],
    "code": ["programming", "source", "implementation"],
}


class SynonymMap:
    """
    Bidirectional, single-hop synonym lookup.

    Keys and synonyms are lowercased on construction, so lookups are
    case-insensitive.
    """

    def __init__(self, mapping: Optional[Mapping[str, Iterable[str]]] = None):
        self._forward: Dict[str, List[str]] = {}
        self._reverse: Dict[str, List[str]] = {}

        for key, synonyms in (mapping or {}).items():
            key = key.lower()
            values = self._forward.setdefault(key, [])
            for synonym in synonyms:
                synonym = synonym.lower()
                if synonym and synonym != key and synonym not in values:
                    values.append(synonym)
                    self._reverse.setdefault(synonym, []).append(key)

    def __contains__(self, token: str) -> bool:
        token = token.lower()
        return token in self._forward or token in self._reverse

    def __len__(self) -> int:
        return len(self._forward)

    def get(self, token: str) -> List[str]:
        """Forward synonyms for `token`, or an empty list."""
        return list(self._forward.get(token.lower(), []))

    def expand(self, tokens: Iterable[str]) -> List[str]:
        """
        Expand tokens with forward synonyms and reverse mappings.

        Original tokens come first, in input order; the result has no
        duplicates.

        Example:
            >>> SynonymMap(DEFAULT_SYNONYMS).expand(["debug"])
            ['debug', 'troubleshoot', 'diagnose', 'fix']
        """
        originals = list(tokens)
        expanded: List[str] = []
        seen = set()

        def _add(token: str) -> None:
            if token not in seen:
                seen.add(token)
                expanded.append(token)

        for token in originals:
            _add(token)

        for token in originals:
            lowered = token.lower()
            for synonym in self._forward.get(lowered, []):
                _add(synonym)
            for key in self._reverse.get(lowered, []):
                _add(key)

        return expanded


default_synonyms = SynonymMap(DEFAULT_SYNONYMS)
