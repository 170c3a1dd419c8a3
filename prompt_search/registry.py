"""
Prompt registry: loads the catalog from a JSON file and owns the search index.

Accepted file shapes:
- a JSON list of prompt objects
- an object {"version": "...", "prompts": [...]}

Invalid entries are skipped (and counted); duplicate ids keep the first
occurrence. The search index is rebuilt only when the registry reloads.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, ValidationError

from .bm25.index_builder import SearchIndex, build_prompt_index
from .models import Prompt

logger = logging.getLogger(__name__)


class RegistryError(Exception):
    """Registry file missing or not parseable"""
    pass


class PromptRecord(BaseModel):
    """Schema for one registry entry"""
    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: str = ""
    category: str = Field(..., min_length=1)
    tags: List[str] = Field(default_factory=list)
    content: str = ""
    author: str = ""
    version: str = "1.0.0"
    created: str = ""
    featured: bool = False

    def to_prompt(self) -> Prompt:
        return Prompt(**self.model_dump())


def parse_prompts(items: object) -> Tuple[List[Prompt], int]:
    """
    Validate raw registry entries.

    Returns:
        (valid prompts in file order, number of rejected entries)
    """
    if not isinstance(items, list):
        raise RegistryError("Registry 'prompts' must be a list")

    prompts: List[Prompt] = []
    seen = set()
    invalid = 0

    for position, item in enumerate(items):
        try:
            record = PromptRecord.model_validate(item)
        except ValidationError as e:
            invalid += 1
            logger.warning(f"Skipping invalid registry entry #{position}: {e.error_count()} error(s)")
            continue

        if record.id in seen:
            logger.warning(f"Skipping duplicate prompt id '{record.id}' (entry #{position})")
            continue

        seen.add(record.id)
        prompts.append(record.to_prompt())

    return prompts, invalid


class PromptRegistry:
    """In-memory prompt catalog backed by a JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.version: Optional[str] = None
        self.invalid_count = 0
        self._prompts: List[Prompt] = []
        self._by_id: Dict[str, Prompt] = {}
        self._index: SearchIndex = build_prompt_index([])

    @property
    def prompts(self) -> List[Prompt]:
        return list(self._prompts)

    @property
    def index(self) -> SearchIndex:
        return self._index

    def __len__(self) -> int:
        return len(self._prompts)

    def get(self, prompt_id: str) -> Optional[Prompt]:
        return self._by_id.get(prompt_id)

    def reload(self) -> "PromptRegistry":
        """
        Re-read the registry file and rebuild the search index.

        Raises:
            RegistryError: File missing, unreadable or not valid UTF-8 JSON
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except FileNotFoundError as e:
            raise RegistryError(f"Registry file not found: {self.path}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise RegistryError(f"Cannot read registry file: {self.path}: {e}") from e
        except json.JSONDecodeError as e:
            raise RegistryError(f"Registry file is not valid JSON: {self.path}: {e}") from e

        if isinstance(payload, dict):
            version = payload.get("version")
            items = payload.get("prompts")
        else:
            version = None
            items = payload

        prompts, invalid = parse_prompts(items)

        self.version = str(version) if version is not None else None
        self.invalid_count = invalid
        self._prompts = prompts
        self._by_id = {p.id: p for p in prompts}
        self._index = build_prompt_index(prompts)

        logger.info(
            f"Loaded {len(prompts)} prompts from {self.path}"
            + (f" ({invalid} invalid skipped)" if invalid else "")
        )
        return self


def load_registry(path: Union[str, Path]) -> PromptRegistry:
    """Create a registry and load it from `path`."""
    return PromptRegistry(path).reload()
