"""
Unit tests for the JSON prompt registry.
"""

import json

import pytest
from prompt_search.registry import PromptRegistry, RegistryError, load_registry, parse_prompts


def _entry(prompt_id, **overrides):
    data = {
        "id": prompt_id,
        "title": prompt_id.replace("-", " ").title(),
        "description": "A prompt",
        "category": "ideation",
        "tags": ["ideas"],
        "content": "Prompt content",
        "author": "Jeffrey Emanuel",
        "version": "1.0.0",
        "created": "2025-01-01",
    }
    data.update(overrides)
    return data


def _write(path, payload):
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestParsePrompts:

    def test_valid_entries(self):
        prompts, invalid = parse_prompts([_entry("idea-wizard", featured=True), _entry("bug-hunter")])

        assert [p.id for p in prompts] == ["idea-wizard", "bug-hunter"]
        assert prompts[0].featured is True
        assert prompts[1].featured is False
        assert invalid == 0

    def test_invalid_entries_skipped(self):
        items = [
            _entry("ok"),
            {"id": "no-title", "category": "ideation"},
            _entry("bad-tags", tags="not-a-list"),
            "not an object",
        ]
        prompts, invalid = parse_prompts(items)

        assert [p.id for p in prompts] == ["ok"]
        assert invalid == 3

    def test_duplicate_ids_keep_first(self):
        prompts, _ = parse_prompts([_entry("dup", title="First"), _entry("dup", title="Second")])

        assert len(prompts) == 1
        assert prompts[0].title == "First"

    def test_non_list_rejected(self):
        with pytest.raises(RegistryError):
            parse_prompts({"id": "x"})


class TestPromptRegistry:

    def test_load_list_file(self, tmp_path):
        path = _write(tmp_path / "prompts.json", [_entry("a"), _entry("b")])
        registry = load_registry(path)

        assert len(registry) == 2
        assert registry.version is None
        assert registry.get("a").id == "a"
        assert registry.get("missing") is None
        assert registry.index.size == 2

    def test_load_object_file(self, tmp_path):
        path = _write(tmp_path / "prompts.json", {"version": "2025.01", "prompts": [_entry("a")]})
        registry = load_registry(path)

        assert registry.version == "2025.01"
        assert [p.id for p in registry.prompts] == ["a"]

    def test_invalid_count(self, tmp_path):
        path = _write(tmp_path / "prompts.json", [_entry("a"), {"id": "broken"}])

        assert load_registry(path).invalid_count == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(RegistryError):
            load_registry(tmp_path / "nope.json")

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "prompts.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(RegistryError):
            load_registry(path)

    def test_non_utf8_file(self, tmp_path):
        path = tmp_path / "prompts.json"
        path.write_bytes(b'[{"id": "a", "title": "\xff\xfe", "category": "x"}]')

        with pytest.raises(RegistryError):
            PromptRegistry(path).reload()

    def test_directory_path(self, tmp_path):
        with pytest.raises(RegistryError):
            PromptRegistry(tmp_path).reload()

    def test_prompts_key_not_list(self, tmp_path):
        path = _write(tmp_path / "prompts.json", {"prompts": "nope"})

        with pytest.raises(RegistryError):
            load_registry(path)

    def test_reload_rebuilds_index(self, tmp_path):
        path = _write(tmp_path / "prompts.json", [_entry("a")])
        registry = load_registry(path)

        _write(path, [_entry("a"), _entry("b"), _entry("c")])
        registry.reload()

        assert len(registry) == 3
        assert registry.index.size == 3
        assert registry.get("c") is not None

    def test_failed_reload_keeps_previous_state(self, tmp_path):
        path = _write(tmp_path / "prompts.json", [_entry("a")])
        registry = load_registry(path)

        path.write_text("[", encoding="utf-8")
        with pytest.raises(RegistryError):
            registry.reload()

        assert len(registry) == 1
        assert registry.index.size == 1

    def test_empty_before_load(self, tmp_path):
        registry = PromptRegistry(tmp_path / "prompts.json")

        assert len(registry) == 0
        assert registry.index.size == 0
