"""Unit test configuration - prompt fixtures"""

import os

import pytest

# prompt_search.main configures logging on import; keep tests off the filesystem
os.environ.setdefault("LOG_FILE", "")

from prompt_search.models import Prompt


def _build_prompt(**overrides) -> Prompt:
    """Build a prompt with test defaults"""
    data = {
        "id": "test-prompt",
        "title": "Test Prompt",
        "description": "Test prompt description",
        "category": "ideation",
        "tags": [],
        "content": "Prompt content",
        "author": "Jeffrey Emanuel",
        "version": "1.0.0",
        "created": "2025-01-01",
        "featured": False,
    }
    data.update(overrides)
    return Prompt(**data)


@pytest.fixture
def make_prompt():
    """Factory for one-off prompts"""
    return _build_prompt


@pytest.fixture
def prompts():
    """
    Five-prompt catalog used across recommendation tests.

    - alpha-docs: featured, documentation, [docs, readme]
    - beta-test: testing, [tests, coverage]
    - gamma-docs: documentation, [docs, style]
    - delta-debug: debugging, [debug, fix], different author
    - epsilon-docs: featured, documentation, [docs, api, readme]
    """
    return [
        _build_prompt(id="alpha-docs", title="Alpha Docs", category="documentation",
                    tags=["docs", "readme"], featured=True),
        _build_prompt(id="beta-test", title="Beta Test", category="testing",
                    tags=["tests", "coverage"]),
        _build_prompt(id="gamma-docs", title="Gamma Docs", category="documentation",
                    tags=["docs", "style"]),
        _build_prompt(id="delta-debug", title="Delta Debug", category="debugging",
                    tags=["debug", "fix"], author="Another Author"),
        _build_prompt(id="epsilon-docs", title="Epsilon Docs", category="documentation",
                    tags=["docs", "api", "readme"], featured=True),
    ]


@pytest.fixture
def search_corpus():
    """Prompts with distinct wording for search tests"""
    return [
        _build_prompt(
            id="bug-hunter",
            title="Bug Hunter",
            description="Find and fix bugs in your code",
            category="debugging",
            tags=["debugging", "review"],
            content="Read the code carefully and fix every bug you find.",
        ),
        _build_prompt(
            id="readme-writer",
            title="README Writer",
            description="Write clear documentation for a project",
            category="documentation",
            tags=["docs", "readme"],
            content="Draft a README with install and usage sections.",
        ),
        _build_prompt(
            id="test-writer",
            title="Test Writer",
            description="Write unit tests",
            category="testing",
            tags=["testing"],
            content="Add tests for untested code paths.",
        ),
        _build_prompt(
            id="idea-wizard",
            title="Idea Wizard",
            description="Brainstorm improvements",
            category="ideation",
            tags=["brainstorming"],
            content="List thirty ideas and pick the best five.",
            featured=True,
        ),
    ]
