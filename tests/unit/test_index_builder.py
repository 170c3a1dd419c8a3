"""
Unit tests for the weighted prompt index.
"""

import pytest
from prompt_search.bm25.index_builder import FIELD_WEIGHTS, build_prompt_index


class TestBuildPromptIndex:

    def test_field_weights_applied(self, make_prompt):
        """Title counts 3x, description 2x, tags 1.5x, content 1x"""
        prompt = make_prompt(title="Fix bugs", description="Debug it", tags=["review"], content="code")
        entry = build_prompt_index([prompt]).entries[0]

        assert entry.term_frequencies["fix"] == FIELD_WEIGHTS["title"]
        assert entry.term_frequencies["debug"] == FIELD_WEIGHTS["description"]
        assert entry.term_frequencies["review"] == FIELD_WEIGHTS["tags"]
        assert entry.term_frequencies["code"] == FIELD_WEIGHTS["content"]
        # 2 title tokens, 1 description, 1 tag, 1 content
        assert entry.length == pytest.approx(3.0 * 2 + 2.0 + 1.5 + 1.0)

    def test_repeated_terms_accumulate(self, make_prompt):
        prompt = make_prompt(title="Review", description="Review code", tags=[], content="review")
        entry = build_prompt_index([prompt]).entries[0]

        assert entry.term_frequencies["review"] == pytest.approx(3.0 + 2.0 + 1.0)

    def test_corpus_statistics(self, make_prompt):
        corpus = [
            make_prompt(id="a", title="Alpha", description="", content=""),
            make_prompt(id="b", title="Alpha Beta", description="", content=""),
        ]
        index = build_prompt_index(corpus)

        assert index.size == 2
        assert index.document_frequencies["alpha"] == 2
        assert index.document_frequencies["beta"] == 1
        assert index.avgdl == pytest.approx((3.0 + 6.0) / 2)
        assert [e.prompt.id for e in index.entries] == ["a", "b"]

    def test_field_terms_recorded(self, make_prompt):
        entry = build_prompt_index([make_prompt(title="Alpha", tags=["docs"])]).entries[0]

        assert "alpha" in entry.field_terms["title"]
        assert "doc" in entry.field_terms["tags"]

    def test_custom_weights(self, make_prompt):
        prompt = make_prompt(title="Alpha", description="", content="")
        entry = build_prompt_index([prompt], field_weights={"title": 10.0}).entries[0]

        assert entry.term_frequencies == {"alpha": 10.0}

    def test_empty_corpus(self):
        for corpus in ([], None):
            index = build_prompt_index(corpus)
            assert index.size == 0
            assert index.avgdl == 0.0
