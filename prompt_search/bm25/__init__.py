"""
BM25 (Best Match 25) ranking for prompt search.

Components:
- tokenizer: word splitting, stopword removal, stemming
- stemmer: Snowball stemmer (NLTK)
- synonyms: injectable bidirectional synonym map
- index_builder: weighted per-field term frequencies over a prompt corpus
- scorer: Okapi BM25 with non-negative idf
"""

from .tokenizer import split_words, tokenize
from .stemmer import stem
from .synonyms import DEFAULT_SYNONYMS, SynonymMap, default_synonyms
from .scorer import BM25
from .index_builder import FIELD_WEIGHTS, SearchIndex, build_prompt_index

__all__ = [
    "split_words",
    "tokenize",
    "stem",
    "DEFAULT_SYNONYMS",
    "SynonymMap",
    "default_synonyms",
    "BM25",
    "FIELD_WEIGHTS",
    "SearchIndex",
    "build_prompt_index",
]
