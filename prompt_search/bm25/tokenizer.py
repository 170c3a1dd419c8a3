"""
Tokenizer for prompt search.

Tokenization pipeline:
1. Lowercase conversion
2. Extract alphanumeric words, any script (including inner hyphens)
3. Filter stopwords and pure numbers
4. Apply stemming (tokenize only)

`split_words` stops before stemming so synonym lookup can run on the
words a user actually typed.
"""

import re
from typing import List, Optional

from .stemmer import stem

# English stopwords (Lucene standard list)
STOPWORDS = frozenset([
    'a', 'an', 'and', 'are', 'as', 'at', 'be', 'but', 'by',
    'for', 'if', 'in', 'into', 'is', 'it',
    'no', 'not', 'of', 'on', 'or', 'such',
    'that', 'the', 'their', 'then', 'there', 'these',
    'they', 'this', 'to', 'was', 'will', 'with'
])

_WORD_RE = re.compile(r'[^\W_]+(?:-[^\W_]+)*')
_NUMBER_RE = re.compile(r'^[0-9-]+$')


def split_words(text: Optional[str]) -> List[str]:
    """
    Split text into lowercase words without stopwords or pure numbers.

    Examples:
        >>> split_words("Fix the flaky CI tests in 2 steps")
        ['fix', 'flaky', 'ci', 'tests', 'steps']
        >>> split_words(None)
        []
    """
    if not text:
        return []

    words = _WORD_RE.findall(text.lower())
    return [
        w for w in words
        if w not in STOPWORDS and not _NUMBER_RE.match(w)
    ]


def tokenize(text: Optional[str]) -> List[str]:
    """
    Tokenize text for BM25 scoring (stopwords removed, words stemmed).

    Examples:
        >>> tokenize("Debugging flaky tests")
        ['debug', 'flaki', 'test']
        >>> tokenize("   ")
        []
    """
    return [stem(w) for w in split_words(text)]
