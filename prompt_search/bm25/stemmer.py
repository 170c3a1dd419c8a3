"""
Snowball Stemmer for English (via NLTK).

Query and prompt text go through the same stemmer so that
"documenting", "documented" and "documentation" land on comparable roots.

Examples:
- "strategies" → "strategi"
- "debugging" → "debug"
- "running" → "run"
"""

from nltk.stem.snowball import SnowballStemmer

_stemmer = SnowballStemmer('english')


def stem(word: str) -> str:
    """
    Stem a single lowercase word.

    Examples:
        >>> stem("debugging")
        'debug'
        >>> stem("prompts")
        'prompt'
    """
    return _stemmer.stem(word)
