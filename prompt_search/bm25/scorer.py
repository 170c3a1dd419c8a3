"""
BM25 scorer over weighted prompt fields.

Formula:
    idf(term) = ln(1 + (N - df + 0.5) / (df + 0.5))
    score(term, doc) = idf × (tf × (k1 + 1)) / (tf + k1 × (1 - b + b × dl/avgdl))

Where:
    tf = weighted term frequency in the prompt
    df = number of prompts containing the term
    N = corpus size
    dl = weighted prompt length
    avgdl = average weighted prompt length
    k1 = term frequency saturation parameter (default: 1.2)
    b = length normalization parameter (default: 0.75)

The "+1" inside the log keeps idf positive even for terms present in every
prompt, so scores are never negative.
"""

import math
from typing import Dict, List, Mapping, Optional


class BM25:
    """Classic Okapi BM25 with a non-negative idf."""

    def __init__(self, k1: float = 1.2, b: float = 0.75):
        """
        Args:
            k1: Term frequency saturation parameter
                Higher = more weight to repeated terms
                Range: 1.2 - 2.0

            b: Length normalization parameter
                Higher = more penalty for long prompts
                Range: 0.0 - 1.0
        """
        self.k1 = k1
        self.b = b

    @staticmethod
    def idf(document_frequency: int, corpus_size: int) -> float:
        if corpus_size <= 0:
            return 0.0
        df = min(max(document_frequency, 0), corpus_size)
        return math.log(1.0 + (corpus_size - df + 0.5) / (df + 0.5))

    def score(
        self,
        query_terms: List[str],
        doc_term_frequencies: Mapping[str, float],
        doc_length: float,
        document_frequencies: Mapping[str, int],
        corpus_size: int,
        avgdl: float,
        term_weights: Optional[Dict[str, float]] = None,
    ) -> float:
        """
        Compute the BM25 score of one prompt for a tokenized query.

        Args:
            query_terms: Stemmed query tokens
            doc_term_frequencies: Weighted term frequency map {term: tf}
            doc_length: Weighted token count of the prompt
            document_frequencies: {term: number of prompts containing it}
            corpus_size: Number of prompts in the corpus
            avgdl: Average weighted prompt length
            term_weights: Optional per-term multiplier (e.g. synonym discount)

        Returns:
            Non-negative score (0.0 when nothing matches)
        """
        if not query_terms or not doc_term_frequencies:
            return 0.0

        if avgdl > 0:
            length_norm = 1 - self.b + self.b * (doc_length / avgdl)
        else:
            length_norm = 1.0

        score = 0.0

        for term in query_terms:
            tf = doc_term_frequencies.get(term, 0)

            if tf <= 0:
                continue

            numerator = tf * (self.k1 + 1)
            denominator = tf + self.k1 * length_norm
            term_score = self.idf(document_frequencies.get(term, 0), corpus_size) * numerator / denominator

            if term_weights:
                term_score *= term_weights.get(term, 1.0)

            score += term_score

        if not math.isfinite(score) or score < 0:
            return 0.0

        return score
