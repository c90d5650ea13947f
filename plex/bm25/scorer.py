"""
BM25 scorer over precomputed corpus statistics.

BM25 (Best Match 25) is a probabilistic ranking function used for information retrieval.

Formula:
    score(q, d) = Σ idf(t) × (tf × (k1 + 1)) / (tf + k1 × (1 - b + b × dl/avgdl))

Where:
    t = each query term
    tf = term frequency of t in document d
    idf = smoothed inverse document frequency (0 for unknown terms)
    k1 = term frequency saturation parameter (default: 1.2)
    b = length normalization parameter (default: 0.75)
    dl = document length (number of tokens)
    avgdl = average document length across the corpus

Scores are sums of floats; the same query on the same corpus always gives the same
value on one machine, but results are only functionally (not bit-) identical
across platforms.
"""

from typing import Dict, List, Sequence

from .index_builder import CorpusStatistics


class BM25Scorer:
    """
    BM25 scoring against a fixed corpus.

    Reads the cached term frequency index, so scoring never re-tokenizes a document.
    """

    def __init__(
        self,
        statistics: CorpusStatistics,
        term_frequencies: Sequence[Dict[str, int]],
        k1: float = 1.2,
        b: float = 0.75,
    ):
        """
        Initialize BM25 scorer.

        Args:
            statistics: Corpus statistics from build_corpus_statistics()
            term_frequencies: Per-document term → count maps (same order as the corpus)
            k1: Term frequency saturation parameter
                Higher = more weight to term frequency
                Range: 1.2 - 2.0
                Default: 1.2 (standard)

            b: Length normalization parameter
                Higher = more penalty for long documents
                Range: 0.0 - 1.0
                Default: 0.75 (standard)
        """
        if len(term_frequencies) != statistics.document_count:
            raise ValueError(
                f"Term frequency index has {len(term_frequencies)} entries, "
                f"corpus has {statistics.document_count} documents"
            )
        self.statistics = statistics
        self.term_frequencies = term_frequencies
        self.k1 = k1
        self.b = b

        # Length normalization depends only on the document; compute it once
        avgdl = statistics.average_document_length
        self._length_norms: List[float] = [
            k1 * (1 - b + b * length / avgdl) for length in statistics.document_lengths
        ]

    def score(self, query_terms: Sequence[str], document_index: int) -> float:
        """
        Compute BM25 score of one document for a tokenized query.

        Args:
            query_terms: Tokenized query (lowercase)
            document_index: Position of the document in the corpus

        Returns:
            BM25 score >= 0 (0.0 when no query term occurs in the document)

        Raises:
            IndexError: document_index outside the corpus

        Example:
            >>> scorer.score(["boston"], 0)
            0.47000362924573...
        """
        if not 0 <= document_index < len(self.term_frequencies):
            raise IndexError(
                f"Document index {document_index} out of range "
                f"(corpus has {len(self.term_frequencies)} documents)"
            )

        doc_term_frequencies = self.term_frequencies[document_index]
        if not query_terms or not doc_term_frequencies:
            return 0.0

        length_norm = self._length_norms[document_index]
        score = 0.0

        for term in query_terms:
            tf = doc_term_frequencies.get(term, 0)
            if tf == 0:
                continue

            idf = self.statistics.idf(term)
            score += idf * (tf * (self.k1 + 1)) / (tf + length_norm)

        return score
