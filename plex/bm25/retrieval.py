"""
BM25 retrieval engine - ranks every document of a corpus for a query.

The engine owns its statistics: they are built once at construction and
never mutated, so one instance can serve concurrent queries without locking.
Rebuilding means constructing a new engine.
"""

import logging
import time
from typing import Any, List, Mapping, NamedTuple, Optional, Sequence

from ..config import EngineConfig
from ..errors import MalformedInputError
from .index_builder import build_corpus_statistics
from .scorer import BM25Scorer
from .stemmer import stem_all
from .tokenizer import tokenize_query

logger = logging.getLogger(__name__)


class ScoredMatch(NamedTuple):
    """One ranked document: corpus position and BM25 score (0.0 = no match)"""
    document_index: int
    score: float


class BM25Engine:
    """
    Exact sparse search over small multi-field records.

    Example:
        >>> engine = BM25Engine(
        ...     [{"city": "Boston"}, {"city": "Boston"}, {"city": "Cambridge"}],
        ...     EngineConfig(fields=("city",)),
        ... )
        >>> [m.document_index for m in engine.hits_text("boston")]
        [0, 1]
        >>> engine.contains("springfield")
        False
    """

    def __init__(self, documents: Sequence[Mapping], config: Optional[EngineConfig] = None):
        self.config = config if config is not None else EngineConfig()
        self.documents = list(documents)

        start = time.perf_counter()
        self.statistics, term_frequencies = build_corpus_statistics(
            self.documents,
            self.config.fields,
            stemming=self.config.stemming,
        )
        self.scorer = BM25Scorer(
            self.statistics,
            term_frequencies,
            k1=self.config.k1,
            b=self.config.b,
        )
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.info(
            f"BM25 index built: {self.statistics.document_count} documents, "
            f"{self.statistics.vocabulary_size} terms in {elapsed_ms:.1f} ms"
        )

    def __len__(self) -> int:
        return self.statistics.document_count

    def document(self, index: int) -> Mapping:
        return self.documents[index]

    def term_frequencies(self, index: int) -> Mapping[str, int]:
        return self.scorer.term_frequencies[index]

    def tokenize_query(self, query: str) -> List[str]:
        """Tokenize a raw query with this engine's tokenizer settings"""
        return tokenize_query(query, stemming=self.config.stemming)

    def _prepare_terms(self, query_terms: Any) -> List[str]:
        """Validate caller tokens and normalize them like indexed tokens"""
        if isinstance(query_terms, str):
            raise MalformedInputError(
                "search() expects a sequence of tokens; use search_text() for raw strings"
            )
        try:
            terms = list(query_terms)
        except TypeError:
            raise MalformedInputError(
                f"Query tokens must be a sequence of strings, got {type(query_terms).__name__}"
            ) from None
        for term in terms:
            if not isinstance(term, str):
                raise MalformedInputError(
                    f"Query tokens must be strings, got {type(term).__name__}"
                )
        terms = [t.lower() for t in terms]
        if self.config.stemming:
            terms = stem_all(terms)
        return terms

    def _rank(self, terms: List[str]) -> List[ScoredMatch]:
        matches = [
            ScoredMatch(i, self.scorer.score(terms, i))
            for i in range(self.statistics.document_count)
        ]
        # sorted() is stable, so ties stay in corpus order
        ranked = sorted(matches, key=lambda m: m.score, reverse=True)
        if ranked:
            logger.debug(f"Query {terms}: top score {ranked[0].score:.4f}")
        return ranked

    def search(self, query_terms: Sequence[str], top_k: Optional[int] = None) -> List[ScoredMatch]:
        """
        Rank all documents for a tokenized query.

        Args:
            query_terms: Query tokens (lowercased, and stemmed when the engine
                stems, before lookup)
            top_k: Keep only the first top_k matches (default: all)

        Returns:
            Every document as a ScoredMatch, sorted by score descending.
            Zero-score documents are included; equal scores keep corpus order.
        """
        _check_top_k(top_k)
        return self._rank(self._prepare_terms(query_terms))[:top_k]

    def hits(self, query_terms: Sequence[str], top_k: Optional[int] = None) -> List[ScoredMatch]:
        """Like search(), but only documents with score > 0"""
        _check_top_k(top_k)
        return _positive(self._rank(self._prepare_terms(query_terms)))[:top_k]

    def search_text(self, query: str, top_k: Optional[int] = None) -> List[ScoredMatch]:
        _check_top_k(top_k)
        return self._rank(self.tokenize_query(query))[:top_k]

    def hits_text(self, query: str, top_k: Optional[int] = None) -> List[ScoredMatch]:
        _check_top_k(top_k)
        return _positive(self._rank(self.tokenize_query(query)))[:top_k]

    def contains(self, query: str) -> bool:
        """True when at least one document matches the query (found / not found)"""
        return bool(self.hits_text(query, top_k=1))


def _check_top_k(top_k: Optional[int]) -> None:
    if top_k is not None and top_k < 0:
        raise ValueError(f"top_k must be >= 0, got {top_k}")


def _positive(ranked: List[ScoredMatch]) -> List[ScoredMatch]:
    return [m for m in ranked if m.score > 0]


__all__ = ["BM25Engine", "ScoredMatch"]
