"""
BM25 index builder - one pass over the corpus for global statistics.

Produces the corpus-wide document frequencies, smoothed IDF weights and
average document length, plus a per-document term frequency map that the
scorer reads instead of re-tokenizing documents at query time.

IDF formula (smoothed, never negative for df <= N):
    idf(t) = ln((N - df(t) + 0.5) / (df(t) + 0.5) + 1)
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Sequence, Tuple

from ..errors import EmptyCorpusError
from .tokenizer import tokenize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CorpusStatistics:
    """Read-only global statistics for one corpus"""
    document_count: int
    document_frequency: Mapping[str, int]
    inverse_document_frequency: Mapping[str, float]
    average_document_length: float
    document_lengths: Tuple[int, ...]

    def idf(self, term: str) -> float:
        """IDF weight of a term (0.0 for terms never seen in the corpus)"""
        return self.inverse_document_frequency.get(term, 0.0)

    @property
    def vocabulary_size(self) -> int:
        return len(self.document_frequency)


def smoothed_idf(document_count: int, document_frequency: int) -> float:
    return math.log(
        (document_count - document_frequency + 0.5) / (document_frequency + 0.5) + 1
    )


def build_corpus_statistics(
    documents: Sequence[Mapping],
    fields: Sequence[str],
    stemming: bool = False,
) -> Tuple[CorpusStatistics, List[Dict[str, int]]]:
    """
    Build corpus statistics and the term frequency index.

    Args:
        documents: Field-bearing records
        fields: Record fields to tokenize
        stemming: Apply Snowball stemming to tokens

    Returns:
        (CorpusStatistics, term_frequencies) where term_frequencies[i] maps
        term → occurrence count for documents[i]

    Raises:
        EmptyCorpusError: no documents, or no tokens in any document
        MalformedInputError: a document is not a mapping of text fields

    Example:
        >>> stats, tf = build_corpus_statistics(
        ...     [{"city": "Boston"}, {"city": "Boston"}, {"city": "Cambridge"}],
        ...     fields=["city"],
        ... )
        >>> stats.document_frequency["boston"]
        2
        >>> tf[2]
        {'cambridge': 1}
    """
    document_count = len(documents)
    if document_count == 0:
        raise EmptyCorpusError("Cannot build BM25 statistics over an empty corpus")

    document_frequency: Counter = Counter()
    term_frequencies: List[Dict[str, int]] = []
    lengths: List[int] = []

    for document in documents:
        tokens = tokenize(document, fields, stemming=stemming)
        lengths.append(len(tokens))

        frequencies = Counter(tokens)
        term_frequencies.append(dict(frequencies))

        # Distinct terms only: df counts documents, not occurrences
        document_frequency.update(frequencies.keys())

    total_tokens = sum(lengths)
    if total_tokens == 0:
        raise EmptyCorpusError(
            f"Corpus of {document_count} documents contains no tokens in fields {list(fields)}"
        )

    idf = {
        term: smoothed_idf(document_count, df)
        for term, df in document_frequency.items()
    }

    statistics = CorpusStatistics(
        document_count=document_count,
        document_frequency=MappingProxyType(dict(document_frequency)),
        inverse_document_frequency=MappingProxyType(idf),
        average_document_length=total_tokens / document_count,
        document_lengths=tuple(lengths),
    )

    logger.debug(
        f"Built BM25 statistics: {statistics.vocabulary_size} unique terms "
        f"from {document_count} documents (avgdl={statistics.average_document_length:.2f})"
    )

    return statistics, term_frequencies
