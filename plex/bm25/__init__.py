"""
BM25 (Best Match 25) sparse ranking over small multi-field records.

Components:
- tokenizer: Field concatenation + lowercase/whitespace tokenization
- stemmer: Optional Snowball stemming
- index_builder: One-pass corpus statistics (df, idf, avgdl) and term frequency index
- scorer: BM25 scoring from the cached term frequency index
- retrieval: BM25Engine, ranked search over the whole corpus

Statistics are built once per engine and are read-only afterwards; no
incremental updates and no persistent index.
"""

from .tokenizer import tokenize, tokenize_query
from .stemmer import stem
from .index_builder import CorpusStatistics, build_corpus_statistics
from .scorer import BM25Scorer
from .retrieval import BM25Engine, ScoredMatch

__all__ = [
    "tokenize",
    "tokenize_query",
    "stem",
    "CorpusStatistics",
    "build_corpus_statistics",
    "BM25Scorer",
    "BM25Engine",
    "ScoredMatch",
]
