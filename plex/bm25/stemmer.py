"""
Snowball Stemmer for English (via NLTK).

Optional token normalization for the BM25 engine. Stemming is off by default;
when an engine enables it, the same stemmer runs over both documents and queries
so that "cities" in a record and "city" in a query meet at "citi".

Examples:
- "cities" → "citi"
- "running" → "run"
- "02134" → "02134"
"""

from typing import List

from nltk.stem.snowball import SnowballStemmer

# Initialize stemmer once (thread-safe, reusable)
_stemmer = SnowballStemmer('english')


def stem(word: str) -> str:
    """
    Stem a single lowercase token.

    Examples:
        >>> stem("springs")
        'spring'
        >>> stem("heights")
        'height'
    """
    return _stemmer.stem(word)


def stem_all(tokens: List[str]) -> List[str]:
    return [stem(t) for t in tokens]
