"""
Unit tests for corpus statistics (df, idf, average length, term frequency index).
"""

import dataclasses
import math

import pytest

from plex.bm25.index_builder import build_corpus_statistics, smoothed_idf
from plex.errors import EmptyCorpusError

pytestmark = pytest.mark.unit


class TestBuildCorpusStatistics:
    """Test the one-pass statistics builder"""

    def test_document_frequency_counts_documents(self, city_config):
        """Test that df counts a term once per document regardless of repetition"""
        docs = [{"city": "boston boston boston"}, {"city": "boston"}, {"city": "salem"}]
        stats, tf = build_corpus_statistics(docs, city_config.fields)

        assert stats.document_frequency["boston"] == 2
        assert stats.document_frequency["salem"] == 1
        assert tf[0] == {"boston": 3}

    def test_average_document_length(self):
        """Test avgdl = total tokens / N"""
        docs = [{"city": "new york"}, {"city": "boston"}, {"city": "salt lake city"}]
        stats, _ = build_corpus_statistics(docs, ["city"])

        assert stats.average_document_length == pytest.approx(2.0)
        assert stats.document_lengths == (2, 1, 3)

    def test_idf_formula(self, boston_corpus):
        """Test smoothed idf: ln((N - df + 0.5) / (df + 0.5) + 1)"""
        stats, _ = build_corpus_statistics(boston_corpus, ["city"])

        assert stats.idf("boston") == pytest.approx(math.log(1.5 / 2.5 + 1))
        assert stats.idf("cambridge") == pytest.approx(math.log(2.5 / 1.5 + 1))

    def test_rarer_terms_have_higher_idf(self):
        """Test that idf strictly decreases with document frequency"""
        docs = [
            {"city": "a b c"},
            {"city": "a b"},
            {"city": "a"},
            {"city": "a"},
        ]
        stats, _ = build_corpus_statistics(docs, ["city"])

        assert stats.idf("c") > stats.idf("b") > stats.idf("a")

    def test_idf_finite_and_non_negative(self, zip_records):
        """Test idf stays finite and >= 0, even for terms in every document"""
        docs = [dict(r, state="MA") for r in zip_records]
        stats, _ = build_corpus_statistics(docs, ["city", "state"])

        assert stats.average_document_length > 0
        for term, value in stats.inverse_document_frequency.items():
            assert math.isfinite(value), term
            assert value >= 0, term
        assert stats.idf("ma") > 0

    def test_unknown_term_idf_is_zero(self, boston_corpus):
        """Test that terms never seen in the corpus weigh nothing"""
        stats, _ = build_corpus_statistics(boston_corpus, ["city"])
        assert stats.idf("springfield") == 0.0

    def test_single_document(self):
        """Test statistics for N = 1"""
        stats, tf = build_corpus_statistics([{"city": "Boston"}], ["city"])

        assert stats.document_count == 1
        assert stats.average_document_length == 1.0
        assert stats.idf("boston") == pytest.approx(smoothed_idf(1, 1))
        assert tf == [{"boston": 1}]

    def test_empty_corpus(self):
        """Test that zero documents is an explicit error"""
        with pytest.raises(EmptyCorpusError):
            build_corpus_statistics([], ["city"])

    def test_corpus_without_tokens(self):
        """Test that documents with no indexable text are an explicit error"""
        with pytest.raises(EmptyCorpusError):
            build_corpus_statistics([{"state": "MA"}, {}], ["city"])

    def test_statistics_are_read_only(self, boston_corpus):
        """Test that statistics cannot be mutated after build"""
        stats, _ = build_corpus_statistics(boston_corpus, ["city"])

        with pytest.raises(TypeError):
            stats.document_frequency["boston"] = 99
        with pytest.raises(TypeError):
            stats.inverse_document_frequency["boston"] = 0.0
        with pytest.raises(dataclasses.FrozenInstanceError):
            stats.average_document_length = 2.0

    def test_vocabulary_size(self, zip_records):
        """Test vocabulary covers every distinct token across fields"""
        stats, _ = build_corpus_statistics(zip_records, ["city", "state"])
        # cummington allston boston south new york manchester ma ny nh
        assert stats.vocabulary_size == 10
