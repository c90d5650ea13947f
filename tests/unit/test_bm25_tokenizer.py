"""
Unit tests for BM25 record and query tokenization.
"""

import pytest

from plex.bm25.tokenizer import tokenize, tokenize_query
from plex.config import DEFAULT_FIELDS
from plex.errors import MalformedInputError

pytestmark = pytest.mark.unit


class TestTokenize:
    """Test multi-field record tokenization"""

    def test_concatenates_fields_in_order(self):
        """Test that configured fields are joined in the given order"""
        record = {"city": "South Boston", "state": "MA", "zip": "02127", "_id": "02127"}
        assert tokenize(record, DEFAULT_FIELDS) == ["south", "boston", "ma", "02127", "02127"]

    def test_lowercase_conversion(self):
        """Test that all tokens are lowercased"""
        assert tokenize({"city": "CUSHMAN"}, ["city"]) == ["cushman"]

    def test_missing_field_is_empty(self):
        """Test that missing fields contribute nothing"""
        assert tokenize({"city": "Boston"}, ["state", "city", "zip"]) == ["boston"]
        assert tokenize({}, ["city"]) == []

    def test_none_field_is_empty(self):
        """Test that None values are treated like missing fields"""
        assert tokenize({"city": None, "state": "MA"}, ["city", "state"]) == ["ma"]

    def test_numeric_field_is_text(self):
        """Test that numeric zip codes are indexed as text"""
        assert tokenize({"zip": 10001}, ["zip"]) == ["10001"]

    def test_integral_float_field(self):
        """Test that whole-number floats drop the trailing .0"""
        assert tokenize({"zip": 2134.0}, ["zip"]) == ["2134"]
        assert tokenize({"lat": 42.35}, ["lat"]) == ["42.35"]

    def test_extra_fields_ignored(self):
        """Test that fields outside the configured list are not read"""
        record = {"city": "Boston", "county": "Suffolk"}
        assert tokenize(record, ["city"]) == ["boston"]

    def test_whitespace_runs(self):
        """Test splitting on tabs, newlines and repeated spaces"""
        assert tokenize({"city": "  New\t\tYork \n"}, ["city"]) == ["new", "york"]

    def test_punctuation_kept(self):
        """Test that only whitespace splits tokens"""
        assert tokenize({"city": "Coeur d'Alene"}, ["city"]) == ["coeur", "d'alene"]

    def test_deterministic(self):
        """Test that identical input gives identical output"""
        record = {"city": "Palm Springs", "state": "CA"}
        assert tokenize(record, DEFAULT_FIELDS) == tokenize(record, DEFAULT_FIELDS)

    def test_stemming(self):
        """Test optional Snowball stemming"""
        assert tokenize({"city": "Palm Springs"}, ["city"], stemming=True) == ["palm", "spring"]

    def test_non_mapping_record(self):
        """Test that records must be mappings"""
        with pytest.raises(MalformedInputError):
            tokenize("Boston MA", ["city"])

    @pytest.mark.parametrize("value", [["Boston"], {"name": "Boston"}, True])
    def test_non_text_field(self, value):
        """Test that lists, dicts and booleans are rejected"""
        with pytest.raises(MalformedInputError):
            tokenize({"city": value}, ["city"])


class TestTokenizeQuery:
    """Test free-text query tokenization"""

    def test_basic_query(self):
        """Test lowercase/whitespace rule on raw queries"""
        assert tokenize_query("  NEW   York ") == ["new", "york"]

    def test_empty_query(self):
        """Test that blank queries yield no tokens"""
        assert tokenize_query("") == []
        assert tokenize_query(" \t\n") == []

    def test_matches_record_rule(self):
        """Test that a query tokenizes like the same text in a record"""
        text = "South BOSTON 02127"
        assert tokenize_query(text) == tokenize({"city": text}, ["city"])

    def test_non_string_query(self):
        """Test that queries must be strings"""
        with pytest.raises(MalformedInputError):
            tokenize_query(2134)
