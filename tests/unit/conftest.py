"""Unit test fixtures - small address corpora in the ZIP/city/state shape"""

import pytest

from plex.config import EngineConfig


@pytest.fixture
def city_config():
    """Index only the city field"""
    return EngineConfig(fields=("city",))


@pytest.fixture
def boston_corpus():
    """Two Boston records and one Cambridge record"""
    return [
        {"city": "Boston"},
        {"city": "Boston"},
        {"city": "Cambridge"},
    ]


@pytest.fixture
def zip_records():
    """Records shaped like the ZIP/county dataset (numeric and string fields mixed)"""
    return [
        {"_id": "01026", "zip": "01026", "city": "CUMMINGTON", "state": "MA"},
        {"_id": "02134", "zip": "02134", "city": "ALLSTON", "state": "MA"},
        {"_id": "02108", "zip": "02108", "city": "BOSTON", "state": "MA"},
        {"_id": "02127", "zip": "02127", "city": "SOUTH BOSTON", "state": "MA"},
        {"_id": "10001", "zip": 10001, "city": "NEW YORK", "state": "NY", "county": "New York"},
        {"_id": "03102", "zip": "03102", "city": "MANCHESTER", "state": "NH"},
    ]
