"""Test helper functions

Covers value resolution, dot-notation data access with wildcards and the
comparison helpers shared by the collections.
"""

from __future__ import annotations

import pytest
from enum import Enum
from types import SimpleNamespace
from typing import Any, Dict

from fluentkit.Iterable.Collection import Collection
from fluentkit.Support.Helpers import (
    adapt_callback,
    compare,
    data_forget,
    data_get,
    data_set,
    enum_value,
    is_blank,
    loose_equals,
    strict_equals,
    value,
)


class Color(Enum):
    RED = 'red'


@pytest.fixture
def payload() -> Dict[str, Any]:
    """Nested payload with a list of rows."""
    return {
        'users': [
            {'name': 'Ada', 'langs': ['en', 'fr']},
            {'name': 'Alan', 'langs': ['en']},
        ],
        'meta': {'total': 2},
    }


class TestValueHelpers:
    """Test suite for value and enum helpers."""

    def test_value_calls_closures(self) -> None:
        """Test closures are called and classes are not."""
        assert value(lambda: 1) == 1
        assert value(lambda number: number * 2, 4) == 8
        assert value('raw') == 'raw'
        assert value(int) is int

    def test_enum_value(self) -> None:
        """Test enum cases are unwrapped."""
        assert enum_value(Color.RED) == 'red'
        assert enum_value('plain') == 'plain'
        assert enum_value(None, 'default') == 'default'

    def test_is_blank(self) -> None:
        """Test PHP-style emptiness."""
        for blank in (None, False, 0, 0.0, '', '0', [], {}, ()):
            assert is_blank(blank) is True

        for filled in (True, 1, 'a', '0.0', [0], {'a': None}, object()):
            assert is_blank(filled) is False


class TestDataAccess:
    """Test suite for data_get, data_set and data_forget."""

    def test_data_get_paths(self, payload: Dict[str, Any]) -> None:
        """Test plain dot paths."""
        assert data_get(payload, 'meta.total') == 2
        assert data_get(payload, 'users.0.name') == 'Ada'
        assert data_get(payload, ['users', 1, 'name']) == 'Alan'
        assert data_get(payload, 'meta.missing', 'none') == 'none'
        assert data_get(payload, None) is payload

    def test_data_get_wildcards(self, payload: Dict[str, Any]) -> None:
        """Test wildcard segments collect values."""
        assert data_get(payload, 'users.*.name') == ['Ada', 'Alan']
        assert data_get(payload, 'users.*.langs.*') == ['en', 'fr', 'en']
        assert data_get(payload, 'meta.total.*', 'none') == 'none'

    def test_data_get_first_and_last(self, payload: Dict[str, Any]) -> None:
        """Test the {first} and {last} placeholders."""
        assert data_get(payload, 'users.{first}.name') == 'Ada'
        assert data_get(payload, 'users.{last}.name') == 'Alan'

    def test_data_get_objects_and_collections(self) -> None:
        """Test attribute access and collections."""
        target = SimpleNamespace(profile=SimpleNamespace(city='Paris'))

        assert data_get(target, 'profile.city') == 'Paris'
        assert data_get(target, 'profile.country', 'FR') == 'FR'
        assert data_get(Collection({'a': {'b': 1}}), 'a.b') == 1

    def test_data_set(self, payload: Dict[str, Any]) -> None:
        """Test nested writes, wildcards and overwrite control."""
        data_set(payload, 'meta.page', 1)
        data_set(payload, 'users.*.active', True)
        data_set(payload, 'meta.total', 99, overwrite=False)

        assert payload['meta'] == {'total': 2, 'page': 1}
        assert [user['active'] for user in payload['users']] == [True, True]

    def test_data_set_on_objects(self) -> None:
        """Test writes to object attributes."""
        target = SimpleNamespace()

        data_set(target, 'settings.theme', 'dark')

        assert target.settings == {'theme': 'dark'}

    def test_data_forget(self, payload: Dict[str, Any]) -> None:
        """Test removing nested keys, including through wildcards."""
        data_forget(payload, 'users.*.langs')
        data_forget(payload, 'meta.total')

        assert payload == {'users': [{'name': 'Ada'}, {'name': 'Alan'}], 'meta': {}}


class TestComparisonHelpers:
    """Test suite for comparisons and callback adaptation."""

    def test_loose_equals(self) -> None:
        """Test booleans compare by truthiness and other values with ==."""
        assert loose_equals(1, True) is True
        assert loose_equals('', False) is True
        assert loose_equals(1, 1.0) is True
        assert loose_equals('1', 1) is False

    def test_strict_equals(self) -> None:
        """Test strict comparison requires the same type."""
        assert strict_equals(1, 1) is True
        assert strict_equals(1, 1.0) is False
        assert strict_equals(1, True) is False

    def test_compare(self) -> None:
        """Test three-way comparison with None and mixed types."""
        assert compare(1, 2) == -1
        assert compare('b', 'a') == 1
        assert compare(None, 0) == -1
        assert compare(None, None) == 0
        assert compare(10, 'a') == compare('10', 'a')

    def test_adapt_callback(self) -> None:
        """Test extra arguments are dropped for narrower callbacks."""
        assert adapt_callback(lambda item: item)(1, 'key') == 1
        assert adapt_callback(lambda item, key: key)(1, 'key') == 'key'
        assert adapt_callback(lambda *args: args)(1, 'key') == (1, 'key')
        assert adapt_callback(len)('ab', 'key') == 2
