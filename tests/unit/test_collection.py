"""Test Collection - eager ordered-map collection

Validates key preservation, PHP-style list normalization, the where family,
aggregates, set operations and ordering.
"""

from __future__ import annotations

import json
import pytest
from enum import Enum
from typing import Any, Dict, List

from fluentkit.Exceptions import InvalidArgumentException, ItemNotFoundException, MultipleItemsFoundException
from fluentkit.Iterable.Collection import Collection, SortFlag, collect
from fluentkit.Iterable.LazyCollection import LazyCollection


class Status(Enum):
    ACTIVE = 'active'
    BANNED = 'banned'


@pytest.fixture
def users() -> List[Dict[str, Any]]:
    """Rows shared by the where and aggregate tests."""
    return [
        {'id': 1, 'name': 'Ada', 'age': 36, 'role': 'admin', 'email': 'ada@example.com'},
        {'id': 2, 'name': 'Grace', 'age': 45, 'role': 'editor', 'email': None},
        {'id': 3, 'name': 'Linus', 'age': 28, 'role': 'admin', 'email': 'linus@example.com'},
    ]


class TestCollectionConstruction:
    """Test suite for creating collections."""

    def test_list_input_round_trips_as_list(self) -> None:
        """Test sequential keys come back as a list."""
        assert Collection([1, 2, 3]).all() == [1, 2, 3]
        assert collect((1, 2)).all() == [1, 2]

    def test_mapping_input_keeps_keys(self) -> None:
        """Test associative input comes back as a dict."""
        assert Collection({'a': 1, 'b': 2}).all() == {'a': 1, 'b': 2}

    def test_scalar_and_none_input(self) -> None:
        """Test scalars are wrapped and None is empty."""
        assert Collection('a').all() == ['a']
        assert Collection().all() == []
        assert Collection(None).is_empty()

    def test_iterable_and_collection_input(self) -> None:
        """Test generic iterables and other collections."""
        assert Collection(range(3)).all() == [0, 1, 2]
        assert Collection(Collection({'a': 1})).all() == {'a': 1}
        assert Collection(LazyCollection([1, 2])).all() == [1, 2]

    def test_range(self) -> None:
        """Test inclusive ranges in both directions."""
        assert Collection.range(1, 5).all() == [1, 2, 3, 4, 5]
        assert Collection.range(5, 1).all() == [5, 4, 3, 2, 1]
        assert Collection.range(1, 10, 3).all() == [1, 4, 7, 10]

    def test_range_with_zero_step(self) -> None:
        """Test a zero step is rejected."""
        with pytest.raises(InvalidArgumentException):
            Collection.range(1, 5, 0)

    def test_times(self) -> None:
        """Test building a collection from a callback."""
        assert Collection.times(3, lambda number: number * 10).all() == [10, 20, 30]
        assert Collection.times(0).all() == []

    def test_wrap_unwrap_and_from_json(self) -> None:
        """Test the static constructors."""
        assert Collection.wrap('a').all() == ['a']
        assert Collection.unwrap(Collection([1])) == [1]
        assert Collection.unwrap('raw') == 'raw'
        assert Collection.from_json('{"a": 1}').all() == {'a': 1}


class TestCollectionMutation:
    """Test suite for in-place mutators."""

    def test_push_put_and_prepend(self) -> None:
        """Test appending with PHP next-index semantics."""
        collection = Collection([1, 2])

        collection.push(3).put('key', 4).prepend(0)

        assert collection.all() == {0: 0, 1: 1, 2: 2, 3: 3, 'key': 4}

    def test_push_after_gap_uses_next_integer_key(self) -> None:
        """Test the next key is the largest integer key plus one."""
        collection = Collection({5: 'a', 'x': 'b'})

        collection.push('c')

        assert collection.all() == {5: 'a', 'x': 'b', 6: 'c'}

    def test_pop(self) -> None:
        """Test popping one or several items."""
        collection = Collection([1, 2, 3, 4])

        assert collection.pop() == 4
        assert collection.pop(2).all() == [3, 2]
        assert collection.all() == [1]
        assert Collection().pop() is None

    def test_shift_reindexes(self) -> None:
        """Test shifting removes from the front and renumbers keys."""
        collection = Collection([1, 2, 3])

        assert collection.shift() == 1
        assert collection.all() == [2, 3]
        assert collection.shift(5).all() == [2, 3]
        assert collection.is_empty()

    def test_shift_with_negative_count(self) -> None:
        """Test a negative count is rejected."""
        with pytest.raises(InvalidArgumentException):
            Collection([1]).shift(-1)

    def test_splice(self) -> None:
        """Test removing a portion and inserting replacements."""
        collection = Collection([1, 2, 3, 4, 5])

        removed = collection.splice(1, 2, ['a', 'b', 'c'])

        assert removed.all() == [2, 3]
        assert collection.all() == [1, 'a', 'b', 'c', 4, 5]

    def test_splice_without_length_removes_the_rest(self) -> None:
        """Test omitting the length."""
        collection = Collection([1, 2, 3, 4])

        assert collection.splice(2).all() == [3, 4]
        assert collection.all() == [1, 2]

    def test_pull_forget_and_transform(self) -> None:
        """Test removing by key and transforming in place."""
        collection = Collection({'a': 1, 'b': 2, 'c': 3})

        assert collection.pull('a') == 1
        collection.forget('b')
        collection.transform(lambda value: value * 10)

        assert collection.all() == {'c': 30}

    def test_get_or_put(self) -> None:
        """Test lazily adding a missing key."""
        collection = Collection()

        assert collection.get_or_put('a', lambda: 1) == 1
        assert collection.get_or_put('a', 2) == 1
        assert collection.all() == {'a': 1}

    def test_item_access(self) -> None:
        """Test subscript syntax and membership."""
        collection = Collection({'a': 1})
        collection['b'] = 2

        assert collection['a'] == 1
        assert 2 in collection
        assert len(collection) == 2

        del collection['a']

        assert collection.all() == {'b': 2}
        with pytest.raises(KeyError):
            collection['missing']

    def test_offset_exists_ignores_none(self) -> None:
        """Test offset_exists behaves like isset."""
        collection = Collection({'a': None, 'b': 1})

        assert collection.offset_exists('a') is False
        assert collection.offset_exists('b') is True
        assert collection.has('a') is True


class TestCollectionRetrieval:
    """Test suite for lookups."""

    def test_get_and_has(self) -> None:
        """Test key lookups."""
        collection = Collection({'a': 1, 'b': 2})

        assert collection.get('a') == 1
        assert collection.get('z', lambda: 'default') == 'default'
        assert collection.has('a', 'b') is True
        assert collection.has(['a', 'z']) is False
        assert collection.has_any('z', 'b') is True

    def test_first_last_and_first_where(self, users: List[Dict[str, Any]]) -> None:
        """Test first and last lookups."""
        collection = Collection(users)

        assert collection.first()['name'] == 'Ada'
        assert collection.last()['name'] == 'Linus'
        assert collection.first(lambda user: user['age'] > 40)['name'] == 'Grace'
        assert collection.first_where('role', 'admin')['name'] == 'Ada'
        assert collection.first_where('age', '<', 30)['name'] == 'Linus'
        assert Collection().first(default='none') == 'none'

    def test_first_or_fail(self, users: List[Dict[str, Any]]) -> None:
        """Test first_or_fail raises when nothing matches."""
        collection = Collection(users)

        assert collection.first_or_fail('role', 'editor')['name'] == 'Grace'
        with pytest.raises(ItemNotFoundException):
            collection.first_or_fail('role', 'guest')

    def test_sole(self, users: List[Dict[str, Any]]) -> None:
        """Test sole returns the only matching item."""
        assert Collection([1]).sole() == 1
        assert Collection(users).sole('role', 'editor')['name'] == 'Grace'
        assert Collection([1, 2, 3]).sole(lambda value: value > 2) == 3

    def test_sole_without_items(self) -> None:
        """Test sole with no matching items."""
        with pytest.raises(ItemNotFoundException):
            Collection([]).sole()

    def test_sole_with_many_items(self, users: List[Dict[str, Any]]) -> None:
        """Test sole with several matching items reports the count."""
        with pytest.raises(MultipleItemsFoundException) as raised:
            Collection(users).sole('role', 'admin')

        assert raised.value.count == 2
        assert str(raised.value) == '2 items were found.'

    def test_value(self, users: List[Dict[str, Any]]) -> None:
        """Test reading a key from the first item that has it."""
        assert Collection(users).value('name') == 'Ada'
        assert Collection(users).value('missing', 'x') == 'x'

    def test_search_before_and_after(self) -> None:
        """Test positional searches."""
        collection = Collection(['a', 'b', 'c'])

        assert collection.search('b') == 1
        assert collection.search('z') is None
        assert collection.search(lambda value: value > 'a') == 1
        assert collection.before('b') == 'a'
        assert collection.after('b') == 'c'
        assert collection.after('c') is None

    def test_contains(self, users: List[Dict[str, Any]]) -> None:
        """Test containment checks."""
        collection = Collection(users)

        assert Collection([1, 2]).contains(2) is True
        assert Collection([1, 2]).contains(lambda value: value > 1) is True
        assert collection.contains('name', 'Grace') is True
        assert collection.contains('age', '>', 50) is False
        assert Collection([1, 2]).doesnt_contain(3) is True
        assert Collection(['1']).contains_strict(1) is False

    def test_every(self, users: List[Dict[str, Any]]) -> None:
        """Test every with callbacks and operators."""
        assert Collection([2, 4]).every(lambda value: value % 2 == 0) is True
        assert Collection(users).every('age', '>', 18) is True
        assert Collection(users).every('role', 'admin') is False


class TestCollectionWhere:
    """Test suite for the where family."""

    def test_where_operators(self, users: List[Dict[str, Any]]) -> None:
        """Test equality and comparison operators."""
        collection = Collection(users)

        assert collection.where('role', 'admin').pluck('name').all() == ['Ada', 'Linus']
        assert collection.where('age', '>', 30).keys().all() == [0, 1]
        assert collection.where('role', '!=', 'admin').pluck('name').all() == ['Grace']

    def test_where_keeps_keys(self, users: List[Dict[str, Any]]) -> None:
        """Test filtered collections keep the original keys."""
        assert list(Collection(users).where('role', 'admin').all().keys()) == [0, 2]

    def test_where_null_and_not_null(self, users: List[Dict[str, Any]]) -> None:
        """Test null checks on a key."""
        collection = Collection(users)

        assert collection.where_null('email').pluck('name').all() == ['Grace']
        assert collection.where_not_null('email').pluck('name').all() == ['Ada', 'Linus']

    def test_where_in_and_between(self, users: List[Dict[str, Any]]) -> None:
        """Test list membership and ranges."""
        collection = Collection(users)

        assert collection.where_in('id', [1, 3]).pluck('name').all() == ['Ada', 'Linus']
        assert collection.where_not_in('id', [1, 3]).pluck('name').all() == ['Grace']
        assert collection.where_between('age', [30, 40]).pluck('name').all() == ['Ada']
        assert collection.where_not_between('age', [30, 40]).pluck('name').all() == ['Grace', 'Linus']

    def test_where_strict_and_instance_of(self) -> None:
        """Test strict comparison and type filtering."""
        collection = Collection([{'v': 1}, {'v': '1'}])

        assert collection.where_strict('v', 1).keys().all() == [0]
        assert Collection([1, 'a', 2.5]).where_instance_of(int).all() == [1]

    def test_filter_without_callback_drops_blank_values(self) -> None:
        """Test filtering PHP-empty values."""
        assert Collection([0, 1, '', None, 'a', [], '0']).filter().all() == {1: 1, 4: 'a'}

    def test_filter_keeps_matching_items_in_order(self) -> None:
        """Test filter keeps exactly the passing items in relative order."""
        collection = Collection([5, 3, 8, 1, 9])

        assert collection.filter(lambda value: value > 4).values().all() == [5, 8, 9]

    def test_reject(self) -> None:
        """Test rejecting with a callback or a value."""
        assert Collection([1, 2, 3]).reject(lambda value: value == 2).all() == {0: 1, 2: 3}
        assert Collection([1, 2, 3]).reject(2).values().all() == [1, 3]

    def test_partition(self) -> None:
        """Test splitting into passing and failing items."""
        evens, odds = Collection([1, 2, 3, 4]).partition(lambda value: value % 2 == 0)

        assert evens.all() == {1: 2, 3: 4}
        assert odds.all() == {0: 1, 2: 3}


class TestCollectionSlicing:
    """Test suite for slices, chunks and windows."""

    def test_take_positive_and_negative(self) -> None:
        """Test taking from the front or the back."""
        collection = Collection([1, 2, 3, 4, 5])

        assert collection.take(2).all() == [1, 2]
        assert collection.take(-2).all() == {3: 4, 4: 5}
        assert collection.take(-2).values().all() == [4, 5]
        assert collection.take(-10).all() == [1, 2, 3, 4, 5]

    def test_slice_and_skip(self) -> None:
        """Test slices keep keys."""
        collection = Collection([1, 2, 3, 4, 5])

        assert collection.slice(1, 2).all() == {1: 2, 2: 3}
        assert collection.slice(-2).all() == {3: 4, 4: 5}
        assert collection.skip(3).values().all() == [4, 5]

    def test_take_and_skip_while(self) -> None:
        """Test conditional windows."""
        collection = Collection([1, 2, 3, 4])

        assert collection.take_while(lambda value: value < 3).all() == [1, 2]
        assert collection.take_until(3).all() == [1, 2]
        assert collection.skip_until(3).all() == {2: 3, 3: 4}
        assert collection.skip_while(lambda value: value < 4).all() == {3: 4}

    def test_for_page(self) -> None:
        """Test paginating."""
        assert Collection(range(1, 10)).for_page(2, 3).values().all() == [4, 5, 6]

    def test_nth(self) -> None:
        """Test every n-th element with an offset."""
        collection = Collection(['a', 'b', 'c', 'd', 'e', 'f'])

        assert collection.nth(4).all() == ['a', 'e']
        assert collection.nth(4, 1).all() == ['b', 'f']

    def test_split_front_loads_remainder(self) -> None:
        """Test splitting seven items into three groups."""
        groups = Collection.range(1, 7).split(3)

        assert [group.all() for group in groups] == [[1, 2, 3], [4, 5], [6, 7]]

    def test_split_with_more_groups_than_items(self) -> None:
        """Test empty groups are skipped."""
        groups = Collection([1, 2]).split(4)

        assert [group.all() for group in groups] == [[1], [2]]

    def test_split_in(self) -> None:
        """Test filling the first groups completely."""
        groups = Collection.range(1, 10).split_in(3)

        assert [group.values().all() for group in groups] == [[1, 2, 3, 4], [5, 6, 7, 8], [9, 10]]

    def test_chunk(self) -> None:
        """Test chunking with and without preserved keys."""
        collection = Collection([1, 2, 3, 4, 5])

        assert [chunk.all() for chunk in collection.chunk(2)] == [[1, 2], {2: 3, 3: 4}, {4: 5}]
        assert [chunk.all() for chunk in collection.chunk(2, preserve_keys=False)] == [[1, 2], [3, 4], [5]]
        assert collection.chunk(0).all() == []

    def test_chunk_while(self) -> None:
        """Test chunking consecutive equal values."""
        collection = Collection(list('AABBCCCD'))

        chunks = collection.chunk_while(lambda value, key, chunk: value == chunk.last())

        assert [chunk.values().all() for chunk in chunks] == [['A', 'A'], ['B', 'B'], ['C', 'C', 'C'], ['D']]

    def test_sliding(self) -> None:
        """Test sliding windows."""
        windows = Collection([1, 2, 3, 4]).sliding(2)

        assert [window.values().all() for window in windows] == [[1, 2], [2, 3], [3, 4]]

    def test_pad(self) -> None:
        """Test padding on either side."""
        assert Collection([1, 2]).pad(4, 0).all() == [1, 2, 0, 0]
        assert Collection([1, 2]).pad(-4, 0).all() == [0, 0, 1, 2]
        assert Collection([1, 2]).pad(1, 0).all() == [1, 2]


class TestCollectionTransformation:
    """Test suite for mapping and reshaping."""

    def test_map_preserves_keys(self) -> None:
        """Test mapping keeps keys and receives them as second argument."""
        collection = Collection({'a': 1, 'b': 2})

        assert collection.map(lambda value: value * 2).all() == {'a': 2, 'b': 4}
        assert collection.map(lambda value, key: f"{key}{value}").all() == {'a': 'a1', 'b': 'b2'}

    def test_map_with_keys_and_map_to_dictionary(self) -> None:
        """Test associative maps."""
        rows = [{'dept': 'a', 'name': 'x'}, {'dept': 'a', 'name': 'y'}, {'dept': 'b', 'name': 'z'}]

        assert Collection(rows).map_with_keys(lambda row: {row['name']: row['dept']}).all() == {'x': 'a', 'y': 'a', 'z': 'b'}
        assert Collection(rows).map_to_dictionary(lambda row: {row['dept']: row['name']}).all() == {
            'a': ['x', 'y'],
            'b': ['z'],
        }

    def test_map_to_groups(self) -> None:
        """Test grouping maps wrap each group in a collection."""
        rows = [{'dept': 'a', 'name': 'x'}, {'dept': 'a', 'name': 'y'}]

        groups = Collection(rows).map_to_groups(lambda row: (row['dept'], row['name']))

        assert groups.get('a').all() == ['x', 'y']

    def test_map_spread_and_flat_map(self) -> None:
        """Test spreading nested items into the callback."""
        assert Collection([[1, 2], [3, 4]]).map_spread(lambda a, b: a + b).all() == [3, 7]
        assert Collection([1, 2]).flat_map(lambda value: [value, value]).all() == [1, 1, 2, 2]

    def test_map_into_enum(self) -> None:
        """Test mapping raw values into enum cases."""
        assert Collection(['active']).map_into(Status).all() == [Status.ACTIVE]

    def test_collapse_and_flatten(self) -> None:
        """Test collapsing and flattening nested items."""
        assert Collection([[1, 2], [3], Collection([4])]).collapse().all() == [1, 2, 3, 4]
        assert Collection([{'a': 1}, {'b': 2}]).collapse_with_keys().all() == {'a': 1, 'b': 2}
        assert Collection([1, [2, [3]]]).flatten().all() == [1, 2, 3]
        assert Collection([1, [2, [3]]]).flatten(1).all() == [1, 2, [3]]

    def test_flip_keys_and_values(self) -> None:
        """Test key/value helpers."""
        collection = Collection({'a': 1, 'b': 2})

        assert collection.flip().all() == {1: 'a', 2: 'b'}
        assert collection.keys().all() == ['a', 'b']
        assert collection.values().all() == [1, 2]

    def test_pluck_and_key_by(self, users: List[Dict[str, Any]]) -> None:
        """Test plucking and keying rows."""
        collection = Collection(users)

        assert collection.pluck('name', 'id').all() == {1: 'Ada', 2: 'Grace', 3: 'Linus'}
        assert collection.key_by('name').keys().all() == ['Ada', 'Grace', 'Linus']
        assert collection.key_by(lambda user: user['id'] * 10).keys().all() == [10, 20, 30]

    def test_select_only_and_except(self, users: List[Dict[str, Any]]) -> None:
        """Test field and key subsets."""
        assert Collection(users).select('id', 'name').first() == {'id': 1, 'name': 'Ada'}
        assert Collection({'a': 1, 'b': 2, 'c': 3}).only('a', 'c').all() == {'a': 1, 'c': 3}
        assert Collection({'a': 1, 'b': 2, 'c': 3}).except_(['a']).all() == {'b': 2, 'c': 3}

    def test_group_by_field(self, users: List[Dict[str, Any]]) -> None:
        """Test grouping by a key."""
        grouped = Collection(users).group_by('role')

        assert grouped.keys().all() == ['admin', 'editor']
        assert grouped.get('admin').pluck('name').all() == ['Ada', 'Linus']

    def test_group_by_fans_out_on_multiple_keys(self) -> None:
        """Test an item is placed in every group its selector returns."""
        posts = [{'title': 'x', 'tags': ['a', 'b']}, {'title': 'y', 'tags': ['b']}]

        grouped = Collection(posts).group_by('tags')

        assert grouped.get('a').pluck('title').all() == ['x']
        assert grouped.get('b').pluck('title').all() == ['x', 'y']

    def test_group_by_preserve_keys_and_nested(self, users: List[Dict[str, Any]]) -> None:
        """Test preserved keys and nested grouping."""
        grouped = Collection(users).group_by('role', preserve_keys=True)
        nested = Collection(users).group_by(['role', lambda user: user['age'] > 30])

        assert grouped.get('admin').keys().all() == [0, 2]
        assert nested.get('admin').keys().all() == [1, 0]
        assert nested.get('admin').get(0).pluck('name').all() == ['Linus']

    def test_count_by(self) -> None:
        """Test counting occurrences."""
        assert Collection(['a', 'b', 'a']).count_by().all() == {'a': 2, 'b': 1}
        assert Collection([1, 2, 3]).count_by(lambda value: value % 2 == 0).all() == {False: 2, True: 1}

    def test_zip_and_combine(self) -> None:
        """Test zipping and combining."""
        assert [row.all() for row in Collection([1, 2]).zip(['a'])] == [[1, 'a'], [2, None]]
        assert Collection(['a', 'b']).combine([1, 2]).all() == {'a': 1, 'b': 2}

    def test_combine_with_mismatched_lengths(self) -> None:
        """Test combine requires equal lengths."""
        with pytest.raises(InvalidArgumentException):
            Collection(['a', 'b']).combine([1])

    def test_cross_join_multiply_dot_and_undot(self) -> None:
        """Test combinatorial and dot helpers."""
        assert Collection([1, 2]).cross_join(['a']).all() == [[1, 'a'], [2, 'a']]
        assert Collection([1, 2]).multiply(2).all() == [1, 2, 1, 2]
        assert Collection({'a': {'b': 1}}).dot().all() == {'a.b': 1}
        assert Collection({'a.b': 1}).undot().all() == {'a': {'b': 1}}


class TestCollectionUniqueness:
    """Test suite for unique and duplicates."""

    def test_unique_keeps_first_occurrence(self) -> None:
        """Test unique keeps the first occurrence and its key."""
        unique = Collection([1, 2, 2, 3, 1]).unique()

        assert unique.all() == {0: 1, 1: 2, 3: 3}
        assert unique.values().all() == [1, 2, 3]

    def test_unique_by_key(self, users: List[Dict[str, Any]]) -> None:
        """Test unique by a field."""
        assert Collection(users).unique('role').pluck('name').all() == ['Ada', 'Grace']

    def test_unique_strict(self) -> None:
        """Test strict uniqueness distinguishes types."""
        assert Collection([1, '1', 1]).unique_strict().all() == [1, '1']

    def test_duplicates(self) -> None:
        """Test duplicates keep their keys."""
        assert Collection(['a', 'b', 'a', 'c', 'b']).duplicates().all() == {2: 'a', 4: 'b'}
        assert Collection([1, '1']).duplicates_strict().all() == []


class TestCollectionSetOperations:
    """Test suite for diff, intersect, merge and union."""

    def test_diff_and_intersect(self) -> None:
        """Test value based set operations keep keys."""
        collection = Collection([1, 2, 3, 4])

        assert collection.diff([2, 4]).all() == {0: 1, 2: 3}
        assert collection.intersect([2, 4]).all() == {1: 2, 3: 4}

    def test_key_based_set_operations(self) -> None:
        """Test key and key/value based set operations."""
        collection = Collection({'a': 1, 'b': 2, 'c': 3})

        assert collection.diff_keys({'a': 9}).all() == {'b': 2, 'c': 3}
        assert collection.diff_assoc({'a': 1, 'b': 9}).all() == {'b': 2, 'c': 3}
        assert collection.intersect_by_keys({'a': 9, 'c': 9}).all() == {'a': 1, 'c': 3}
        assert collection.intersect_assoc({'a': 1, 'b': 9}).all() == {'a': 1}

    def test_callback_set_operations(self) -> None:
        """Test set operations using comparison callbacks."""
        collection = Collection(['A', 'b'])

        def insensitive(left: str, right: str) -> int:
            return (left.lower() > right.lower()) - (left.lower() < right.lower())

        assert collection.diff_using(['a'], insensitive).all() == {1: 'b'}
        assert collection.intersect_using(['a'], insensitive).all() == ['A']

    def test_merge_union_and_replace(self) -> None:
        """Test merging variants."""
        assert Collection([1, 2]).merge([3]).all() == [1, 2, 3]
        assert Collection({'a': 1}).merge({'a': 2, 'b': 3}).all() == {'a': 2, 'b': 3}
        assert Collection({'a': 1}).union({'a': 2, 'b': 3}).all() == {'a': 1, 'b': 3}
        assert Collection(['a', 'b', 'c']).replace({1: 'x', 3: 'y'}).all() == ['a', 'x', 'c', 'y']
        assert Collection({'a': {'b': 1}}).merge_recursive({'a': {'c': 2}}).all() == {'a': {'b': 1, 'c': 2}}
        assert Collection({'a': {'b': 1}}).replace_recursive({'a': {'b': 2}}).all() == {'a': {'b': 2}}

    def test_concat_renumbers(self) -> None:
        """Test concat appends values."""
        assert Collection({'a': 1}).concat([2, 3]).all() == {'a': 1, 0: 2, 1: 3}


class TestCollectionOrdering:
    """Test suite for sorting."""

    def test_sort_keeps_keys(self) -> None:
        """Test sorting values."""
        sorted_collection = Collection([3, 1, 2]).sort()

        assert list(sorted_collection.all().keys()) == [1, 2, 0]
        assert sorted_collection.values().all() == [1, 2, 3]
        assert Collection([3, 1, 2]).sort(lambda a, b: b - a).values().all() == [3, 2, 1]
        assert Collection([3, 1, 2]).sort_desc().values().all() == [3, 2, 1]

    def test_sort_flags(self) -> None:
        """Test natural and case-insensitive sorting."""
        files = Collection(['img12', 'img10', 'img2'])
        words = Collection(['b', 'A', 'c'])

        assert files.sort(SortFlag.NATURAL).values().all() == ['img2', 'img10', 'img12']
        assert words.sort(SortFlag.STRING | SortFlag.FLAG_CASE).values().all() == ['A', 'b', 'c']
        assert Collection(['10', '9', '2']).sort(SortFlag.NUMERIC).values().all() == ['2', '9', '10']

    def test_sort_by(self, users: List[Dict[str, Any]]) -> None:
        """Test sorting by a field, callback or several rules."""
        collection = Collection(users)

        assert collection.sort_by('age').pluck('name').values().all() == ['Linus', 'Ada', 'Grace']
        assert collection.sort_by_desc(lambda user: user['age']).pluck('name').values().all() == ['Grace', 'Ada', 'Linus']
        assert collection.sort_by([['role', 'asc'], ['age', 'desc']]).pluck('name').values().all() == [
            'Ada',
            'Linus',
            'Grace',
        ]

    def test_sort_keys(self) -> None:
        """Test sorting by keys."""
        collection = Collection({'b': 1, 'a': 2, 'c': 3})

        assert collection.sort_keys().keys().all() == ['a', 'b', 'c']
        assert collection.sort_keys_desc().keys().all() == ['c', 'b', 'a']
        assert collection.sort_keys_using(lambda a, b: (a > b) - (a < b)).keys().all() == ['a', 'b', 'c']

    def test_reverse_and_shuffle(self) -> None:
        """Test reversing and seeded shuffling."""
        collection = Collection([1, 2, 3])

        assert collection.reverse().all() == {2: 3, 1: 2, 0: 1}
        assert collection.reverse().values().all() == [3, 2, 1]
        assert sorted(collection.shuffle(7).all()) == [1, 2, 3]
        assert collection.shuffle(7).all() == collection.shuffle(7).all()


class TestCollectionAggregates:
    """Test suite for aggregates and reductions."""

    def test_numeric_aggregates(self) -> None:
        """Test sum, average, median, min and max."""
        collection = Collection([1, 2, 3, 4])

        assert collection.sum() == 10
        assert collection.avg() == 2.5
        assert collection.average() == 2.5
        assert collection.median() == 2.5
        assert collection.min() == 1
        assert collection.max() == 4
        assert Collection().avg() is None

    def test_aggregates_by_key(self, users: List[Dict[str, Any]]) -> None:
        """Test aggregates over a field."""
        collection = Collection(users)

        assert collection.sum('age') == 109
        assert collection.max('age') == 45
        assert collection.min(lambda user: user['id']) == 1

    def test_mode_and_percentage(self) -> None:
        """Test mode and percentage."""
        assert Collection([1, 1, 2]).mode() == [1]
        assert Collection([1, 1, 2, 2]).mode() == [1, 2]
        assert Collection([1, 1, 2, 2]).percentage(lambda value: value == 1) == 50.0
        assert Collection().mode() is None

    def test_reduce(self) -> None:
        """Test reductions."""
        collection = Collection({'a': 1, 'b': 2})

        assert collection.reduce(lambda carry, value: carry + value, 0) == 3
        assert collection.reduce_with_keys(lambda carry, value, key: carry + key, '') == 'ab'
        assert Collection([1, 2, 3]).reduce_spread(lambda total, count, value: (total + value, count + 1), 0, 0) == (6, 3)

    def test_reduce_spread_requires_tuple(self) -> None:
        """Test reduce_spread rejects non-tuple results."""
        with pytest.raises(InvalidArgumentException):
            Collection([1]).reduce_spread(lambda total, value: total + value, 0)

    def test_each_stops_on_false(self) -> None:
        """Test returning False stops the iteration."""
        seen: List[int] = []

        def record(value: int) -> Any:
            seen.append(value)
            if value >= 2:
                return False
            return None

        Collection([1, 2, 3]).each(record)

        assert seen == [1, 2]

    def test_ensure(self) -> None:
        """Test type enforcement."""
        assert Collection([1, 2]).ensure(int).all() == [1, 2]
        with pytest.raises(InvalidArgumentException):
            Collection([1, 'a']).ensure(int)


class TestCollectionConditionals:
    """Test suite for when/unless and pipes."""

    def test_when_and_unless(self) -> None:
        """Test conditional callbacks."""
        assert Collection([1]).when(True, lambda collection: collection.push(2)).all() == [1, 2]
        assert Collection([1]).when(False, lambda collection: collection.push(2)).all() == [1]
        assert Collection([1]).unless(False, lambda collection: collection.push(3)).all() == [1, 3]
        assert Collection([1]).when(False, None, lambda collection: collection.push(4)).all() == [1, 4]

    def test_when_empty_variants(self) -> None:
        """Test emptiness conditionals."""
        assert Collection().when_empty(lambda collection: collection.push('x')).all() == ['x']
        assert Collection([1]).when_not_empty(lambda collection: collection.push(2)).all() == [1, 2]
        assert Collection([1]).unless_empty(lambda collection: collection.push(3)).all() == [1, 3]

    def test_pipes_and_tap(self) -> None:
        """Test piping the collection."""
        collection = Collection([1, 2, 3])
        tapped: List[int] = []

        assert collection.pipe(lambda items: items.sum()) == 6
        assert collection.pipe_through([lambda items: items.map(lambda v: v * 2), lambda items: items.sum()]) == 12
        assert collection.tap(lambda items: tapped.append(items.count())) is collection
        assert tapped == [3]


class TestCollectionSerialization:
    """Test suite for strings and JSON."""

    def test_implode_and_join(self) -> None:
        """Test building strings."""
        assert Collection([{'n': 'a'}, {'n': 'b'}]).implode('n', ', ') == 'a, b'
        assert Collection(['a', 'b']).implode('-') == 'a-b'
        assert Collection(['a', 'b', 'c']).join(', ', ' and ') == 'a, b and c'

    def test_to_array_and_json(self) -> None:
        """Test nested collections serialize to plain arrays."""
        collection = Collection({'a': Collection([1, 2]), 'b': None})

        assert collection.to_array() == {'a': [1, 2], 'b': None}
        assert json.loads(collection.to_json()) == {'a': [1, 2], 'b': None}
        assert collection.to_pretty_json().startswith('{\n    "a"')
        assert str(Collection([1])) == '[1]'

    def test_lazy_round_trip(self) -> None:
        """Test converting to a lazy collection and back."""
        lazy = Collection({'a': 1}).lazy()

        assert isinstance(lazy, LazyCollection)
        assert lazy.collect().all() == {'a': 1}
