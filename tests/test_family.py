import array
from collections import UserList, deque

import pytest

from errors import FamilyError, RebindError
from family import (
    ArrayFamily,
    DequeFamily,
    FixedFamily,
    SequenceFamily,
    common_type,
    default_value,
    family_of,
    family_of_type,
)
from util import FixedArray


class Names(UserList):
    pass


class _NeedsArgs:
    def __init__(self, x):
        self.x = x


class TestRebind:
    def test_sequence_keeps_factory(self):
        fam = SequenceFamily(Names, int)
        assert fam.rebind(str) == SequenceFamily(Names, str)

    def test_deque_keeps_maxlen(self):
        assert DequeFamily(8, int).rebind(float) == DequeFamily(8, float)

    def test_fixed_keeps_size(self):
        assert FixedFamily(4, int).rebind(str) == FixedFamily(4, str)

    def test_array_picks_typecode(self):
        assert ArrayFamily('q').rebind(float) == ArrayFamily('d')
        assert ArrayFamily('d').rebind(int) == ArrayFamily('q')

    def test_array_same_type_is_identity(self):
        fam = ArrayFamily('i')
        assert fam.rebind(int) is fam

    def test_array_without_typecode_fails(self):
        with pytest.raises(RebindError) as info:
            ArrayFamily('q').rebind(list)
        assert info.value.element_type is list
        assert isinstance(info.value, TypeError)

    def test_array_never_rebinds_to_str(self):
        with pytest.raises(RebindError):
            ArrayFamily('q').rebind(str)

    def test_character_array_takes_single_characters(self):
        fam = ArrayFamily('w' if 'w' in array.typecodes else 'u')
        assert fam.rebind(str) is fam
        assert fam.accepts('a')
        assert not fam.accepts('ab')

    def test_families_are_hashable_values(self):
        seen = {SequenceFamily(list, int), SequenceFamily(list, int), FixedFamily(2)}
        assert len(seen) == 2


class TestFamilyOf:
    def test_list(self):
        assert family_of([1, 2]) == SequenceFamily(list, object)

    def test_user_list(self):
        assert family_of(Names()) == SequenceFamily(Names, object)

    def test_deque(self):
        assert family_of(deque(maxlen=3)) == DequeFamily(3)

    def test_array(self):
        assert family_of(array.array('d')) == ArrayFamily('d')

    def test_fixed_array(self):
        assert family_of(FixedArray([1, 2, 3])) == FixedFamily(3)

    @pytest.mark.parametrize('container', [{}, {1, 2}, frozenset(), (1, 2), 'abc'])
    def test_rejects_non_sequences(self, container):
        with pytest.raises(FamilyError):
            family_of(container)

    def test_of_type(self):
        assert family_of_type(deque, int) == DequeFamily(None, int)
        assert family_of_type(list, str) == SequenceFamily(list, str)
        assert family_of_type(array.array, float) == ArrayFamily('d')

    @pytest.mark.parametrize('container_type', [dict, tuple, FixedArray, 'list'])
    def test_of_type_rejects(self, container_type):
        with pytest.raises(FamilyError):
            family_of_type(container_type)


class TestValidation:
    def test_factory_must_be_mutable_sequence(self):
        with pytest.raises(FamilyError):
            SequenceFamily(tuple)

    def test_bad_typecode(self):
        with pytest.raises(FamilyError):
            ArrayFamily('x')

    def test_negative_size(self):
        with pytest.raises(ValueError):
            FixedFamily(-1)


class TestStorage:
    def test_fixed_empty_is_default_filled(self):
        assert FixedFamily(3, int).empty() == FixedArray([0, 0, 0])

    def test_deque_truncate(self):
        d = deque([1, 2, 3, 4])
        DequeFamily().truncate(d, 1)
        assert d == deque([1])

    def test_array_assign_in_place(self):
        a = array.array('q', [3, 1, 2])
        ArrayFamily('q').sort(a)
        assert a == array.array('q', [1, 2, 3])

    def test_max_size(self):
        assert DequeFamily(5).max_size() == 5
        assert FixedFamily(2).max_size() == 2


class TestHelpers:
    def test_common_type(self):
        assert common_type([1, 2]) is int
        assert common_type([True, 1]) is int
        assert common_type([1, 'a']) is object
        assert common_type([]) is None

    def test_default_value(self):
        assert default_value(int) == 0
        assert default_value(str) == ''
        assert default_value(object) is None
        assert default_value(_NeedsArgs) is None
