import typing as tp
import warnings

import pytest

from collection import Collection
from errors import ShortConversionWarning, SlotTypeError


class Point(tp.NamedTuple):
    x : int
    y : float


class TestPair:
    def test_first_two(self):
        assert Collection([1, 2, 3]).to_pair() == (1, 2)

    def test_short_source(self):
        with pytest.warns(ShortConversionWarning):
            assert Collection([1]).to_pair() == (1, 0)

    def test_empty_untyped_source(self):
        with pytest.warns(ShortConversionWarning):
            assert Collection().to_pair() == (None, None)

    def test_slot_types(self):
        pair = Collection([1, 2]).to_pair(float)
        assert pair == (1.0, 2)
        assert isinstance(pair[0], float)

    def test_into_pair(self):
        c = Collection([1, 2])
        assert c.into_pair() == (1, 2)
        assert c.empty()

    def test_warning_can_be_an_error(self):
        with warnings.catch_warnings():
            warnings.simplefilter('error', ShortConversionWarning)
            with pytest.raises(ShortConversionWarning):
                Collection([1]).to_pair()


class TestTuple:
    def test_every_element(self):
        assert Collection([1, 2, 3]).to_tuple() == (1, 2, 3)

    def test_count(self):
        assert Collection([1, 2, 3]).to_tuple(2) == (1, 2)
        with pytest.warns(ShortConversionWarning):
            assert Collection([1, 2]).to_tuple(3) == (1, 2, 0)

    def test_slot_types(self):
        assert Collection([1, 'a']).to_tuple(int, str) == (1, 'a')

    def test_slot_type_mismatch(self):
        with pytest.raises(SlotTypeError):
            Collection([1]).to_tuple(str)

    def test_named_tuple(self):
        p = Collection([1, 2]).to_tuple(Point)
        assert isinstance(p, Point)
        assert p == Point(1, 2.0)
        assert isinstance(p.y, float)

    def test_short_named_tuple(self):
        with pytest.warns(ShortConversionWarning):
            assert Collection([4]).to_tuple(Point) == Point(4, 0.0)

    def test_bad_slots(self):
        with pytest.raises(ValueError):
            Collection([1]).to_tuple(-1)
        with pytest.raises(TypeError):
            Collection([1]).to_tuple(int, 'str')

    def test_copies_elements(self):
        c = Collection([[1]])
        t = c.to_tuple()
        t[0].append(2)
        assert c[0] == [1]

    def test_into_tuple(self):
        c = Collection([1, 2])
        assert c.into_tuple() == (1, 2)
        assert c.empty()


class TestRanges:
    def test_to(self):
        c = Collection([1, 2, 2])
        assert c.to(tuple) == (1, 2, 2)
        assert c.to(set) == {1, 2}
        assert c.size() == 3

    def test_into(self):
        c = Collection([1, 2])
        assert c.into(list) == [1, 2]
        assert c.empty()

    def test_to_container_is_a_copy(self):
        c = Collection([[1]])
        raw = c.to_container()
        raw[0].append(2)
        raw.append([3])
        assert c.equals([[1]])
