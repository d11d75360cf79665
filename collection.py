'''
Collection: a chainable functional adaptor over one owned ordered container.

Every reshaping operation comes in three forms:

    c.sort()               mutate c in place, return None
    c.into_sorted()        mutate c's storage, hand it to a new Collection
                           and leave c empty
    c.sorted()             copy c, then into_sorted() on the copy

Operations that produce elements of another type build their result in
the rebound family of the source (see family.py), so a deque bounded at 8
stays a deque bounded at 8 and a FixedCollection of 4 stays 4 wide.
'''
import array
import copy
import functools as ft
import itertools as it
import typing as tp
from collections.abc import Iterable, Mapping, MutableSequence, Set, Sized

import conversion
import execution
from errors import CapacityError, ElementTypeError, FamilyError, OutOfRangeError, RebindError
from execution import Policy, SEQ
from family import Family, FixedFamily, SequenceFamily, common_type, family_of, family_of_type
from util import FixedArray, SequenceView

__all__ = [
    'Collection',
    'FixedCollection',
    'make_collection',
    'make_dynamic_collection',
]

T = tp.TypeVar('T')
U = tp.TypeVar('U')

Predicate = tp.Callable[[T], bool]
Less = tp.Callable[[T, T], bool]

_MISSING = object()
_RAW_CONTAINERS = (MutableSequence, FixedArray, array.array)


def _result_type(op : tp.Callable, out_type : tp.Optional[type]) -> tp.Optional[type]:
    '''Element type `op` is known to produce before it is called, if any'''
    if out_type is not None:
        return out_type
    if isinstance(op, type):
        return op
    try:
        hints = tp.get_type_hints(op)
    except (NameError, TypeError):
        # unresolvable forward references or an object with no annotations
        return None
    ret = hints.get('return')
    if isinstance(ret, type):
        return ret
    return None


def _sort_key(key, cmp : tp.Optional[Less]):
    if cmp is None:
        return key
    if key is not None:
        raise TypeError('pass either key or cmp, not both')
    return ft.cmp_to_key(lambda a, b: -1 if cmp(a, b) else (1 if cmp(b, a) else 0))


def _take(source) -> tp.Tuple[tp.Iterable, tp.Optional[Family]]:
    '''Values to build from and the family they came in, copying owned containers'''
    if isinstance(source, _CollectionBase):
        return copy.deepcopy(source._storage), source._family
    if isinstance(source, (Mapping, Set)):
        raise FamilyError(f'{type(source).__qualname__} is not an ordered sequence of one element type')
    if isinstance(source, _RAW_CONTAINERS):
        return copy.deepcopy(source), family_of(source)
    if not isinstance(source, Iterable):
        raise TypeError(f'{type(source).__qualname__} object is not iterable')
    return list(source), None


def _wrap(family : Family, storage : MutableSequence, reserved : int = 0) -> '_CollectionBase':
    cls = Collection if family.resizable else FixedCollection
    return cls._from_storage(family, storage, reserved)


class _CollectionBase(tp.Generic[T]):
    __slots__ = '_family', '_storage', '_reserved', '__weakref__'

    _family : Family
    _storage : tp.MutableSequence[T]
    _reserved : int

    def __init__(self,
            source : tp.Iterable[T] = (),
            family : tp.Optional[Family] = None,
            *,
            element_type : tp.Optional[type] = None):
        values, source_family = _take(source)
        if family is None:
            family = self._default_family(values, source_family)
        self._check_family(family)
        if element_type is not None:
            family = family.rebind(element_type)
        elif family.element_type is object:
            inferred = common_type(values)
            if inferred is not None and inferred is not object:
                family = family.rebind(inferred)

        storage = family.make(values)
        family.check(storage)
        self._family = family
        self._storage = storage
        self._reserved = 0

    @classmethod
    def _default_family(cls, values : tp.Sized, source_family : tp.Optional[Family]) -> Family:
        raise NotImplementedError()

    @classmethod
    def _check_family(cls, family : Family) -> None:
        raise NotImplementedError()

    @classmethod
    def _from_storage(cls, family : Family, storage : MutableSequence, reserved : int = 0):
        obj = cls.__new__(cls)
        obj._family = family
        obj._storage = storage
        obj._reserved = reserved
        return obj

    @classmethod
    def adopt(cls, container : MutableSequence, element_type : tp.Optional[type] = None):
        '''Take ownership of a raw container without copying it'''
        family = family_of(container)
        cls._check_family(family)
        if element_type is None and family.element_type is object:
            element_type = common_type(container)
        if element_type is not None and element_type is not object:
            if family.element_type is object:
                family = family.rebind(element_type)
            elif not family.accepts_type(element_type):
                raise RebindError(family, element_type)
        family.check(container)
        return cls._from_storage(family, container)

    @classmethod
    def of(cls, *elements : T, element_type : tp.Optional[type] = None):
        return cls(elements, element_type=element_type)

    @classmethod
    def from_iter(cls,
            iterable : tp.Iterable[T],
            start : int = 0,
            stop : tp.Optional[int] = None,
            *,
            element_type : tp.Optional[type] = None):
        '''Elements [start, stop) of an iterator'''
        return cls(it.islice(iterable, start, stop), element_type=element_type)

    # Ownership --------------------------------------------------------------

    def _release(self) -> MutableSequence:
        storage = self._storage
        self._storage = self._family.empty()
        self._reserved = 0
        return storage

    def _moved(self) -> '_CollectionBase[T]':
        reserved = self._reserved
        family = self._family
        return _wrap(family, self._release(), reserved)

    def copy(self) -> '_CollectionBase[T]':
        return self._from_storage(self._family, copy.deepcopy(self._storage), self._reserved)

    def __copy__(self):
        return self.copy()

    def __deepcopy__(self, memo):
        return self._from_storage(self._family, copy.deepcopy(self._storage, memo), self._reserved)

    def swap(self, other : '_CollectionBase[T]') -> None:
        if type(other) is not type(self) or other._family != self._family:
            raise TypeError(f'can not swap {self._family!r} with {getattr(other, "_family", other)!r}')
        self._storage, other._storage = other._storage, self._storage
        self._reserved, other._reserved = other._reserved, self._reserved

    def assign(self, values : tp.Iterable[T]) -> None:
        '''Replace every element'''
        values, _ = _take(values)
        values = list(values)
        self._family.check(values)
        self._family.assign(self._storage, values)

    # Properties -------------------------------------------------------------

    @property
    def family(self) -> Family:
        return self._family

    @property
    def element_type(self) -> type:
        return self._family.element_type

    def view(self) -> SequenceView:
        return SequenceView(self._storage)

    # Element access ---------------------------------------------------------

    def at(self, pos : int) -> T:
        size = len(self._storage)
        if not 0 <= pos < size:
            raise OutOfRangeError(pos, size)
        return self._storage[pos]

    def __getitem__(self, pos):
        # unchecked: out of range positions behave however the storage does
        return self._storage[pos]

    def __setitem__(self, pos, value) -> None:
        if isinstance(pos, slice):
            value = list(value)
            self._family.check(value)
        elif not self._family.accepts(value):
            raise ElementTypeError(value, self._family.element_type)
        self._storage[pos] = value

    def front(self) -> T:
        if not len(self._storage):
            raise OutOfRangeError(0, 0)
        return self._storage[0]

    def back(self) -> T:
        if not len(self._storage):
            raise OutOfRangeError(-1, 0)
        return self._storage[-1]

    # Capacity ---------------------------------------------------------------

    def size(self) -> int:
        return len(self._storage)

    def __len__(self) -> int:
        return len(self._storage)

    def empty(self) -> bool:
        return len(self._storage) == 0

    def __bool__(self) -> bool:
        return len(self._storage) > 0

    def capacity(self) -> int:
        return max(len(self._storage), self._reserved)

    def max_size(self) -> int:
        return self._family.max_size()

    # Comparison -------------------------------------------------------------

    @staticmethod
    def _elements(other) -> tp.Sequence:
        if isinstance(other, _CollectionBase):
            return other._storage
        if not isinstance(other, Sized):
            return list(other)
        return other

    def equals(self, other : tp.Iterable) -> bool:
        other = self._elements(other)
        return len(self._storage) == len(other) and all(a == b for a, b in zip(self._storage, other))

    def compare(self, other : tp.Iterable) -> int:
        '''Lexicographic three way comparison: -1, 0 or 1'''
        other = self._elements(other)
        for a, b in zip(self._storage, other):
            if a == b:
                continue
            return -1 if a < b else 1
        return (len(self._storage) > len(other)) - (len(self._storage) < len(other))

    def __eq__(self, other) -> bool:
        if not isinstance(other, _CollectionBase):
            return NotImplemented
        return self.equals(other)

    def __lt__(self, other) -> bool:
        if not isinstance(other, _CollectionBase):
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other) -> bool:
        if not isinstance(other, _CollectionBase):
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other) -> bool:
        if not isinstance(other, _CollectionBase):
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other) -> bool:
        if not isinstance(other, _CollectionBase):
            return NotImplemented
        return self.compare(other) >= 0

    __hash__ = None

    # Iteration --------------------------------------------------------------

    def __iter__(self) -> tp.Iterator[T]:
        return iter(self._storage)

    def __reversed__(self) -> tp.Iterator[T]:
        return reversed(self._storage)

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({list(self._storage)!r}, {self._family!r})'

    # Reduce -----------------------------------------------------------------

    def reduce(self, op : tp.Callable[[U, T], U], init : U, policy : Policy = SEQ) -> U:
        '''
            Left fold of the elements into init.

            Under a parallel policy chunks are folded separately and their
            results folded into init afterwards, which only gives the
            sequential answer when op is associative and commutative.
        '''
        return execution.run_reduce(op, init, self._storage, policy)

    # Contains ---------------------------------------------------------------

    def contains(self, value, policy : Policy = SEQ) -> bool:
        return execution.run_any(lambda elem: elem == value, self._storage, policy)

    def __contains__(self, value) -> bool:
        return self.contains(value)

    # Transform --------------------------------------------------------------

    def _apply(self,
            op : tp.Callable[[T], U],
            out_type : tp.Optional[type],
            policy : Policy) -> tp.Tuple[Family, MutableSequence]:
        family = self._family
        storage = self._storage
        declared = _result_type(op, out_type)

        if declared is not None and not family.accepts_type(declared):
            target = family.rebind(declared)
            result = target.make(execution.run_map(op, storage, policy))
            target.check(result)
            return target, result

        # nothing is written back until every result is known to fit
        results = list(execution.run_map(op, storage, policy))
        for value in results:
            if not family.accepts(value):
                if declared is not None:
                    raise ElementTypeError(value, declared)
                target = family.rebind(common_type(results))
                return target, target.make(results)
        family.assign(storage, results)
        return family, storage

    def transform(self,
            op : tp.Callable[[T], U],
            *,
            out_type : tp.Optional[type] = None,
            policy : Policy = SEQ) -> None:
        '''
            Replace every element e with op(e).

            The result type is out_type if given, else op when op is a class,
            else op's return annotation, else whatever op actually returns.
            Results the family accepts are written back into the same storage;
            anything else rebinds this collection to family.rebind(result type).
        '''
        family, storage = self._apply(op, out_type, policy)
        if storage is not self._storage:
            self._reserved = 0
        self._family, self._storage = family, storage

    def into_transformed(self, op, *, out_type=None, policy : Policy = SEQ) -> '_CollectionBase':
        self.transform(op, out_type=out_type, policy=policy)
        return self._moved()

    def transformed(self, op, *, out_type=None, policy : Policy = SEQ) -> '_CollectionBase':
        return self.copy().into_transformed(op, out_type=out_type, policy=policy)

    # Sort -------------------------------------------------------------------

    def _sort(self, key, reverse : bool, cmp : tp.Optional[Less], policy : Policy) -> None:
        key = _sort_key(key, cmp)
        merged = execution.run_sort(self._storage, key, reverse, policy)
        if merged is None:
            self._family.sort(self._storage, key, reverse)
        else:
            self._family.assign(self._storage, merged)

    def sort(self, key=None, *, reverse : bool = False, cmp : tp.Optional[Less] = None, policy : Policy = SEQ) -> None:
        '''
            Order elements by key (or by the strict less-than predicate cmp).

            Nothing is promised about the relative order of equal elements.
        '''
        self._sort(key, reverse, cmp, policy)

    def into_sorted(self, key=None, *, reverse=False, cmp=None, policy : Policy = SEQ) -> '_CollectionBase[T]':
        self.sort(key, reverse=reverse, cmp=cmp, policy=policy)
        return self._moved()

    def sorted(self, key=None, *, reverse=False, cmp=None, policy : Policy = SEQ) -> '_CollectionBase[T]':
        return self.copy().into_sorted(key, reverse=reverse, cmp=cmp, policy=policy)

    def stable_sort(self, key=None, *, reverse : bool = False, cmp : tp.Optional[Less] = None, policy : Policy = SEQ) -> None:
        '''As sort, keeping equal elements in their current relative order'''
        self._sort(key, reverse, cmp, policy)

    def into_stable_sorted(self, key=None, *, reverse=False, cmp=None, policy : Policy = SEQ) -> '_CollectionBase[T]':
        self.stable_sort(key, reverse=reverse, cmp=cmp, policy=policy)
        return self._moved()

    def stable_sorted(self, key=None, *, reverse=False, cmp=None, policy : Policy = SEQ) -> '_CollectionBase[T]':
        return self.copy().into_stable_sorted(key, reverse=reverse, cmp=cmp, policy=policy)

    # Reverse ----------------------------------------------------------------

    def reverse(self, policy : Policy = SEQ) -> None:
        execution.check_policy(policy)
        self._storage.reverse()

    def into_reversed(self, policy : Policy = SEQ) -> '_CollectionBase[T]':
        self.reverse(policy)
        return self._moved()

    def reversed(self, policy : Policy = SEQ) -> '_CollectionBase[T]':
        return self.copy().into_reversed(policy)

    # Conversions ------------------------------------------------------------

    def to_container(self) -> MutableSequence:
        return copy.deepcopy(self._storage)

    def into_container(self) -> MutableSequence:
        return self._release()

    def to(self, range_type : tp.Callable[[tp.Iterable[T]], U]) -> U:
        '''Build range_type from a copy of the elements'''
        return range_type(copy.deepcopy(self._storage))

    def into(self, range_type : tp.Callable[[tp.Iterable[T]], U]) -> U:
        return range_type(self._release())

    def to_pair(self, first : tp.Optional[type] = None, second : tp.Optional[type] = None) -> tuple:
        return copy.deepcopy(conversion.to_pair(self._storage, self.element_type, first, second))

    def into_pair(self, first : tp.Optional[type] = None, second : tp.Optional[type] = None) -> tuple:
        element_type = self.element_type
        return conversion.to_pair(self._release(), element_type, first, second)

    def to_tuple(self, *slots) -> tuple:
        '''
            Positional conversion to a tuple.

            to_tuple()                 every element
            to_tuple(n)                the first n elements
            to_tuple(int, str)         one slot per type
            to_tuple(SomeNamedTuple)   the fields of a named tuple

            Slots past the last element are default constructed with a
            ShortConversionWarning.
        '''
        return copy.deepcopy(conversion.to_tuple(self._storage, self.element_type, *slots))

    def into_tuple(self, *slots) -> tuple:
        element_type = self.element_type
        return conversion.to_tuple(self._release(), element_type, *slots)


class Collection(_CollectionBase[T]):
    '''Collection over a resizable container'''
    __slots__ = ()

    @classmethod
    def _default_family(cls, values, source_family):
        if source_family is None:
            return SequenceFamily()
        if not source_family.resizable:
            return SequenceFamily(list, source_family.element_type)
        return source_family

    @classmethod
    def _check_family(cls, family):
        if not family.resizable:
            raise FamilyError(f'{family!r} is not resizable, use FixedCollection')

    @classmethod
    def filled(cls,
            count : int,
            value = _MISSING,
            *,
            element_type : tp.Optional[type] = None,
            family : tp.Optional[Family] = None) -> 'Collection':
        '''count copies of value, default constructed elements when value is omitted'''
        family = family if family is not None else SequenceFamily()
        if element_type is not None:
            family = family.rebind(element_type)
        if value is _MISSING:
            value = family.default()
        # a run of Nones says nothing about the element type
        untyped = object if value is None and family.element_type is object else None
        return cls((copy.deepcopy(value) for _ in range(count)), family, element_type=untyped)

    # Capacity ---------------------------------------------------------------

    def reserve(self, capacity : int) -> None:
        if capacity > self.max_size():
            raise CapacityError(f'capacity {capacity} exceeds max size {self.max_size()}')
        self._reserved = max(self._reserved, capacity)

    def shrink_to_fit(self) -> None:
        self._reserved = 0

    # Modifiers --------------------------------------------------------------

    def _check(self, value) -> None:
        if not self._family.accepts(value):
            raise ElementTypeError(value, self._family.element_type)

    def _check_pos(self, pos : int, size : int) -> None:
        if not 0 <= pos <= size:
            raise OutOfRangeError(pos, size)

    def _check_grow(self, count : int) -> None:
        size = len(self._storage) + count
        if size > self.max_size():
            raise CapacityError(f'size {size} exceeds max size {self.max_size()}')

    def append(self, value : T) -> None:
        self._check(value)
        self._check_grow(1)
        self._storage.append(value)

    def pop(self) -> T:
        if not len(self._storage):
            raise OutOfRangeError(-1, 0)
        return self._storage.pop()

    def extend(self, values : tp.Iterable[T]) -> None:
        values, _ = _take(values)
        values = list(values)
        self._family.check(values)
        self._check_grow(len(values))
        self._storage.extend(values)

    def insert(self, pos : int, value : T) -> None:
        self._check_pos(pos, len(self._storage))
        self._check(value)
        self._check_grow(1)
        self._storage.insert(pos, value)

    def insert_range(self, pos : int, values : tp.Iterable[T]) -> None:
        self._check_pos(pos, len(self._storage))
        values, _ = _take(values)
        values = list(values)
        self._family.check(values)
        self._check_grow(len(values))
        for offset, value in enumerate(values):
            self._storage.insert(pos + offset, value)

    def erase(self, pos : int, stop : tp.Optional[int] = None) -> None:
        '''Remove the element at pos, or the elements [pos, stop)'''
        size = len(self._storage)
        if stop is None:
            if not 0 <= pos < size:
                raise OutOfRangeError(pos, size)
            stop = pos + 1
        self._check_pos(pos, size)
        self._check_pos(stop, size)
        if stop < pos:
            raise OutOfRangeError(stop, size)
        for _ in range(stop - pos):
            del self._storage[pos]

    def clear(self) -> None:
        self._family.truncate(self._storage, 0)

    def resize(self, count : int, value = _MISSING) -> None:
        storage = self._storage
        size = len(storage)
        if count <= size:
            self._family.truncate(storage, count)
            return
        if value is _MISSING:
            value = self._family.default()
        self._check(value)
        self._check_grow(count - size)
        storage.extend(copy.deepcopy(value) for _ in range(count - size))

    def into_resized(self, count : int, value = _MISSING) -> 'Collection[T]':
        self.resize(count, value)
        return self._moved()

    def resized(self, count : int, value = _MISSING) -> 'Collection[T]':
        return self.copy().into_resized(count, value)

    # Filter -----------------------------------------------------------------

    def filter(self, predicate : Predicate, policy : Policy = SEQ) -> None:
        '''Drop elements failing predicate; survivors keep their order'''
        storage = self._storage
        kept = 0
        for i, keep in enumerate(execution.run_map(predicate, storage, policy)):
            if keep:
                if kept != i:
                    storage[kept] = storage[i]
                kept += 1
        self._family.truncate(storage, kept)

    def into_filtered(self, predicate : Predicate, policy : Policy = SEQ) -> 'Collection[T]':
        self.filter(predicate, policy)
        return self._moved()

    def filtered(self, predicate : Predicate, policy : Policy = SEQ) -> 'Collection[T]':
        return self.copy().into_filtered(predicate, policy)

    # Flat transform ---------------------------------------------------------

    def _flatten(self, op, out_type, policy):
        policy = execution.check_policy(policy)
        storage = self._storage
        for inner in storage:
            if not (isinstance(inner, Iterable) and isinstance(inner, Sized)):
                raise ElementTypeError(inner, Sized)
        total = sum(len(inner) for inner in storage)

        values = it.chain.from_iterable(storage)
        if op is not None:
            if policy.parallel:
                values = list(values)
            values = execution.run_map(op, values, policy)

        declared = _result_type(op, out_type) if op is not None else out_type
        if declared is None:
            values = list(values)
            declared = common_type(values) or object
        target = self._family.rebind(declared)
        result = target.make(values)
        target.check(result)
        assert len(result) == min(total, target.max_size())
        return target, result, total

    def flat_transform(self,
            op : tp.Optional[tp.Callable] = None,
            *,
            out_type : tp.Optional[type] = None,
            policy : Policy = SEQ) -> None:
        '''
            Replace the collection of sequences by op applied to each inner
            element, concatenated in outer then inner order.  One level of
            nesting is removed; without op this only flattens.
        '''
        self._family, self._storage, self._reserved = self._flatten(op, out_type, policy)

    def into_flat_transformed(self, op=None, *, out_type=None, policy : Policy = SEQ) -> 'Collection':
        self.flat_transform(op, out_type=out_type, policy=policy)
        return self._moved()

    def flat_transformed(self, op=None, *, out_type=None, policy : Policy = SEQ) -> 'Collection':
        return self.copy().into_flat_transformed(op, out_type=out_type, policy=policy)


class FixedCollection(_CollectionBase[T]):
    '''
        Collection over a FixedArray: the size is part of the family and
        nothing that would change it is offered.
    '''
    __slots__ = ()

    @classmethod
    def _default_family(cls, values, source_family):
        element_type = source_family.element_type if source_family is not None else object
        return FixedFamily(len(values), element_type)

    @classmethod
    def _check_family(cls, family):
        if family.resizable:
            raise FamilyError(f'{family!r} is resizable, use Collection')

    @classmethod
    def filled(cls, count : int, value = _MISSING, *, element_type : tp.Optional[type] = None) -> 'FixedCollection':
        family = FixedFamily(count, element_type or object)
        if value is _MISSING:
            value = family.default()
        untyped = object if value is None and family.element_type is object else None
        return cls([copy.deepcopy(value) for _ in range(count)], family, element_type=untyped)

    def _dynamic_family(self, target) -> Family:
        element_type = self._family.element_type
        if target is None:
            return SequenceFamily(list, element_type)
        if isinstance(target, Family):
            if not target.resizable:
                raise FamilyError(f'{target!r} is not resizable')
            return target.rebind(element_type)
        return family_of_type(target, element_type)

    def dynamicize(self, target = None) -> Collection[T]:
        '''
            Resizable copy of this collection.

            target is a resizable Family, a container class (list, deque,
            array.array, a UserList subclass, ...) or None for a list.
        '''
        family = self._dynamic_family(target)
        storage = family.make(copy.deepcopy(self._storage))
        family.check(storage)
        return Collection._from_storage(family, storage)

    def into_dynamicized(self, target = None) -> Collection[T]:
        family = self._dynamic_family(target)
        storage = family.make(self._release())
        family.check(storage)
        return Collection._from_storage(family, storage)


def make_collection(*elements : T, element_type : tp.Optional[type] = None) -> FixedCollection[T]:
    return FixedCollection.of(*elements, element_type=element_type)

def make_dynamic_collection(*elements : T, element_type : tp.Optional[type] = None) -> Collection[T]:
    return Collection.of(*elements, element_type=element_type)
