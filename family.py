'''
Container families.

A family is the shape of a backing container with its element type
abstracted out: "a list of something", "a deque bounded at 8 of
something", "exactly 4 of something".  Rebinding a family to a new
element type keeps every other parameter of the shape.
'''
import array
import sys
import typing as tp
from abc import ABCMeta, abstractmethod
from collections import UserList, deque
from collections.abc import Mapping, MutableSequence, Set

import attr

from errors import ElementTypeError, FamilyError, RebindError
from util import FixedArray

__all__ = [
    'Family',
    'SequenceFamily',
    'DequeFamily',
    'ArrayFamily',
    'FixedFamily',
    'family_of',
    'family_of_type',
    'common_type',
    'default_value',
]

def default_value(element_type : type) -> tp.Any:
    '''Value of a default constructed `element_type`, None when it has none'''
    if element_type is object:
        return None
    try:
        return element_type()
    except TypeError:
        return None


def common_type(values : tp.Iterable) -> tp.Optional[type]:
    '''Most specific class every value is an instance of, None if there are no values'''
    types = []
    for v in values:
        t = type(v)
        if t not in types:
            types.append(t)
    if not types:
        return None
    for candidate in types[0].__mro__:
        if all(issubclass(t, candidate) for t in types[1:]):
            return candidate
    return object


class Family(metaclass=ABCMeta):
    __slots__ = ()

    resizable = True

    element_type : type

    @abstractmethod
    def make(self, values : tp.Iterable) -> MutableSequence:
        pass

    @abstractmethod
    def rebind(self, element_type : type) -> 'Family':
        pass

    def empty(self) -> MutableSequence:
        return self.make(())

    def accepts_type(self, element_type : type) -> bool:
        return issubclass(element_type, self.element_type)

    def accepts(self, value) -> bool:
        return isinstance(value, self.element_type)

    def check(self, values : tp.Iterable) -> None:
        if self.element_type is object:
            return
        for v in values:
            if not self.accepts(v):
                raise ElementTypeError(v, self.element_type)

    def default(self) -> tp.Any:
        return default_value(self.element_type)

    def assign(self, storage : MutableSequence, values : tp.Iterable) -> None:
        storage[:] = values

    def truncate(self, storage : MutableSequence, size : int) -> None:
        del storage[size:]

    def sort(self, storage : MutableSequence, key=None, reverse : bool = False) -> None:
        self.assign(storage, sorted(storage, key=key, reverse=reverse))

    def max_size(self) -> int:
        return sys.maxsize


@attr.s(slots=True, auto_attribs=True, frozen=True)
class SequenceFamily(Family):
    factory      : type = attr.ib(default=list)
    element_type : type = attr.ib(default=object)

    @factory.validator
    def _check_factory(self, attribute, value):
        if not (isinstance(value, type) and issubclass(value, MutableSequence)):
            raise FamilyError(f'{value!r} is not a mutable sequence type')

    def make(self, values : tp.Iterable) -> MutableSequence:
        return self.factory(values)

    def rebind(self, element_type : type) -> 'SequenceFamily':
        return attr.evolve(self, element_type=element_type)

    def sort(self, storage : MutableSequence, key=None, reverse : bool = False) -> None:
        if isinstance(storage, (list, UserList)):
            storage.sort(key=key, reverse=reverse)
        else:
            Family.sort(self, storage, key, reverse)


@attr.s(slots=True, auto_attribs=True, frozen=True)
class DequeFamily(Family):
    maxlen       : tp.Optional[int] = attr.ib(default=None)
    element_type : type = attr.ib(default=object)

    def make(self, values : tp.Iterable) -> deque:
        return deque(values, self.maxlen)

    def rebind(self, element_type : type) -> 'DequeFamily':
        return attr.evolve(self, element_type=element_type)

    def assign(self, storage : deque, values : tp.Iterable) -> None:
        values = list(values)
        storage.clear()
        storage.extend(values)

    def truncate(self, storage : deque, size : int) -> None:
        for _ in range(len(storage) - size):
            storage.pop()

    def max_size(self) -> int:
        if self.maxlen is None:
            return sys.maxsize
        return self.maxlen


_TYPECODE_TYPES = {
    **dict.fromkeys('bBhHiIlLqQ', int),
    **dict.fromkeys('fd', float),
    **dict.fromkeys('uw', str),
}

# str arrays ('u', 'w') hold single characters, so str is never rebound to
_TYPE_TYPECODES = {
    int   : 'q',
    float : 'd',
}

@attr.s(slots=True, auto_attribs=True, frozen=True)
class ArrayFamily(Family):
    '''
        Family of `array.array` storages.

        The element type is carried by the typecode.  Rebinding reaches int
        and float (and their subclasses) only; character arrays keep str
        but reject anything longer than one character.
    '''
    typecode : str = attr.ib(default='q')

    @typecode.validator
    def _check_typecode(self, attribute, value):
        if value not in _TYPECODE_TYPES or value not in array.typecodes:
            raise FamilyError(f'unsupported array typecode {value!r}')

    @property
    def element_type(self) -> type:
        return _TYPECODE_TYPES[self.typecode]

    @classmethod
    def for_type(cls, element_type : type) -> 'ArrayFamily':
        for t, code in _TYPE_TYPECODES.items():
            if issubclass(element_type, t):
                return cls(code)
        raise RebindError(cls(), element_type)

    def _build(self, values : tp.Iterable) -> array.array:
        values = list(values)
        try:
            return array.array(self.typecode, values)
        except (TypeError, OverflowError):
            for v in values:
                try:
                    array.array(self.typecode, [v])
                except (TypeError, OverflowError):
                    raise ElementTypeError(v, self.element_type,
                            f'not storable in an array of typecode {self.typecode!r}') from None
            raise

    def make(self, values : tp.Iterable) -> array.array:
        return self._build(values)

    def rebind(self, element_type : type) -> 'ArrayFamily':
        if self.accepts_type(element_type):
            return self
        try:
            return self.for_type(element_type)
        except RebindError:
            raise RebindError(self, element_type) from None

    def accepts(self, value) -> bool:
        # array('q') refuses floats, array('d') takes ints
        if not isinstance(value, self.element_type):
            return False
        return self.element_type is not str or len(value) == 1

    def assign(self, storage : array.array, values : tp.Iterable) -> None:
        storage[:] = self._build(values)


@attr.s(slots=True, auto_attribs=True, frozen=True)
class FixedFamily(Family):
    size         : int = attr.ib(validator=attr.validators.instance_of(int))
    element_type : type = attr.ib(default=object)

    resizable = False

    @size.validator
    def _check_size(self, attribute, value):
        if value < 0:
            raise ValueError(f'negative fixed size {value}')

    def make(self, values : tp.Iterable) -> FixedArray:
        return FixedArray(values, self.size)

    def empty(self) -> FixedArray:
        return FixedArray.filled(self.size, self.default())

    def rebind(self, element_type : type) -> 'FixedFamily':
        return attr.evolve(self, element_type=element_type)

    def sort(self, storage : FixedArray, key=None, reverse : bool = False) -> None:
        storage.sort(key=key, reverse=reverse)

    def truncate(self, storage, size):
        raise TypeError('fixed size storage can not be truncated')

    def max_size(self) -> int:
        return self.size


def family_of(container, element_type : type = object) -> Family:
    '''Family describing an existing container'''
    if isinstance(container, FixedArray):
        return FixedFamily(len(container), element_type)
    if isinstance(container, array.array):
        return ArrayFamily(container.typecode)
    if isinstance(container, deque):
        return DequeFamily(container.maxlen, element_type)
    if isinstance(container, (Mapping, Set)):
        raise FamilyError(f'{type(container).__qualname__} is not an ordered sequence of one element type')
    if isinstance(container, MutableSequence):
        return SequenceFamily(type(container), element_type)
    raise FamilyError(f'{type(container).__qualname__} is not a mutable sequence')


def family_of_type(container_type : type, element_type : type = object) -> Family:
    '''Resizable family for a container class'''
    if not isinstance(container_type, type):
        raise FamilyError(f'{container_type!r} is not a container type')
    if issubclass(container_type, FixedArray):
        raise FamilyError('a fixed size family needs a size')
    if issubclass(container_type, array.array):
        return ArrayFamily.for_type(element_type)
    if issubclass(container_type, deque):
        return DequeFamily(None, element_type)
    if issubclass(container_type, MutableSequence) and not issubclass(container_type, (Mapping, Set)):
        return SequenceFamily(container_type, element_type)
    raise FamilyError(f'{container_type.__qualname__} is not a mutable sequence type')
