import typing as tp
from errors import FixedSizeError

__all__ = ['FixedArray']

T = tp.TypeVar('T')

class FixedArray(tp.Sequence[T]):
    '''
        Sequence whose length is set at construction and never changes.

        Elements may be replaced (including through equal length slice
        assignment) but nothing can be inserted or removed.
    '''
    __slots__ = '_data', '__weakref__'
    _data : tp.List[T]

    def __init__(self, values : tp.Iterable[T] = (), size : tp.Optional[int] = None):
        self._data = list(values)
        if size is not None and len(self._data) != size:
            raise FixedSizeError(f'expected {size} values, got {len(self._data)}')

    @classmethod
    def filled(cls, size : int, value : T) -> 'FixedArray[T]':
        return cls([value] * size)

    def __getitem__(self, i):
        return self._data[i]

    def __setitem__(self, i, value) -> None:
        if isinstance(i, slice):
            value = list(value)
            if len(range(*i.indices(len(self._data)))) != len(value):
                raise FixedSizeError('slice assignment would change the size of a FixedArray')
        self._data[i] = value

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> tp.Iterator[T]:
        return iter(self._data)

    def __reversed__(self) -> tp.Iterator[T]:
        return reversed(self._data)

    def __eq__(self, other) -> bool:
        if isinstance(other, FixedArray):
            return self._data == other._data
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self._data!r})'

    def reverse(self) -> None:
        self._data.reverse()

    def sort(self, key=None, reverse : bool = False) -> None:
        self._data.sort(key=key, reverse=reverse)
