'''Read only adapters over mutable sequences'''
import typing as tp

__all__ = ['CollectionView', 'SequenceView']

T_co = tp.TypeVar('T_co', covariant=True)

class CollectionView(tp.Collection[T_co]):
    __slots__ = '_obj',

    _obj : tp.Collection[T_co]

    def __init__(self, obj : tp.Collection[T_co]) -> None:
        self._obj = obj

    def __contains__(self, elem) -> bool:
        return self._obj.__contains__(elem)

    def __iter__(self) -> tp.Iterator[T_co]:
        return self._obj.__iter__()

    def __len__(self) -> int:
        return self._obj.__len__()

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self._obj.__repr__()})'


class SequenceView(CollectionView[T_co], tp.Sequence[T_co]):
    '''
    Borrowed, read only window onto a sequence.

    Slicing a view yields another view over the sliced object, so no
    caller holding a view can reach the mutators of the underlying
    storage.
    '''
    __slots__ = ()

    _obj : tp.Sequence[T_co]

    @tp.overload
    def __getitem__(self, idx : int) -> T_co:
        ...

    @tp.overload
    def __getitem__(self, idx : slice) -> 'SequenceView[T_co]':
        ...

    def __getitem__(self, idx):
        if isinstance(idx, slice):
            return type(self)(self._obj[idx])
        return self._obj[idx]

    def __reversed__(self) -> tp.Iterator[T_co]:
        return reversed(self._obj)

    def __eq__(self, other) -> bool:
        if isinstance(other, SequenceView):
            other = other._obj
        if not isinstance(other, tp.Sequence):
            return NotImplemented
        return len(self) == len(other) and all(a == b for a, b in zip(self, other))

    __hash__ = None
