'''
Positional conversions from a sequence of elements to tuple-like values.

Slots are filled left to right.  A slot with no element left to fill it
is default constructed and a ShortConversionWarning is issued; callers
that treat a short source as an error can escalate the warning with
`warnings.simplefilter('error', ShortConversionWarning)`.
'''
import numbers
import typing as tp
import warnings

from errors import ShortConversionWarning, SlotTypeError
from family import default_value

__all__ = ['coerce', 'to_pair', 'to_tuple', 'slot_layout']

TupleBuilder = tp.Callable[[tp.Sequence], tuple]

def coerce(value, slot_type : type):
    '''Value as stored into a slot of type `slot_type`'''
    if slot_type is object or isinstance(value, slot_type):
        return value
    if isinstance(value, numbers.Number) and issubclass(slot_type, numbers.Number):
        return slot_type(value)
    raise SlotTypeError(f'{value!r} can not be assigned to a slot of type {slot_type.__qualname__}')


def _is_namedtuple(cls) -> bool:
    return isinstance(cls, type) and issubclass(cls, tuple) and hasattr(cls, '_fields')

def slot_layout(
        slots : tp.Sequence,
        size : int,
        element_type : type) -> tp.Tuple[tp.Tuple[type, ...], TupleBuilder]:
    '''
        Slot types and result constructor for the `to_tuple` spellings:

        ()                  one slot per element
        (n,)                n slots of the element type
        (NamedTupleClass,)  the fields of the class
        (t0, t1, ...)       one slot per type
    '''
    if not slots:
        return (element_type,) * size, tuple
    if len(slots) == 1 and isinstance(slots[0], int) and not isinstance(slots[0], bool):
        n = slots[0]
        if n < 0:
            raise ValueError(f'negative slot count {n}')
        return (element_type,) * n, tuple
    if len(slots) == 1 and _is_namedtuple(slots[0]):
        cls = slots[0]
        hints = tp.get_type_hints(cls)
        types = tuple(hints.get(f, element_type) for f in cls._fields)
        return types, lambda values: cls(*values)
    for s in slots:
        if not isinstance(s, type):
            raise TypeError(f'slot type expected, got {s!r}')
    return tuple(slots), tuple


def _fill(values : tp.Sequence, types : tp.Sequence[type]) -> tp.List:
    filled = [coerce(v, t) for v, t in zip(values, types)]
    missing = len(types) - len(filled)
    if missing > 0:
        warnings.warn(
                f'{missing} of {len(types)} slots default constructed, source has {len(values)} elements',
                ShortConversionWarning,
                stacklevel=4)
        filled.extend(default_value(t) for t in types[len(filled):])
    return filled


def to_tuple(values : tp.Sequence, element_type : type, *slots) -> tuple:
    types, build = slot_layout(slots, len(values), element_type)
    return build(_fill(values, types))


def to_pair(
        values : tp.Sequence,
        element_type : type,
        first : tp.Optional[type] = None,
        second : tp.Optional[type] = None) -> tp.Tuple[tp.Any, tp.Any]:
    types = (first or element_type, second or element_type)
    return tuple(_fill(values, types))
