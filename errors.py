'''
Exceptions and warnings raised by collections

Every exception also derives from the builtin a caller would expect, so
`except IndexError` still catches a failed `at`.
'''

__all__ = [
    'CollectionError',
    'OutOfRangeError',
    'FamilyError',
    'RebindError',
    'ElementTypeError',
    'SlotTypeError',
    'FixedSizeError',
    'CapacityError',
    'ShortConversionWarning',
    'PolicyWarning',
]

class CollectionError(Exception):
    pass

class OutOfRangeError(CollectionError, IndexError):
    def __init__(self, pos, size):
        super().__init__(f'position {pos} out of range for size {size}')
        self.pos = pos
        self.size = size

class FamilyError(CollectionError, TypeError):
    '''Container can not be described as a family over its element type'''

class RebindError(CollectionError, TypeError):
    def __init__(self, family, element_type):
        super().__init__(f'{family!r} can not hold elements of type {element_type.__qualname__}')
        self.family = family
        self.element_type = element_type

class ElementTypeError(CollectionError, TypeError):
    def __init__(self, value, element_type, reason=None):
        if reason is None:
            reason = f'not an instance of {element_type.__qualname__}'
        super().__init__(f'{value!r} is {reason}')
        self.value = value
        self.element_type = element_type

class SlotTypeError(CollectionError, TypeError):
    pass

class FixedSizeError(CollectionError, ValueError):
    pass

class CapacityError(CollectionError, ValueError):
    '''Size would exceed the max_size of the family'''

class ShortConversionWarning(UserWarning):
    pass

class PolicyWarning(UserWarning):
    pass
