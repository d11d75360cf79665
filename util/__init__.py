from .data_structures import FixedArray, CollectionView, SequenceView
from .timer import Timer, NullTimer
