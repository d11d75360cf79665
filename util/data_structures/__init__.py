from .fixed_array import FixedArray
from .views import CollectionView, SequenceView
