from .assignment import IndexSpan, assign_range, assign_span
from .parallel import NdRangeParIter, NdRangeProducer
from .ranges import InvalidRangeError, NdRange, Range1, Range2, Range3, Range4, Range5
from .sequential import NdRangeIter, ReversedNdRangeIter
from .state import IterState

__all__ = [
    "NdRange",
    "Range1",
    "Range2",
    "Range3",
    "Range4",
    "Range5",
    "InvalidRangeError",
    "IterState",
    "NdRangeIter",
    "ReversedNdRangeIter",
    "NdRangeProducer",
    "NdRangeParIter",
    "IndexSpan",
    "assign_span",
    "assign_range",
]
