from .base import BaseHandle
from .concat import ConcatHandle
from .drop import DropHandle
from .filter import FilterHandle
from .flat_map import FlatMapHandle
from .map import MapHandle
from .map_error import MapErrorHandle, ResultHandle
from .slice import slice_handle
from .take import TakeHandle

__all__ = (
    "BaseHandle",
    "ConcatHandle",
    "DropHandle",
    "FilterHandle",
    "FlatMapHandle",
    "MapErrorHandle",
    "MapHandle",
    "ResultHandle",
    "TakeHandle",
    "slice_handle",
)
