from .scalar import (
    Scalar,
    Ordering
)
from .extents import Extents
from .index import (
    Index,
    Order
)
from .array import Array
from .views import (
    Vector,
    Matrix
)
from .dot import (
    Dot,
    dot
)
from .schedule import (
    Schedule,
    ScheduleOp
)
from .fft import (
    FFTDirection,
    Transform,
    Forward,
    Inverse,
    transform_axis
)
from .proc import Node
from .ists import (
    ReconstructionOptions,
    reconstruct,
    soft_threshold,
    spectrum
)

__all__ = [
    "Scalar",
    "Ordering",
    "Extents",
    "Index",
    "Order",
    "Array",
    "Vector",
    "Matrix",
    "Dot",
    "dot",
    "Schedule",
    "ScheduleOp",
    "FFTDirection",
    "Transform",
    "Forward",
    "Inverse",
    "transform_axis",
    "Node",
    "ReconstructionOptions",
    "reconstruct",
    "soft_threshold",
    "spectrum"
]
