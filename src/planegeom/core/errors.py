"""
Error types raised by the geometry engine.

All errors abort only the call that raised them. A ``None`` argument is
never an error: it is propagated as a ``None`` result instead.
"""

from typing import Optional, Tuple


class GeometryError(Exception):
    """Base class for every error raised by planegeom."""


class InvalidGeometry(GeometryError, ValueError):
    """A structural invariant was violated while building a geometry."""


class MalformedInput(GeometryError, ValueError):
    """Text or binary input could not be decoded."""


class MalformedWkt(MalformedInput):
    """Syntax error in well-known text."""


class MalformedWkb(MalformedInput):
    """Truncated or unrecognised well-known binary."""


class TopologyException(GeometryError):
    """
    A geometric operation failed because an input is topologically invalid.

    Parameters
    ----------
    operation : str
        Name of the failing operation, e.g. ``"contains"`` or ``"union"``.
    detail : str
        Description of the defect, without the location.
    location : tuple of float, optional
        Coordinate of the defect when known.
    action : str
        ``"check"`` for predicates, ``"compute"`` for constructive operations.
    """

    def __init__(
        self,
        operation: str,
        detail: str,
        location: Optional[Tuple[float, float]] = None,
        action: str = "check"
    ):
        self.operation = operation
        self.detail = detail
        self.location = location
        self.action = action
        super().__init__(self._format())

    def _format(self) -> str:
        text = f"Failed to {self.action} geometry {self.operation}: TopologyException: {self.detail}"
        if self.location is not None:
            text += " at {} {}".format(*(_format_ordinate(v) for v in self.location))
        if self.action == "check":
            text += ". This can occur if the input geometry is invalid."
        return text


def _format_ordinate(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
