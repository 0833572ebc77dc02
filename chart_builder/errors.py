"""Typed failures raised by the layout core.

The core never prints or swallows these; builders decide what to do with them.
"""


class LayoutError(ValueError):
    """Base class for layout failures."""


class ConfigurationMismatch(LayoutError):
    """Seat allocations, candidates or geometry do not fit together."""


class InvalidViewport(LayoutError):
    """Viewport is non-positive/non-finite or leaves no room for a cell."""


class EmptyDataset(LayoutError):
    """No records to lay out."""


class DuplicateGridCell(LayoutError):
    """Two grid cells share the same (grid_x, grid_y)."""
