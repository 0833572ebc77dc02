"""Grid map layout.

Each map unit is a cell on an integer lattice (grid_x, grid_y). All cells are
drawn as equal squares: one cell size for both axes, the occupied bounding
box centred in the padded viewport, y flipped so north is up.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .errors import DuplicateGridCell, EmptyDataset, InvalidViewport


@dataclass(frozen=True)
class GridCell:
    grid_x: int
    grid_y: int
    level: Optional[int] = None
    properties: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class GridLayoutConfig:
    min_x: int
    max_x: int
    min_y: int
    max_y: int
    cell_size: float
    offset_x: float
    offset_y: float


@dataclass(frozen=True)
class FlowArrow:
    source: Tuple[int, int]
    target: Tuple[int, int]
    value: float


@dataclass(frozen=True)
class FlowSegment:
    x1: float
    y1: float
    x2: float
    y2: float
    width: float
    value: float


CellLike = Union[GridCell, Tuple[int, int]]


def _xy(cell: CellLike) -> Tuple[int, int]:
    if isinstance(cell, GridCell):
        return cell.grid_x, cell.grid_y
    x, y = cell
    return int(x), int(y)


def _valid_dimension(v) -> bool:
    try:
        return math.isfinite(v) and v > 0
    except TypeError:
        return False


def compute_layout(cells: Iterable[CellLike], viewport_width: float, viewport_height: float,
                   padding: float = 0.0) -> GridLayoutConfig:
    if not _valid_dimension(viewport_width) or not _valid_dimension(viewport_height):
        raise InvalidViewport(f"viewport must be positive and finite, got {viewport_width}x{viewport_height}")

    coords = [_xy(c) for c in cells]
    if not coords:
        raise EmptyDataset("no grid cells to lay out")
    if len(set(coords)) != len(coords):
        seen, dupes = set(), set()
        for xy in coords:
            if xy in seen:
                dupes.add(xy)
            seen.add(xy)
        raise DuplicateGridCell(f"duplicate grid cells: {sorted(dupes)}")

    xs = [x for x, _ in coords]
    ys = [y for _, y in coords]
    min_x, max_x = min(xs), max(xs)
    min_y, max_y = min(ys), max(ys)
    range_x = max_x - min_x + 1
    range_y = max_y - min_y + 1

    avail_w = viewport_width - 2 * padding
    avail_h = viewport_height - 2 * padding
    cell_size = min(avail_w / range_x, avail_h / range_y)
    if not math.isfinite(cell_size) or cell_size <= 0:
        raise InvalidViewport(
            f"padding {padding} leaves no room in a {viewport_width}x{viewport_height} viewport")

    offset_x = padding + (avail_w - range_x * cell_size) / 2
    offset_y = padding + (avail_h - range_y * cell_size) / 2
    return GridLayoutConfig(min_x=min_x, max_x=max_x, min_y=min_y, max_y=max_y,
                            cell_size=cell_size, offset_x=offset_x, offset_y=offset_y)


def cell_to_pixel(cell: CellLike, layout: GridLayoutConfig) -> Tuple[float, float]:
    """Top-left pixel corner of a cell; larger grid_y renders higher."""
    gx, gy = _xy(cell)
    x = layout.offset_x + (gx - layout.min_x) * layout.cell_size
    y = layout.offset_y + (layout.max_y - gy) * layout.cell_size
    return x, y


def cell_center(cell: CellLike, layout: GridLayoutConfig) -> Tuple[float, float]:
    x, y = cell_to_pixel(cell, layout)
    half = layout.cell_size / 2
    return x + half, y + half


def load_grid_cells(features: Sequence[Dict[str, Any]]) -> List[GridCell]:
    """Build GridCells from GeoJSON features carrying properties.grid_x / grid_y / level."""
    out: List[GridCell] = []
    for feat in features:
        props = dict(feat.get("properties") or {})
        if "grid_x" not in props or "grid_y" not in props:
            raise ValueError(f"feature missing grid_x/grid_y: {props}")
        gx = int(props.pop("grid_x"))
        gy = int(props.pop("grid_y"))
        level = props.pop("level", None)
        if level is not None and level != "":
            level = int(level)
            if not 0 <= level <= 5:
                raise ValueError(f"level must be in 0..5, got {level} at ({gx}, {gy})")
        else:
            level = None
        out.append(GridCell(grid_x=gx, grid_y=gy, level=level, properties=props))
    return out


def flow_segments(flows: Sequence[FlowArrow], layout: GridLayoutConfig,
                  max_width: float = 6.0, shrink: float = 0.3) -> List[FlowSegment]:
    """Project flow arrows to centre-to-centre pixel segments.

    Both ends are pulled in by `shrink` cells so arrow heads stay inside the
    cells; width scales linearly with value against the largest flow.
    """
    if not flows:
        return []
    peak = max(abs(f.value) for f in flows)
    pull = shrink * layout.cell_size

    out: List[FlowSegment] = []
    for f in flows:
        x1, y1 = cell_center(f.source, layout)
        x2, y2 = cell_center(f.target, layout)
        dx, dy = x2 - x1, y2 - y1
        dist = math.hypot(dx, dy)
        if dist > 2 * pull:
            ux, uy = dx / dist, dy / dist
            x1, y1 = x1 + ux * pull, y1 + uy * pull
            x2, y2 = x2 - ux * pull, y2 - uy * pull
        width = max_width * abs(f.value) / peak if peak > 0 else 0.0
        out.append(FlowSegment(x1=x1, y1=y1, x2=x2, y2=y2, width=width, value=f.value))
    return out


FLOW_COLUMNS = ["from_x", "from_y", "to_x", "to_y"]


def flows_from_rows(rows: Sequence[Dict[str, str]]) -> List[FlowArrow]:
    out: List[FlowArrow] = []
    for r in rows:
        missing = [c for c in FLOW_COLUMNS if c not in r]
        if missing:
            raise ValueError(f"flow table missing columns: {missing}")
        out.append(FlowArrow(
            source=(int(r["from_x"]), int(r["from_y"])),
            target=(int(r["to_x"]), int(r["to_y"])),
            value=float(r.get("value") or 0.0),
        ))
    return out
