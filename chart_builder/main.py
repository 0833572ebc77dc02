from pathlib import Path
from typing import Iterable, List, Optional

import matplotlib.pyplot as plt

import params
from .config import FLOWS_CSV, GRID_GEOJSON, LEGISLATORS_CSV, OUT_DIR
from .grid import compute_layout, flows_from_rows, load_grid_cells
from .io_utils import ensure_dirs, read_csv, read_geojson
from .records import SeatRecord, allocations_from_records, load_legislators
from .render import draw_grid_map, draw_parliament, draw_treemap, draw_vote_bars, render_context, save
from .seats import assign_parties, bind_candidates, generate_seats

TITLES = {
    "circle": "2024 立法委員 當選席次",
    "rect": "2024 立法委員 當選席次（方形）",
    "bar": "2024 立法委員 得票數",
    "bar2": "2024 立法委員 得票數（交錯）",
    "treemap": "2024 立法委員 得票數樹狀圖",
    "map": "2024 立法委員 網格地圖",
}


def build_parliament(records: List[SeatRecord], shape: str, out_dir: Path) -> Path:
    allocations = allocations_from_records(records)
    seats = generate_seats(len(records), params.SEAT_ROWS, params.INNER_RADIUS, params.OUTER_RADIUS)
    assignment = assign_parties(seats, allocations, params.CENTER_START_INDEX)
    bindings = bind_candidates(seats, assignment, records)

    with render_context() as ctx:
        draw_parliament(ctx, seats, bindings, shape=shape, title=TITLES[shape])
        return save(ctx, out_dir / f"{shape}.png")


def build_bars(records: List[SeatRecord], view: str, out_dir: Path) -> Path:
    with render_context(width=max(params.CHART_WIDTH, 14 * len(records))) as ctx:
        draw_vote_bars(ctx, records, interleave=(view == "bar2"), title=TITLES[view])
        ctx.fig.tight_layout()
        return save(ctx, out_dir / f"{view}.png")


def build_treemap(records: List[SeatRecord], out_dir: Path) -> Path:
    with render_context() as ctx:
        draw_treemap(ctx, records, title=TITLES["treemap"])
        return save(ctx, out_dir / "treemap.png")


def build_map(grid_geojson: Path, flows_csv: Optional[Path], out_dir: Path) -> Path:
    cells = load_grid_cells(read_geojson(grid_geojson))
    flows = []
    if flows_csv is not None and flows_csv.exists():
        flows = flows_from_rows(read_csv(flows_csv))

    with render_context(params.CHART_HEIGHT, params.CHART_HEIGHT) as ctx:
        layout = compute_layout(cells, ctx.width, ctx.height, params.MAP_PADDING)
        draw_grid_map(ctx, cells, layout, flows, title=TITLES["map"])
        return save(ctx, out_dir / "map.png")


def build_charts(views: Optional[Iterable[str]] = None, out_dir: Path = OUT_DIR,
                 legislators_csv: Path = LEGISLATORS_CSV, grid_geojson: Path = GRID_GEOJSON,
                 flows_csv: Optional[Path] = FLOWS_CSV) -> List[Path]:
    views = list(views) if views is not None else list(params.VIEWS)
    unknown = [v for v in views if v not in params.VIEWS]
    if unknown:
        raise ValueError(f"unknown views: {unknown} (choose from {params.VIEWS})")

    plt.style.use("dark_background")
    ensure_dirs(out_dir)

    records: Optional[List[SeatRecord]] = None
    written: List[Path] = []
    for view in views:
        try:
            if view != "map" and records is None:
                records = load_legislators(legislators_csv)
                print(f"Loaded {len(records)} legislators from {legislators_csv}")

            if view in ("circle", "rect"):
                path = build_parliament(records, view, out_dir)
            elif view in ("bar", "bar2"):
                path = build_bars(records, view, out_dir)
            elif view == "treemap":
                path = build_treemap(records, out_dir)
            else:
                path = build_map(grid_geojson, flows_csv, out_dir)
        except (ValueError, FileNotFoundError) as e:
            print(f"Warning: couldn't build {view} chart: {e}")
            continue
        print(f"Wrote {path}")
        written.append(path)

    print(f"Done. Built {len(written)} of {len(views)} charts into {out_dir}")
    return written
