"""Thin wrapper to build the chart images using the chart_builder package."""
import argparse
from pathlib import Path

import params
from chart_builder.config import FLOWS_CSV, GRID_GEOJSON, LEGISLATORS_CSV, OUT_DIR
from chart_builder.main import build_charts


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Build legislator election charts (hemicycle, bars, treemap, grid map)")
    parser.add_argument("--view", dest="views", action="append", choices=params.VIEWS,
                        help="View to build; repeat for several (default: all)")
    parser.add_argument("--out-dir", type=Path, default=OUT_DIR)
    parser.add_argument("--legislators", type=Path, default=LEGISLATORS_CSV, help="Elected legislators CSV")
    parser.add_argument("--grid", type=Path, default=GRID_GEOJSON, help="Grid map GeoJSON")
    parser.add_argument("--flows", type=Path, default=FLOWS_CSV, help="Flow arrows CSV (optional)")
    args = parser.parse_args()

    build_charts(views=args.views, out_dir=args.out_dir, legislators_csv=args.legislators,
                 grid_geojson=args.grid, flows_csv=args.flows)
