"""Matplotlib drawing for the chart views.

Drawing handles live on an explicit RenderContext rather than at module
level. Acquire one with `render_context()` (or create/destroy by hand); every
draw function takes the context and returns it.
"""
from __future__ import annotations

import math
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Optional, Sequence

import matplotlib.pyplot as plt
import matplotlib.patches as mpatches
import squarify

import params
import utils
from .classify import median
from .config import FOOTER_TEXT, LAST_UPDATED
from .errors import InvalidViewport
from .grid import FlowArrow, GridCell, GridLayoutConfig, cell_to_pixel, flow_segments
from .records import SeatRecord, group_by_party, interleave_by_party, rank_candidates
from .seats import SeatBinding, SeatPosition, seat_radius


@dataclass
class RenderContext:
    fig: plt.Figure
    ax: plt.Axes
    width: int
    height: int
    dpi: int
    closed: bool = False


def create_render_context(width: int = params.CHART_WIDTH, height: int = params.CHART_HEIGHT,
                          dpi: int = params.CHART_DPI) -> RenderContext:
    for v in (width, height, dpi):
        if not isinstance(v, (int, float)) or not math.isfinite(v) or v <= 0:
            raise InvalidViewport(f"render viewport must be positive and finite, got {width}x{height}@{dpi}")
    fig, ax = plt.subplots(1, 1, figsize=(width / dpi, height / dpi), dpi=dpi)
    return RenderContext(fig=fig, ax=ax, width=int(width), height=int(height), dpi=int(dpi))


def destroy_render_context(ctx: RenderContext):
    if not ctx.closed:
        plt.close(ctx.fig)
        ctx.closed = True


@contextmanager
def render_context(width: int = params.CHART_WIDTH, height: int = params.CHART_HEIGHT,
                   dpi: int = params.CHART_DPI) -> Iterator[RenderContext]:
    ctx = create_render_context(width, height, dpi)
    try:
        yield ctx
    finally:
        destroy_render_context(ctx)


def _require_open(ctx: RenderContext):
    if ctx.closed:
        raise RuntimeError("render context already destroyed")


def _party_legend(ax, counts: Dict[str, int], loc="lower center"):
    handles = []
    for party, n in counts.items():
        label = f"{params.PARTY_LABELS.get(party, party)} ({n})"
        handles.append(mpatches.Patch(color=utils.party_color(party), label=label))
    if handles:
        ax.legend(handles=handles, loc=loc, ncol=min(4, len(handles)), fontsize=8, frameon=False)


def draw_parliament(ctx: RenderContext, seats: Sequence[SeatPosition], bindings: Sequence[SeatBinding],
                    shape: str = "circle", title: Optional[str] = None,
                    area_divisor: float = params.AREA_DIVISOR,
                    default_radius: float = params.DEFAULT_SEAT_RADIUS) -> RenderContext:
    """Hemicycle of seats sized by votes: circles, or squares of equal area ("rect")."""
    _require_open(ctx)
    if shape not in ("circle", "rect"):
        raise ValueError(f"unknown seat shape: {shape}")
    ax = ctx.ax

    counts: Dict[str, int] = {}
    max_r = default_radius
    for b in bindings:
        seat = seats[b.seat_index]
        r = seat_radius(b.candidate.vote_count, area_divisor, default_radius)
        max_r = max(max_r, r)
        color = utils.party_color(b.party_id)
        if shape == "circle":
            patch = mpatches.Circle((seat.x, seat.y), r, facecolor=color, edgecolor="white", linewidth=0.5)
        else:
            side = r * math.sqrt(math.pi)
            patch = mpatches.Rectangle((seat.x - side / 2, seat.y - side / 2), side, side,
                                       facecolor=color, edgecolor="white", linewidth=0.5)
        ax.add_patch(patch)
        counts[b.party_id] = counts.get(b.party_id, 0) + 1

    extent = max([math.hypot(s.x, s.y) for s in seats] or [params.OUTER_RADIUS]) + 2 * max_r
    ax.set_xlim(-extent, extent)
    ax.set_ylim(-0.25 * extent, extent)
    ax.set_aspect("equal")
    ax.axis("off")
    ax.text(0, 0, f"{len(seats)}", ha="center", va="bottom", fontsize=20, fontweight="bold")
    _party_legend(ax, counts)
    if title:
        ax.set_title(title)
    return ctx


def draw_vote_bars(ctx: RenderContext, records: Sequence[SeatRecord], interleave: bool = False,
                   title: Optional[str] = None) -> RenderContext:
    """Candidate vote bars, strongest first (or staggered across parties) with a median line."""
    _require_open(ctx)
    ax = ctx.ax
    ordered = interleave_by_party(records) if interleave else rank_candidates(records)
    if not ordered:
        ax.text(0.5, 0.5, "No data", ha="center", transform=ax.transAxes)
        ax.axis("off")
        return ctx

    x_idx = list(range(len(ordered)))
    votes = [r.vote_count for r in ordered]
    colors = [utils.party_color(r.party_id) for r in ordered]
    ax.bar(x_idx, votes, width=0.8, color=colors)

    mid = median(votes)
    if mid is not None:
        ax.axhline(mid, color="white", linestyle="--", linewidth=1, label=f"Median {utils.votes_str(mid)}")
        ax.legend(loc="upper right", fontsize=8)

    ax.set_xticks(x_idx)
    ax.set_xticklabels([r.candidate_name for r in ordered], rotation=90, fontsize=6)
    ax.set_ylabel("得票數")
    y_vals = ax.get_yticks()
    ax.set_yticks(y_vals)
    ax.set_yticklabels([utils.votes_str(v) for v in y_vals])
    ax.grid(True, axis="y", alpha=0.3)
    if title:
        ax.set_title(title)
    return ctx


def draw_treemap(ctx: RenderContext, records: Sequence[SeatRecord], title: Optional[str] = None) -> RenderContext:
    """Two-level treemap: party blocks sized by total votes, candidates inside."""
    _require_open(ctx)
    ax = ctx.ax
    width, height = float(ctx.width), float(ctx.height)

    by_party = {p: [r for r in rs if r.vote_count > 0] for p, rs in group_by_party(rank_candidates(records)).items()}
    by_party = {p: rs for p, rs in by_party.items() if rs}
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.axis("off")
    if not by_party:
        ax.text(width / 2, height / 2, "No data", ha="center")
        return ctx

    parties = sorted(by_party, key=lambda p: -sum(r.vote_count for r in by_party[p]))
    totals = [sum(r.vote_count for r in by_party[p]) for p in parties]
    party_rects = squarify.squarify(squarify.normalize_sizes(totals, width, height), 0, 0, width, height)

    for party, prect in zip(parties, party_rects):
        cands = by_party[party]
        sizes = squarify.normalize_sizes([r.vote_count for r in cands], prect["dx"], prect["dy"])
        rects = squarify.squarify(sizes, prect["x"], prect["y"], prect["dx"], prect["dy"])
        color = utils.party_color(party)
        for cand, rect in zip(cands, rects):
            ax.add_patch(mpatches.Rectangle((rect["x"], rect["y"]), rect["dx"], rect["dy"],
                                            facecolor=color, edgecolor="black", linewidth=0.5))
            if rect["dx"] > 40 and rect["dy"] > 16:
                ax.text(rect["x"] + rect["dx"] / 2, rect["y"] + rect["dy"] / 2, cand.candidate_name,
                        ha="center", va="center", fontsize=6, color="white")
        ax.add_patch(mpatches.Rectangle((prect["x"], prect["y"]), prect["dx"], prect["dy"],
                                        fill=False, edgecolor="white", linewidth=2))

    _party_legend(ax, {p: len(by_party[p]) for p in parties}, loc="upper right")
    if title:
        ax.set_title(title)
    return ctx


def draw_grid_map(ctx: RenderContext, cells: Sequence[GridCell], layout: GridLayoutConfig,
                  flows: Optional[Sequence[FlowArrow]] = None, title: Optional[str] = None) -> RenderContext:
    """Level-coloured grid squares in pixel space, with optional flow arrows."""
    _require_open(ctx)
    ax = ctx.ax
    size = layout.cell_size
    for cell in cells:
        x, y = cell_to_pixel(cell, layout)
        ax.add_patch(mpatches.Rectangle((x, y), size, size, facecolor=utils.level_color(cell.level),
                                        edgecolor="black", linewidth=0.5))
        name = cell.properties.get("name")
        if name and size >= 24:
            ax.text(x + size / 2, y + size / 2, str(name), ha="center", va="center", fontsize=6, color="black")

    for seg in flow_segments(flows or [], layout, params.MAP_FLOW_MAX_WIDTH, params.MAP_FLOW_SHRINK):
        if seg.width <= 0:
            continue
        ax.annotate("", xy=(seg.x2, seg.y2), xytext=(seg.x1, seg.y1),
                    arrowprops=dict(arrowstyle="-|>", lw=seg.width, color="orange", shrinkA=0, shrinkB=0))

    ax.set_xlim(0, ctx.width)
    ax.set_ylim(ctx.height, 0)  # pixel space, y down
    ax.set_aspect("equal")
    ax.axis("off")
    if title:
        ax.set_title(title)
    return ctx


def save(ctx: RenderContext, path: Path, footer: bool = True) -> Path:
    _require_open(ctx)
    if footer:
        ctx.fig.text(0.99, 0.01, f"{FOOTER_TEXT} · {LAST_UPDATED}", ha="right", va="bottom", fontsize=6)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    ctx.fig.savefig(path, dpi=ctx.dpi)
    return path
