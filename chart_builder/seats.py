"""Hemicycle seat layout.

Seats sit on `row_count` concentric half-circle arcs. Each row gets a share of
the seats proportional to its arc length, the outermost row absorbs the
rounding drift, and seats are numbered left to right (angle pi -> 0).
Parties then take contiguous blocks of that left-to-right order, centre block
first.
"""
from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import params
from .errors import ConfigurationMismatch
from .records import PartyAllocation, SeatRecord, group_by_party, rank_candidates


@dataclass(frozen=True)
class SeatPosition:
    x: float
    y: float
    row: int
    angle: float
    seat_number: int


@dataclass(frozen=True)
class SeatBinding:
    seat_index: int
    party_id: str
    candidate: SeatRecord
    rank: int


def _round_half_up(x: float) -> int:
    # Math.round semantics; Python's round() is banker's rounding
    return int(math.floor(x + 0.5))


def row_radii(row_count: int, inner_radius: float, outer_radius: float) -> List[float]:
    if row_count == 1:
        return [inner_radius]
    step = (outer_radius - inner_radius) / (row_count - 1)
    return [inner_radius + i * step for i in range(row_count)]


def row_seat_counts(total_seats: int, radii: Sequence[float]) -> List[int]:
    """Seats per row, proportional to arc length; the last row takes the remainder.

    Rows before the last are capped at what is still unallocated, so the last
    row never goes negative when several rows round up.
    """
    arcs = [math.pi * r for r in radii]
    total_arc = sum(arcs)
    counts: List[int] = []
    allocated = 0
    for arc in arcs[:-1]:
        n = _round_half_up(total_seats * arc / total_arc)
        n = min(n, total_seats - allocated)
        counts.append(n)
        allocated += n
    counts.append(total_seats - allocated)
    return counts


def generate_seats(total_seats: int, row_count: int = params.SEAT_ROWS,
                   inner_radius: float = params.INNER_RADIUS,
                   outer_radius: float = params.OUTER_RADIUS) -> List[SeatPosition]:
    if total_seats < 0:
        raise ConfigurationMismatch(f"total_seats must be >= 0, got {total_seats}")
    if row_count < 1:
        raise ConfigurationMismatch(f"row_count must be >= 1, got {row_count}")
    if not (inner_radius > 0) or not math.isfinite(inner_radius):
        raise ConfigurationMismatch(f"inner_radius must be > 0, got {inner_radius}")
    if not (outer_radius >= inner_radius) or not math.isfinite(outer_radius):
        raise ConfigurationMismatch(f"outer_radius {outer_radius} is smaller than inner_radius {inner_radius}")
    if total_seats == 0:
        return []

    radii = row_radii(row_count, inner_radius, outer_radius)
    counts = row_seat_counts(total_seats, radii)

    raw = []  # (x, y, row, angle)
    for row, (r, n) in enumerate(zip(radii, counts)):
        if n <= 0:
            continue
        if n == 1:
            angles = [math.pi / 2]
        else:
            step = math.pi / (n - 1)
            angles = [j * step for j in range(n)]
        for theta in angles:
            raw.append((r * math.cos(theta), r * math.sin(theta), row, theta))

    # left to right; sorted() is stable so equal angles keep row order
    raw.sort(key=lambda s: -s[3])
    return [
        SeatPosition(x=x, y=y, row=row, angle=theta, seat_number=i + 1)
        for i, (x, y, row, theta) in enumerate(raw)
    ]


def natural_center_index(allocations: Sequence[PartyAllocation]) -> int:
    """Centre block start for which the left-side blocks exactly fill the seats before it."""
    return sum(a.seat_count for a in allocations[1::2])


def assign_parties(seats: Sequence[SeatPosition], allocations: Sequence[PartyAllocation],
                   center_start_index: Optional[int] = None) -> Dict[int, PartyAllocation]:
    """Map each seat index (into the left-to-right order) to its party.

    allocations[0] is the centre block starting at center_start_index.
    allocations[1] fills leftward from center_start_index - 1 down to 0,
    allocations[2] fills rightward after the centre block; any further
    allocations keep alternating left/right outward from the previous block.
    Raises ConfigurationMismatch instead of clamping when the blocks do not
    exactly partition the seats.
    """
    n = len(seats)
    if not allocations:
        if n:
            raise ConfigurationMismatch(f"no allocations for {n} seats")
        return {}

    for a in allocations:
        if a.seat_count <= 0:
            raise ConfigurationMismatch(f"{a.party_id} has non-positive seat_count {a.seat_count}")
    total = sum(a.seat_count for a in allocations)
    if total != n:
        raise ConfigurationMismatch(f"allocations sum to {total} seats but layout has {n}")

    if center_start_index is None:
        center_start_index = natural_center_index(allocations)
    center = allocations[0]
    c = center_start_index
    if c < 0 or c + center.seat_count > n:
        raise ConfigurationMismatch(
            f"centre block {center.party_id} [{c}, {c + center.seat_count}) is outside 0..{n}")

    left = allocations[1::2]
    left_total = sum(a.seat_count for a in left)
    if left_total != c:
        raise ConfigurationMismatch(
            f"left-side blocks hold {left_total} seats but centre starts at index {c}")

    assignment: Dict[int, PartyAllocation] = {}
    for i in range(c, c + center.seat_count):
        assignment[i] = center

    cursor = c - 1
    for alloc in left:
        for _ in range(alloc.seat_count):
            assignment[cursor] = alloc
            cursor -= 1

    cursor = c + center.seat_count
    for alloc in allocations[2::2]:
        for _ in range(alloc.seat_count):
            assignment[cursor] = alloc
            cursor += 1

    return dict(sorted(assignment.items()))


def bind_candidates(seats: Sequence[SeatPosition], assignment: Dict[int, PartyAllocation],
                    records: Sequence[SeatRecord]) -> List[SeatBinding]:
    """Bind each party's candidates to its seats, strongest candidate first.

    Within a party block seats are ordered outer row first, then nearest the
    top centre; candidates are ordered by votes (descending, stable).
    """
    seats_by_party: Dict[str, List[int]] = defaultdict(list)
    for idx in sorted(assignment):
        seats_by_party[assignment[idx].party_id].append(idx)
    candidates = group_by_party(rank_candidates(records))

    unseated = sorted(set(candidates) - set(seats_by_party))
    if unseated:
        raise ConfigurationMismatch(f"candidates without seats for parties: {unseated}")

    bindings: List[SeatBinding] = []
    for party, idxs in seats_by_party.items():
        cands = candidates.get(party, [])
        if len(cands) != len(idxs):
            raise ConfigurationMismatch(
                f"{party} has {len(idxs)} seats but {len(cands)} candidates")
        order = sorted(idxs, key=lambda i: (-seats[i].row, abs(seats[i].angle - math.pi / 2)))
        for rank, (i, cand) in enumerate(zip(order, cands), start=1):
            bindings.append(SeatBinding(seat_index=i, party_id=party, candidate=cand, rank=rank))

    bindings.sort(key=lambda b: b.seat_index)
    return bindings


def seat_radius(vote_count, area_divisor: float = params.AREA_DIVISOR,
                default_radius: float = params.DEFAULT_SEAT_RADIUS) -> float:
    """Circle radius whose area is proportional to the vote count."""
    if not vote_count or vote_count <= 0:
        return default_radius
    return math.sqrt(vote_count / (area_divisor * math.pi))
