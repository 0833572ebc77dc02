"""Candidate records and party allocations.

Loads elected_legislators_final.csv (one row per elected legislator) into
SeatRecord values and derives the per-party seat allocations that drive the
hemicycle layout.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pandas as pd

import params
import utils


@dataclass(frozen=True)
class SeatRecord:
    party_id: str
    candidate_name: str
    vote_count: int
    county: str = ""
    district: str = ""


@dataclass(frozen=True)
class PartyAllocation:
    party_id: str
    color: str
    seat_count: int


REQUIRED_COLUMNS = [params.COL_NAME, params.COL_VOTES]


def records_from_frame(df: pd.DataFrame) -> List[SeatRecord]:
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"legislator table missing columns: {missing}")

    df = df.copy()
    # votes: blank/invalid -> 0
    df[params.COL_VOTES] = pd.to_numeric(df[params.COL_VOTES], errors="coerce").fillna(0).astype(int)

    out: List[SeatRecord] = []
    for _, row in df.iterrows():
        party = row[params.COL_PARTY] if params.COL_PARTY in df.columns else None
        if pd.isna(party):
            party = None
        out.append(SeatRecord(
            party_id=utils.party_code(party),
            candidate_name=str(row[params.COL_NAME]).strip(),
            vote_count=max(0, int(row[params.COL_VOTES])),
            county=_text(row.get(params.COL_COUNTY)),
            district=_text(row.get(params.COL_DISTRICT)),
        ))
    return out


def _text(v) -> str:
    if v is None or pd.isna(v):
        return ""
    return str(v).strip()


def load_legislators(path: Path) -> List[SeatRecord]:
    if not Path(path).exists():
        raise FileNotFoundError(f"CSV not found: {path}")
    try:
        df = pd.read_csv(path, dtype=str, encoding="utf-8-sig")
    except pd.errors.EmptyDataError:
        return []
    df.columns = [str(c).strip() for c in df.columns]
    return records_from_frame(df)


def rank_candidates(records: Sequence[SeatRecord]) -> List[SeatRecord]:
    """Sort by vote count descending; ties keep their original order."""
    return sorted(records, key=lambda r: -r.vote_count)


def group_by_party(records: Sequence[SeatRecord]) -> Dict[str, List[SeatRecord]]:
    g: Dict[str, List[SeatRecord]] = defaultdict(list)
    for r in records:
        g[r.party_id].append(r)
    return dict(g)


def allocations_from_records(records: Sequence[SeatRecord],
                             order: Optional[List[str]] = None) -> List[PartyAllocation]:
    """One allocation per party present, centre party first.

    Parties missing from `order` are appended after it, largest first.
    """
    order = list(order if order is not None else params.PARTY_ORDER)
    counts = group_by_party(records)
    extra = sorted((p for p in counts if p not in order), key=lambda p: -len(counts[p]))

    out: List[PartyAllocation] = []
    for party in order + extra:
        n = len(counts.get(party, []))
        if n > 0:
            out.append(PartyAllocation(party_id=party, color=utils.party_color(party), seat_count=n))
    return out


def interleave_by_party(records: Sequence[SeatRecord]) -> List[SeatRecord]:
    """Round-robin candidates across parties (largest party first), each party in rank order.

    Used for the staggered bar chart: DPP #1, KMT #1, IND #1, DPP #2, ...
    """
    by_party = group_by_party(rank_candidates(records))
    order = {p: i for i, p in enumerate(params.PARTY_ORDER)}
    parties = sorted(by_party, key=lambda p: (-len(by_party[p]), order.get(p, len(order))))

    out: List[SeatRecord] = []
    depth = max((len(v) for v in by_party.values()), default=0)
    for i in range(depth):
        for p in parties:
            if i < len(by_party[p]):
                out.append(by_party[p][i])
    return out
