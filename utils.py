import re
from typing import Dict, List, Optional

import params


def party_code(party_name) -> str:
    """
    Convert a party name from the results table to its short code (ex. DPP, KMT).
    Blank, missing or "無" parties are independents.
    """
    if party_name is None:
        return params.INDEPENDENT_CODE
    name = str(party_name).strip()
    if not name or name == "無" or name.lower() == "nan":
        return params.INDEPENDENT_CODE
    return params.PARTY_CODES.get(name, params.INDEPENDENT_CODE)


def party_color(code: str) -> str:
    return params.PARTY_COLORS.get(code, params.PARTY_COLORS[params.INDEPENDENT_CODE])


def votes_str(votes) -> str:
    """Format a vote count with thousands separators (ex. 123,456); '-' when missing."""
    if votes is None:
        return "-"
    try:
        return f"{int(votes):,}"
    except (ValueError, TypeError):
        return "-"


def level_color(level) -> str:
    """Map a grid cell's discrete level (0-5) to its fill colour."""
    if level is None:
        return params.MISSING_LEVEL_COLOR
    try:
        lv = int(level)
    except (ValueError, TypeError):
        return params.MISSING_LEVEL_COLOR
    return params.LEVEL_COLORS.get(lv, params.MISSING_LEVEL_COLOR)


def normalize_dots(name: str) -> str:
    # Aboriginal names use several middle-dot variants
    return name.replace(".", "‧").replace("·", "‧")


def find_photo_url(candidate_name: str, photo_mapping: List[Dict[str, str]]) -> Optional[str]:
    """Look up a legislator photo URL by name, trying progressively looser matches.

    photo_mapping: list of {"name": ..., "photoUrl": ...} entries.
    Order: exact, whitespace removed, dot variants normalised, then a prefix
    match on the first whitespace-separated token (drops romanised names).
    """
    for entry in photo_mapping:
        if entry.get("name") == candidate_name:
            return entry.get("photoUrl")

    no_space = re.sub(r"\s+", "", candidate_name)
    for entry in photo_mapping:
        if re.sub(r"\s+", "", entry.get("name", "")) == no_space:
            return entry.get("photoUrl")

    normalized = normalize_dots(candidate_name)
    for entry in photo_mapping:
        if entry.get("name") == normalized:
            return entry.get("photoUrl")

    parts = candidate_name.split()
    main_name = parts[0] if parts else candidate_name
    if main_name:
        for entry in photo_mapping:
            if entry.get("name", "").startswith(main_name):
                return entry.get("photoUrl")

    return None
