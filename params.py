from typing import List, Dict, Optional


# Party name (as printed in the CEC results) -> short code.
# Anything not listed here, including a blank party or "無", counts as IND.
PARTY_CODES: Dict[str, str] = {
    "民主進步黨": "DPP",
    "中國國民黨": "KMT",
}
INDEPENDENT_CODE = "IND"

PARTY_COLORS = {
    "DPP": "#1B9431",
    "KMT": "#000095",
    "IND": "#9E9E9E",
}

PARTY_LABELS = {
    "DPP": "民主進步黨",
    "KMT": "中國國民黨",
    "IND": "無黨籍",
}

# Seat blocks are laid out centre-first: the first party sits in the middle
# of the hemicycle, the second fills to its left, the third to its right.
PARTY_ORDER: List[str] = ["IND", "DPP", "KMT"]

# Override for the centre block start index. None = derive it from the
# allocations so the left block exactly fills the seats before it.
CENTER_START_INDEX: Optional[int] = None

# Hemicycle geometry (pixels)
SEAT_ROWS = 5
INNER_RADIUS = 60.0
OUTER_RADIUS = 260.0

# Seat circle area is votes / AREA_DIVISOR (hand tuned for ~100k-vote seats)
AREA_DIVISOR = 300.0
DEFAULT_SEAT_RADIUS = 8.0

# Grid map
MAP_PADDING = 40.0
MAP_FLOW_MAX_WIDTH = 6.0
MAP_FLOW_SHRINK = 0.3

# Discrete grid levels 0..5 (light -> dark)
LEVEL_COLORS: Dict[int, str] = {
    0: "#F7F7F7",
    1: "#D9F0D3",
    2: "#A6DBA0",
    3: "#5AAE61",
    4: "#1B7837",
    5: "#00441B",
}
MISSING_LEVEL_COLOR = "#333333"

# Chart canvas (pixels) and dpi for saved figures
CHART_WIDTH = 800
CHART_HEIGHT = 500
CHART_DPI = 100

# CSV column names in elected_legislators_final.csv
COL_COUNTY = "縣市"
COL_DISTRICT = "選區"
COL_NAME = "候選人姓名"
COL_PARTY = "推薦政黨"
COL_VOTES = "得票數"

VIEWS: List[str] = ["circle", "rect", "bar", "bar2", "treemap", "map"]
