from pathlib import Path
import datetime

# Paths
DATA_DIR = Path("public") / "data"
LEGISLATORS_CSV = DATA_DIR / "csv" / "elected_legislators_final.csv"
GRID_GEOJSON = DATA_DIR / "geojson" / "taiwan_grid.geojson"
FLOWS_CSV = DATA_DIR / "csv" / "grid_flows.csv"
PHOTO_MAPPING_JSON = Path("scripts") / "photo-url-mapping.json"
IMAGES_DIR = DATA_DIR / "images"
OUT_DIR = Path("charts")

# timestamp stamped on chart footers (UTC at build time)
LAST_UPDATED = datetime.datetime.now(datetime.UTC).strftime("%Y-%m-%d %H:%M UTC")

FOOTER_TEXT = "2024 立法委員選舉 · 資料來源：中央選舉委員會"
