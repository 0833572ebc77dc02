"""Download legislator photos.

Reads the elected legislators CSV and scripts/photo-url-mapping.json
([{"name": ..., "photoUrl": ...}, ...]) and saves one <name>.jpg per
legislator into public/data/images.

Run from the repository root:
  python -m tools.download_photos
"""
import argparse
import time
from pathlib import Path
from typing import Dict, List

import requests

import utils
from chart_builder.config import IMAGES_DIR, LEGISLATORS_CSV, PHOTO_MAPPING_JSON
from chart_builder.io_utils import read_json
from chart_builder.records import load_legislators

DELAY_SECONDS = 0.2
TIMEOUT_SECONDS = 30


def looks_like_html(path: Path) -> bool:
    """True for files that are really an HTML error page saved under .jpg."""
    head = path.read_bytes()[:100].decode("utf-8", errors="ignore")
    return "<!DOCTYPE" in head or "<html" in head


def download_image(session: requests.Session, url: str, filepath: Path):
    # requests follows 301/302 redirects by default
    response = session.get(url, timeout=TIMEOUT_SECONDS)
    response.raise_for_status()
    filepath.write_bytes(response.content)


def download_all(names: List[str], photo_mapping: List[Dict[str, str]], images_dir: Path,
                 session: requests.Session, delay: float = DELAY_SECONDS) -> Dict[str, list]:
    images_dir.mkdir(parents=True, exist_ok=True)
    succeeded: List[str] = []
    failed: List[Dict[str, str]] = []
    total = len(names)

    for i, name in enumerate(names, start=1):
        url = utils.find_photo_url(name, photo_mapping)
        if not url:
            print(f"[{i}/{total}] ✗ {name} - no photo URL")
            failed.append({"name": name, "error": "no photo URL"})
            continue

        filepath = images_dir / f"{name}.jpg"
        if filepath.exists():
            if looks_like_html(filepath):
                print(f"[{i}/{total}] {name} - existing file is an HTML page, downloading again")
                filepath.unlink()
            else:
                print(f"[{i}/{total}] {name} - already exists, skipping")
                succeeded.append(name)
                continue

        try:
            download_image(session, url, filepath)
        except requests.RequestException as e:
            print(f"[{i}/{total}] ✗ {name} - download failed: {e}")
            failed.append({"name": name, "url": url, "error": str(e)})
            continue
        print(f"[{i}/{total}] ✓ {name}")
        succeeded.append(name)
        if delay:
            time.sleep(delay)

    return {"succeeded": succeeded, "failed": failed}


def main(csv_path: Path = LEGISLATORS_CSV, mapping_path: Path = PHOTO_MAPPING_JSON,
         images_dir: Path = IMAGES_DIR):
    names = [r.candidate_name for r in load_legislators(csv_path) if r.candidate_name]
    photo_mapping = read_json(mapping_path)
    print(f"Downloading photos for {len(names)} legislators...")

    with requests.Session() as session:
        result = download_all(names, photo_mapping, images_dir, session)

    print("\nDone.")
    print(f"Succeeded: {len(result['succeeded'])}")
    print(f"Failed: {len(result['failed'])}")
    if result["failed"]:
        print("\nFailed:")
        for item in result["failed"]:
            print(f"  - {item['name']}: {item['error']}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Download elected legislator photos")
    parser.add_argument("--csv", type=Path, default=LEGISLATORS_CSV)
    parser.add_argument("--mapping", type=Path, default=PHOTO_MAPPING_JSON)
    parser.add_argument("--out", type=Path, default=IMAGES_DIR)
    args = parser.parse_args()
    main(args.csv, args.mapping, args.out)
