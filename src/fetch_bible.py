"""
fetch_bible.py: download the flat-text Bible and its abbreviation table into data/

Usage:
    python src/fetch_bible.py BIBLE_URL
    python src/fetch_bible.py BIBLE_URL --abbreviations-url ABBREV_URL
    python src/fetch_bible.py BIBLE_URL --zstd      # store data/Bible.txt.zst
    python src/fetch_bible.py BIBLE_URL --force     # overwrite existing files

Existing files are skipped unless --force is given, so the run can be repeated.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import requests
import zstandard

sys.path.insert(0, str(Path(__file__).parent))

from bible_data import DATA_DIR

BIBLE_FILENAME = "Bible.txt"
ABBREVIATIONS_FILENAME = "Bible_Abbreviations.csv"

HEADERS = {
    "User-Agent": "scripture-lookup/1.0",
}
REQUEST_TIMEOUT = 30  # seconds
ZSTD_LEVEL = 19


def fetch(session: requests.Session, url: str) -> bytes:
    """GET url and return the body; raises requests.RequestException on failure."""
    resp = session.get(url, headers=HEADERS, timeout=REQUEST_TIMEOUT)
    resp.raise_for_status()
    return resp.content


def compress(data: bytes, level: int = ZSTD_LEVEL) -> bytes:
    cctx = zstandard.ZstdCompressor(level=level)
    return cctx.compress(data)


def save(
    session: requests.Session,
    url: str,
    out_path: Path,
    force: bool = False,
    zstd: bool = False,
) -> bool:
    """
    Download url to out_path (zstd-compressed when zstd is set).
    Returns False if the file already existed and was left alone.
    """
    if out_path.exists() and not force:
        print(f"  Skipping {out_path} (already exists, use --force to overwrite)")
        return False

    print(f"  Fetching {url} ...")
    data = fetch(session, url)
    print(f"  Downloaded {len(data) / 1024:.1f} KB")
    if zstd:
        data = compress(data)
        print(f"  Compressed size: {len(data) / 1024:.1f} KB")

    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(data)
    print(f"  Written to {out_path}")
    return True


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Download the Bible corpus and abbreviation table")
    ap.add_argument("bible_url", help="URL of the flat-text Bible")
    ap.add_argument("--abbreviations-url", help="URL of the abbreviation CSV")
    ap.add_argument("--out-dir", type=Path, default=DATA_DIR, help="Destination directory (default: data/)")
    ap.add_argument("--zstd", action="store_true", help="Store the corpus zstd-compressed as Bible.txt.zst")
    ap.add_argument("--force", action="store_true", help="Re-download files that already exist")
    args = ap.parse_args(argv)

    bible_name = BIBLE_FILENAME + (".zst" if args.zstd else "")

    with requests.Session() as session:
        try:
            save(session, args.bible_url, args.out_dir / bible_name, force=args.force, zstd=args.zstd)
            if args.abbreviations_url:
                save(session, args.abbreviations_url, args.out_dir / ABBREVIATIONS_FILENAME, force=args.force)
        except requests.RequestException as e:
            print(f"ERROR: download failed: {e}", file=sys.stderr)
            sys.exit(1)
        except OSError as e:
            print(f"ERROR: could not write file: {e}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    main()
