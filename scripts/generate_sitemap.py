"""Write sitemap.xml (or an index plus sitemap-<n>.xml files) and robots.txt to a directory."""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

load_dotenv()

from fleet_hub.services import sitemap


def write_sitemaps(out_dir: Path) -> list[Path]:
    out_dir.mkdir(parents=True, exist_ok=True)
    site_url = sitemap.SITEMAP_CONFIG["site_url"].rstrip("/")
    chunks = sitemap.chunk_entries(sitemap.build_sitemap_entries())
    written: list[Path] = []

    if len(chunks) <= 1:
        path = out_dir / "sitemap.xml"
        path.write_text(sitemap.render_urlset(chunks[0] if chunks else []), encoding="utf-8")
        written.append(path)
    else:
        urls = []
        for index, chunk in enumerate(chunks):
            path = out_dir / f"sitemap-{index}.xml"
            path.write_text(sitemap.render_urlset(chunk), encoding="utf-8")
            written.append(path)
            urls.append(f"{site_url}/{path.name}")
        index_path = out_dir / "sitemap.xml"
        index_path.write_text(sitemap.render_sitemap_index(urls), encoding="utf-8")
        written.append(index_path)

    robots = out_dir / "robots.txt"
    robots.write_text(sitemap.render_robots_txt(), encoding="utf-8")
    written.append(robots)
    return written


def main() -> int:
    out_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else ROOT / "public"
    for path in write_sitemaps(out_dir):
        print(f"Wrote {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
