from __future__ import annotations

import argparse
from pathlib import Path

from route360.config import ensure_dirs, load_config
from route360.io.centroids import fetch_centroids, write_centroid_cache


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Download world-atlas country shapes and cache one centroid per country.")
    p.add_argument("--config", type=Path, default=Path("config/project.yml"))
    p.add_argument("--out", type=Path, default=None, help="Cache file. Defaults to centroids.cache_path from the config.")
    return p.parse_args()


def main() -> None:
    args = parse_args()
    cfg = load_config(args.config)
    ensure_dirs(cfg)

    out = args.out or cfg.centroids.cache_path
    if out is None:
        raise SystemExit("No output path: pass --out or set centroids.cache_path.")
    centroids = fetch_centroids(cfg.centroids.topology_url, names_url=cfg.centroids.names_url, timeout=cfg.centroids.timeout)
    write_centroid_cache(out, centroids)
    print(f"Wrote {out} ({len(centroids):,} centroids)")


if __name__ == "__main__":
    main()
