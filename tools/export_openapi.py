#!/usr/bin/env python3
"""
Export the Panchang OpenAPI schema to openapi.json.

Usage:
  - From a running API:
      python tools/export_openapi.py --base http://127.0.0.1:8000 --out openapi.json

  - From the installed package:
      python tools/export_openapi.py --local --out openapi.json

Fails when two operations share an operationId, since SDK generators
would silently merge them.
"""

from __future__ import annotations

import argparse
import json

from collections import Counter
from pathlib import Path
from urllib.request import Request, urlopen


def fetch_from_base(base: str) -> dict:
    url = base.rstrip("/") + "/openapi.json"
    req = Request(url, headers={"Accept": "application/json"})
    with urlopen(req, timeout=10) as resp:  # nosec B310
        return json.loads(resp.read().decode("utf-8"))


def build_local() -> dict:
    from apps.api.main import app

    return app.openapi()


def duplicate_operation_ids(spec: dict) -> list[str]:
    ids = [
        op["operationId"]
        for methods in spec.get("paths", {}).values()
        for op in methods.values()
        if isinstance(op, dict) and "operationId" in op
    ]
    return sorted(op_id for op_id, n in Counter(ids).items() if n > 1)


def main() -> int:
    ap = argparse.ArgumentParser(description="Export Panchang OpenAPI schema")
    ap.add_argument("--base", help="Base URL of a running API (e.g. http://127.0.0.1:8000)")
    ap.add_argument("--local", action="store_true", help="Build schema by importing the app")
    ap.add_argument("--out", default="openapi.json", help="Output file path")
    args = ap.parse_args()

    if not args.base and not args.local:
        ap.error("Provide --base or --local")

    spec = fetch_from_base(args.base) if args.base else build_local()

    duplicates = duplicate_operation_ids(spec)
    if duplicates:
        print(f"Duplicate operationIds: {', '.join(duplicates)}")
        return 1

    out = Path(args.out)
    out.write_text(json.dumps(spec, indent=2))
    print(f"Wrote {out} ({out.stat().st_size} bytes, {len(spec.get('paths', {}))} paths)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
