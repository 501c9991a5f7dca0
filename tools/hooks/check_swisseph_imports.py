#!/usr/bin/env python3
"""
Fail commits that import swisseph outside the engine's ephemeris layer.

Swiss Ephemeris keeps process-wide state (data path, sidereal mode), so every
call must go through the lock in engine/swe_backend.py. Only the modules that
need its constants or calendar conversions may import it directly.
"""
from __future__ import annotations

import sys
from pathlib import Path

APPROVED = {
    "src/engine/swe_backend.py",
    "src/engine/constants.py",
    "src/engine/time_utils.py",
}


def is_approved(path: Path) -> bool:
    return path.as_posix() in APPROVED


def main(argv: list[str]) -> int:
    bad: list[str] = []
    for arg in argv:
        p = Path(arg)
        if not p.exists() or p.is_dir() or p.suffix != ".py":
            continue
        if is_approved(p):
            continue
        text = p.read_text(encoding="utf-8", errors="ignore")
        if "import swisseph" in text or "from swisseph" in text:
            bad.append(str(p))
    if bad:
        print(
            "::error::Direct swisseph imports are restricted to the engine ephemeris layer.\n"
            + "\n".join(f" - {b}" for b in bad)
        )
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
