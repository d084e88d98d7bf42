"""Guard script to prevent accidental dependency shadowing.

Fail if a directory or module named after a runtime dependency (`pydantic/`,
`yaml/`, `yaml.py`) shows up at the repository root, where it would be
imported instead of the installed distribution. Meant to run in CI.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path


ROOT = Path(os.getenv("BUSTKIT_REPO_ROOT") or Path(__file__).resolve().parents[1]).resolve()
FORBIDDEN = {"pydantic", "yaml"}


def find_offenders(root: Path) -> list[str]:
    offenders = []
    for name in FORBIDDEN:
        if (root / name).exists() or (root / f"{name}.py").exists():
            offenders.append(name)
    return sorted(offenders)


def main() -> int:
    offenders = find_offenders(ROOT)
    if offenders:
        sys.stderr.write(
            "Forbidden shadowing modules present at repo root: "
            + ", ".join(offenders)
            + "\n"
        )
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
