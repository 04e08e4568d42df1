"""\
Example Output Validation Script

This script validates that the PanelCharts examples produced reasonable output.

Checks:
- PNG chart files exist, exceed a minimum size and carry the PNG signature
- SVG chart files exist and contain an <svg> element
- The HTML page embeds a base64 PNG

Usage:
  python examples/validate_output.py
"""

from __future__ import annotations

from pathlib import Path

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def _check_png(path: Path, min_bytes: int) -> tuple[bool, str]:
    if not path.exists():
        return False, f"MISSING: {path}"
    size = path.stat().st_size
    if size < min_bytes:
        return False, f"TOO SMALL: {path} ({size} bytes < {min_bytes})"
    with path.open("rb") as f:
        if f.read(len(PNG_SIGNATURE)) != PNG_SIGNATURE:
            return False, f"NOT PNG?: {path} (bad signature)"
    return True, f"OK: {path} ({size/1024:.1f} KB)"


def _check_text(path: Path, marker: str) -> tuple[bool, str]:
    if not path.exists():
        return False, f"MISSING: {path}"
    if marker not in path.read_text(encoding="utf-8", errors="replace"):
        return False, f"INVALID: {path} (missing {marker!r})"
    return True, f"OK: {path}"


def main() -> int:
    output = Path("output")

    print("Validating PanelCharts example outputs")
    print("=" * 60)

    checks = [
        _check_png(output / "basic_chart.png", min_bytes=10_000),
        _check_png(output / "panel_before.png", min_bytes=10_000),
        _check_png(output / "panel_after.png", min_bytes=10_000),
        _check_text(output / "basic_chart.svg", "<svg"),
        _check_text(output / "panel.html", "data:image/png;base64,"),
    ]
    svgs = sorted((output / "batch").glob("*.svg"))
    checks.extend(_check_text(p, "<svg") for p in svgs)
    if not svgs:
        checks.append((False, f"EMPTY: {output / 'batch'} (no .svg charts)"))

    ok_all = True
    for ok, msg in checks:
        print(f"  {msg}")
        ok_all = ok_all and ok

    print("\nSummary:")
    if ok_all:
        print("  SUCCESS: All expected outputs look reasonable")
        return 0

    print("  FAIL: One or more outputs missing/invalid")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
