"""
PDF页数统计（用于核对导出报告的页数与页脚 "Page i of N" 是否一致）。
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path


def _add_backend_to_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    backend_root = repo_root / "backend"
    if str(backend_root) not in sys.path:
        sys.path.insert(0, str(backend_root))


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--pdf", required=True, nargs="+")
    args = ap.parse_args()

    _add_backend_to_path()
    from dfr_export.export import ReportLabPDFWriter  # type: ignore
    from dfr_export.interfaces import ExportError  # type: ignore

    writer = ReportLabPDFWriter()
    status = 0
    for pdf in args.pdf:
        path = Path(pdf)
        try:
            print(f"{path.name}: {writer.count_pages(path.read_bytes())}")
        except (OSError, ExportError) as exc:
            print(f"{path.name}: ERROR {exc}")
            status = 1
    return status


if __name__ == "__main__":
    raise SystemExit(main())
