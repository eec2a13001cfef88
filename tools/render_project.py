"""
工程文件导出PDF（命令行）。

示例：
    python tools/render_project.py --project samples/site-visit.dfr --out-dir exports
    python tools/render_project.py --project log.json --kind photo_log
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path


def _add_backend_to_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    backend_root = repo_root / "backend"
    if str(backend_root) not in sys.path:
        sys.path.insert(0, str(backend_root))


def main() -> int:
    parser = argparse.ArgumentParser(description="Render a field report project file to PDF.")
    parser.add_argument("--project", required=True, help="工程文件（.dfr/.spdfr/.plog/.clog/.json）")
    parser.add_argument("--kind", default="", help="可选：强制报告类型（dfr_standard/dfr_saskpower/photo_log）")
    parser.add_argument("--config", default="", help="可选：运行期配置YAML")
    parser.add_argument("--out-dir", default="", help="可选：输出目录（默认取配置 output_dir）")
    parser.add_argument("--filename", default="", help="可选：输出文件名（默认按报告类型规则生成）")
    args = parser.parse_args()

    _add_backend_to_path()
    from dfr_export.config import get_config, reload_config  # type: ignore
    from dfr_export.export import ExportService  # type: ignore
    from dfr_export.interfaces import DfrExportError  # type: ignore

    config = reload_config(args.config) if args.config else get_config()
    if args.out_dir:
        config.output_dir = Path(args.out_dir)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.logging.log_to_file:
        config.output_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(config.output_dir / "dfr_export.log", encoding="utf-8"))
    logging.basicConfig(
        level=config.logging.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
    )

    service = ExportService(config=config)
    try:
        result = asyncio.run(
            service.export_file(Path(args.project), kind=args.kind or None, filename=args.filename or None)
        )
    except DfrExportError as exc:
        print(f"导出失败: {exc}")
        return 1

    print(f"{result.path}: pages={result.page_count}" + (" (migrated)" if result.migrated else ""))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
