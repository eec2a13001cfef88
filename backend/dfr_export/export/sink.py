"""
产物落盘 - 原子写入PDF文件

职责：
1. 只接收完整字节流（不写半成品）
2. 先写同目录临时文件再重命名，避免中途失败留下损坏文件
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from ..interfaces import ExportError, IArtifactSink

logger = logging.getLogger(__name__)


class FileSink(IArtifactSink):
    """文件落盘"""

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)

    def deliver(self, data: bytes, filename: str) -> Path:
        if not data:
            raise ExportError("PDF字节为空，拒绝写出")

        name = Path(filename).name
        if not name:
            raise ExportError(f"无效文件名: {filename!r}")
        if not name.lower().endswith(".pdf"):
            name += ".pdf"

        self.output_dir.mkdir(parents=True, exist_ok=True)
        target = self.output_dir / name

        fd, tmp_name = tempfile.mkstemp(prefix=".partial-", suffix=".pdf", dir=self.output_dir)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, target)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise ExportError(f"PDF写出失败: {target}: {e}") from e

        logger.info(f"PDF已保存: {target} ({len(data)}字节)")
        return target
