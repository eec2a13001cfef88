"""
导出服务 - 工程文件 → 排版 → PDF → 落盘

职责：
1. 按扩展名识别报告类型并解析工程文件
2. 调用装配器排版，写出PDF，校验页数
3. 交给产物接收方落盘

测试要点：
- test_export_content_writes_pdf: 内容导出后文件存在且页数一致
- test_export_file_unknown_extension: 未知扩展名返回ParseError
- test_export_file_parse_error: 解析失败抛 ExportError
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from ..config import RuntimeConfig, get_config, load_variants
from ..interfaces import ExportError
from ..layout import DocumentAssembler
from ..models import Ok, ParseError, ParseOutcome, ReportContent, parse_project
from .images import FileAssetResolver, PillowImageDecoder
from .pdf_writer import ReportLabPDFWriter
from .sink import FileSink

if TYPE_CHECKING:
    from ..interfaces import IArtifactSink, IAssetResolver, IImageDecoder, IPDFWriter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportResult:
    """导出结果"""
    path: Path
    page_count: int
    migrated: bool = False


class ExportService:
    """导出服务"""

    def __init__(
        self,
        config: RuntimeConfig | None = None,
        decoder: IImageDecoder | None = None,
        resolver: IAssetResolver | None = None,
        writer: IPDFWriter | None = None,
        sink: IArtifactSink | None = None,
    ):
        self.config = config or get_config()
        self.variants = load_variants(self.config.variants_path)
        self.decoder = decoder or PillowImageDecoder()
        self.resolver = resolver or FileAssetResolver(self.config.assets.asset_dirs)
        self.writer = writer or ReportLabPDFWriter()
        self.sink = sink or FileSink(self.config.output_dir)
        self.assembler = DocumentAssembler(self.decoder, self.resolver, self.config)

    def load_project(self, path: Path, kind: str | None = None) -> ParseOutcome:
        """读取并解析工程文件"""
        path = Path(path)
        kind = kind or self.variants.kind_for_extension(path.suffix)
        if kind is None:
            return ParseError(f"不支持的工程文件类型: {path.suffix or path.name}")
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return ParseError(f"工程文件读取失败: {e}")

        outcome = parse_project(text, self.variants.get(kind))
        if isinstance(outcome, Ok) and outcome.migrated:
            logger.info(f"工程文件已从旧版本格式迁移: {path.name}")
        return outcome

    async def export(self, content: ReportContent, filename: str | None = None) -> ExportResult:
        """排版并导出报告内容"""
        started = time.perf_counter()
        document = await self.assembler.assemble(content)
        data = self.writer.write(document)

        page_count = self.writer.count_pages(data)
        if page_count != document.page_count:
            raise ExportError(f"PDF页数异常: 排版{document.page_count}页, 写出{page_count}页")

        path = self.sink.deliver(data, filename or content.suggested_filename)
        logger.info(f"导出完成: {path.name}, {page_count}页, 耗时{time.perf_counter() - started:.2f}s")
        return ExportResult(path=path, page_count=page_count)

    async def export_file(self, path: Path, kind: str | None = None,
                          filename: str | None = None) -> ExportResult:
        """工程文件一步导出"""
        outcome = self.load_project(path, kind)
        if isinstance(outcome, ParseError):
            raise ExportError(outcome.reason)
        result = await self.export(outcome.content, filename)
        return ExportResult(path=result.path, page_count=result.page_count, migrated=outcome.migrated)
