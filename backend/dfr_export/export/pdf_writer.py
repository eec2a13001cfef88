"""
PDF写出器 - 将分页绘制指令写为PDF字节流

职责：
1. 坐标换算：mm/左上角原点 → pt/左下角原点
2. 逐页回放 Text/Line/Rect/Circle/Image 指令
3. PDF页数计算

依赖：
- reportlab: PDF生成
- PyPDF2: 页数计算

测试要点：
- test_write_page_count: 写出页数与文档页数一致
- test_write_empty_document: 空文档抛 ExportError
- test_y_axis_flip: y轴翻转
"""

from __future__ import annotations

import io
import logging

from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen.canvas import Canvas

from ..interfaces import ExportError, IPDFWriter
from ..models import (
    CircleCommand,
    DrawCommand,
    ImageCommand,
    LineCommand,
    RectCommand,
    RenderedDocument,
    TextCommand,
)
from ..models.layout import RGB

logger = logging.getLogger(__name__)


class ReportLabPDFWriter(IPDFWriter):
    """reportlab PDF写出器"""

    def __init__(self, title: str | None = None, author: str | None = None):
        self.title = title
        self.author = author

    def write(self, document: RenderedDocument) -> bytes:
        if not document.pages:
            raise ExportError("文档没有任何页面，无法写出PDF")

        buffer = io.BytesIO()
        page_h = document.page_height * mm
        pdf = Canvas(buffer, pagesize=(document.page_width * mm, page_h))
        if self.title:
            pdf.setTitle(self.title)
        if self.author:
            pdf.setAuthor(self.author)

        for page in document.pages:
            for cmd in page.commands:
                self._draw(pdf, cmd, page_h)
            pdf.showPage()

        pdf.save()
        data = buffer.getvalue()
        logger.debug(f"PDF写出完成: {document.page_count}页, {len(data)}字节")
        return data

    def count_pages(self, data: bytes) -> int:
        try:
            return len(PdfReader(io.BytesIO(data)).pages)
        except PdfReadError as e:
            raise ExportError(f"PDF无法解析: {e}") from e

    # === 指令回放 ===

    def _draw(self, pdf: Canvas, cmd: DrawCommand, page_h: float) -> None:
        if isinstance(cmd, TextCommand):
            self._text(pdf, cmd, page_h)
        elif isinstance(cmd, LineCommand):
            self._stroke(pdf, cmd.color, cmd.width)
            pdf.line(cmd.x1 * mm, page_h - cmd.y1 * mm, cmd.x2 * mm, page_h - cmd.y2 * mm)
        elif isinstance(cmd, RectCommand):
            self._stroke(pdf, cmd.color, cmd.width)
            pdf.rect(cmd.x * mm, page_h - (cmd.y + cmd.h) * mm, cmd.w * mm, cmd.h * mm,
                     stroke=1, fill=0)
        elif isinstance(cmd, CircleCommand):
            self._stroke(pdf, cmd.color, cmd.width)
            if cmd.fill is not None:
                pdf.setFillColorRGB(*_rgb(cmd.fill))
            pdf.circle(cmd.x * mm, page_h - cmd.y * mm, cmd.r * mm,
                       stroke=1, fill=1 if cmd.fill is not None else 0)
        elif isinstance(cmd, ImageCommand):
            pdf.drawImage(ImageReader(io.BytesIO(cmd.data)), cmd.x * mm,
                          page_h - (cmd.y + cmd.h) * mm, cmd.w * mm, cmd.h * mm)
        else:
            raise ExportError(f"未知绘制指令: {cmd!r}")

    def _text(self, pdf: Canvas, cmd: TextCommand, page_h: float) -> None:
        pdf.setFont(cmd.font, cmd.size)
        pdf.setFillColorRGB(*_rgb(cmd.color))
        x = cmd.x * mm
        for i, line in enumerate(cmd.lines):
            y = page_h - (cmd.y + i * cmd.line_height) * mm
            if cmd.align == "center":
                pdf.drawCentredString(x, y, line)
            elif cmd.align == "right":
                pdf.drawRightString(x, y, line)
            else:
                pdf.drawString(x, y, line)

    @staticmethod
    def _stroke(pdf: Canvas, color: RGB, width: float) -> None:
        pdf.setStrokeColorRGB(*_rgb(color))
        pdf.setLineWidth(width * mm)


def _rgb(color: RGB) -> tuple[float, float, float]:
    return tuple(c / 255 for c in color)
