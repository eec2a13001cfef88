"""
文档画布 - 以绘制指令记录分页内容

职责：
1. 维护页列表与当前页
2. 提供文本/直线/矩形/圆/图片绘制原语（记录为 DrawCommand）
3. 页边框（每页一次）与页脚位预留

说明：
- 画布只记录指令，不直接产出PDF；PDF由 export.pdf_writer 写出
- 坐标单位mm，原点左上角
"""

from __future__ import annotations

from ..config import RuntimeConfig
from ..models import (
    CircleCommand,
    DrawCommand,
    ImageCommand,
    LineCommand,
    Page,
    PageKind,
    RectCommand,
    RenderedDocument,
    TextCommand,
)
from ..models.layout import BLACK, RGB


class DocumentCanvas:
    """文档画布（单次导出独占）"""

    def __init__(self, config: RuntimeConfig):
        self.config = config
        self.pages: list[Page] = []

    # === 分页 ===

    @property
    def current(self) -> Page:
        if not self.pages:
            raise IndexError("画布尚未创建任何页面")
        return self.pages[-1]

    @property
    def page_number(self) -> int:
        """当前页码（1起）"""
        return len(self.pages)

    def add_page(self, kind: PageKind = PageKind.BODY) -> Page:
        page = Page(index=len(self.pages) + 1, kind=kind)
        self.pages.append(page)
        return page

    def draw_border(self) -> None:
        """底部青色边线（每页只画一次）"""
        page = self.current
        if page.border_drawn:
            return
        cfg = self.config.page
        y = cfg.border_y
        self.line(cfg.border_margin, y, cfg.width - cfg.border_margin, y,
                  color=cfg.border_color, width=cfg.border_line_width)
        page.border_drawn = True

    def reserve_footer(self) -> None:
        """预留页脚位（页码在全部排版结束后统一盖印）"""
        self.current.footer_reserved = True

    def finish_page(self) -> None:
        self.draw_border()
        self.reserve_footer()

    def to_document(self) -> RenderedDocument:
        return RenderedDocument(
            page_width=self.config.page.width,
            page_height=self.config.page.height,
            pages=self.pages,
        )

    # === 绘制原语 ===

    def emit(self, *commands: DrawCommand) -> None:
        self.current.commands.extend(commands)

    def make_text(
        self,
        lines: str | list[str],
        x: float,
        y: float,
        font: str,
        size: float,
        color: RGB = BLACK,
        align: str = "left",
    ) -> TextCommand:
        """构造文本指令但不落页（用于延迟绘制）"""
        if isinstance(lines, str):
            lines = [lines]
        return TextCommand(
            x=x, y=y, lines=lines, font=font, size=size,
            line_height=self.config.pt_to_mm(size), color=color, align=align,
        )

    def text(self, lines: str | list[str], x: float, y: float, font: str, size: float,
             color: RGB = BLACK, align: str = "left") -> TextCommand:
        cmd = self.make_text(lines, x, y, font, size, color=color, align=align)
        self.emit(cmd)
        return cmd

    def line(self, x1: float, y1: float, x2: float, y2: float,
             color: RGB = BLACK, width: float = 0.5) -> LineCommand:
        cmd = LineCommand(x1=x1, y1=y1, x2=x2, y2=y2, color=color, width=width)
        self.emit(cmd)
        return cmd

    def rect(self, x: float, y: float, w: float, h: float,
             color: RGB = BLACK, width: float = 0.25) -> RectCommand:
        cmd = RectCommand(x=x, y=y, w=w, h=h, color=color, width=width)
        self.emit(cmd)
        return cmd

    def circle(self, x: float, y: float, r: float, color: RGB = BLACK,
               fill: RGB | None = None, width: float = 0.25) -> CircleCommand:
        cmd = CircleCommand(x=x, y=y, r=r, color=color, fill=fill, width=width)
        self.emit(cmd)
        return cmd

    def image(self, data: bytes, x: float, y: float, w: float, h: float) -> ImageCommand:
        cmd = ImageCommand(x=x, y=y, w=w, h=h, data=data)
        self.emit(cmd)
        return cmd

    def rule(self, y: float) -> LineCommand:
        """青色通栏分隔线（边距到边距）"""
        cfg = self.config.page
        return self.line(cfg.border_margin, y, cfg.width - cfg.border_margin, y,
                         color=cfg.border_color, width=cfg.border_line_width)
