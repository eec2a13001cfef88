"""
勾选项渲染 - Yes/No/N/A 单选行 + 备注行

职责：
1. 整块放不下时先分页（块高 = 4 + 8n + 10）；超过一页的块逐行分页
2. 每行：左侧标签，右侧三个选项圆圈（选中填充青色）
3. 可选的加粗备注行（如 Total Hours Worked）
"""

from __future__ import annotations

from ..config import RuntimeConfig
from ..models import ChecklistItem, CircleCommand
from .cursor import PageCursor
from .measurer import TextMeasurer


class ChecklistRenderer:
    """勾选项渲染器"""

    def __init__(self, config: RuntimeConfig, measurer: TextMeasurer, cursor: PageCursor):
        self.config = config
        self.measurer = measurer
        self.cursor = cursor

    def block_height(self, items: list[ChecklistItem]) -> float:
        cfg = self.config.checklist
        return cfg.block_padding_top + cfg.row_pitch * len(items) + cfg.block_padding_bottom

    def render(self, items: list[ChecklistItem], note: str | None = None) -> float:
        """绘制勾选块，返回结束y"""
        if not items and not note:
            return self.cursor.y

        cfg = self.config.checklist
        page = self.config.page
        fonts = self.config.fonts
        cursor = self.cursor
        canvas = cursor.canvas

        if not cursor.fits(self.block_height(items)):
            cursor.break_page()
        cursor.advance(cfg.block_padding_top)

        options_x = page.width - page.content_margin - len(cfg.options) * cfg.option_pitch
        for item in items:
            # 整块超过一页时逐行分页
            if not cursor.fits(cfg.row_pitch):
                cursor.break_page()
            item_y = cursor.y
            cursor.defer(canvas.make_text(item.label, page.content_margin, item_y, fonts.regular, cfg.font_size))
            x = options_x
            for option in cfg.options:
                selected = option == item.value.value
                cursor.defer(
                    CircleCommand(
                        x=x, y=item_y - cfg.circle_radius / 2, r=cfg.circle_radius,
                        fill=page.border_color if selected else None,
                    ),
                    canvas.make_text(option, x + cfg.circle_radius + 2, item_y, fonts.regular, cfg.font_size),
                )
                x += cfg.option_pitch
            cursor.advance(cfg.row_pitch)

        if note:
            if not cursor.fits(cfg.block_padding_top + self.measurer.line_height(cfg.font_size)):
                cursor.break_page()
            note_y = cursor.y + cfg.block_padding_top
            cursor.defer(canvas.make_text(note, page.content_margin, note_y, fonts.bold, cfg.font_size))
            cursor.y = note_y + self.measurer.line_height(cfg.font_size)

        cursor.flush()
        return cursor.y
