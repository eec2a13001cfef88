"""
正文段落渲染 - 标题 + 带缩进/项目符号的文本流

职责：
1. 标题防孤立：标题 + 一行正文放不下时先分页
2. 标题全文档只画一次，续页不重复
3. 每两个前导空格缩进一级（5mm），前导 '-' 画为独立项目符号
4. 逐行溢出检查，溢出时分页并重绘页眉；超过整页的段落按行拆分
5. 方框段落：按页分段描边，正文左右各内缩2mm

测试要点：
- test_blank_section_skipped: 空正文不占空间
- test_title_not_orphaned: 标题放不下时整体移到下一页
- test_indent_mapping: k对前导空格 → k×5mm
- test_bullet_glyph: '-' 去除后单独绘制
- test_box_per_page_segment: 跨页方框每页一个矩形
- test_oversized_paragraph_split_across_pages: 超长段落按行拆分
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from ..config import RuntimeConfig
from ..models import RectCommand, TextSection
from .cursor import PageCursor
from .measurer import TextMeasurer

logger = logging.getLogger(__name__)


@dataclass
class _BodyLine:
    """解析后的正文行"""
    text: str
    indent: float
    bullet: bool
    blank: bool = False


class SectionFlowRenderer:
    """正文段落渲染器"""

    def __init__(self, config: RuntimeConfig, measurer: TextMeasurer, cursor: PageCursor):
        self.config = config
        self.measurer = measurer
        self.cursor = cursor
        self.font = config.fonts.regular
        self.size = config.fonts.body_size

    def reset_font(self) -> None:
        self.font = self.config.fonts.regular
        self.size = self.config.fonts.body_size

    def parse_lines(self, body: str) -> list[_BodyLine]:
        """拆分正文为行（缩进级别与项目符号）"""
        result = []
        unit = self.config.text_flow.indent_unit
        for raw in body.split("\n"):
            if not raw.strip():
                result.append(_BodyLine(text="", indent=0, bullet=False, blank=True))
                continue
            leading = len(raw) - len(raw.lstrip())
            indent = math.floor(leading / 2) * unit
            stripped = raw.strip()
            bullet = stripped.startswith("-")
            text = stripped[1:].strip() if bullet else stripped
            if not text:
                continue
            result.append(_BodyLine(text=text, indent=indent, bullet=bullet))
        return result

    def render(self, section: TextSection) -> float:
        """绘制段落，返回结束y"""
        if section.is_blank:
            return self.cursor.y

        cursor = self.cursor
        flow = self.config.text_flow
        fonts = self.config.fonts
        page = self.config.page
        box = section.render_as_box
        inset = flow.box_padding if box else 0.0
        box_pad_y = flow.box_padding * 2 if box else 0.0

        cursor.set_font_reset(self.reset_font)
        if section.force_new_page:
            cursor.break_page()

        # 标题防孤立
        space_before = flow.space_before_section if section.space_before is None else section.space_before
        title = self.measurer.measure(
            section.title, fonts.bold, fonts.section_title_size, page.content_width - inset * 2
        )
        one_line = self.measurer.line_height(fonts.body_size)
        if not cursor.fits(space_before + box_pad_y + title.height + one_line):
            cursor.break_page()
        else:
            cursor.advance(space_before)

        segment_top = cursor.y
        self.font, self.size = fonts.bold, fonts.section_title_size
        cursor.defer(self._text(title.lines, page.content_margin + inset, cursor.y + box_pad_y))
        cursor.advance(box_pad_y + title.height + flow.title_gap)
        self.reset_font()

        for line in self.parse_lines(section.body):
            if line.blank:
                if cursor.fits(flow.blank_line_gap):
                    cursor.advance(flow.blank_line_gap)
                continue

            bullet_w = flow.bullet_text_offset if line.bullet else 0.0
            max_width = page.content_width - bullet_w - line.indent - inset * 2
            glyphs = self.measurer.measure(line.text, self.font, self.size, max_width)
            x = page.content_margin + line.indent + inset
            line_h = self.measurer.line_height(self.size)
            remaining_lines = glyphs.lines
            fresh_page = False

            while remaining_lines:
                # 段后 line_gap 不计入判定，与标题判定各自独立
                if cursor.fits(len(remaining_lines) * line_h):
                    chunk, remaining_lines = remaining_lines, []
                elif fresh_page:
                    # 整段超过一整页时按行拆到后续页
                    fit = max(1, int(cursor.remaining() // line_h))
                    chunk, remaining_lines = remaining_lines[:fit], remaining_lines[fit:]
                else:
                    if box:
                        cursor.defer(self._box(segment_top, cursor.y))
                    cursor.break_page()
                    segment_top = cursor.y
                    fresh_page = True
                    continue

                if line.bullet and len(chunk) + len(remaining_lines) == glyphs.line_count:
                    cursor.defer(self._text(["-"], x + flow.bullet_offset, cursor.y))
                cursor.defer(self._text(chunk, x + bullet_w, cursor.y))
                cursor.advance(len(chunk) * line_h)
                if remaining_lines:
                    fresh_page = False
            cursor.advance(flow.line_gap)

        if box:
            cursor.advance(box_pad_y)
            cursor.defer(self._box(segment_top, cursor.y))
        cursor.flush()
        cursor.set_font_reset(None)
        return cursor.y

    def _text(self, lines: list[str], x: float, y: float):
        return self.cursor.canvas.make_text(lines, x, y, self.font, self.size)

    def _box(self, top: float, bottom: float) -> RectCommand:
        flow = self.config.text_flow
        page = self.config.page
        return RectCommand(
            x=page.content_margin, y=top, w=page.content_width, h=bottom - top,
            color=flow.box_color, width=flow.box_line_width,
        )
