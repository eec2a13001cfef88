"""
文本测量器 - 换行与高度计算

职责：
1. 按显式换行拆分，再按单词贪心填充
2. 超过行宽的单词按字符拆分
3. 计算多行文本高度（行高系数1.15）

依赖：
- reportlab.pdfbase.pdfmetrics: 标准Times字族字宽

测试要点：
- test_empty_text_one_line: 空文本按一行计
- test_wrap_greedy: 贪心换行不超宽
- test_long_word_split: 超长单词按字符拆分
- test_explicit_newlines: 显式换行保留
"""

from __future__ import annotations

from reportlab.pdfbase.pdfmetrics import stringWidth

from ..config import RuntimeConfig
from ..config.runtime_config import MM_PER_PT
from ..models import GlyphLines


class TextMeasurer:
    """文本测量器（纯函数式，无状态）"""

    def __init__(self, config: RuntimeConfig | None = None):
        self.config = config or RuntimeConfig()

    def text_width(self, text: str, font: str, size: float) -> float:
        """单行文本宽度(mm)"""
        return stringWidth(text, font, size) * MM_PER_PT

    def line_height(self, size: float) -> float:
        """单行高度(mm)"""
        return self.config.pt_to_mm(size)

    def measure(self, text: str, font: str, size: float, max_width: float) -> GlyphLines:
        """换行并计算高度"""
        lines: list[str] = []
        for paragraph in (text or "").split("\n"):
            lines.extend(self._wrap(paragraph, font, size, max_width))
        if not lines:
            lines = [""]
        return GlyphLines(
            lines=lines,
            height=len(lines) * self.line_height(size),
            font=font,
            size=size,
        )

    def _wrap(self, paragraph: str, font: str, size: float, max_width: float) -> list[str]:
        words = paragraph.split()
        if not words:
            return [""]

        lines: list[str] = []
        current = ""
        for word in words:
            candidate = f"{current} {word}" if current else word
            if self.text_width(candidate, font, size) <= max_width:
                current = candidate
                continue
            if current:
                lines.append(current)
                current = ""
            if self.text_width(word, font, size) <= max_width:
                current = word
            else:
                pieces = self._split_word(word, font, size, max_width)
                lines.extend(pieces[:-1])
                current = pieces[-1]
        lines.append(current)
        return lines

    def _split_word(self, word: str, font: str, size: float, max_width: float) -> list[str]:
        """超宽单词按字符拆分（每段至少一个字符）"""
        pieces: list[str] = []
        current = ""
        for ch in word:
            if current and self.text_width(current + ch, font, size) > max_width:
                pieces.append(current)
                current = ch
            else:
                current += ch
        pieces.append(current)
        return pieces
