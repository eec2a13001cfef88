"""
文本测量单元测试
"""

import pytest

from dfr_export.config.runtime_config import MM_PER_PT
from dfr_export.layout import TextMeasurer

FONT = "Times-Roman"


class TestTextMeasurer:
    """文本测量器测试"""

    def test_empty_text_one_line(self, measurer: TextMeasurer):
        """空文本按一行计"""
        result = measurer.measure("", FONT, 12, 100)
        assert result.lines == [""]
        assert result.height == pytest.approx(12 * 1.15 * MM_PER_PT)

    def test_height_scales_with_lines(self, measurer: TextMeasurer):
        """高度 = 行数 × 字号 × 1.15"""
        result = measurer.measure("a\nb\nc", FONT, 12, 100)
        assert result.line_count == 3
        assert result.height == pytest.approx(3 * 12 * 1.15 * MM_PER_PT)

    def test_explicit_newlines(self, measurer: TextMeasurer):
        """显式换行保留，空行保留为空串"""
        result = measurer.measure("first\n\nthird", FONT, 12, 100)
        assert result.lines == ["first", "", "third"]

    def test_wrap_greedy(self, measurer: TextMeasurer):
        """贪心换行：每行不超宽，且下一个单词放不进当前行"""
        text = "the quick brown fox jumps over the lazy dog " * 6
        width = 60
        result = measurer.measure(text, FONT, 12, width)
        assert result.line_count > 1
        for i, line in enumerate(result.lines):
            assert measurer.text_width(line, FONT, 12) <= width
            if i + 1 < result.line_count:
                next_word = result.lines[i + 1].split()[0]
                assert measurer.text_width(f"{line} {next_word}", FONT, 12) > width
        assert " ".join(result.lines).split() == text.split()

    def test_long_word_split(self, measurer: TextMeasurer):
        """超长单词按字符拆分"""
        word = "x" * 80
        result = measurer.measure(word, FONT, 12, 20)
        assert result.line_count > 1
        assert "".join(result.lines) == word
        assert all(measurer.text_width(line, FONT, 12) <= 20 for line in result.lines)

    def test_text_width_mm(self, measurer: TextMeasurer):
        """宽度以mm计，随字号线性增长"""
        w10 = measurer.text_width("Page 1 of 1", FONT, 10)
        w20 = measurer.text_width("Page 1 of 1", FONT, 20)
        assert w10 > 0
        assert w20 == pytest.approx(w10 * 2)

    def test_deterministic(self, measurer: TextMeasurer):
        """相同输入结果相同"""
        text = "Crew completed topsoil stripping along the north edge of the lease."
        assert measurer.measure(text, FONT, 12, 50) == measurer.measure(text, FONT, 12, 50)
