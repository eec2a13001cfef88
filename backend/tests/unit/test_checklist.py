"""
勾选项渲染单元测试
"""

import pytest

from dfr_export.layout import ChecklistRenderer
from dfr_export.models import ChecklistItem, ChecklistValue


@pytest.fixture
def items() -> list[ChecklistItem]:
    return [
        ChecklistItem(label="Completed/Reviewed X-Terra Tailgate:", value=ChecklistValue.YES),
        ChecklistItem(label="Reviewed/Signed Crew Tailgate:", value=ChecklistValue.NA),
        ChecklistItem(label="Reviewed Permit(s) with Crew(s):"),
    ]


class TestChecklistRenderer:
    """勾选块测试"""

    def test_block_height(self, runtime_config, measurer, body_cursor, items):
        """块高 = 4 + 8n + 10"""
        renderer = ChecklistRenderer(runtime_config, measurer, body_cursor)
        assert renderer.block_height(items) == 4 + 8 * 3 + 10

    def test_rows_and_circles(self, runtime_config, measurer, body_cursor, items):
        """每行三个选项圆，选中项填充青色"""
        ChecklistRenderer(runtime_config, measurer, body_cursor).render(items)
        circles = body_cursor.canvas.current.commands_of("circle")
        assert len(circles) == 9
        filled = [c for c in circles if c.fill is not None]
        assert len(filled) == 2
        assert all(c.fill == (0, 125, 140) for c in filled)

        # 第一行选中 Yes（第1个），第二行选中 N/A（第3个）
        first_x = 215.9 - (12.7 + 4) - 3 * 20
        assert filled[0].x == pytest.approx(first_x)
        assert filled[1].x == pytest.approx(first_x + 40)
        assert filled[1].y - filled[0].y == pytest.approx(8)

    def test_circle_offset_from_baseline(self, runtime_config, measurer, body_cursor, items):
        ChecklistRenderer(runtime_config, measurer, body_cursor).render(items[:1])
        circle = body_cursor.canvas.current.commands_of("circle")[0]
        assert circle.y == pytest.approx(50 + 4 - 1.5 / 2)
        assert circle.r == 1.5

    def test_note_bold(self, runtime_config, measurer, body_cursor, items):
        """备注行加粗，位于最后一行下方4mm"""
        end = ChecklistRenderer(runtime_config, measurer, body_cursor).render(
            items, "Total Hours Worked: 9.5"
        )
        note = [c for c in body_cursor.canvas.current.commands_of("text")
                if c.lines == ["Total Hours Worked: 9.5"]][0]
        assert note.font == "Times-Bold"
        assert note.y == pytest.approx(50 + 4 + 3 * 8 + 4)
        assert end == pytest.approx(note.y + measurer.line_height(10))

    def test_break_when_block_does_not_fit(self, runtime_config, measurer, body_cursor, items):
        """整块放不下时先分页"""
        body_cursor.y = body_cursor.max_y - 30
        ChecklistRenderer(runtime_config, measurer, body_cursor).render(items)
        assert body_cursor.page_index == 2
        assert body_cursor.canvas.pages[0].commands_of("circle") == []
        assert len(body_cursor.canvas.pages[1].commands_of("circle")) == 9

    def test_oversized_block_paginates_per_row(self, runtime_config, measurer, body_cursor):
        """超过一页的勾选块逐行分页，不越过底线"""
        many = [ChecklistItem(label=f"Item {i}:", value=ChecklistValue.YES) for i in range(60)]
        ChecklistRenderer(runtime_config, measurer, body_cursor).render(many, "Total Hours Worked: 12")

        pages = body_cursor.canvas.pages
        assert len(pages) >= 3
        circles = [c for page in pages for c in page.commands_of("circle")]
        assert len(circles) == 60 * 3
        labels = [t for page in pages for t in page.texts() if t.startswith("Item ")]
        assert labels == [f"Item {i}:" for i in range(60)]
        for page in pages:
            for text in page.commands_of("text"):
                assert text.y <= body_cursor.max_y

    def test_empty_checklist_noop(self, runtime_config, measurer, body_cursor):
        assert ChecklistRenderer(runtime_config, measurer, body_cursor).render([]) == 50
