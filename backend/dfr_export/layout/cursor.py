"""
页游标 - 纵向位置与分页协议

职责：
1. 跟踪当前页的纵向位置 y 与可用底线 max_y
2. 判断原子元素是否放得下（y + h ≤ max_y）
3. 管理延迟绘制队列（分页或段落结束时统一刷出）
4. 执行分页：刷出延迟指令 → 画边框 → 预留页脚 → 新页 → 重绘页眉 → 重置y → 重置字体

测试要点：
- test_fits_boundary: 恰好等于 max_y 视为放得下
- test_break_order: 分页时先刷出延迟指令再画边框
- test_break_same_kind: 新页与当前页类型一致
- test_font_reset_hook: 分页后调用字体重置回调
"""

from __future__ import annotations

import logging
from typing import Callable

from ..interfaces import LayoutError
from ..models import DrawCommand, PageKind
from .canvas import DocumentCanvas

logger = logging.getLogger(__name__)

HeaderDrawer = Callable[[DocumentCanvas, PageKind], float]


class PageCursor:
    """页游标（单次导出独占，原地修改）"""

    def __init__(self, canvas: DocumentCanvas, header_drawer: HeaderDrawer):
        self.canvas = canvas
        self.header_drawer = header_drawer
        self.max_y = canvas.config.page.max_y
        self.y = canvas.config.page.content_margin
        self._pending: list[DrawCommand] = []
        self._font_reset: Callable[[], None] | None = None

    @property
    def page_index(self) -> int:
        return self.canvas.page_number

    # === 位置 ===

    def fits(self, height: float) -> bool:
        return self.y + height <= self.max_y

    def remaining(self) -> float:
        return self.max_y - self.y

    def advance(self, height: float) -> float:
        self.y += height
        return self.y

    # === 延迟绘制 ===

    def defer(self, *commands: DrawCommand) -> None:
        """加入延迟绘制队列（属于当前页）"""
        self._pending.extend(commands)

    def flush(self) -> None:
        """将延迟指令刷到当前页"""
        if self._pending:
            self.canvas.emit(*self._pending)
            self._pending.clear()

    @property
    def pending(self) -> list[DrawCommand]:
        return list(self._pending)

    # === 分页 ===

    def set_font_reset(self, hook: Callable[[], None] | None) -> None:
        """设置分页后的字体重置回调（由当前渲染器注册）"""
        self._font_reset = hook

    def start_page(self, kind: PageKind) -> float:
        """开启新页并绘制页眉（不处理上一页的收尾）"""
        self.canvas.add_page(kind)
        self.y = self._draw_header(kind)
        return self.y

    def break_page(self, redraw_header: bool = True) -> float:
        """分页，返回新页的起始y"""
        self.flush()
        self.canvas.finish_page()
        kind = self.canvas.current.kind
        self.canvas.add_page(kind)
        if redraw_header:
            self.y = self._draw_header(kind)
        else:
            self.y = self.canvas.config.page.content_margin
        if self._font_reset is not None:
            self._font_reset()
        logger.debug(f"分页: 第{self.page_index}页 ({kind.value}), y={self.y:.2f}")
        return self.y

    def close(self) -> None:
        """收尾当前页"""
        self.flush()
        if self.canvas.pages:
            self.canvas.finish_page()

    def _draw_header(self, kind: PageKind) -> float:
        y = self.header_drawer(self.canvas, kind)
        if y >= self.max_y:
            raise LayoutError(f"页眉过高，第{self.page_index}页无剩余空间 (y={y:.2f}, max_y={self.max_y:.2f})")
        return y
