"""
页眉渲染 - 项目信息块与正文/照片页的running header

职责：
1. 项目信息块：2~3列字段 + 通栏字段，标签加粗大写，值按列宽换行
2. 正文页页眉：Logo + 居中标题 + 信息块（含上下青色线）
3. 照片页页眉：Logo + 照片日志标题 + 上青线 + 信息块
4. Logo每次导出只解析加载一次，失败时回退为文字 "X-TERRA"

依赖：
- IAssetResolver / IImageDecoder: Logo定位与加载

测试要点：
- test_labels_uppercase_colon: 标签大写并带冒号
- test_columns_independent: 各列独立累加高度
- test_bottom_rule_position: 底线位置 = 字段末尾 - 字段间距 + 下内边距
- test_logo_fallback_text: Logo不可用时绘制文字
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..config import ColumnSpec, HeaderStyle, RuntimeConfig
from ..interfaces import AssetError
from ..models import HeaderBlock, HeaderField, PageKind
from .canvas import DocumentCanvas
from .measurer import TextMeasurer

if TYPE_CHECKING:
    from ..interfaces import IAssetResolver, IImageDecoder

logger = logging.getLogger(__name__)


class HeaderBlockRenderer:
    """项目信息块渲染器"""

    def __init__(self, config: RuntimeConfig, measurer: TextMeasurer, style: HeaderStyle):
        self.config = config
        self.measurer = measurer
        self.style = style

    def render(
        self,
        canvas: DocumentCanvas,
        start_y: float,
        header: HeaderBlock,
        draw_top_line: bool = True,
        draw_bottom_line: bool = True,
    ) -> float:
        """绘制信息块，返回底线y"""
        page = self.config.page
        y = start_y + self.style.padding_top

        column_specs = self._column_specs(len(header.columns))
        column_ends = []
        for fields, spec in zip(header.columns, column_specs):
            x = spec.x(page.content_margin, page.content_width)
            width = spec.width(page.content_width)
            col_y = y
            for field in fields:
                col_y += self._draw_field(canvas, field, x, col_y, width) + self.style.field_gap
            column_ends.append(col_y)

        y = max(column_ends, default=y)
        for field in header.full_width:
            y += self._draw_field(canvas, field, page.content_margin, y, page.content_width) \
                + self.style.field_gap

        block_bottom = y - self.style.field_gap + self.style.padding_bottom
        if draw_top_line:
            canvas.rule(start_y)
        if draw_bottom_line:
            canvas.rule(block_bottom)
        return block_bottom

    def label_text(self, label: str) -> str:
        text = label.strip()
        if self.style.uppercase_labels:
            text = text.upper()
        if not text.endswith(":"):
            text += ":"
        return text

    def _draw_field(
        self, canvas: DocumentCanvas, field: HeaderField, x: float, y: float, max_width: float
    ) -> float:
        """绘制单个字段，返回值文本高度"""
        fonts = self.config.fonts
        label = self.label_text(field.label)
        label_w = self.measurer.text_width(label, fonts.bold, self.style.label_size)
        canvas.text(label, x, y, fonts.bold, self.style.label_size)

        value_w = max_width - label_w - self.style.label_value_gap
        value = self.measurer.measure(field.value or " ", fonts.regular, self.style.value_size, value_w)
        canvas.text(value.lines, x + label_w + self.style.label_value_gap, y,
                    fonts.regular, self.style.value_size)
        return value.height

    def _column_specs(self, count: int) -> list[ColumnSpec]:
        if len(self.style.columns) == count:
            return self.style.columns
        # 版式未定义该列数时均分
        return [ColumnSpec(x_ratio=i / count, width_ratio=1 / count) for i in range(count)]


class RunningHeader:
    """正文页/照片页页眉（每次分页重绘）"""

    def __init__(
        self,
        config: RuntimeConfig,
        block: HeaderBlockRenderer,
        header: HeaderBlock,
        title: str,
        photo_title: str,
        logo: bytes | None = None,
    ):
        self.config = config
        self.block = block
        self.header = header
        self.title = title
        self.photo_title = photo_title
        self.logo = logo

    def __call__(self, canvas: DocumentCanvas, kind: PageKind) -> float:
        if kind == PageKind.BODY:
            return self.draw_body(canvas)
        return self.draw_photo(canvas)

    def draw_body(self, canvas: DocumentCanvas) -> float:
        """正文页页眉，返回正文起始y"""
        top = self.config.page.content_margin
        self._draw_brand(canvas, self.title)
        block_end = self.block.render(canvas, top + 15, self.header)
        return block_end + self.block.style.post_gap

    def draw_photo(self, canvas: DocumentCanvas) -> float:
        """照片/地图页页眉"""
        top = self.config.page.content_margin
        self._draw_brand(canvas, self.photo_title)
        canvas.rule(top + 15)
        block_end = self.block.render(canvas, top + 15, self.header, draw_top_line=False)
        return block_end + 1

    def _draw_brand(self, canvas: DocumentCanvas, title: str) -> None:
        page = self.config.page
        fonts = self.config.fonts
        assets = self.config.assets
        top = page.content_margin

        if self.logo is not None:
            canvas.image(self.logo, page.content_margin, top, assets.logo_width, assets.logo_height)
        else:
            canvas.text(assets.logo_fallback_text, page.content_margin, top + 5,
                        fonts.bold, 10, color=page.border_color)

        canvas.text(title, page.width / 2, top + 7, fonts.bold, fonts.title_size,
                    color=page.border_color, align="center")


async def preload_logo(
    config: RuntimeConfig,
    resolver: IAssetResolver | None,
    decoder: IImageDecoder,
) -> bytes | None:
    """解析并加载Logo（失败返回None，页眉改用文字）"""
    if resolver is None:
        return None
    try:
        path = resolver.resolve(config.assets.logo_name)
        return await decoder.load(str(path))
    except AssetError as e:
        logger.warning(f"Logo不可用，改用文字页眉: {e}")
        return None
