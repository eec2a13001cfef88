"""
照片页排版 - 尺寸预探测、贪心分组、成对均衡绘制

职责：
1. 预计算：并发探测所有照片原始尺寸（有上限，保持顺序），得到条目高度
2. 分组：单遍贪心，每页最多2张；h1 + h2 + 2×tight_gap ≤ 可用高度 才配对
3. 绘制：单张直接画在页眉下；两张时上下留白均分，中间画青色分隔线
4. 图片失败：高度按0计，绘制灰色空框，不中断导出

依赖：
- IImageDecoder: 尺寸探测与图片加载（测试中用合成尺寸替换）

测试要点：
- test_layout_pairs_when_fit: 恰好等于可用高度时配对
- test_layout_scenario_c: [[1,2],[3]]
- test_layout_deterministic: 同一高度数组重复分组结果一致
- test_probe_order_preserved: 并发探测结果保持输入顺序
- test_failed_image_placeholder: 失败图片绘制空框且文本完整
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..config import RuntimeConfig
from ..interfaces import AssetError
from ..models import ImageInfo, PageKind, PhotoEntry, PhotoLayoutGroup
from .canvas import DocumentCanvas
from .cursor import PageCursor
from .measurer import TextMeasurer

if TYPE_CHECKING:
    from ..interfaces import IImageDecoder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhotoMetrics:
    """预计算结果（与输入照片一一对应）"""
    heights: tuple[float, ...]
    infos: tuple[ImageInfo | None, ...]


class PhotoLayoutEngine:
    """照片页排版引擎"""

    def __init__(self, config: RuntimeConfig, measurer: TextMeasurer, decoder: IImageDecoder):
        self.config = config
        self.measurer = measurer
        self.decoder = decoder

    # === 几何 ===

    @property
    def text_width(self) -> float:
        cfg = self.config.photos
        return (self.config.page.content_width - cfg.column_gap) * cfg.text_ratio

    @property
    def image_width(self) -> float:
        cfg = self.config.photos
        return (self.config.page.content_width - cfg.column_gap) * (1 - cfg.text_ratio)

    @property
    def image_x(self) -> float:
        return self.config.page.content_margin + self.text_width + self.config.photos.column_gap

    # === 预计算 ===

    async def probe_all(self, photos: list[PhotoEntry]) -> list[ImageInfo | None]:
        """并发探测图片尺寸（结果保持输入顺序，失败为None）"""
        semaphore = asyncio.Semaphore(self.config.concurrency.max_image_probes)

        async def _probe(photo: PhotoEntry) -> ImageInfo | None:
            if not photo.image_ref:
                return None
            async with semaphore:
                try:
                    return await self.decoder.probe(photo.image_ref)
                except AssetError as e:
                    logger.warning(f"照片 {photo.sequence or '?'} 尺寸探测失败: {e}")
                    return None

        return list(await asyncio.gather(*(_probe(p) for p in photos)))

    def text_block_height(self, photo: PhotoEntry, width: float | None = None) -> float:
        """文字块高度（编号/方向/日期/地点/描述）"""
        cfg = self.config.photos
        fonts = self.config.fonts
        width = self.text_width if width is None else width

        height = self.measurer.line_height(fonts.body_size) * cfg.ascent_ratio
        for label, value in self._fields(photo):
            label_w = self.measurer.text_width(f"{label}:", fonts.bold, fonts.body_size)
            value_lines = self.measurer.measure(
                value or " ", fonts.regular, fonts.body_size, width - label_w - cfg.label_value_gap
            )
            height += value_lines.height + cfg.field_gap
        height += cfg.description_gap
        height += self.measurer.measure(
            photo.description or " ", fonts.regular, fonts.body_size, width
        ).height
        return height

    def entry_height(self, photo: PhotoEntry, info: ImageInfo | None) -> float:
        image_h = info.height_for_width(self.image_width) if info else 0.0
        return max(self.text_block_height(photo), image_h)

    async def precompute(self, photos: list[PhotoEntry]) -> PhotoMetrics:
        """探测全部图片后计算条目高度（必须在任何绘制之前完成）"""
        infos = await self.probe_all(photos)
        heights = tuple(self.entry_height(p, i) for p, i in zip(photos, infos))
        return PhotoMetrics(heights=heights, infos=tuple(infos))

    # === 分组 ===

    def layout(self, heights: list[float] | tuple[float, ...], available: float) -> list[PhotoLayoutGroup]:
        """单遍贪心分组（不做全局最优）"""
        pair_gap = self.config.photos.tight_gap * 2
        groups: list[PhotoLayoutGroup] = []
        current: list[int] = []

        for i, height in enumerate(heights):
            if not current:
                current = [i]
            elif heights[current[0]] + height + pair_gap <= available:
                current.append(i)
            else:
                groups.append(self._group(current, heights))
                current = [i]
            if len(current) == 2:
                groups.append(self._group(current, heights))
                current = []

        if current:
            groups.append(self._group(current, heights))
        return groups

    @staticmethod
    def _group(indices: list[int], heights) -> PhotoLayoutGroup:
        return PhotoLayoutGroup(
            indices=tuple(indices), heights=tuple(heights[i] for i in indices)
        )

    def available_height(self, cursor: PageCursor) -> float:
        """照片页页眉下的可用高度（在草稿画布上试画页眉）"""
        scratch = DocumentCanvas(self.config)
        scratch.add_page(PageKind.PHOTO)
        header_y = cursor.header_drawer(scratch, PageKind.PHOTO)
        return cursor.max_y - header_y

    # === 绘制 ===

    async def render(self, cursor: PageCursor, photos: list[PhotoEntry]) -> int:
        """排版全部现场照片，返回生成页数"""
        if not photos:
            return 0
        metrics = await self.precompute(photos)
        groups = self.layout(metrics.heights, self.available_height(cursor))
        logger.info(f"照片分组: {len(photos)} 张 → {len(groups)} 页")

        for group in groups:
            if cursor.canvas.pages:
                cursor.close()
            cursor.start_page(PageKind.PHOTO)
            await self.draw(cursor, group, photos, metrics)
        return len(groups)

    async def draw(
        self,
        cursor: PageCursor,
        group: PhotoLayoutGroup,
        photos: list[PhotoEntry],
        metrics: PhotoMetrics,
    ) -> None:
        """绘制一页照片组"""
        cfg = self.config.photos
        page = self.config.page
        first = group.indices[0]

        if group.size == 1:
            await self.draw_entry(cursor.canvas, photos[first], metrics.infos[first],
                                  cursor.y, group.heights[0])
            cursor.advance(group.heights[0])
            return

        second = group.indices[1]
        remaining = cursor.remaining() - group.total_height - cfg.tight_gap * 2
        large_gap = remaining / 2 if remaining > 0 else cfg.fallback_gap

        cursor.advance(cfg.tight_gap)
        await self.draw_entry(cursor.canvas, photos[first], metrics.infos[first],
                              cursor.y, group.heights[0])
        cursor.advance(group.heights[0] + large_gap)
        cursor.canvas.line(page.border_margin, cursor.y, page.width - page.border_margin, cursor.y,
                           color=page.border_color, width=page.border_line_width)
        cursor.advance(cfg.tight_gap)
        await self.draw_entry(cursor.canvas, photos[second], metrics.infos[second],
                              cursor.y, group.heights[1])
        cursor.advance(group.heights[1])

    async def draw_entry(
        self,
        canvas: DocumentCanvas,
        photo: PhotoEntry,
        info: ImageInfo | None,
        y: float,
        height: float,
    ) -> None:
        """绘制单个条目：左侧文字块，右侧图片（或空框）"""
        self.draw_text_block(canvas, photo, self.config.page.content_margin, y, self.text_width)

        data = await self.load_image(photo, info)
        if data is not None:
            canvas.image(data, self.image_x, y, self.image_width, info.height_for_width(self.image_width))
        else:
            canvas.rect(self.image_x, y, self.image_width, height,
                        color=self.config.photos.placeholder_color)

    def draw_text_block(
        self, canvas: DocumentCanvas, photo: PhotoEntry, x: float, y: float, width: float
    ) -> float:
        """绘制文字块，返回结束y"""
        cfg = self.config.photos
        fonts = self.config.fonts
        size = fonts.body_size

        text_y = y + self.measurer.line_height(size) * cfg.ascent_ratio
        for label, value in self._fields(photo):
            label_text = f"{label}:"
            canvas.text(label_text, x, text_y, fonts.bold, size)
            label_w = self.measurer.text_width(label_text, fonts.bold, size)
            value_lines = self.measurer.measure(
                value or " ", fonts.regular, size, width - label_w - cfg.label_value_gap
            )
            canvas.text(value_lines.lines, x + label_w + cfg.label_value_gap, text_y, fonts.regular, size)
            text_y += value_lines.height + cfg.field_gap

        canvas.text("Description:", x, text_y, fonts.bold, size)
        text_y += cfg.description_gap
        desc = self.measurer.measure(photo.description or " ", fonts.regular, size, width)
        canvas.text(desc.lines, x, text_y, fonts.regular, size)
        return text_y + desc.height

    async def load_image(self, photo: PhotoEntry, info: ImageInfo | None) -> bytes | None:
        """加载嵌入用图片字节（失败返回None）"""
        if not photo.image_ref or info is None:
            return None
        try:
            return await self.decoder.load(photo.image_ref)
        except AssetError as e:
            logger.warning(f"照片 {photo.sequence or '?'} 加载失败，改为空框: {e}")
            return None

    @staticmethod
    def _fields(photo: PhotoEntry) -> list[tuple[str, str]]:
        fields = [("Map" if photo.is_map else "Photo", photo.sequence)]
        if not photo.is_map:
            fields.append(("Direction", photo.direction or "N/A"))
        fields.append(("Date", photo.date))
        fields.append(("Location", photo.location))
        return fields
