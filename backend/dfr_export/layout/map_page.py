"""
地图页渲染 - 每页一张地图，等比适配 + 下方说明

职责：
1. 可用高度 = 页高 - 页眉下y - 页脚留白(25mm) - 说明文字高度
2. 图片等比缩放至内容宽度与可用高度之内，水平居中
3. 说明文字位于图片下方8mm；图片失败时紧贴页眉
"""

from __future__ import annotations

import logging

from ..config import RuntimeConfig
from ..models import PageKind, PhotoEntry
from .cursor import PageCursor
from .photo import PhotoLayoutEngine

logger = logging.getLogger(__name__)


class MapPageRenderer:
    """地图页渲染器（复用照片引擎的探测与文字块）"""

    def __init__(self, config: RuntimeConfig, photos: PhotoLayoutEngine):
        self.config = config
        self.photos = photos

    async def render(self, cursor: PageCursor, map_photo: PhotoEntry) -> float:
        """绘制一页地图，返回说明文字结束y"""
        page = self.config.page
        cfg = self.config.photos
        canvas = cursor.canvas

        if canvas.pages:
            cursor.close()
        y = cursor.start_page(PageKind.MAP)

        caption_h = self.photos.text_block_height(map_photo, page.content_width)
        avail_h = page.height - y - cfg.map_footer_allowance - caption_h
        avail_w = page.content_width

        infos = await self.photos.probe_all([map_photo])
        info = infos[0]
        data = await self.photos.load_image(map_photo, info)

        caption_y = y
        if data is not None and avail_h > 0:
            ratio = min(avail_w / info.width, avail_h / info.height)
            draw_w = info.width * ratio
            draw_h = info.height * ratio
            draw_x = page.content_margin + (avail_w - draw_w) / 2
            canvas.image(data, draw_x, y, draw_w, draw_h)
            caption_y = y + draw_h + cfg.map_caption_gap
        elif data is not None:
            logger.warning(f"地图 {map_photo.sequence or '?'} 说明过长，无空间放置图片")

        end_y = self.photos.draw_text_block(canvas, map_photo, page.content_margin, caption_y,
                                            page.content_width)
        cursor.y = end_y
        return end_y
