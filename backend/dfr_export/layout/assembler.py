"""
文档装配器 - 串联页眉/正文/勾选/照片/地图，并统一盖印页码

职责：
1. 调用契约校验（失败在排版开始前抛 ContractError）
2. 预加载Logo（每次导出一次）
3. 正文页：段落 → 勾选块
4. 照片页 → 地图页
5. 终结阶段：所有内容排完后，按真实总页数盖印 "Page i of N"

依赖：
- IImageDecoder: 图片探测与加载
- IAssetResolver: Logo定位（可选）

测试要点：
- test_scenario_a_single_page: 短段落 → 1页，页脚 "Page 1 of 1"
- test_scenario_b_one_break: 长段落 → 2页，标题只出现在第1页
- test_scenario_c_photo_groups: 3张照片 → [[1,2],[3]]
- test_scenario_d_failed_image: 图片失败仍成功导出
- test_footer_final_count: 所有页脚引用最终页数
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..config import RuntimeConfig, get_config, load_variants
from ..interfaces import ContractError, IDocumentAssembler
from ..models import PageKind, RenderedDocument, ReportContent
from .canvas import DocumentCanvas
from .checklist import ChecklistRenderer
from .cursor import PageCursor
from .header import HeaderBlockRenderer, RunningHeader, preload_logo
from .map_page import MapPageRenderer
from .measurer import TextMeasurer
from .photo import PhotoLayoutEngine
from .section import SectionFlowRenderer

if TYPE_CHECKING:
    from ..interfaces import IAssetResolver, IImageDecoder

logger = logging.getLogger(__name__)


class DocumentAssembler(IDocumentAssembler):
    """文档装配器实现（每次 assemble 独立构造游标与画布）"""

    def __init__(
        self,
        decoder: IImageDecoder,
        resolver: IAssetResolver | None = None,
        config: RuntimeConfig | None = None,
    ):
        self.decoder = decoder
        self.resolver = resolver
        self.config = config or get_config()
        self.variants = load_variants(self.config.variants_path)

    async def assemble(self, content: ReportContent) -> RenderedDocument:
        problems = content.contract_problems()
        if problems:
            raise ContractError("报告内容不满足排版要求: " + "; ".join(problems))

        config = self.config
        style = self.variants.get(content.kind.value).header_style
        measurer = TextMeasurer(config)
        canvas = DocumentCanvas(config)

        logo = await preload_logo(config, self.resolver, self.decoder)
        header = RunningHeader(
            config,
            HeaderBlockRenderer(config, measurer, style),
            content.header,
            title=content.title,
            photo_title=content.photo_title,
            logo=logo,
        )
        cursor = PageCursor(canvas, header)

        # 1. 正文页
        if content.include_body_pages:
            cursor.start_page(PageKind.BODY)
            sections = SectionFlowRenderer(config, measurer, cursor)
            for section in content.sections:
                sections.render(section)
            if content.checklist or content.checklist_note:
                ChecklistRenderer(config, measurer, cursor).render(
                    content.checklist, content.checklist_note
                )
            cursor.close()

        # 2. 照片页
        photos = PhotoLayoutEngine(config, measurer, self.decoder)
        await photos.render(cursor, content.site_photos)

        # 3. 地图页
        maps = MapPageRenderer(config, photos)
        for map_photo in content.map_photos:
            await maps.render(cursor, map_photo)

        cursor.close()

        # 4. 页码（总页数此时才确定）
        stamp_footers(canvas)

        document = canvas.to_document()
        logger.info(
            f"排版完成: {content.kind.value}, 共{document.page_count}页 "
            f"(正文{len(document.pages_of(PageKind.BODY))}, "
            f"照片{len(document.pages_of(PageKind.PHOTO))}, "
            f"地图{len(document.pages_of(PageKind.MAP))})"
        )
        return document


def stamp_footers(canvas: DocumentCanvas) -> None:
    """终结阶段：按最终页数给每页盖印页码"""
    page_cfg = canvas.config.page
    total = len(canvas.pages)
    x = page_cfg.width - page_cfg.border_margin
    y = page_cfg.height - page_cfg.border_margin + page_cfg.footer_offset
    for page in canvas.pages:
        footer = f"Page {page.index} of {total}"
        page.commands.append(
            canvas.make_text(footer, x, y, canvas.config.fonts.regular,
                             page_cfg.footer_font_size, align="right")
        )
        page.footer_text = footer
