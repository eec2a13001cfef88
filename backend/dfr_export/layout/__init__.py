"""
排版引擎 - 将 ReportContent 确定性地排为分页绘制指令

模块：
- measurer: 文本换行与高度
- canvas/cursor: 指令记录与分页协议
- header/section/checklist: 正文页各区块
- photo/map_page: 照片与地图页
- assembler: 串联与页码盖印
"""

from .assembler import DocumentAssembler, stamp_footers
from .canvas import DocumentCanvas
from .checklist import ChecklistRenderer
from .cursor import PageCursor
from .header import HeaderBlockRenderer, RunningHeader, preload_logo
from .map_page import MapPageRenderer
from .measurer import TextMeasurer
from .photo import PhotoLayoutEngine, PhotoMetrics
from .section import SectionFlowRenderer

__all__ = [
    "DocumentAssembler",
    "stamp_footers",
    "DocumentCanvas",
    "PageCursor",
    "TextMeasurer",
    "HeaderBlockRenderer",
    "RunningHeader",
    "preload_logo",
    "SectionFlowRenderer",
    "ChecklistRenderer",
    "PhotoLayoutEngine",
    "PhotoMetrics",
    "MapPageRenderer",
]
