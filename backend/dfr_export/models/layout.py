"""
版面模型 - 文本测量结果、绘制指令、分页结构

坐标约定：单位mm，原点在页面左上角，y向下递增。
PDF写出时再换算为pt与左下角原点。
"""

from __future__ import annotations

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, Field

RGB = tuple[int, int, int]
BLACK: RGB = (0, 0, 0)


class GlyphLines(BaseModel):
    """文本换行结果（每次渲染重新计算，不跨导出缓存）"""
    lines: list[str]
    height: float
    font: str
    size: float

    model_config = {"frozen": True}

    @property
    def line_count(self) -> int:
        return len(self.lines)


class ImageInfo(BaseModel):
    """图片原始尺寸"""
    width: int
    height: int

    @property
    def aspect(self) -> float:
        return self.height / self.width

    def height_for_width(self, target_width: float) -> float:
        """按目标宽度等比缩放后的高度"""
        return self.height * (target_width / self.width)


# ============================================================================
# 绘制指令
# ============================================================================

class TextCommand(BaseModel):
    """文本（y为首行基线）"""
    op: Literal["text"] = "text"
    x: float
    y: float
    lines: list[str]
    font: str
    size: float
    line_height: float
    color: RGB = BLACK
    align: Literal["left", "center", "right"] = "left"

    model_config = {"frozen": True}


class LineCommand(BaseModel):
    """直线"""
    op: Literal["line"] = "line"
    x1: float
    y1: float
    x2: float
    y2: float
    color: RGB = BLACK
    width: float = 0.5

    model_config = {"frozen": True}


class RectCommand(BaseModel):
    """矩形描边"""
    op: Literal["rect"] = "rect"
    x: float
    y: float
    w: float
    h: float
    color: RGB = BLACK
    width: float = 0.25

    model_config = {"frozen": True}


class CircleCommand(BaseModel):
    """圆（fill为None时只描边）"""
    op: Literal["circle"] = "circle"
    x: float
    y: float
    r: float
    color: RGB = BLACK
    fill: RGB | None = None
    width: float = 0.25

    model_config = {"frozen": True}


class ImageCommand(BaseModel):
    """图片"""
    op: Literal["image"] = "image"
    x: float
    y: float
    w: float
    h: float
    data: bytes = Field(repr=False)

    model_config = {"frozen": True}


DrawCommand = Union[TextCommand, LineCommand, RectCommand, CircleCommand, ImageCommand]


# ============================================================================
# 分页结构
# ============================================================================

class PageKind(str, Enum):
    """页面类型"""
    BODY = "body"
    PHOTO = "photo"
    MAP = "map"


class Page(BaseModel):
    """单页"""
    index: int
    kind: PageKind = PageKind.BODY
    commands: list[DrawCommand] = Field(default_factory=list)
    border_drawn: bool = False
    footer_reserved: bool = False
    footer_text: str | None = None

    def texts(self) -> list[str]:
        """页面上所有文本行（便于检查与测试）"""
        result = []
        for cmd in self.commands:
            if isinstance(cmd, TextCommand):
                result.extend(cmd.lines)
        return result

    def commands_of(self, op: str) -> list[DrawCommand]:
        return [c for c in self.commands if c.op == op]


class RenderedDocument(BaseModel):
    """排版完成的分页文档"""
    page_width: float
    page_height: float
    pages: list[Page] = Field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def pages_of(self, kind: PageKind) -> list[Page]:
        return [p for p in self.pages if p.kind == kind]


class PhotoLayoutGroup(BaseModel):
    """照片分组（一页1~2张），预计算后不可变"""
    indices: tuple[int, ...]
    heights: tuple[float, ...]

    model_config = {"frozen": True}

    @property
    def size(self) -> int:
        return len(self.indices)

    @property
    def total_height(self) -> float:
        return sum(self.heights)
