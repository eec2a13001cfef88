"""
数据模型层 - 定义系统核心数据结构

所有模块通过这些模型交互，实现解耦：
- ReportContent: 报告内容（表单层输入，只读）
- GlyphLines/DrawCommand/Page: 排版中间结果
- PhotoLayoutGroup: 照片分页分组
- ParseOutcome: 工程文件解析结果（Ok | ParseError）
"""

from .layout import (
    CircleCommand,
    DrawCommand,
    GlyphLines,
    ImageCommand,
    ImageInfo,
    LineCommand,
    Page,
    PageKind,
    PhotoLayoutGroup,
    RectCommand,
    RenderedDocument,
    TextCommand,
)
from .project_file import Ok, ParseError, ParseOutcome, build_content, parse_project
from .report import (
    ChecklistItem,
    ChecklistValue,
    HeaderBlock,
    HeaderField,
    PhotoEntry,
    ReportContent,
    ReportKind,
    TextSection,
)

__all__ = [
    "ReportContent",
    "ReportKind",
    "HeaderBlock",
    "HeaderField",
    "TextSection",
    "ChecklistItem",
    "ChecklistValue",
    "PhotoEntry",
    "GlyphLines",
    "ImageInfo",
    "DrawCommand",
    "TextCommand",
    "LineCommand",
    "RectCommand",
    "CircleCommand",
    "ImageCommand",
    "Page",
    "PageKind",
    "RenderedDocument",
    "PhotoLayoutGroup",
    "Ok",
    "ParseError",
    "ParseOutcome",
    "parse_project",
    "build_content",
]
