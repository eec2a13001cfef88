"""
导出层 - 图片解码、PDF写出、产物落盘、导出服务
"""

from .images import FileAssetResolver, PillowImageDecoder, read_image_bytes
from .pdf_writer import ReportLabPDFWriter
from .service import ExportResult, ExportService
from .sink import FileSink

__all__ = [
    "FileAssetResolver",
    "PillowImageDecoder",
    "read_image_bytes",
    "ReportLabPDFWriter",
    "ExportResult",
    "ExportService",
    "FileSink",
]
