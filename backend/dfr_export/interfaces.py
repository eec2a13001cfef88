"""
模块接口契约 - 定义排版引擎与外部协作方之间的抽象接口

设计原则：
1. 排版引擎只依赖接口，不直接依赖图片加载/文件保存的具体实现
2. 每个接口定义清晰的输入输出类型
3. 便于单元测试用合成尺寸替换真实图片

使用方式：
    from dfr_export.interfaces import IImageDecoder

    class MyDecoder(IImageDecoder):
        async def probe(self, ref: str) -> ImageInfo:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ImageInfo, RenderedDocument, ReportContent


# ============================================================================
# 外部协作方接口
# ============================================================================

class IAssetResolver(ABC):
    """资源定位接口 - 按名称解析Logo等内置资源"""

    @abstractmethod
    def resolve(self, name: str) -> Path:
        """
        解析资源路径

        Args:
            name: 资源名（如 "xterra-logo.jpg"）

        Returns:
            可加载的本地路径

        Raises:
            AssetError: 资源不存在
        """
        ...


class IImageDecoder(ABC):
    """图片解码接口 - 尺寸探测与嵌入数据加载"""

    @abstractmethod
    async def probe(self, ref: str) -> ImageInfo:
        """
        探测图片原始宽高

        Args:
            ref: 图片引用（本地路径或 data: URL）

        Returns:
            图片尺寸信息

        Raises:
            AssetError: 无法读取或解码
        """
        ...

    @abstractmethod
    async def load(self, ref: str) -> bytes:
        """
        加载可嵌入PDF的图片字节

        Raises:
            AssetError: 无法读取或解码
        """
        ...


class IArtifactSink(ABC):
    """产物接收接口 - 保存或预览导出的PDF"""

    @abstractmethod
    def deliver(self, data: bytes, filename: str) -> Path:
        """
        接收完整的PDF字节流

        Args:
            data: PDF字节
            filename: 建议文件名

        Returns:
            最终落盘路径
        """
        ...


# ============================================================================
# 排版与导出接口
# ============================================================================

class IDocumentAssembler(ABC):
    """文档装配器接口"""

    @abstractmethod
    async def assemble(self, content: ReportContent) -> RenderedDocument:
        """
        将报告内容排版为分页文档

        Raises:
            ContractError: 报告内容缺少必要结构
        """
        ...


class IPDFWriter(ABC):
    """PDF写出器接口"""

    @abstractmethod
    def write(self, document: RenderedDocument) -> bytes:
        """将分页文档写为PDF字节流"""
        ...

    @abstractmethod
    def count_pages(self, data: bytes) -> int:
        """计算PDF页数"""
        ...


# ============================================================================
# 异常定义
# ============================================================================

class DfrExportError(Exception):
    """基础异常"""
    pass


class LayoutError(DfrExportError):
    """排版错误"""
    pass


class AssetError(DfrExportError):
    """资源错误（Logo/照片无法获取或解码）"""
    pass


class ContractError(DfrExportError):
    """调用契约错误（报告内容缺少必要结构）"""
    pass


class ExportError(DfrExportError):
    """导出错误"""
    pass
