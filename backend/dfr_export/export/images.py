"""
图片解码与资源定位 - Pillow实现

职责：
1. 读取本地路径或 data: URL 图片
2. 探测原始宽高（线程池中解码，不阻塞事件循环）
3. 输出可嵌入PDF的图片字节（JPEG/PNG原样，其它格式转PNG）
4. 在资源目录中定位Logo等内置资源

依赖：
- Pillow: 图片解码

测试要点：
- test_probe_data_url: data: URL 尺寸探测
- test_probe_missing_file: 文件不存在抛 AssetError
- test_load_converts_other_formats: 非JPEG/PNG转PNG
- test_resolver_search_order: 按目录顺序查找
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import io
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ..interfaces import AssetError, IAssetResolver, IImageDecoder
from ..models import ImageInfo

EMBEDDABLE_FORMATS = {"JPEG", "PNG"}


def read_image_bytes(ref: str) -> bytes:
    """读取图片引用（路径或 data: URL）的原始字节"""
    if ref.startswith("data:"):
        header, sep, payload = ref.partition(",")
        if not sep:
            raise AssetError("data: URL 缺少数据段")
        try:
            if header.endswith(";base64"):
                return base64.b64decode(payload, validate=True)
            return payload.encode("latin-1")
        except (binascii.Error, UnicodeEncodeError) as e:
            raise AssetError(f"data: URL 解码失败: {e}") from e

    path = Path(ref)
    if not path.is_file():
        raise AssetError(f"图片不存在: {path}")
    try:
        return path.read_bytes()
    except OSError as e:
        raise AssetError(f"图片读取失败: {path}: {e}") from e


class PillowImageDecoder(IImageDecoder):
    """Pillow图片解码器"""

    async def probe(self, ref: str) -> ImageInfo:
        return await asyncio.to_thread(self._probe_sync, ref)

    async def load(self, ref: str) -> bytes:
        return await asyncio.to_thread(self._load_sync, ref)

    def _probe_sync(self, ref: str) -> ImageInfo:
        raw = read_image_bytes(ref)
        try:
            with Image.open(io.BytesIO(raw)) as img:
                width, height = img.size
        except (UnidentifiedImageError, OSError) as e:
            raise AssetError(f"无法识别的图片: {e}") from e
        if width <= 0 or height <= 0:
            raise AssetError(f"图片尺寸无效: {width}x{height}")
        return ImageInfo(width=width, height=height)

    def _load_sync(self, ref: str) -> bytes:
        raw = read_image_bytes(ref)
        try:
            with Image.open(io.BytesIO(raw)) as img:
                if img.format in EMBEDDABLE_FORMATS:
                    return raw
                out = io.BytesIO()
                img.convert("RGBA" if "A" in img.getbands() else "RGB").save(out, format="PNG")
                return out.getvalue()
        except (UnidentifiedImageError, OSError) as e:
            raise AssetError(f"无法识别的图片: {e}") from e


class FileAssetResolver(IAssetResolver):
    """按目录顺序查找资源文件"""

    def __init__(self, asset_dirs: list[Path]):
        self.asset_dirs = [Path(d) for d in asset_dirs]

    def resolve(self, name: str) -> Path:
        for directory in self.asset_dirs:
            candidate = directory / name
            if candidate.is_file():
                return candidate
        searched = ", ".join(str(d) for d in self.asset_dirs) or "(无)"
        raise AssetError(f"资源不存在: {name}（已查找: {searched}）")
