"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(make_content, fake_decoder):
        content = make_content(sections=[TextSection(title="A:", body="x")])
"""

from __future__ import annotations

import asyncio
import io
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest
from PIL import Image

from dfr_export.config import RuntimeConfig, VariantCatalog, load_variants
from dfr_export.interfaces import AssetError, IAssetResolver, IImageDecoder
from dfr_export.layout import DocumentCanvas, PageCursor, TextMeasurer
from dfr_export.models import (
    HeaderBlock,
    HeaderField,
    ImageInfo,
    PageKind,
    PhotoEntry,
    ReportContent,
    ReportKind,
)


def make_png(width: int = 40, height: int = 30) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), (0, 125, 140)).save(buf, format="PNG")
    return buf.getvalue()


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture
def runtime_config() -> RuntimeConfig:
    """运行期配置（默认值）"""
    return RuntimeConfig()


@pytest.fixture(scope="session")
def variants() -> VariantCatalog:
    """版式规范（会话级别缓存）"""
    return load_variants()


@pytest.fixture
def measurer(runtime_config: RuntimeConfig) -> TextMeasurer:
    return TextMeasurer(runtime_config)


# ============================================================================
# 协作方替身
# ============================================================================

class FakeDecoder(IImageDecoder):
    """合成尺寸的图片解码器（不读真实文件）"""

    def __init__(
        self,
        sizes: dict[str, tuple[int, int]] | None = None,
        failures: set[str] | None = None,
        delays: dict[str, float] | None = None,
    ):
        self.sizes = sizes or {}
        self.failures = failures or set()
        self.delays = delays or {}
        self.probed: list[str] = []
        self.loaded: list[str] = []
        self.active = 0
        self.max_active = 0

    async def probe(self, ref: str) -> ImageInfo:
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delays.get(ref, 0))
            self.probed.append(ref)
            if ref in self.failures or ref not in self.sizes:
                raise AssetError(f"无法解码: {ref}")
            w, h = self.sizes[ref]
            return ImageInfo(width=w, height=h)
        finally:
            self.active -= 1

    async def load(self, ref: str) -> bytes:
        self.loaded.append(ref)
        if ref in self.failures:
            raise AssetError(f"无法解码: {ref}")
        if ref in self.sizes:
            return make_png(*self.sizes[ref])
        raise AssetError(f"无法解码: {ref}")


class MissingAssetResolver(IAssetResolver):
    """任何资源都找不到"""

    def resolve(self, name: str) -> Path:
        raise AssetError(f"资源不存在: {name}")


class StaticAssetResolver(IAssetResolver):
    """所有资源都解析为同一路径"""

    def __init__(self, path: Path):
        self.path = path

    def resolve(self, name: str) -> Path:
        return self.path


@pytest.fixture
def fake_decoder() -> FakeDecoder:
    return FakeDecoder()


@pytest.fixture
def missing_resolver() -> MissingAssetResolver:
    return MissingAssetResolver()


# ============================================================================
# 数据模型 Fixtures
# ============================================================================

@pytest.fixture
def sample_header() -> HeaderBlock:
    """示例页眉（两列 + 通栏）"""
    return HeaderBlock(
        columns=[
            [
                HeaderField(label="Date", value="2024-05-14"),
                HeaderField(label="Proponent", value="Prairie Pipelines Ltd."),
                HeaderField(label="Location", value="NE-12-034-05-W3M"),
            ],
            [
                HeaderField(label="Project #", value="XT-2041"),
                HeaderField(label="Monitor", value="J. Doe"),
                HeaderField(label="ENV File #", value="ENV-118"),
            ],
        ],
        full_width=[HeaderField(label="Project Name", value="North Lateral Reclamation")],
    )


@pytest.fixture
def make_content(sample_header: HeaderBlock) -> Callable[..., ReportContent]:
    """ReportContent 工厂"""

    def _make(**overrides) -> ReportContent:
        data = {
            "kind": ReportKind.DFR_STANDARD,
            "header": sample_header,
            "sections": [],
            "photos": [],
        }
        data.update(overrides)
        return ReportContent(**data)

    return _make


def photo(seq: str, ref: str | None = None, **kwargs) -> PhotoEntry:
    return PhotoEntry(sequence=seq, date="2024-05-14", location="Pad A",
                      description=kwargs.pop("description", "Looking north."),
                      image_ref=ref, **kwargs)


# ============================================================================
# 排版 Fixtures
# ============================================================================

class HeaderStub:
    """固定高度的页眉（便于精确控制可用空间）"""

    def __init__(self, start_y: float = 50.0):
        self.start_y = start_y
        self.calls: list[tuple[int, PageKind]] = []

    def __call__(self, canvas: DocumentCanvas, kind: PageKind) -> float:
        self.calls.append((canvas.page_number, kind))
        canvas.text("HEADER", 20, 20, "Times-Bold", 10)
        return self.start_y


@pytest.fixture
def header_stub() -> HeaderStub:
    return HeaderStub()


@pytest.fixture
def body_cursor(runtime_config: RuntimeConfig, header_stub: HeaderStub) -> PageCursor:
    """已开启第1页正文页的游标"""
    cursor = PageCursor(DocumentCanvas(runtime_config), header_stub)
    cursor.start_page(PageKind.BODY)
    return cursor


# ============================================================================
# 文件 Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
