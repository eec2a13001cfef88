"""
版式规范加载器 - 读取 report_variants.yaml

职责：
- 解析YAML并提供类型安全访问
- 提供各报告类型的页眉字段、正文段落、勾选项、文件名规则
- 缓存加载结果（避免重复解析）

使用方式：
    catalog = VariantLoader.load()
    spec = catalog.get("dfr_saskpower")
    kind = catalog.kind_for_extension(".spdfr")
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

DEFAULT_VARIANTS_PATH = Path(__file__).with_name("report_variants.yaml")


class ColumnSpec(BaseModel):
    """页眉列几何（按内容宽度比例+偏移）"""
    x_ratio: float
    width_ratio: float
    x_offset: float = 0.0
    width_offset: float = 0.0

    def x(self, content_margin: float, content_width: float) -> float:
        return content_margin + content_width * self.x_ratio + self.x_offset

    def width(self, content_width: float) -> float:
        return content_width * self.width_ratio + self.width_offset


class HeaderStyle(BaseModel):
    """页眉信息块样式"""
    label_size: float = 12.0
    value_size: float = 11.0
    padding_top: float = 4.0
    padding_bottom: float = 0.0
    field_gap: float = 1.5
    post_gap: float = 6.0
    label_value_gap: float = 2.0
    uppercase_labels: bool = True
    columns: list[ColumnSpec] = Field(default_factory=list)


class FieldBinding(BaseModel):
    """页眉字段落点"""
    key: str
    label: str
    label_key: str | None = None


class SectionBinding(BaseModel):
    """正文段落落点"""
    key: str
    title: str
    box: bool = False
    force_new_page: bool = False


class ActivitiesBinding(BaseModel):
    """项目活动段落（总述+按地点分段）"""
    title: str
    location_title: str = "Location: {location}"


class ChecklistBinding(BaseModel):
    """勾选项落点"""
    key: str
    label: str


class VariantSpec(BaseModel):
    """单个报告类型的版式规范"""
    kind: str = ""
    title: str
    photo_title: str = "PHOTOGRAPHIC LOG"
    file_extensions: list[str] = Field(default_factory=list)
    filename_pattern: str = "{project_name}_{date}.pdf"
    body_pages: bool = True
    header_style: HeaderStyle = Field(default_factory=HeaderStyle)
    header_columns: list[list[FieldBinding]] = Field(default_factory=list)
    header_full_width: list[FieldBinding] = Field(default_factory=list)
    activities: ActivitiesBinding | None = None
    sections: list[SectionBinding] = Field(default_factory=list)
    checklist: list[ChecklistBinding] = Field(default_factory=list)
    checklist_note: str | None = None


class VariantCatalog(BaseModel):
    """版式规范（report_variants.yaml 的结构化表示）"""
    schema_version: str
    variants: dict[str, VariantSpec] = Field(default_factory=dict)

    def model_post_init(self, __context) -> None:
        for kind, spec in self.variants.items():
            spec.kind = kind

    # === 便捷访问方法 ===

    def get(self, kind: str) -> VariantSpec:
        """获取报告类型规范"""
        if kind not in self.variants:
            raise KeyError(f"未知报告类型: {kind}")
        return self.variants[kind]

    def kinds(self) -> list[str]:
        return list(self.variants)

    def kind_for_extension(self, suffix: str) -> str | None:
        """按工程文件扩展名判断报告类型"""
        suffix = suffix.lower()
        for kind, spec in self.variants.items():
            if suffix in spec.file_extensions:
                return kind
        return None


class VariantLoader:
    """版式规范加载器（缓存）"""

    @classmethod
    @lru_cache(maxsize=4)
    def load(cls, variants_path: str | Path = DEFAULT_VARIANTS_PATH) -> VariantCatalog:
        """加载并缓存版式规范"""
        path = Path(variants_path)
        if not path.exists():
            raise FileNotFoundError(f"版式规范文件不存在: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        return VariantCatalog(**data)

    @classmethod
    def reload(cls, variants_path: str | Path = DEFAULT_VARIANTS_PATH) -> VariantCatalog:
        """强制重新加载（清除缓存）"""
        cls.load.cache_clear()
        return cls.load(variants_path)


# 便捷函数
def load_variants(variants_path: str | Path | None = None) -> VariantCatalog:
    """加载版式规范"""
    return VariantLoader.load(variants_path or DEFAULT_VARIANTS_PATH)
