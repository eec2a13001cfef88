"""
运行期配置 - 读取 documents/dfr_runtime.yaml

职责：
- 加载页面几何/字体/间距/并发等运行参数
- 提供环境变量覆盖机制（DFR_ 前缀）
- 类型安全的配置访问
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

MM_PER_PT = 25.4 / 72

_SECTIONS = ("page", "fonts", "text_flow", "photos", "checklist", "concurrency", "assets", "logging")


class PageConfig(BaseModel):
    """页面几何（单位mm，Letter纸）"""

    width: float = 215.9
    height: float = 279.4
    border_margin: float = 12.7
    content_padding: float = 4.0
    border_nudge: float = 0.0
    border_color: tuple[int, int, int] = (0, 125, 140)
    border_line_width: float = 0.5
    footer_offset: float = 4.0
    footer_font_size: float = 10.0

    @property
    def content_margin(self) -> float:
        return self.border_margin + self.content_padding

    @property
    def content_width(self) -> float:
        return self.width - self.content_margin * 2

    @property
    def max_y(self) -> float:
        return self.height - self.content_margin

    @property
    def border_y(self) -> float:
        return self.height - self.border_margin - self.border_nudge


class FontConfig(BaseModel):
    """字体配置（reportlab 标准 Times 字族）"""

    regular: str = "Times-Roman"
    bold: str = "Times-Bold"
    line_height_factor: float = 1.15
    title_size: float = 18.0
    section_title_size: float = 13.0
    body_size: float = 12.0


class TextFlowConfig(BaseModel):
    """正文排版参数"""

    space_before_section: float = 4.0
    title_gap: float = 2.0
    line_gap: float = 2.0
    blank_line_gap: float = 3.0
    indent_unit: float = 5.0
    bullet_offset: float = 2.0
    bullet_text_offset: float = 5.0
    box_padding: float = 2.0
    box_color: tuple[int, int, int] = (128, 128, 128)
    box_line_width: float = 0.25


class PhotoLayoutConfig(BaseModel):
    """照片页排版参数"""

    column_gap: float = 5.0
    text_ratio: float = 0.35
    tight_gap: float = 5.0
    fallback_gap: float = 2.0
    label_value_gap: float = 2.0
    field_gap: float = 1.5
    description_gap: float = 5.0
    ascent_ratio: float = 0.75
    map_footer_allowance: float = 25.0
    map_caption_gap: float = 8.0
    placeholder_color: tuple[int, int, int] = (200, 200, 200)


class ChecklistConfig(BaseModel):
    """勾选项排版参数"""

    options: list[str] = Field(default_factory=lambda: ["Yes", "No", "N/A"])
    row_pitch: float = 8.0
    option_pitch: float = 20.0
    circle_radius: float = 1.5
    font_size: float = 10.0
    block_padding_top: float = 4.0
    block_padding_bottom: float = 10.0


class ConcurrencyConfig(BaseModel):
    """并发配置"""

    max_image_probes: int = 8


class AssetConfig(BaseModel):
    """资源配置"""

    asset_dirs: list[Path] = Field(default_factory=lambda: [Path("assets")])
    logo_name: str = "xterra-logo.jpg"
    logo_width: float = 40.0
    logo_height: float = 10.0
    logo_fallback_text: str = "X-TERRA"


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"
    log_to_file: bool = False


class RuntimeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    # 基础路径
    output_dir: Path = Path("exports")
    variants_path: Path | None = None

    # 各子配置
    page: PageConfig = Field(default_factory=PageConfig)
    fonts: FontConfig = Field(default_factory=FontConfig)
    text_flow: TextFlowConfig = Field(default_factory=TextFlowConfig)
    photos: PhotoLayoutConfig = Field(default_factory=PhotoLayoutConfig)
    checklist: ChecklistConfig = Field(default_factory=ChecklistConfig)
    concurrency: ConcurrencyConfig = Field(default_factory=ConcurrencyConfig)
    assets: AssetConfig = Field(default_factory=AssetConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "DFR_",
        "env_nested_delimiter": "__",
        "arbitrary_types_allowed": True,
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """DFR_ 环境变量覆盖YAML取值"""
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """从YAML文件加载配置"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        runtime_opts = data.get("runtime_options", {})

        # 以普通dict传入，与同名环境变量逐项合并（环境变量优先）
        config = cls(**{key: cls._extract(runtime_opts, key) for key in _SECTIONS})

        config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置"""
        section = data.get(key, {}) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """解析相对路径配置为绝对路径（基于配置文件所在目录）"""
        self.assets.asset_dirs = [
            d if d.is_absolute() else (base_dir / d).resolve()
            for d in self.assets.asset_dirs
        ]
        if self.variants_path and not self.variants_path.is_absolute():
            self.variants_path = (base_dir / self.variants_path).resolve()

    def pt_to_mm(self, size_pt: float) -> float:
        """字号(pt)对应的单行高度(mm)"""
        return size_pt * self.fonts.line_height_factor * MM_PER_PT


# 全局配置实例
_config: RuntimeConfig | None = None


def get_config() -> RuntimeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        default_path = Path("documents/dfr_runtime.yaml")
        if not default_path.exists():
            fallback_path = Path("config/dfr_runtime.yaml")
            if fallback_path.exists():
                default_path = fallback_path
        _config = RuntimeConfig.from_yaml(default_path)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """重新加载配置"""
    global _config
    path = yaml_path or "documents/dfr_runtime.yaml"
    _config = RuntimeConfig.from_yaml(path)
    return _config
