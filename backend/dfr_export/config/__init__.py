"""
配置层 - 加载运行期配置与报告版式规范

职责：
- 加载 documents/dfr_runtime.yaml（运行期参数，可被 DFR_ 环境变量覆盖）
- 加载 report_variants.yaml（各报告类型版式规范）
- 提供类型安全的配置访问接口
"""

from .runtime_config import RuntimeConfig, get_config, reload_config
from .variant_loader import (
    ColumnSpec,
    FieldBinding,
    HeaderStyle,
    VariantCatalog,
    VariantLoader,
    VariantSpec,
    load_variants,
)

__all__ = [
    "RuntimeConfig",
    "get_config",
    "reload_config",
    "ColumnSpec",
    "FieldBinding",
    "HeaderStyle",
    "VariantCatalog",
    "VariantLoader",
    "VariantSpec",
    "load_variants",
]
