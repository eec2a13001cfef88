"""
报告内容模型 - 排版引擎的唯一输入结构

由表单层在导出前即时构建，排版引擎只读不写
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class ReportKind(str, Enum):
    """报告类型"""
    DFR_STANDARD = "dfr_standard"
    DFR_SASKPOWER = "dfr_saskpower"
    PHOTO_LOG = "photo_log"


class ChecklistValue(str, Enum):
    """勾选项取值"""
    YES = "Yes"
    NO = "No"
    NA = "N/A"
    UNSET = ""

    @classmethod
    def parse(cls, raw: str | None) -> ChecklistValue:
        """兼容旧文件中的 "NA" 写法"""
        value = "" if raw is None else str(raw).strip()
        if value.upper() in ("NA", "N/A"):
            return cls.NA
        for member in cls:
            if member.value.lower() == value.lower():
                return member
        return cls.UNSET


class HeaderField(BaseModel):
    """页眉字段"""
    label: str
    value: str = ""


class HeaderBlock(BaseModel):
    """页眉信息块（2~3列 + 通栏字段）"""
    columns: list[list[HeaderField]]
    full_width: list[HeaderField] = Field(default_factory=list)

    @field_validator("columns")
    @classmethod
    def _check_columns(cls, v: list[list[HeaderField]]) -> list[list[HeaderField]]:
        if len(v) not in (2, 3):
            raise ValueError(f"页眉信息块需要2或3列，实际为{len(v)}列")
        return v


class TextSection(BaseModel):
    """正文段落"""
    title: str
    body: str = ""
    render_as_box: bool = False
    force_new_page: bool = False
    space_before: float | None = None

    @property
    def is_blank(self) -> bool:
        return not self.body or not self.body.strip()


class ChecklistItem(BaseModel):
    """勾选行"""
    label: str
    value: ChecklistValue = ChecklistValue.UNSET


class PhotoEntry(BaseModel):
    """照片/地图条目"""
    sequence: str = Field("", description="照片编号")
    date: str = ""
    location: str = ""
    description: str = ""
    direction: str | None = None
    image_ref: str | None = Field(None, description="本地路径或 data: URL")
    is_map: bool = False


class ReportContent(BaseModel):
    """报告内容（排版引擎的唯一输入）"""

    kind: ReportKind = ReportKind.DFR_STANDARD
    title: str = "DAILY FIELD REPORT"
    photo_title: str = "PHOTOGRAPHIC LOG"

    # 页眉
    header: HeaderBlock

    # 正文
    sections: list[TextSection] = Field(default_factory=list)
    checklist: list[ChecklistItem] = Field(default_factory=list)
    checklist_note: str | None = None

    # 照片日志（有序）
    photos: list[PhotoEntry] = Field(default_factory=list)

    # 生成选项
    include_body_pages: bool = True
    suggested_filename: str = "report.pdf"

    model_config = {"frozen": True}

    @property
    def site_photos(self) -> list[PhotoEntry]:
        return [p for p in self.photos if not p.is_map]

    @property
    def map_photos(self) -> list[PhotoEntry]:
        return [p for p in self.photos if p.is_map]

    def contract_problems(self) -> list[str]:
        """调用契约校验，返回问题列表（空表示通过）"""
        problems = []
        if not self.title.strip():
            problems.append("报告标题为空")
        if not any(self.header.columns) and not self.header.full_width:
            problems.append("页眉信息块没有任何字段")
        if not self.include_body_pages and not self.photos:
            problems.append("既无正文页也无照片页，无法生成文档")
        return problems
