"""
工程文件解析 - .dfr/.spdfr/.plog/.clog → ReportContent

职责：
1. 解析JSON工程文件（解析失败以 ParseError 返回，不抛异常）
2. 兼容旧版本字段（activityBlocks/projectActivities/textData/envFile）
3. 按报告类型版式规范构建 ReportContent
4. 生成建议的PDF文件名

测试要点：
- test_parse_invalid_json: 非法JSON返回ParseError
- test_parse_missing_structure: 缺少必要结构返回ParseError
- test_migrate_activity_blocks: 旧版activityBlocks迁移
- test_migrate_env_file: 旧版envFile迁移
- test_saskpower_merge_locations: SaskPower地点活动合并
- test_suggested_filename: 文件名规则
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Any, Union

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

if TYPE_CHECKING:
    from ..config import FieldBinding, VariantSpec


@dataclass(frozen=True)
class Ok:
    """解析成功"""
    content: ReportContent
    migrated: bool = False


@dataclass(frozen=True)
class ParseError:
    """解析失败（原因可直接展示给用户）"""
    reason: str


ParseOutcome = Union[Ok, ParseError]


def parse_project(text: str, spec: VariantSpec) -> ParseOutcome:
    """解析工程文件文本"""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        return ParseError(f"工程文件不是有效的JSON: {e.msg} (行{e.lineno})")

    if not isinstance(data, dict):
        return ParseError("工程文件格式无效: 顶层必须是对象")

    photos = data.get("photosData")
    if photos is not None and not isinstance(photos, list):
        return ParseError("工程文件格式无效: photosData 必须是数组")

    kind = ReportKind(spec.kind)
    if kind != ReportKind.DFR_SASKPOWER:
        header = data.get("headerData")
        if not isinstance(header, dict) or photos is None:
            return ParseError("工程文件格式无效: 缺少 headerData 或 photosData")
        if kind == ReportKind.DFR_STANDARD and not (
            isinstance(data.get("bodyData"), dict) or isinstance(data.get("textData"), dict)
        ):
            return ParseError("工程文件格式无效: 缺少 bodyData")

    try:
        if kind == ReportKind.DFR_SASKPOWER:
            fields, migrated = _normalize_saskpower(data)
        else:
            fields, migrated = _normalize_standard(data)
        content = build_content(fields, photos or [], spec)
    except (ValueError, TypeError, AttributeError) as e:
        return ParseError(f"工程文件内容无效: {e}")
    return Ok(content=content, migrated=migrated)


# ============================================================================
# 旧版本兼容
# ============================================================================

def _normalize_standard(data: dict[str, Any]) -> tuple[dict[str, Any], bool]:
    """标准DFR/照片日志：展平 headerData + bodyData，并迁移旧字段"""
    migrated = False
    header = dict(_mapping(data.get("headerData")))
    body = dict(_mapping(data.get("bodyData")))
    legacy_text = _mapping(data.get("textData"))

    if "envFile" in header:
        migrated = True
        header.setdefault("envFileType", "ENV File #")
        header["envFileValue"] = header.pop("envFile")

    if "generalActivity" not in body and "locationActivities" not in body and (
        "bodyData" in data or "textData" in data
    ):
        migrated = True
        general = ""
        locations: list[dict[str, Any]] = []
        blocks = body.get("activityBlocks")
        if isinstance(blocks, list):
            for block in _dicts(blocks):
                if block.get("type") == "general" and not general:
                    general = block.get("activities", "")
                elif block.get("type") == "location":
                    locations.append({
                        "location": block.get("location") or "",
                        "activities": block.get("activities", ""),
                    })
        elif body.get("projectActivities"):
            general = body["projectActivities"]
        elif legacy_text.get("projectActivities"):
            general = legacy_text["projectActivities"]
        body["generalActivity"] = general
        body["locationActivities"] = locations
        for key, value in legacy_text.items():
            if not body.get(key):
                body[key] = value

    fields = {**header, **body}
    fields.setdefault("locationActivities", [])
    return fields, migrated


def _normalize_saskpower(data: dict[str, Any]) -> tuple[dict[str, Any], bool]:
    """SaskPower DFR：地点活动合并进总述文本"""
    migrated = False
    fields = {k: v for k, v in data.items() if k != "photosData"}

    merged: list[str] = []

    def _add(text: str) -> None:
        if text and text not in merged:
            merged.append(text)

    _add(_text(fields.get("generalActivity")))
    if fields.get("projectActivities"):
        _add(_text(fields.pop("projectActivities")))
        migrated = True

    locations = _dicts(fields.get("locationActivities"))
    if fields.get("locationActivities_old"):
        locations.extend(_dicts(fields.pop("locationActivities_old")))
        migrated = True
    for block in _dicts(fields.pop("activityBlocks", None)):
        migrated = True
        if block.get("type") == "general" and block.get("activities"):
            _add(_text(block["activities"]))
        elif block.get("type") == "location":
            locations.append(block)

    if locations:
        migrated = True
        for loc in locations:
            _add(f"--- Location: {loc.get('location') or 'Unspecified'} ---\n{loc.get('activities', '')}")

    fields["generalActivity"] = "\n\n".join(merged)
    fields["locationActivities"] = []
    return fields, migrated


# ============================================================================
# 构建 ReportContent
# ============================================================================

def build_content(
    fields: dict[str, Any],
    photos: list[dict[str, Any]],
    spec: VariantSpec,
) -> ReportContent:
    """按版式规范将展平后的字段构建为 ReportContent"""
    header = HeaderBlock(
        columns=[[_header_field(b, fields) for b in col] for col in spec.header_columns],
        full_width=[_header_field(b, fields) for b in spec.header_full_width],
    )

    sections: list[TextSection] = []
    if spec.activities is not None:
        sections.append(TextSection(
            title=spec.activities.title,
            body=_text(fields.get("generalActivity")),
        ))
        for loc in _dicts(fields.get("locationActivities")):
            sections.append(TextSection(
                title=spec.activities.location_title.format(location=loc.get("location") or "N/A"),
                body=_text(loc.get("activities")),
            ))
    for binding in spec.sections:
        sections.append(TextSection(
            title=binding.title,
            body=_text(fields.get(binding.key)),
            render_as_box=binding.box,
            force_new_page=binding.force_new_page,
        ))

    checklist = [
        ChecklistItem(label=b.label, value=ChecklistValue.parse(_text(fields.get(b.key))))
        for b in spec.checklist
    ]
    note = None
    if spec.checklist_note:
        note = spec.checklist_note.format_map(_Missing(fields))

    return ReportContent(
        kind=ReportKind(spec.kind),
        title=spec.title,
        photo_title=spec.photo_title,
        header=header,
        sections=sections,
        checklist=checklist,
        checklist_note=note,
        photos=[_photo_entry(p) for p in photos if isinstance(p, dict)],
        include_body_pages=spec.body_pages,
        suggested_filename=suggested_filename(spec.filename_pattern, fields),
    )


def _header_field(binding: FieldBinding, fields: dict[str, Any]) -> HeaderField:
    label = binding.label
    if binding.label_key and fields.get(binding.label_key):
        label = str(fields[binding.label_key])
    return HeaderField(label=label, value=_text(fields.get(binding.key)))


def _photo_entry(raw: dict[str, Any]) -> PhotoEntry:
    return PhotoEntry(
        sequence=_text(raw.get("photoNumber")),
        date=_text(raw.get("date")),
        location=_text(raw.get("location")),
        description=_text(raw.get("description")),
        direction=raw.get("direction") or None,
        image_ref=raw.get("imageUrl") or None,
        is_map=bool(raw.get("isMap")),
    )


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _dicts(value: Any) -> list[dict[str, Any]]:
    """列表中的对象项（旧文件中的非对象项忽略）"""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


class _Missing(dict):
    """format_map 缺失字段时填空串"""

    def __missing__(self, key: str) -> str:
        return ""


# ============================================================================
# 文件名规则
# ============================================================================

def sanitize_name(name: str) -> str:
    """非字母数字下划线替换为'-'并转小写"""
    return re.sub(r"[^a-z0-9_]", "-", name or "", flags=re.IGNORECASE).lower()


def format_date_for_filename(value: str) -> str:
    """YYYY-MM-DD → MM-DD-YYYY；无法识别时去掉非字母数字"""
    if not value:
        return "NoDate"
    try:
        d = date.fromisoformat(value.strip()[:10])
    except ValueError:
        return re.sub(r"[^a-z0-9]", "", value, flags=re.IGNORECASE)
    return f"{d.month:02d}-{d.day:02d}-{d.year}"


def suggested_filename(pattern: str, fields: dict[str, Any]) -> str:
    """按文件名模板生成建议文件名"""
    return pattern.format(
        project_name=sanitize_name(_text(fields.get("projectName"))) or "project",
        project_number=sanitize_name(_text(fields.get("projectNumber"))) or "project",
        date=format_date_for_filename(_text(fields.get("date"))),
    )
