"""
工程文件解析单元测试
"""

import json

import pytest

from dfr_export.models import ChecklistValue, Ok, ParseError, ReportKind, parse_project
from dfr_export.models.project_file import format_date_for_filename, sanitize_name


def _standard(**overrides) -> dict:
    data = {
        "headerData": {
            "proponent": "Prairie Pipelines",
            "projectName": "North Lateral",
            "location": "NE-12",
            "date": "2024-05-14",
            "projectNumber": "XT-2041",
            "monitor": "J. Doe",
            "envFileType": "AER Licence",
            "envFileValue": "L-5531",
        },
        "bodyData": {
            "generalActivity": "- Crew onsite 07:00",
            "locationActivities": [{"location": "Pad A", "activities": "Topsoil stripping"}],
            "communication": "Called client.",
            "weatherAndGroundConditions": "Sunny, dry",
            "environmentalProtection": "",
            "wildlifeObservations": "Deer",
            "furtherRestoration": "",
        },
        "photosData": [
            {"photoNumber": "1", "date": "2024-05-14", "location": "Pad A",
             "description": "North view", "imageUrl": "data:image/png;base64,AAAA",
             "direction": "N", "isMap": False},
            {"photoNumber": "M1", "date": "", "location": "", "description": "Site map",
             "imageUrl": None, "isMap": True},
        ],
    }
    data.update(overrides)
    return data


def _parse(data, spec) -> Ok:
    outcome = parse_project(json.dumps(data), spec)
    assert isinstance(outcome, Ok), outcome
    return outcome


class TestParseStandard:
    """标准DFR解析测试"""

    def test_parse_current_format(self, variants):
        outcome = _parse(_standard(), variants.get("dfr_standard"))
        content = outcome.content
        assert not outcome.migrated
        assert content.kind == ReportKind.DFR_STANDARD
        assert content.title == "DAILY FIELD REPORT"
        titles = [s.title for s in content.sections]
        assert titles[:2] == ["Project Activities:", "Location: Pad A"]
        assert "Communication:" in titles
        assert len(content.site_photos) == 1 and len(content.map_photos) == 1
        assert content.site_photos[0].image_ref.startswith("data:")
        assert content.map_photos[0].image_ref is None

    def test_dynamic_env_label(self, variants):
        """ENV字段标签取 envFileType"""
        content = _parse(_standard(), variants.get("dfr_standard")).content
        labels = {f.label: f.value for col in content.header.columns for f in col}
        assert labels["AER Licence"] == "L-5531"

    def test_migrate_env_file(self, variants):
        """旧版 envFile → envFileType/envFileValue"""
        data = _standard()
        header = data["headerData"]
        del header["envFileType"], header["envFileValue"]
        header["envFile"] = "ENV-9"
        outcome = _parse(data, variants.get("dfr_standard"))
        assert outcome.migrated
        labels = {f.label: f.value for col in outcome.content.header.columns for f in col}
        assert labels["ENV File #"] == "ENV-9"

    def test_migrate_activity_blocks(self, variants):
        """旧版 activityBlocks → 总述 + 地点活动"""
        data = _standard(bodyData={
            "activityBlocks": [
                {"type": "general", "activities": "General work"},
                {"type": "location", "location": "", "activities": "Fencing"},
            ],
            "communication": "Radio",
        })
        outcome = _parse(data, variants.get("dfr_standard"))
        assert outcome.migrated
        sections = {s.title: s.body for s in outcome.content.sections}
        assert sections["Project Activities:"] == "General work"
        assert sections["Location: N/A"] == "Fencing"
        assert sections["Communication:"] == "Radio"

    def test_migrate_text_data(self, variants):
        """更早的 textData 结构"""
        data = _standard(textData={"projectActivities": "Old text", "wildlifeObservations": "Elk"})
        del data["bodyData"]
        outcome = _parse(data, variants.get("dfr_standard"))
        sections = {s.title: s.body for s in outcome.content.sections}
        assert sections["Project Activities:"] == "Old text"
        assert sections["Wildlife Observations:"] == "Elk"

    def test_suggested_filename(self, variants):
        content = _parse(_standard(), variants.get("dfr_standard")).content
        assert content.suggested_filename == "north-lateral_DFR_05-14-2024.pdf"


class TestParseErrors:
    """解析失败测试（返回 ParseError，不抛异常）"""

    def test_parse_invalid_json(self, variants):
        outcome = parse_project("{not json", variants.get("dfr_standard"))
        assert isinstance(outcome, ParseError)
        assert "JSON" in outcome.reason

    def test_parse_missing_structure(self, variants):
        outcome = parse_project(json.dumps({"photosData": []}), variants.get("dfr_standard"))
        assert isinstance(outcome, ParseError)

    def test_missing_body_data(self, variants):
        data = _standard()
        del data["bodyData"]
        assert isinstance(parse_project(json.dumps(data), variants.get("dfr_standard")), ParseError)

    def test_photos_not_list(self, variants):
        data = _standard(photosData={"a": 1})
        assert isinstance(parse_project(json.dumps(data), variants.get("dfr_standard")), ParseError)

    def test_top_level_array(self, variants):
        assert isinstance(parse_project("[]", variants.get("photo_log")), ParseError)

    def test_invalid_photo_field_type(self, variants):
        """照片字段类型错误 → ParseError"""
        data = _standard(photosData=[{"photoNumber": "1", "imageUrl": {"src": "a.jpg"}}])
        assert isinstance(parse_project(json.dumps(data), variants.get("dfr_standard")), ParseError)


class TestMalformedEntries:
    """合法JSON中的异常条目：忽略或转为文本，不抛异常"""

    def test_non_object_activity_blocks_skipped(self, variants):
        data = _standard(bodyData={
            "activityBlocks": ["oops", 3, {"type": "general", "activities": "Kept"}],
        })
        outcome = _parse(data, variants.get("dfr_standard"))
        sections = {s.title: s.body for s in outcome.content.sections}
        assert sections["Project Activities:"] == "Kept"

    def test_non_object_locations_skipped(self, variants):
        body = _standard()["bodyData"]
        body["locationActivities"] = ["oops", {"location": "Pad B", "activities": "Seeding"}]
        outcome = _parse(_standard(bodyData=body), variants.get("dfr_standard"))
        titles = [s.title for s in outcome.content.sections]
        assert "Location: Pad B" in titles
        assert sum(t.startswith("Location:") for t in titles) == 1

    def test_non_object_text_data_ignored(self, variants):
        data = _standard(textData=["legacy"])
        assert isinstance(parse_project(json.dumps(data), variants.get("dfr_standard")), Ok)

    def test_saskpower_non_object_locations(self, variants):
        data = TestParseSaskPower()._data(
            locationActivities=["oops"],
            activityBlocks=[None, {"type": "location", "location": "Yard", "activities": "Staging"}],
        )
        content = _parse(data, variants.get("dfr_saskpower")).content
        assert "--- Location: Yard ---\nStaging" in content.sections[0].body

    def test_saskpower_boolean_checklist_value(self, variants):
        """非字符串勾选值不抛异常，按未选处理"""
        data = TestParseSaskPower()._data(completedTailgate=True, reviewedTailgate=None)
        content = _parse(data, variants.get("dfr_saskpower")).content
        assert content.checklist[0].value == ChecklistValue.UNSET
        assert content.checklist[1].value == ChecklistValue.UNSET

    def test_checklist_value_parse_non_string(self):
        assert ChecklistValue.parse(True) == ChecklistValue.UNSET
        assert ChecklistValue.parse(" na ") == ChecklistValue.NA


class TestParseSaskPower:
    """SaskPower 解析测试"""

    def _data(self, **overrides) -> dict:
        data = {
            "proponent": "SaskPower", "projectName": "Line 7", "location": "Regina",
            "date": "2024-06-01", "projectNumber": "SP 77", "envFileNumber": "E-1",
            "environmentalMonitor": "A. Smith", "vendorAndForeman": "Vendor X",
            "generalActivity": "Pole replacement",
            "equipmentOnsite": "Truck",
            "completedTailgate": "Yes", "reviewedTailgate": "NA", "reviewedPermits": "",
            "totalHoursWorked": "9.5",
            "photosData": [],
        }
        data.update(overrides)
        return data

    def test_checklist_values(self, variants):
        content = _parse(self._data(), variants.get("dfr_saskpower")).content
        assert [i.value for i in content.checklist] == [
            ChecklistValue.YES, ChecklistValue.NA, ChecklistValue.UNSET,
        ]
        assert content.checklist_note == "Total Hours Worked: 9.5"

    def test_saskpower_merge_locations(self, variants):
        """地点活动合并进总述"""
        data = self._data(
            projectActivities="Legacy text",
            locationActivities=[{"location": "", "activities": "Clearing"}],
        )
        outcome = _parse(data, variants.get("dfr_saskpower"))
        assert outcome.migrated
        general = outcome.content.sections[0].body
        assert general == "Pole replacement\n\nLegacy text\n\n--- Location: Unspecified ---\nClearing"

    def test_header_four_rows(self, variants):
        content = _parse(self._data(), variants.get("dfr_saskpower")).content
        assert [len(col) for col in content.header.columns] == [4, 4]

    def test_filename(self, variants):
        content = _parse(self._data(), variants.get("dfr_saskpower")).content
        assert content.suggested_filename == "sp-77_SaskPower_DFR.pdf"


class TestParsePhotoLog:
    def test_photo_log(self, variants):
        data = {
            "headerData": {"proponent": "P", "projectName": "Log", "location": "L",
                           "date": "2024-01-02", "projectNumber": "X1"},
            "photosData": [{"photoNumber": "1", "description": "d", "isMap": False}],
        }
        content = _parse(data, variants.get("photo_log")).content
        assert not content.include_body_pages
        assert content.sections == []
        assert content.suggested_filename == "x1_log_Photolog.pdf"


class TestFilenameRules:
    """文件名规则"""

    @pytest.mark.parametrize("raw,expected", [
        ("North Lateral #2", "north-lateral--2"),
        ("abc_DEF", "abc_def"),
        ("", ""),
    ])
    def test_sanitize(self, raw, expected):
        assert sanitize_name(raw) == expected

    @pytest.mark.parametrize("raw,expected", [
        ("2024-05-14", "05-14-2024"),
        ("", "NoDate"),
        ("May 14, 2024", "May142024"),
    ])
    def test_format_date(self, raw, expected):
        assert format_date_for_filename(raw) == expected
