"""Tests for in-place resume edits."""

import json

import pytest

from resume_pdf.errors import FileSystemError, ValidationError
from resume_pdf.utils.json_update import (
    add_work_experience,
    apply_updates,
    backup_path,
    parse_assignment,
    parse_field_path,
    set_field,
)


@pytest.fixture
def resume_file(tmp_path, sample_resume_data):
    path = tmp_path / "resume.json"
    path.write_text(json.dumps(sample_resume_data), encoding="utf-8")
    return path


class TestParsing:
    def test_field_path(self):
        assert parse_field_path("basics.name") == ["basics", "name"]
        assert parse_field_path("work[0].highlights[2]") == ["work", 0, "highlights", 2]

    @pytest.mark.parametrize("path", ["basics..name", "work[x].position", "work[0"])
    def test_bad_field_path(self, path):
        with pytest.raises(ValueError, match="Invalid field path"):
            parse_field_path(path)

    def test_assignment_splits_on_first_equals(self):
        assert parse_assignment("basics.summary=a=b") == ("basics.summary", "a=b")
        assert parse_assignment("basics.label=") == ("basics.label", "")

    @pytest.mark.parametrize("text", ["basics.name", "=Jane"])
    def test_bad_assignment(self, text):
        with pytest.raises(ValueError, match="Expected format"):
            parse_assignment(text)


class TestSetField:
    def test_nested_value(self, sample_resume_data):
        updated = set_field(sample_resume_data, "work[1].position", "Lead Engineer")
        assert updated["work"][1]["position"] == "Lead Engineer"
        assert sample_resume_data["work"][1]["position"] == "Software Engineer"

    def test_creates_missing_section(self, sample_resume_data):
        updated = set_field(sample_resume_data, "interests[0].name", "Climbing")
        assert updated["interests"] == [{"name": "Climbing"}]

    def test_pads_list(self, sample_resume_data):
        updated = set_field(sample_resume_data, "skills[3].name", "Cloud")
        assert updated["skills"][2] == {}
        assert updated["skills"][3] == {"name": "Cloud"}

    def test_unknown_root_rejected(self, sample_resume_data):
        with pytest.raises(ValueError, match="Invalid root property: hobbies"):
            set_field(sample_resume_data, "hobbies.name", "x")

    def test_cannot_descend_into_string(self, sample_resume_data):
        with pytest.raises(ValueError, match="non-object"):
            set_field(sample_resume_data, "basics.name.first", "Jane")


class TestAddWorkExperience:
    def test_prepends(self, sample_resume_data):
        entry = {"name": "Globex", "position": "Principal", "startDate": "2024-01-01"}
        updated = add_work_experience(sample_resume_data, entry)
        assert updated["work"][0] == entry
        assert len(updated["work"]) == 3

    def test_rejects_non_object(self, sample_resume_data):
        with pytest.raises(ValueError, match="JSON object"):
            add_work_experience(sample_resume_data, ["Globex"])


class TestApplyUpdates:
    def test_writes_and_backs_up(self, resume_file):
        original = resume_file.read_text(encoding="utf-8")
        saved = apply_updates(resume_file, ["basics.name=Jane Doe", "work[0].position=CTO"])
        assert saved == backup_path(resume_file)
        assert saved.name == "resume.json.bak"
        assert saved.read_text(encoding="utf-8") == original
        data = json.loads(resume_file.read_text(encoding="utf-8"))
        assert data["basics"]["name"] == "Jane Doe"
        assert data["work"][0]["position"] == "CTO"

    def test_no_backup(self, resume_file):
        assert apply_updates(resume_file, ["basics.label=Engineer"], backup=False) is None
        assert not backup_path(resume_file).exists()

    def test_add_work(self, resume_file):
        entry = {"name": "Globex", "position": "Principal", "startDate": "2024-01-01"}
        apply_updates(resume_file, add_work=entry)
        data = json.loads(resume_file.read_text(encoding="utf-8"))
        assert data["work"][0]["name"] == "Globex"

    def test_invalid_result_leaves_file_untouched(self, resume_file):
        original = resume_file.read_text(encoding="utf-8")
        with pytest.raises(ValidationError, match="basics.email"):
            apply_updates(resume_file, ["basics.email=not-an-email"])
        assert resume_file.read_text(encoding="utf-8") == original
        assert not backup_path(resume_file).exists()

    def test_fixes_previously_invalid_file(self, tmp_path, sample_resume_data):
        del sample_resume_data["basics"]["email"]
        path = tmp_path / "resume.json"
        path.write_text(json.dumps(sample_resume_data), encoding="utf-8")
        apply_updates(path, ["basics.email=jane@example.com"])
        assert json.loads(path.read_text(encoding="utf-8"))["basics"]["email"] == "jane@example.com"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValidationError, match="Invalid JSON format"):
            apply_updates(path, ["basics.name=x"])

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileSystemError, match="File not found"):
            apply_updates(tmp_path / "nope.json", ["basics.name=x"])

    def test_keeps_unicode(self, resume_file):
        apply_updates(resume_file, ["basics.name=José Núñez"], backup=False)
        assert "José Núñez" in resume_file.read_text(encoding="utf-8")
