"""Tests for SKILL.md parsing and skill discovery.

Usage:
    pytest tests/test_skill_loader.py -v
"""

import pytest

from ai_skills.skills.loader import (
    SkillLoader,
    parse_skill_markdown,
    read_supporting_file,
    render_skill_markdown,
)

from conftest import write_skill


class TestParseSkillMarkdown:
    """Test frontmatter + body parsing."""

    def test_valid_document(self):
        text = "---\nname: pdf\ndescription: Work with PDFs\n---\n\n# Title\n\nBody text\n"
        metadata, body = parse_skill_markdown(text)
        assert metadata.name == "pdf"
        assert metadata.description == "Work with PDFs"
        assert body == "# Title\n\nBody text"

    def test_must_start_with_delimiter(self):
        assert parse_skill_markdown("\n---\nname: a\ndescription: b\n---\nbody") is None
        assert parse_skill_markdown("name: a\ndescription: b") is None

    def test_missing_closing_delimiter(self):
        assert parse_skill_markdown("---\nname: a\ndescription: b\nbody") is None

    def test_invalid_yaml(self):
        assert parse_skill_markdown("---\nname: [unclosed\ndescription: b\n---\nbody") is None

    def test_frontmatter_not_a_mapping(self):
        assert parse_skill_markdown("---\n- a\n- b\n---\nbody") is None

    def test_name_and_description_must_be_strings(self):
        assert parse_skill_markdown("---\nname: 42\ndescription: b\n---\nbody") is None
        assert parse_skill_markdown("---\nname: a\n---\nbody") is None

    def test_empty_body(self):
        metadata, body = parse_skill_markdown("---\nname: a\ndescription: b\n---\n")
        assert metadata.name == "a"
        assert body == ""

    def test_extra_frontmatter_keys_ignored(self):
        text = "---\nname: a\ndescription: b\nlicense: MIT\n---\nbody"
        metadata, body = parse_skill_markdown(text)
        assert metadata.to_dict() == {"name": "a", "description": "b"}
        assert body == "body"


class TestRenderSkillMarkdown:
    """Test SKILL.md generation."""

    def test_layout(self):
        text = render_skill_markdown("my-skill", "Does things", "Step 1")
        assert text == "---\nname: my-skill\ndescription: Does things\n---\n\nStep 1"

    def test_special_characters_survive_parsing(self):
        description = "Use when: the user says 'hi' # not a comment"
        metadata, body = parse_skill_markdown(render_skill_markdown("x", description, "body"))
        assert metadata.description == description
        assert body == "body"


class TestSkillLoader:
    """Test discovery of skill directories."""

    def test_scan_folder_finds_skills_sorted(self, skills_dir):
        skills = SkillLoader().scan_folder(skills_dir)
        assert [s.name for s in skills] == ["git-commit", "pdf-tools"]

    def test_skill_fields(self, skills_dir):
        skill = SkillLoader().load_skill_dir(skills_dir / "pdf-tools")
        assert skill.metadata.name == "pdf-tools"
        assert skill.metadata.description == "Extract text and tables from PDF files"
        assert skill.content == "# PDF\n\nUse pdfplumber."
        assert skill.skill_md_path == skills_dir / "pdf-tools" / "SKILL.md"
        assert skill.supporting_files == ["forms.py", "reference.md"]

    def test_supporting_files_exclude_subdirectories(self, skills_dir):
        (skills_dir / "pdf-tools" / "scripts").mkdir()
        skill = SkillLoader().load_skill_dir(skills_dir / "pdf-tools")
        assert "scripts" not in skill.supporting_files

    def test_lowercase_skill_md_is_ignored(self, tmp_path):
        skill_dir = tmp_path / "lower"
        skill_dir.mkdir()
        (skill_dir / "skill.md").write_text("---\nname: lower\ndescription: x\n---\nbody")
        assert SkillLoader().load_skill_dir(skill_dir) is None

    def test_invalid_skill_is_skipped(self, skills_dir):
        broken = skills_dir / "broken"
        broken.mkdir()
        (broken / "SKILL.md").write_text("no frontmatter here")
        names = [s.name for s in SkillLoader().scan_folder(skills_dir)]
        assert "broken" not in names
        assert len(names) == 2

    def test_empty_description_is_skipped(self, tmp_path):
        write_skill(tmp_path, "empty", description="''")
        assert SkillLoader().scan_folder(tmp_path) == []

    def test_files_in_folder_root_are_ignored(self, skills_dir):
        (skills_dir / "README.md").write_text("not a skill")
        assert len(SkillLoader().scan_folder(skills_dir)) == 2

    def test_missing_folder_returns_empty(self, tmp_path):
        assert SkillLoader().scan_folder(tmp_path / "nope") == []

    def test_scan_keeps_folder_order(self, tmp_path):
        first = tmp_path / "b-folder"
        second = tmp_path / "a-folder"
        write_skill(first, "zeta")
        write_skill(second, "alpha")
        skills = SkillLoader().scan([first, tmp_path / "missing", second])
        assert [s.name for s in skills] == ["zeta", "alpha"]

    def test_directory_name_differs_from_frontmatter_name(self, tmp_path):
        write_skill(tmp_path, "dir-name", name="Pretty Name")
        skill = SkillLoader().scan_folder(tmp_path)[0]
        assert skill.name == "dir-name"
        assert skill.metadata.name == "Pretty Name"
        assert skill.matches("dir-name")
        assert skill.matches("Pretty Name")
        assert not skill.matches("pretty name")


class TestReadSupportingFile:
    """Test reading files next to SKILL.md."""

    def test_reads_file(self, skills_dir):
        skill = SkillLoader().load_skill_dir(skills_dir / "pdf-tools")
        assert read_supporting_file(skill, "reference.md") == "More details"

    def test_missing_file(self, skills_dir):
        skill = SkillLoader().load_skill_dir(skills_dir / "pdf-tools")
        with pytest.raises(FileNotFoundError):
            read_supporting_file(skill, "nope.md")

    def test_path_escape_rejected(self, skills_dir):
        skill = SkillLoader().load_skill_dir(skills_dir / "pdf-tools")
        with pytest.raises(ValueError):
            read_supporting_file(skill, "../git-commit/SKILL.md")
