"""Tests for host tool entry points and their confirmations.

Usage:
    pytest tests/test_tools.py -v
"""

from ai_skills import tools

from conftest import FakeAI, write_skill


class TestAddSkill:
    def test_creates_skill(self, registry, skills_dir):
        message = tools.add_skill(registry, "new-skill", "Does new things", "Step one")

        assert message.startswith('✅ Successfully created AI Skill "new-skill"')
        assert (skills_dir / "new-skill" / "SKILL.md").exists()
        assert registry.is_skill_enabled("new-skill")

    def test_validation_errors(self, registry):
        assert "Skill name is required" in tools.add_skill(registry, "", "d", "c")
        assert "Invalid skill name" in tools.add_skill(registry, "Bad_Name", "d", "c")
        assert "Description is required" in tools.add_skill(registry, "ok", " ", "c")
        assert "Content is required" in tools.add_skill(registry, "ok", "d", "")

    def test_existing_skill_reported(self, registry):
        message = tools.add_skill(registry, "pdf-tools", "d", "c")
        assert message.startswith("❌ Failed to create skill")

    def test_confirmation(self, registry, skills_dir):
        confirmation = tools.confirm_add_skill(registry, "new-skill", "x" * 150, "body")
        info = dict(confirmation.info)

        assert confirmation.message == 'Create new AI Skill "new-skill"?'
        assert not confirmation.destructive
        assert info["Description"] == "x" * 100 + "..."
        assert info["Folder"] == str(skills_dir)

    def test_confirmation_shows_chosen_folder(self, registry, tmp_path):
        other = str(tmp_path / "other")
        confirmation = tools.confirm_add_skill(registry, "new-skill", "d", "body", other)
        assert dict(confirmation.info)["Folder"] == other

    def test_no_confirmation_for_invalid_input(self, registry):
        assert tools.confirm_add_skill(registry, "Bad Name", "d", "c") is None


class TestEditSkill:
    def test_edit_description(self, registry):
        message = tools.edit_skill(registry, "git-commit", description="Better")

        assert message.startswith('✅ Successfully updated AI Skill "git-commit"')
        assert "  - Description: Better" in message
        assert registry.find_skill("git-commit").metadata.description == "Better"

    def test_rename(self, registry, skills_dir):
        message = tools.edit_skill(registry, "git-commit", new_name="commit-writer")

        assert "  - New name: git-commit → commit-writer" in message
        assert (skills_dir / "commit-writer").is_dir()

    def test_rename_frontmatter_name_to_directory_name(self, registry, skills_dir):
        write_skill(skills_dir, "release-notes", name="Release Notes", description="Draft release notes")

        message = tools.edit_skill(registry, "Release Notes", new_name="release-notes")

        assert message.startswith('✅ Successfully updated AI Skill "release-notes"')
        assert registry.find_skill("release-notes").metadata.name == "release-notes"

    def test_unknown_skill(self, registry):
        assert "not found" in tools.edit_skill(registry, "missing", description="x")

    def test_same_name_rejected(self, registry):
        message = tools.edit_skill(registry, "git-commit", new_name="git-commit")
        assert "same as the current name" in message

    def test_duplicate_name_rejected(self, registry):
        message = tools.edit_skill(registry, "git-commit", new_name="pdf-tools")
        assert 'A skill with the name "pdf-tools" already exists' in message

    def test_empty_content_rejected(self, registry):
        assert "Content cannot be empty" in tools.edit_skill(registry, "git-commit", content="  ")

    def test_confirmation_lists_changes(self, registry):
        confirmation = tools.confirm_edit_skill(registry, "git-commit", new_name="commit", content="new")
        info = dict(confirmation.info)

        assert confirmation.message == 'Update AI Skill "git-commit"?'
        assert info["New name"] == "git-commit → commit"
        assert info["Content"] == "(updated)"
        assert "Description" not in info

    def test_no_confirmation_for_unknown_skill(self, registry):
        assert tools.confirm_edit_skill(registry, "missing", description="x") is None


class TestRemoveSkill:
    def test_removes(self, registry, skills_dir):
        message = tools.remove_skill(registry, "pdf-tools")
        assert message.startswith('✅ Successfully removed AI Skill "pdf-tools"')
        assert not (skills_dir / "pdf-tools").exists()

    def test_unknown(self, registry):
        assert tools.remove_skill(registry, "missing").startswith('❌ Skill "missing" not found')

    def test_confirmation_is_destructive(self, registry):
        confirmation = tools.confirm_remove_skill(registry, "pdf-tools")
        assert confirmation.destructive
        assert tools.confirm_remove_skill(registry, "missing") is None


class TestListTools:
    def test_list_skills(self, registry, skills_dir):
        message = tools.list_skills(registry)

        assert message.startswith(f"Skills Folder: {skills_dir}")
        assert "Available AI Skills (2):" in message
        assert "**pdf-tools** (Directory: pdf-tools)" in message
        assert "- Supporting Files: 2 file(s)" in message

    def test_list_skills_empty(self, registry, tmp_path):
        registry.set_skills_folder(str(tmp_path / "empty"))
        assert tools.list_skills(registry).startswith("No AI Skills found in:")

    def test_list_folders(self, registry, skills_dir):
        message = tools.list_skills_folders(registry)

        assert "Configured Skills Folders (1):" in message
        assert f"1. {skills_dir}" in message
        assert "Found 2 skill(s) across all folders" in message

    def test_list_folders_none(self, registry):
        registry.store.set_item("skills-folder-paths", "[]")
        assert tools.list_skills_folders(registry).startswith("No skills folders configured.")


class TestFolderTools:
    def test_set_folder_enables_found_skills(self, registry, skills_dir):
        registry.set_enabled_skills(["pdf-tools"])
        registry.set_skills_folder(str(skills_dir))
        message = tools.set_skills_folder(registry, str(skills_dir))

        assert message.startswith(f"✅ Added skills folder: {skills_dir}")
        assert "1 skill(s) auto-enabled" in message
        assert set(registry.get_enabled_skills()) == {"pdf-tools", "git-commit"}

    def test_set_folder_validation(self, registry, tmp_path):
        assert "Path does not exist" in tools.set_skills_folder(registry, str(tmp_path / "missing"))
        assert "traversal" in tools.set_skills_folder(registry, "../skills")

    def test_remove_folder(self, registry, skills_dir, tmp_path):
        other = tmp_path / "other"
        other.mkdir()
        registry.add_skills_folder(str(other))

        message = tools.remove_skills_folder(registry, str(other))

        assert message.startswith(f"✅ Removed skills folder from configuration: {other}")
        assert registry.get_skills_folder_paths() == [str(skills_dir)]

    def test_cannot_remove_last_folder(self, registry, skills_dir):
        registry.set_skills_folder(str(skills_dir))
        assert "Cannot remove the only skills folder" in tools.remove_skills_folder(registry, str(skills_dir))

    def test_remove_unknown_folder(self, registry):
        assert "not found in configuration" in tools.remove_skills_folder(registry, "/nowhere")

    def test_remove_folder_confirmation(self, registry, skills_dir):
        confirmation = tools.confirm_remove_skills_folder(registry, str(skills_dir))
        assert confirmation.destructive
        assert tools.confirm_remove_skills_folder(registry, "/nowhere") is None


class TestUseSkills:
    def test_returns_router_message(self, registry):
        registry.set_routing_model("gpt-4o-mini")
        registry.set_enabled_skills(["git-commit"])

        message = tools.use_skills(registry, FakeAI(reply="git-commit"), "write a commit message")
        assert message.startswith("# Skill: git-commit")
