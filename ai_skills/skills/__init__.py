"""Skills framework for discovering, managing and toggling AI Skills.

Usage:
    from ai_skills.host import JsonFileStore
    from ai_skills.skills import SkillRegistry

    registry = SkillRegistry(JsonFileStore(settings.storage_path))
    registry.add_skills_folder("~/.claude/skills")

    for skill in registry.get_enabled_skill_objects():
        print(skill.metadata.name, skill.metadata.description)
"""

from .loader import (
    Skill,
    SkillLoader,
    SkillMetadata,
    parse_skill_markdown,
    read_supporting_file,
    render_skill_markdown,
)
from .registry import SkillRegistry, SkillsFolder

__all__ = [
    "Skill",
    "SkillLoader",
    "SkillMetadata",
    "SkillRegistry",
    "SkillsFolder",
    "parse_skill_markdown",
    "read_supporting_file",
    "render_skill_markdown",
]
