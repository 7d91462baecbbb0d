"""Skill loader for parsing and discovering AI Skills.

This module implements loading of skills following the agentskills.io
open standard format. Skills are folders containing a SKILL.md file
with YAML frontmatter (``name`` and ``description``) and markdown
instructions.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

import yaml

logger = logging.getLogger(__name__)

SKILL_FILE_NAME = "SKILL.md"
FRONTMATTER_DELIMITER = "---"


@dataclass
class SkillMetadata:
    """YAML frontmatter fields of a SKILL.md file."""

    name: str
    description: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "description": self.description}


@dataclass
class Skill:
    """Represents a skill discovered on disk."""

    name: str  # Directory name
    path: Path
    metadata: SkillMetadata
    content: str  # The markdown body (instructions)
    skill_md_path: Path
    supporting_files: list[str] = field(default_factory=list)

    def matches(self, name: str) -> bool:
        """True if ``name`` is this skill's directory name or frontmatter name."""
        return name == self.name or name == self.metadata.name

    def get_injectable_content(self) -> str:
        """Get the skill formatted for the host assistant."""
        return (
            f"# Skill: {self.metadata.name}\n\n"
            f"{self.metadata.description}\n\n"
            f"## Instructions\n\n"
            f"{self.content}"
        )


def parse_skill_markdown(text: str) -> Optional[tuple[SkillMetadata, str]]:
    """Split a SKILL.md document into metadata and markdown body.

    The document must open with ``---``; the frontmatter runs until the next
    ``---``. Both ``name`` and ``description`` must be strings.

    Args:
        text: Raw SKILL.md content

    Returns:
        ``(metadata, body)`` or None when the document is not a valid skill
    """
    if not text.startswith(FRONTMATTER_DELIMITER):
        return None

    start = len(FRONTMATTER_DELIMITER)
    end = text.find(FRONTMATTER_DELIMITER, start)
    if end == -1:
        return None

    frontmatter_text = text[start:end].strip()
    body = text[end + len(FRONTMATTER_DELIMITER):].strip()

    try:
        frontmatter = yaml.safe_load(frontmatter_text)
    except yaml.YAMLError as e:
        logger.warning(f"Invalid YAML frontmatter: {e}")
        return None

    if not isinstance(frontmatter, dict):
        return None

    name = frontmatter.get("name")
    description = frontmatter.get("description")
    if not isinstance(name, str) or not isinstance(description, str):
        return None

    return SkillMetadata(name=name, description=description), body


def render_skill_markdown(name: str, description: str, content: str) -> str:
    """Build SKILL.md text from metadata and instructions."""
    frontmatter = yaml.safe_dump(
        {"name": name, "description": description},
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=float("inf"),
    ).rstrip()
    return f"{FRONTMATTER_DELIMITER}\n{frontmatter}\n{FRONTMATTER_DELIMITER}\n\n{content}"


class SkillLoader:
    """Discovers and parses skills inside skills folders."""

    def load_skill_dir(self, skill_path: Path) -> Optional[Skill]:
        """Load a single skill directory.

        Args:
            skill_path: Directory expected to contain SKILL.md

        Returns:
            Loaded Skill or None if the directory is not a valid skill
        """
        try:
            entries = sorted(p.name for p in skill_path.iterdir())
        except OSError as e:
            logger.warning(f"Cannot read skill directory {skill_path}: {e}")
            return None

        # Exact, case-sensitive match; a lowercase skill.md is not a skill
        if SKILL_FILE_NAME not in entries:
            return None

        skill_md_path = skill_path / SKILL_FILE_NAME
        try:
            text = skill_md_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read {skill_md_path}: {e}")
            return None

        parsed = parse_skill_markdown(text)
        if parsed is None:
            logger.warning(f"Invalid SKILL.md format: {skill_md_path}")
            return None

        metadata, body = parsed
        if not metadata.name or not metadata.description:
            logger.warning(f"Missing 'name' or 'description' in frontmatter: {skill_md_path}")
            return None

        supporting_files = [
            entry for entry in entries
            if entry != SKILL_FILE_NAME and (skill_path / entry).is_file()
        ]

        return Skill(
            name=skill_path.name,
            path=skill_path,
            metadata=metadata,
            content=body,
            skill_md_path=skill_md_path,
            supporting_files=supporting_files,
        )

    def scan_folder(self, folder: Path) -> list[Skill]:
        """Load every skill directly below ``folder``."""
        folder = Path(folder).expanduser()
        if not folder.is_dir():
            logger.debug(f"Skipping missing skills folder: {folder}")
            return []

        try:
            children = sorted(folder.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logger.warning(f"Cannot read skills folder {folder}: {e}")
            return []

        skills = []
        for child in children:
            if not child.is_dir():
                continue
            skill = self.load_skill_dir(child)
            if skill:
                skills.append(skill)

        logger.debug(f"Loaded {len(skills)} skills from {folder}")
        return skills

    def scan(self, folders: Iterable[Path]) -> list[Skill]:
        """Load skills from every folder, in folder order."""
        skills = []
        for folder in folders:
            skills.extend(self.scan_folder(folder))
        return skills


def read_supporting_file(skill: Skill, file_name: str) -> str:
    """Read one of a skill's supporting files.

    Args:
        skill: Skill owning the file
        file_name: File name relative to the skill directory

    Returns:
        File contents

    Raises:
        ValueError: If the file name points outside the skill directory
        FileNotFoundError: If the file does not exist
    """
    skill_dir = skill.path.resolve()
    file_path = (skill_dir / file_name).resolve()

    if skill_dir not in file_path.parents:
        raise ValueError(f"File '{file_name}' is outside skill '{skill.name}'")

    if not file_path.is_file():
        raise FileNotFoundError(f"File '{file_name}' not found in skill '{skill.name}'")

    return file_path.read_text(encoding="utf-8")
