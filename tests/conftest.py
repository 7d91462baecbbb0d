"""
Pytest configuration and fixtures for AI Skills tests.

This conftest.py provides:
- Skills folders populated with SKILL.md directories
- A SkillRegistry backed by an in-memory key-value store
- A scripted AI provider that records prompts
"""

from pathlib import Path
from typing import Optional

import pytest

from ai_skills.host import MemoryStore
from ai_skills.skills.registry import SkillRegistry


def write_skill(
    folder: Path,
    dir_name: str,
    name: Optional[str] = None,
    description: str = "Does something useful",
    body: str = "Follow these steps.",
    extra_files: Optional[dict[str, str]] = None,
) -> Path:
    """Create a skill directory with SKILL.md (and optional supporting files)."""
    skill_dir = folder / dir_name
    skill_dir.mkdir(parents=True, exist_ok=True)
    (skill_dir / "SKILL.md").write_text(
        f"---\nname: {name or dir_name}\ndescription: {description}\n---\n\n{body}\n",
        encoding="utf-8",
    )
    for file_name, text in (extra_files or {}).items():
        (skill_dir / file_name).write_text(text, encoding="utf-8")
    return skill_dir


class FakeAI:
    """AI provider returning a scripted reply (or raising)."""

    def __init__(self, reply: str = "NONE", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: list[dict] = []

    def ask(self, prompt: str, *, model: Optional[str] = None, creativity: str = "none") -> str:
        self.calls.append({"prompt": prompt, "model": model, "creativity": creativity})
        if self.error:
            raise self.error
        return self.reply

    def provider_name(self) -> str:
        return "fake"

    def is_available(self) -> bool:
        return True


@pytest.fixture
def skills_dir(tmp_path):
    """A skills folder with two valid skills."""
    folder = tmp_path / "skills"
    write_skill(
        folder,
        "pdf-tools",
        description="Extract text and tables from PDF files",
        body="# PDF\n\nUse pdfplumber.",
        extra_files={"reference.md": "More details", "forms.py": "print('x')"},
    )
    write_skill(
        folder,
        "git-commit",
        description="Write conventional commit messages",
        body="Summarize the diff in one line.",
    )
    return folder


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def registry(store, skills_dir):
    """Registry whose default folder is ``skills_dir``."""
    return SkillRegistry(store, default_folder=skills_dir)


@pytest.fixture
def fake_ai():
    return FakeAI()
