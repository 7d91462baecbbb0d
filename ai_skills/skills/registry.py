"""Skill registry for managing skills folders, enabled state and skill files.

All registry state lives in the host key-value store as flat JSON blobs:

    skills-folder-paths  JSON array of {"path": ..., "label": ...}
    enabled_skills       JSON array of skill directory names
    routing_model        plain model id string

Skill files themselves live on disk inside the configured folders.
"""

import json
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from ..host import KeyValueStore
from .loader import SKILL_FILE_NAME, Skill, SkillLoader, parse_skill_markdown, render_skill_markdown

logger = logging.getLogger(__name__)

SKILLS_FOLDER_KEY = "skills-folder-paths"
ENABLED_SKILLS_KEY = "enabled_skills"
ROUTING_MODEL_KEY = "routing_model"

PathLike = Union[str, Path]


@dataclass
class SkillsFolder:
    """A configured folder that is searched for skills."""

    path: str
    label: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.label or Path(self.path).name or self.path

    def same_path(self, other: PathLike) -> bool:
        """Case-insensitive path comparison (macOS file systems are case-insensitive)."""
        return self.path.lower() == str(other).lower()

    def to_dict(self) -> dict[str, str]:
        data = {"path": self.path}
        if self.label:
            data["label"] = self.label
        return data

    @classmethod
    def from_value(cls, value: Any) -> Optional["SkillsFolder"]:
        if isinstance(value, str):
            return cls(path=value)
        if isinstance(value, dict) and isinstance(value.get("path"), str):
            label = value.get("label")
            return cls(path=value["path"], label=label if isinstance(label, str) else None)
        return None


class SkillRegistry:
    """Manages skills folders, enabled skills, the routing model and skill CRUD."""

    def __init__(
        self,
        store: KeyValueStore,
        loader: Optional[SkillLoader] = None,
        default_folder: Optional[PathLike] = None,
    ):
        """Initialize the skill registry.

        Args:
            store: Host key-value store holding registry state
            loader: Optional SkillLoader instance (creates one if not provided)
            default_folder: Folder used when none is configured. Defaults to
                ``settings.default_skills_folder``.
        """
        if default_folder is None:
            from ..config import settings

            default_folder = settings.default_skills_folder

        self.store = store
        self.loader = loader or SkillLoader()
        self.default_folder = str(Path(default_folder).expanduser()) if default_folder else None

    # -------------------------------------------------------------------------
    # JSON helpers
    # -------------------------------------------------------------------------

    def _save_json(self, key: str, value: Any) -> None:
        self.store.set_item(key, json.dumps(value))

    # -------------------------------------------------------------------------
    # Skills folders
    # -------------------------------------------------------------------------

    def get_skills_folders(self) -> list[SkillsFolder]:
        """Get all configured skills folders.

        A stored value that is not JSON is a single path saved by an older
        version. When nothing usable is stored, the default folder is returned.
        """
        stored = self.store.get_item(SKILLS_FOLDER_KEY)

        if stored:
            try:
                parsed = json.loads(stored)
            except json.JSONDecodeError:
                logger.debug("Stored skills folder is not JSON, treating it as a single path")
                return [SkillsFolder(path=stored)]

            if isinstance(parsed, list):
                folders = [SkillsFolder.from_value(item) for item in parsed]
                return [f for f in folders if f is not None]

            logger.warning(f"Ignoring malformed {SKILLS_FOLDER_KEY} value")

        if self.default_folder:
            return [SkillsFolder(path=self.default_folder)]
        return []

    def get_skills_folder_paths(self) -> list[str]:
        return [f.path for f in self.get_skills_folders()]

    def get_primary_skills_folder(self) -> Optional[str]:
        """First configured folder, falling back to the default folder."""
        paths = self.get_skills_folder_paths()
        if paths:
            return paths[0]
        return self.default_folder

    def _save_folders(self, folders: list[SkillsFolder]) -> None:
        self._save_json(SKILLS_FOLDER_KEY, [f.to_dict() for f in folders])

    def add_skills_folder(self, folder_path: PathLike, label: Optional[str] = None) -> bool:
        """Add a folder to the list.

        Returns:
            True if added, False if the path was already configured
        """
        folders = self.get_skills_folders()

        if any(f.same_path(folder_path) for f in folders):
            logger.debug(f"Skills folder already configured: {folder_path}")
            return False

        folders.append(SkillsFolder(path=str(folder_path), label=label or None))
        self._save_folders(folders)
        logger.info(f"Added skills folder: {folder_path}")
        return True

    def remove_skills_folder(self, folder_path: PathLike) -> bool:
        """Remove a folder from the list (the folder itself is not touched).

        Returns:
            True if a folder was removed
        """
        folders = self.get_skills_folders()
        remaining = [f for f in folders if not f.same_path(folder_path)]

        self._save_folders(remaining)
        removed = len(remaining) != len(folders)
        if removed:
            logger.info(f"Removed skills folder: {folder_path}")
        return removed

    def update_skills_folder(
        self,
        old_path: PathLike,
        new_path: PathLike,
        label: Optional[str] = None,
    ) -> bool:
        """Replace a folder's path and label.

        Returns:
            False if ``old_path`` is not configured
        """
        folders = self.get_skills_folders()

        for i, folder in enumerate(folders):
            if folder.same_path(old_path):
                folders[i] = SkillsFolder(path=str(new_path), label=label or None)
                self._save_folders(folders)
                logger.info(f"Updated skills folder: {old_path} -> {new_path}")
                return True

        return False

    def set_skills_folder(self, folder_path: PathLike) -> None:
        """Replace all folders with a single one."""
        self._save_folders([SkillsFolder(path=str(folder_path))])

    # -------------------------------------------------------------------------
    # Enabled skills
    # -------------------------------------------------------------------------

    def get_enabled_skills(self) -> list[str]:
        stored = self.store.get_item(ENABLED_SKILLS_KEY)
        if not stored:
            return []

        try:
            parsed = json.loads(stored)
        except json.JSONDecodeError as e:
            logger.warning(f"Error parsing enabled skills: {e}")
            return []

        if not isinstance(parsed, list):
            logger.warning(f"Ignoring malformed {ENABLED_SKILLS_KEY} value")
            return []

        return [name for name in parsed if isinstance(name, str)]

    def is_skill_enabled(self, skill_name: str) -> bool:
        return skill_name in self.get_enabled_skills()

    def enable_skill(self, skill_name: str) -> None:
        enabled = self.get_enabled_skills()
        if skill_name not in enabled:
            enabled.append(skill_name)
            self._save_json(ENABLED_SKILLS_KEY, enabled)
            logger.info(f"Enabled skill '{skill_name}'")

    def disable_skill(self, skill_name: str) -> None:
        enabled = self.get_enabled_skills()
        filtered = [name for name in enabled if name != skill_name]
        self._save_json(ENABLED_SKILLS_KEY, filtered)
        if len(filtered) != len(enabled):
            logger.info(f"Disabled skill '{skill_name}'")

    def set_enabled_skills(self, skill_names: list[str]) -> None:
        """Replace the enabled set (duplicates dropped, order kept)."""
        self._save_json(ENABLED_SKILLS_KEY, list(dict.fromkeys(skill_names)))

    def get_enabled_skill_objects(self) -> list[Skill]:
        enabled = set(self.get_enabled_skills())
        return [skill for skill in self.get_all_skills() if skill.name in enabled]

    def ensure_default_enabled(self) -> list[str]:
        """Enable every skill when nothing has been enabled yet.

        Returns:
            The enabled skill names after the check
        """
        enabled = self.get_enabled_skills()
        if enabled:
            return enabled

        names = [skill.name for skill in self.get_all_skills()]
        if names:
            self.set_enabled_skills(names)
            logger.info(f"Enabled all {len(names)} skills on first run")
        return names

    # -------------------------------------------------------------------------
    # Routing model
    # -------------------------------------------------------------------------

    def get_routing_model(self) -> Optional[str]:
        """Get the preferred routing model, None if it was never chosen."""
        return self.store.get_item(ROUTING_MODEL_KEY) or None

    def set_routing_model(self, model: str) -> None:
        self.store.set_item(ROUTING_MODEL_KEY, model)
        logger.info(f"Routing model set to {model}")

    def clear_routing_model(self) -> None:
        self.store.remove_item(ROUTING_MODEL_KEY)

    # -------------------------------------------------------------------------
    # Skills
    # -------------------------------------------------------------------------

    def get_all_skills(self) -> list[Skill]:
        """Get all skills from all skills folders."""
        return self.loader.scan(Path(p).expanduser() for p in self.get_skills_folder_paths())

    def find_skill(self, name: str) -> Optional[Skill]:
        """Find a skill by directory name or frontmatter name."""
        for skill in self.get_all_skills():
            if skill.matches(name):
                return skill
        return None

    def create_skill(
        self,
        name: str,
        description: str,
        content: str,
        folder_path: Optional[PathLike] = None,
    ) -> Skill:
        """Create a new skill directory with SKILL.md and enable it.

        Args:
            name: Skill name, used for the directory and the frontmatter
            description: What the skill does and when to use it
            content: Markdown instructions
            folder_path: Target skills folder (defaults to the primary folder)

        Returns:
            The created Skill

        Raises:
            ValueError: If no skills folder is configured
            FileExistsError: If the skill already exists in the target folder
        """
        folder = folder_path or self.get_primary_skills_folder()
        if not folder:
            raise ValueError(
                "No skills folder configured. Please configure a skills folder before creating skills."
            )

        skill_path = Path(folder).expanduser() / name
        skill_md_path = skill_path / SKILL_FILE_NAME
        if skill_md_path.exists():
            raise FileExistsError(f"Skill '{name}' already exists in {folder}")

        skill_path.mkdir(parents=True, exist_ok=True)
        skill_md_path.write_text(render_skill_markdown(name, description, content), encoding="utf-8")

        self.enable_skill(name)
        logger.info(f"Created skill '{name}' in {skill_path}")

        skill = self.loader.load_skill_dir(skill_path)
        if skill is None:
            raise ValueError(f"Skill '{name}' was written but could not be loaded back")
        return skill

    def update_skill(
        self,
        name: str,
        new_name: Optional[str] = None,
        description: Optional[str] = None,
        content: Optional[str] = None,
    ) -> Optional[Skill]:
        """Update an existing skill's SKILL.md, optionally renaming it.

        Only the supplied fields change. A rename moves the skill directory
        and carries the enabled flag over to the new name.

        Returns:
            The updated Skill, or None if the skill was not found

        Raises:
            FileExistsError: If the rename target directory already exists
        """
        skill = self.find_skill(name)
        if skill is None:
            return None

        metadata_name = skill.metadata.name
        skill_path = skill.path

        if new_name and new_name != skill.name:
            new_path = skill_path.parent / new_name
            if new_path.exists():
                raise FileExistsError(f"A skill directory named '{new_name}' already exists")

            skill_path.rename(new_path)
            logger.info(f"Renamed skill '{skill.name}' -> '{new_name}'")

            enabled = self.get_enabled_skills()
            if skill.name in enabled:
                self.set_enabled_skills([new_name if n == skill.name else n for n in enabled])

            skill_path = new_path

        if new_name:
            metadata_name = new_name

        skill_md_path = skill_path / SKILL_FILE_NAME
        parsed = parse_skill_markdown(skill_md_path.read_text(encoding="utf-8"))
        if parsed is None:
            logger.warning(f"Cannot update skill with invalid SKILL.md: {skill_md_path}")
            return None

        current_metadata, current_body = parsed
        new_description = description if description is not None else current_metadata.description
        new_content = content if content is not None else current_body

        skill_md_path.write_text(
            render_skill_markdown(metadata_name, new_description, new_content),
            encoding="utf-8",
        )

        return self.loader.load_skill_dir(skill_path)

    def delete_skill(self, name: str) -> bool:
        """Delete a skill directory and drop it from the enabled set.

        Returns:
            False if the skill was not found
        """
        skill = self.find_skill(name)
        if skill is None:
            return False

        shutil.rmtree(skill.path)
        self.disable_skill(skill.name)
        logger.info(f"Deleted skill '{skill.name}' ({skill.path})")
        return True
