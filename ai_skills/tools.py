"""Tool entry points exposed to the host assistant.

Every tool returns a human-readable string. Validation failures and
operational errors are reported in that string rather than raised, because
the host forwards the text straight to the assistant.

Tools that modify files or configuration also have a ``confirm_*`` builder
that returns the confirmation shown before the tool runs, or None when the
input would be rejected anyway.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .host import AIProvider
from .router import SkillRouter
from .skills.registry import SkillRegistry
from .skills.validation import (
    validate_content,
    validate_description,
    validate_folder_path,
    validate_skill_name,
)

logger = logging.getLogger(__name__)


@dataclass
class Confirmation:
    """Confirmation prompt shown before a tool runs."""

    message: str
    info: list[tuple[str, str]] = field(default_factory=list)
    destructive: bool = False


def _truncate(text: str, limit: int = 100) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


def _numbered(paths: list[str]) -> str:
    return "\n".join(f"  {i}. {p}" for i, p in enumerate(paths, start=1))


def _edit_errors(
    name: str,
    new_name: Optional[str],
    description: Optional[str],
    content: Optional[str],
) -> Optional[str]:
    if new_name is not None:
        error = validate_skill_name(new_name, label="New skill name")
        if error:
            return error
        if new_name == name:
            return "New skill name is the same as the current name."

    if description is not None:
        error = validate_description(description)
        if error:
            return error

    if content is not None and not content.strip():
        return "Content cannot be empty."

    return None


def _edit_changes(old_name: str, new_name: Optional[str], description: Optional[str], content: Optional[str]):
    changes = []
    if new_name:
        changes.append(("New name", f"{old_name} → {new_name}"))
    if description is not None:
        changes.append(("Description", description))
    if content:
        changes.append(("Content", "(updated)"))
    return changes


# =============================================================================
# add-skill
# =============================================================================

def confirm_add_skill(
    registry: SkillRegistry,
    name: str,
    description: str,
    content: str,
    folder_path: Optional[str] = None,
) -> Optional[Confirmation]:
    if validate_skill_name(name) or validate_description(description) or validate_content(content):
        return None

    folder = folder_path or registry.get_primary_skills_folder()
    return Confirmation(
        message=f'Create new AI Skill "{name}"?',
        info=[
            ("Skill Name", name),
            ("Description", _truncate(description)),
            ("Folder", folder or "Default skills folder"),
            ("Status", "Will be enabled by default"),
        ],
    )


def add_skill(
    registry: SkillRegistry,
    name: str,
    description: str,
    content: str,
    folder_path: Optional[str] = None,
) -> str:
    """Create a new skill directory with a SKILL.md file."""
    error = validate_skill_name(name) or validate_description(description) or validate_content(content)
    if error:
        return f"❌ {error}"

    try:
        skill = registry.create_skill(name, description, content, folder_path)
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to create skill {name}: {e}")
        return f"❌ Failed to create skill: {e}"

    return (
        f'✅ Successfully created AI Skill "{skill.metadata.name}"\n\n'
        f"Directory: {skill.path}\n\n"
        f"Description: {skill.metadata.description}\n\n"
        "The skill is enabled by default and available automatically when relevant."
    )


# =============================================================================
# edit-skill
# =============================================================================

def confirm_edit_skill(
    registry: SkillRegistry,
    name: str,
    new_name: Optional[str] = None,
    description: Optional[str] = None,
    content: Optional[str] = None,
) -> Optional[Confirmation]:
    if not name or not name.strip():
        return None

    skill = registry.find_skill(name)
    if skill is None:
        return None

    if _edit_errors(name, new_name, description, content):
        return None

    return Confirmation(
        message=f'Update AI Skill "{skill.metadata.name}"?',
        info=[
            ("Skill Name", skill.metadata.name),
            ("Directory", str(skill.path)),
            *_edit_changes(skill.metadata.name, new_name, description, content),
        ],
    )


def edit_skill(
    registry: SkillRegistry,
    name: str,
    new_name: Optional[str] = None,
    description: Optional[str] = None,
    content: Optional[str] = None,
) -> str:
    """Update an existing skill; only the supplied fields change."""
    if not name or not name.strip():
        return "❌ Skill name is required."

    skill = registry.find_skill(name)
    if skill is None:
        return f'❌ Skill "{name}" not found. Use list-skills to see all available skills.'

    error = _edit_errors(name, new_name, description, content)
    if error:
        return f"❌ {error}"

    if new_name is not None:
        existing = registry.find_skill(new_name)
        if existing and existing.path != skill.path:
            return f'❌ A skill with the name "{new_name}" already exists.'

    try:
        updated = registry.update_skill(name, new_name=new_name, description=description, content=content)
    except OSError as e:
        logger.warning(f"Failed to update skill {name}: {e}")
        return f"❌ Failed to update skill: {e}"

    if updated is None:
        return f'❌ Failed to update skill "{name}"'

    changes = "\n".join(
        f"  - {label}: {value}" for label, value in _edit_changes(name, new_name, description, content)
    )
    return (
        f'✅ Successfully updated AI Skill "{updated.metadata.name}"\n\n'
        f"Changes:\n{changes}\n\n"
        f"Description: {updated.metadata.description}\n\n"
        "The skill will use the updated content next time it is invoked."
    )


# =============================================================================
# remove-skill
# =============================================================================

def confirm_remove_skill(registry: SkillRegistry, name: str) -> Optional[Confirmation]:
    skill = registry.find_skill(name)
    if skill is None:
        return None

    return Confirmation(
        message=f'Are you sure you want to delete the AI Skill "{skill.metadata.name}"?',
        info=[
            ("Skill Name", skill.metadata.name),
            ("Directory", str(skill.path)),
            ("Description", _truncate(skill.metadata.description)),
        ],
        destructive=True,
    )


def remove_skill(registry: SkillRegistry, name: str) -> str:
    """Delete a skill directory and all its files."""
    skill = registry.find_skill(name)
    if skill is None:
        return f'❌ Skill "{name}" not found. Use list-skills to see all available skills.'

    try:
        removed = registry.delete_skill(name)
    except OSError as e:
        logger.warning(f"Failed to remove skill {name}: {e}")
        return f"❌ Failed to remove skill: {e}"

    if not removed:
        return f'❌ Failed to remove skill "{name}"'

    return (
        f'✅ Successfully removed AI Skill "{skill.metadata.name}"\n\n'
        f"Deleted directory: {skill.path}\n\n"
        "The skill will no longer be available."
    )


# =============================================================================
# list-skills / list-skills-folders
# =============================================================================

def list_skills(registry: SkillRegistry) -> str:
    """List all available skills with their descriptions."""
    skills_folder = registry.get_primary_skills_folder()
    skills = registry.get_all_skills()

    if not skills:
        return (
            f"No AI Skills found in: {skills_folder}\n\n"
            "Skills are stored as directories containing a SKILL.md file. "
            "Make sure your skills folder path is configured correctly."
        )

    blocks = []
    for skill in skills:
        lines = [
            f"**{skill.metadata.name}** (Directory: {skill.name})",
            f"- Description: {skill.metadata.description}",
            f"- Path: {skill.path}",
        ]
        if skill.supporting_files:
            lines.append(f"- Supporting Files: {len(skill.supporting_files)} file(s)")
        blocks.append("\n".join(lines))

    formatted = "\n\n".join(blocks)
    return f"Skills Folder: {skills_folder}\n\nAvailable AI Skills ({len(skills)}):\n\n{formatted}"


def list_skills_folders(registry: SkillRegistry) -> str:
    """List all configured skills folders and the skills found in them."""
    paths = registry.get_skills_folder_paths()

    if not paths:
        return (
            "No skills folders configured.\n\n"
            "Use set-skills-folder to add a folder containing your AI Skills."
        )

    skills = registry.get_all_skills()

    output = f"📁 Configured Skills Folders ({len(paths)}):\n\n"
    output += "".join(f"{i}. {p}\n" for i, p in enumerate(paths, start=1))
    output += f"\n📊 Found {len(skills)} skill(s) across all folders\n\n"

    if skills:
        output += "Skills:\n" + "\n".join(f"  • {s.metadata.name} ({s.path})" for s in skills) + "\n"

    output += "\n💡 Use set-skills-folder to add more folders, or remove-skills-folder to remove a folder."
    return output


# =============================================================================
# set-skills-folder / remove-skills-folder
# =============================================================================

def set_skills_folder(registry: SkillRegistry, folder_path: str) -> str:
    """Add a folder to search for skills and enable every skill found."""
    error = validate_folder_path(folder_path)
    if error:
        return f"❌ {error}"

    registry.add_skills_folder(folder_path)

    all_paths = registry.get_skills_folder_paths()
    skills = registry.get_all_skills()
    previously_enabled = registry.get_enabled_skills()

    all_names = [s.name for s in skills]
    registry.set_enabled_skills(all_names)
    newly_enabled = len(set(all_names) - set(previously_enabled))

    if skills:
        found = "Skills: " + ", ".join(s.metadata.name for s in skills)
    else:
        found = "No skills found yet. Each skill should be a subdirectory with a SKILL.md file."

    output = (
        f"✅ Added skills folder: {folder_path}\n\n"
        f"You now have {len(all_paths)} skills folder(s) configured:\n{_numbered(all_paths)}\n\n"
        f"Found {len(skills)} total AI Skill(s) across all folders.\n\n"
        f"{found}\n"
    )
    if newly_enabled > 0:
        output += f"\n✅ {newly_enabled} skill(s) auto-enabled from the new folder.\n"
    output += "\nSkills from all these locations are now available."
    return output


def confirm_remove_skills_folder(registry: SkillRegistry, folder_path: str) -> Optional[Confirmation]:
    if folder_path not in registry.get_skills_folder_paths():
        return None

    return Confirmation(
        message="Are you sure you want to remove this skills folder from the list?",
        info=[
            ("Folder Path", folder_path),
            (
                "Note",
                "This won't delete the folder or its files, it just removes it "
                "from the list of folders to search for skills.",
            ),
        ],
        destructive=True,
    )


def remove_skills_folder(registry: SkillRegistry, folder_path: str) -> str:
    """Remove a folder from the search path; its files are not deleted."""
    paths = registry.get_skills_folder_paths()

    if folder_path not in paths:
        return (
            f'❌ Folder path not found in configuration: "{folder_path}"\n\n'
            "Use list-skills-folders to see all configured folders."
        )

    if len(paths) == 1:
        return (
            "❌ Cannot remove the only skills folder.\n\n"
            "You must have at least one skills folder configured. "
            "Add another folder first using set-skills-folder before removing this one."
        )

    registry.remove_skills_folder(folder_path)

    updated_paths = registry.get_skills_folder_paths()
    skills = registry.get_all_skills()

    return (
        f"✅ Removed skills folder from configuration: {folder_path}\n\n"
        f"You now have {len(updated_paths)} skills folder(s) configured:\n{_numbered(updated_paths)}\n\n"
        f"Found {len(skills)} total AI Skill(s) across remaining folders.\n\n"
        "Note: The folder and its files were not deleted, only removed from the search path."
    )


# =============================================================================
# use-skills
# =============================================================================

def use_skills(registry: SkillRegistry, ai: AIProvider, request: str) -> str:
    """Return the instructions of the enabled skill that best fits ``request``."""
    return SkillRouter(registry, ai).route(request).message
