"""Input validation for skill and folder operations.

Each check returns an error message, or None when the value is acceptable.
"""

import os
import re
from pathlib import Path
from typing import Optional

MAX_NAME_LENGTH = 64
MAX_DESCRIPTION_LENGTH = 1024

SKILL_NAME_RE = re.compile(r"^[a-z0-9-]+$")


def validate_skill_name(name: Optional[str], label: str = "Skill name") -> Optional[str]:
    if not name or not name.strip():
        return f"{label} is required."
    if not SKILL_NAME_RE.match(name):
        return (
            f'Invalid {label.lower()} "{name}". Skill names must use lowercase letters, '
            f"numbers, and hyphens only (max {MAX_NAME_LENGTH} characters)."
        )
    if len(name) > MAX_NAME_LENGTH:
        return f"{label} too long. Maximum {MAX_NAME_LENGTH} characters allowed."
    return None


def validate_description(description: Optional[str]) -> Optional[str]:
    if not description or not description.strip():
        return "Description is required."
    if len(description) > MAX_DESCRIPTION_LENGTH:
        return (
            f"Description too long. Maximum {MAX_DESCRIPTION_LENGTH} characters allowed "
            f"(currently {len(description)} characters)."
        )
    return None


def validate_content(content: Optional[str]) -> Optional[str]:
    if not content or not content.strip():
        return "Content is required."
    return None


def has_path_traversal(folder_path: str) -> bool:
    """True if the normalized path still contains a ``..`` segment."""
    parts = os.path.normpath(folder_path).split(os.sep)
    return ".." in parts


def validate_folder_path(folder_path: Optional[str]) -> Optional[str]:
    """Validate a folder the user wants to add to the skills search path."""
    if not folder_path or not folder_path.strip():
        return "Folder path is required."
    if has_path_traversal(folder_path):
        return f"Invalid path: {folder_path}\n\nPath contains traversal sequences (..) that are not allowed."

    path = Path(folder_path).expanduser()
    if not path.exists():
        return (
            f"Path does not exist: {folder_path}\n\n"
            "Please provide a valid path to a folder containing your skills."
        )
    if not path.is_dir():
        return (
            f"Path is not a directory: {folder_path}\n\n"
            "Please provide a path to a folder, not a file."
        )
    return None
