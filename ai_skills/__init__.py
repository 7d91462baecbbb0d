"""
AI Skills: skill management and semantic routing for launcher assistants

This package manages "skills" (directories holding a SKILL.md file with
YAML frontmatter and markdown instructions) across configurable folders:
- enable/disable state kept in the host key-value store
- create, edit and delete skills on disk
- ask a fast LLM to pick the best enabled skill for a request
"""

__version__ = "0.1.0"
