"""Semantic skill routing.

A fast LLM reads the user's request and the enabled skills' names and
descriptions, and replies with the single best skill name (or ``NONE``).
The selected skill's instructions are returned to the host assistant.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .host import AIProvider
from .skills.loader import Skill
from .skills.registry import SkillRegistry

logger = logging.getLogger(__name__)

NO_MATCH_TOKEN = "NONE"

# Deterministic selection
ROUTING_CREATIVITY = "none"


class RoutingStatus(str, Enum):
    SETUP_REQUIRED = "setup_required"
    NO_ENABLED_SKILLS = "no_enabled_skills"
    MATCHED = "matched"
    NO_MATCH = "no_match"


@dataclass
class RoutingResult:
    """Outcome of routing a request."""

    status: RoutingStatus
    message: str
    skill: Optional[Skill] = None
    model: Optional[str] = None

    @property
    def matched(self) -> bool:
        return self.status == RoutingStatus.MATCHED


SETUP_REQUIRED_MESSAGE = """\
# Setup Required

Before using AI Skills, you need to configure your routing model preference.

## What is a Routing Model?

The routing model is a fast AI model that intelligently selects which skill to use based on your request.

## How to Setup

1. Run `ai-skills model list` to see the recommended fast models
2. Run `ai-skills model set <model-id>` to choose one (we recommend **Gemini 2.5 Flash Lite**)
3. The selection is saved automatically

Once configured, you can use AI Skills to help with various tasks!"""

NO_ENABLED_SKILLS_MESSAGE = """\
No AI Skills are currently enabled.

To enable skills:
1. Run `ai-skills list` to see all skills
2. Run `ai-skills enable <name>` (or `ai-skills enable-all`)
3. Once enabled, skills will be available here

Skills must be enabled before they can be used by the AI."""

_ROUTING_PROMPT = """\
You are a skill router. Select the best skill for the user's request.

User Request: "{request}"

Available Skills:
{skills_list}

Selection rules:
1. Pick the skill whose purpose best matches what the user wants to accomplish
2. Consider the entire description, not just keywords
3. If multiple skills match, choose the most specific one
4. Only return "NONE" if the request is completely unrelated to all skills (e.g., "hello", "how are you")

Output: ONLY the skill name from the list above, or "NONE" if no match.

Selected skill name:"""


def build_routing_prompt(request: str, skills: list[Skill]) -> str:
    """Build the single prompt sent to the routing model."""
    skills_list = "\n".join(
        f"{i}. Name: {skill.metadata.name}\n   Description: {skill.metadata.description}"
        for i, skill in enumerate(skills, start=1)
    )
    return _ROUTING_PROMPT.format(request=request, skills_list=skills_list)


def parse_routing_reply(raw: str) -> Optional[str]:
    """Extract the selected skill name from the model reply.

    Returns:
        The skill name, or None when the model answered NONE (or nothing)
    """
    reply = raw.strip()
    if len(reply) >= 2 and reply[0] == reply[-1] and reply[0] in "\"'`":
        reply = reply[1:-1].strip()

    if not reply or reply.upper() == NO_MATCH_TOKEN:
        return None
    return reply


def match_skill(name: str, skills: list[Skill]) -> Optional[Skill]:
    """Find the skill the model named, exact match first."""
    for skill in skills:
        if skill.matches(name):
            return skill

    lowered = name.lower()
    for skill in skills:
        if skill.name.lower() == lowered or skill.metadata.name.lower() == lowered:
            return skill
    return None


def format_no_match_message(skills: list[Skill]) -> str:
    skills_list = "\n".join(
        f"{i}. **{skill.metadata.name}** - {skill.metadata.description}"
        for i, skill in enumerate(skills, start=1)
    )
    return (
        "# General Response Required\n\n"
        "No enabled skill matches this request. Use your general capabilities to help the user.\n\n"
        "Do NOT use any of the following skills:\n"
        f"{skills_list}\n\n"
        "If the user explicitly mentions a skill name, inform them it's not available."
    )


class SkillRouter:
    """Routes free-text requests to the best enabled skill."""

    def __init__(self, registry: SkillRegistry, ai: AIProvider):
        self.registry = registry
        self.ai = ai

    def select_skill_name(self, request: str, skills: list[Skill], model: str) -> Optional[str]:
        """Ask the routing model which skill fits.

        Provider errors are logged and treated as "no match".
        """
        prompt = build_routing_prompt(request, skills)

        try:
            raw = self.ai.ask(prompt, model=model, creativity=ROUTING_CREATIVITY)
        except Exception as e:
            logger.warning(f"AI skill selection failed: {e}")
            return None

        selected = parse_routing_reply(raw)
        logger.debug(f"Routing model {model} selected: {selected!r}")
        return selected

    def route(self, request: str) -> RoutingResult:
        """Select the best enabled skill for ``request``."""
        model = self.registry.get_routing_model()
        if not model:
            return RoutingResult(RoutingStatus.SETUP_REQUIRED, SETUP_REQUIRED_MESSAGE)

        skills = self.registry.get_enabled_skill_objects()
        if not skills:
            return RoutingResult(RoutingStatus.NO_ENABLED_SKILLS, NO_ENABLED_SKILLS_MESSAGE, model=model)

        selected_name = self.select_skill_name(request, skills, model)
        skill = match_skill(selected_name, skills) if selected_name else None

        if skill is None:
            if selected_name:
                logger.info(f"Routing model returned unknown skill: {selected_name!r}")
            return RoutingResult(RoutingStatus.NO_MATCH, format_no_match_message(skills), model=model)

        logger.info(f"Routed request to skill '{skill.name}'")
        return RoutingResult(
            RoutingStatus.MATCHED,
            skill.get_injectable_content(),
            skill=skill,
            model=model,
        )


def route_request(request: str, registry: SkillRegistry, ai: AIProvider) -> RoutingResult:
    """Convenience wrapper around SkillRouter.route()."""
    return SkillRouter(registry, ai).route(request)
