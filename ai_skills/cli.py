"""Command-line interface for managing AI Skills."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from .config import settings
from .host import AIProvider, JsonFileStore, create_ai_provider
from .models import FAST_MODELS, get_default_model, get_model_by_id
from .router import SkillRouter
from .skills.loader import Skill, read_supporting_file
from .skills.registry import SkillRegistry
from .skills.validation import (
    validate_content,
    validate_description,
    validate_folder_path,
    validate_skill_name,
)
from .tools import (
    Confirmation,
    confirm_add_skill,
    confirm_edit_skill,
    confirm_remove_skill,
    confirm_remove_skills_folder,
)

# Set up logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.WARNING),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# CLI app
app = typer.Typer(
    name="ai-skills",
    help="AI Skills: manage SKILL.md skills and route requests to the best one",
    add_completion=False,
)
folders_app = typer.Typer(help="Manage the folders searched for skills", add_completion=False)
model_app = typer.Typer(help="Choose the fast model used for skill routing", add_completion=False)
app.add_typer(folders_app, name="folders")
app.add_typer(model_app, name="model")

console = Console()


def get_registry() -> SkillRegistry:
    """Registry backed by the local storage file."""
    return SkillRegistry(JsonFileStore(settings.storage_path))


def get_ai_provider() -> AIProvider:
    return create_ai_provider(settings)


# =============================================================================
# Helpers
# =============================================================================

def _fail(message: str) -> None:
    console.print(f"[red]{message}[/red]")
    raise typer.Exit(code=1)


def _confirm(confirmation: Optional[Confirmation], yes: bool) -> None:
    """Show a confirmation and abort unless the user agrees."""
    if confirmation is None or yes:
        return

    table = Table(show_header=False, box=None)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for label, value in confirmation.info:
        table.add_row(label, value)

    style = "bold red" if confirmation.destructive else "bold blue"
    console.print(Panel(table, title=confirmation.message, style=style))

    if not typer.confirm("Continue?", default=not confirmation.destructive):
        console.print("[yellow]Cancelled.[/yellow]")
        raise typer.Exit(code=1)


def _read_content(content: Optional[str], content_file: Optional[Path]) -> Optional[str]:
    if content_file is not None:
        return content_file.read_text(encoding="utf-8")
    return content


def _require_skill(registry: SkillRegistry, name: str) -> Skill:
    skill = registry.find_skill(name)
    if skill is None:
        _fail(f"Skill '{name}' not found. Run 'ai-skills list' to see all skills.")
    return skill


def _skills_table(title: str, skills: list[Skill], style: str) -> Table:
    table = Table(title=title)
    table.add_column("Name", style=style)
    table.add_column("Description")
    table.add_column("Files", justify="right")
    table.add_column("Directory", style="dim")

    for skill in skills:
        description = skill.metadata.description
        if len(description) > 80:
            description = description[:77] + "..."
        table.add_row(
            skill.metadata.name,
            description,
            str(len(skill.supporting_files) + 1),
            str(skill.path),
        )
    return table


# =============================================================================
# Skill commands
# =============================================================================

@app.command()
def config():
    """Show current configuration (for debugging)."""
    console.print(Panel("Current Configuration", style="bold blue"))

    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("STORAGE_PATH", str(settings.storage_path))
    table.add_row("DEFAULT_SKILLS_FOLDER", str(settings.default_skills_folder))
    table.add_row("LLM_PROVIDER", settings.llm_provider)

    if settings.llm_provider == "ollama":
        table.add_row("OLLAMA_URL", settings.ollama_url)
    else:
        api_key = settings.openai_api_key
        table.add_row("OPENAI_API_KEY", f"{api_key[:6]}..." if api_key else "[red]Not set[/red]")
        if settings.openai_base_url:
            table.add_row("OPENAI_BASE_URL", settings.openai_base_url)

    registry = get_registry()
    table.add_row("Routing model", registry.get_routing_model() or "[yellow]Not configured[/yellow]")
    table.add_row("Skills folders", "\n".join(registry.get_skills_folder_paths()) or "-")

    console.print(table)


@app.command("list")
def list_skills():
    """List all skills, grouped by enabled state."""
    registry = get_registry()
    skills = registry.get_all_skills()

    if not skills:
        folders = ", ".join(registry.get_skills_folder_paths()) or "(none)"
        console.print(f"[yellow]No skills found in: {folders}[/yellow]")
        console.print("Each skill is a directory containing a SKILL.md file.")
        return

    enabled = set(registry.ensure_default_enabled())
    enabled_skills = [s for s in skills if s.name in enabled]
    disabled_skills = [s for s in skills if s.name not in enabled]

    if enabled_skills:
        console.print(_skills_table(f"Enabled Skills ({len(enabled_skills)})", enabled_skills, "green"))
    if disabled_skills:
        console.print(_skills_table(f"Disabled Skills ({len(disabled_skills)})", disabled_skills, "red"))

    model = registry.get_routing_model()
    if model:
        console.print(f"\nRouting model: [cyan]{model}[/cyan]")
    else:
        console.print("\n[yellow]No routing model configured. Run 'ai-skills model set <id>'.[/yellow]")


@app.command()
def show(
    name: str = typer.Argument(..., help="Skill directory or frontmatter name"),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Print a supporting file instead"),
):
    """Show a skill's instructions and supporting files."""
    registry = get_registry()
    skill = _require_skill(registry, name)

    if file:
        try:
            console.print(read_supporting_file(skill, file))
        except (FileNotFoundError, ValueError) as e:
            _fail(str(e))
        return

    status = "[green]Enabled[/green]" if registry.is_skill_enabled(skill.name) else "[red]Disabled[/red]"
    console.print(Panel(
        f"{skill.metadata.description}\n\nStatus: {status}\nDirectory: {skill.path}",
        title=skill.metadata.name,
        style="bold blue",
    ))
    console.print(Markdown(skill.content))

    if skill.supporting_files:
        console.print("\n[bold]Supporting files:[/bold]")
        for file_name in skill.supporting_files:
            console.print(f"  • {file_name}")


@app.command()
def enable(name: str = typer.Argument(..., help="Skill to enable")):
    """Enable a skill for routing."""
    registry = get_registry()
    skill = _require_skill(registry, name)
    registry.enable_skill(skill.name)
    console.print(f"[green]Enabled {skill.metadata.name}[/green]")


@app.command()
def disable(name: str = typer.Argument(..., help="Skill to disable")):
    """Disable a skill for routing."""
    registry = get_registry()
    skill = _require_skill(registry, name)
    registry.disable_skill(skill.name)
    console.print(f"[yellow]Disabled {skill.metadata.name}[/yellow]")


@app.command("enable-all")
def enable_all():
    """Enable every discovered skill."""
    registry = get_registry()
    names = [s.name for s in registry.get_all_skills()]
    registry.set_enabled_skills(names)
    console.print(f"[green]Enabled {len(names)} skill(s)[/green]")


@app.command("disable-all")
def disable_all(yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation")):
    """Disable every skill."""
    registry = get_registry()
    _confirm(
        Confirmation(
            message="Disable all skills?",
            info=[("Note", "Routing will have no skills to choose from until you enable some.")],
            destructive=True,
        ),
        yes,
    )
    registry.set_enabled_skills([])
    console.print("[yellow]Disabled all skills[/yellow]")


@app.command()
def create(
    name: str = typer.Argument(..., help="Skill name (lowercase letters, numbers, hyphens)"),
    description: str = typer.Option(..., "--description", "-d", help="What the skill does and when to use it"),
    content: Optional[str] = typer.Option(None, "--content", "-c", help="Markdown instructions"),
    content_file: Optional[Path] = typer.Option(
        None, "--content-file", help="Read the instructions from a file", exists=True, dir_okay=False
    ),
    folder: Optional[str] = typer.Option(None, "--folder", help="Target skills folder"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """Create a new skill."""
    registry = get_registry()
    body = _read_content(content, content_file)

    error = validate_skill_name(name) or validate_description(description) or validate_content(body)
    if error:
        _fail(error)

    _confirm(confirm_add_skill(registry, name, description, body, folder), yes)

    try:
        skill = registry.create_skill(name, description, body, folder)
    except (FileExistsError, ValueError) as e:
        _fail(str(e))

    console.print(f"[green]Created skill {skill.metadata.name} in {skill.path}[/green]")


@app.command()
def edit(
    name: str = typer.Argument(..., help="Skill to edit"),
    new_name: Optional[str] = typer.Option(None, "--new-name", help="Rename the skill"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description"),
    content: Optional[str] = typer.Option(None, "--content", "-c", help="New markdown instructions"),
    content_file: Optional[Path] = typer.Option(
        None, "--content-file", help="Read the new instructions from a file", exists=True, dir_okay=False
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """Edit a skill's name, description or instructions."""
    registry = get_registry()
    skill = _require_skill(registry, name)
    body = _read_content(content, content_file)

    if new_name is None and description is None and body is None:
        _fail("Nothing to change. Pass --new-name, --description, --content or --content-file.")

    confirmation = confirm_edit_skill(registry, name, new_name=new_name, description=description, content=body)
    if confirmation is None:
        error = (
            (validate_skill_name(new_name, label="New skill name") if new_name is not None else None)
            or (validate_description(description) if description is not None else None)
            or (validate_content(body) if body is not None else None)
            or "New skill name is the same as the current name."
        )
        _fail(error)

    _confirm(confirmation, yes)

    try:
        updated = registry.update_skill(skill.name, new_name=new_name, description=description, content=body)
    except FileExistsError as e:
        _fail(str(e))

    if updated is None:
        _fail(f"Failed to update skill '{name}'")

    console.print(f"[green]Updated skill {updated.metadata.name}[/green]")


@app.command()
def delete(
    name: str = typer.Argument(..., help="Skill to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """Delete a skill directory and all its files."""
    registry = get_registry()
    skill = _require_skill(registry, name)

    _confirm(confirm_remove_skill(registry, name), yes)

    registry.delete_skill(skill.name)
    console.print(f"[yellow]Deleted {skill.metadata.name} ({skill.path})[/yellow]")


@app.command()
def use(request: str = typer.Argument(..., help="What you want to get done")):
    """Route a request to the best enabled skill and print its instructions."""
    registry = get_registry()

    try:
        ai = get_ai_provider()
    except ValueError as e:
        _fail(str(e))

    result = SkillRouter(registry, ai).route(request)
    console.print(Markdown(result.message))

    if result.matched:
        logger.info(f"Selected skill {result.skill.name} with {result.model}")


# =============================================================================
# Folder commands
# =============================================================================

@folders_app.command("list")
def folders_list():
    """List configured skills folders."""
    registry = get_registry()
    folders = registry.get_skills_folders()

    if not folders:
        console.print("[yellow]No skills folders configured. Run 'ai-skills folders add <path>'.[/yellow]")
        return

    table = Table(title=f"Skills Folders ({len(folders)})")
    table.add_column("#", justify="right")
    table.add_column("Label", style="cyan")
    table.add_column("Path")
    table.add_column("Skills", justify="right")

    for i, folder in enumerate(folders, start=1):
        path = Path(folder.path).expanduser()
        if path.is_dir():
            count = str(len(registry.loader.scan_folder(path)))
        else:
            count = "[red]missing[/red]"
        table.add_row(str(i), folder.display_name, folder.path, count)

    console.print(table)


@folders_app.command("add")
def folders_add(
    path: str = typer.Argument(..., help="Folder containing skill directories"),
    label: Optional[str] = typer.Option(None, "--label", "-l", help="Custom label"),
):
    """Add a skills folder."""
    error = validate_folder_path(path)
    if error:
        _fail(error)

    registry = get_registry()
    if registry.add_skills_folder(path, label):
        console.print(f"[green]Added skills folder: {path}[/green]")
    else:
        console.print(f"[yellow]Already configured: {path}[/yellow]")


@folders_app.command("edit")
def folders_edit(
    old_path: str = typer.Argument(..., help="Currently configured path"),
    new_path: str = typer.Argument(..., help="Replacement path"),
    label: Optional[str] = typer.Option(None, "--label", "-l", help="Custom label"),
):
    """Change a skills folder's path or label."""
    error = validate_folder_path(new_path)
    if error:
        _fail(error)

    registry = get_registry()
    if not registry.update_skills_folder(old_path, new_path, label):
        _fail(f"Folder not configured: {old_path}")

    console.print(f"[green]Updated skills folder: {new_path}[/green]")


@folders_app.command("remove")
def folders_remove(
    path: str = typer.Argument(..., help="Configured folder to remove"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """Remove a folder from the search path (files are not deleted)."""
    registry = get_registry()
    folders = registry.get_skills_folders()

    if not any(f.same_path(path) for f in folders):
        _fail(f"Folder not configured: {path}")
    if len(folders) == 1:
        _fail("Cannot remove the last skills folder. Add another folder first.")

    _confirm(confirm_remove_skills_folder(registry, path), yes)

    registry.remove_skills_folder(path)
    console.print(f"[yellow]Removed skills folder: {path}[/yellow]")


# =============================================================================
# Routing model commands
# =============================================================================

@model_app.command("list")
def model_list():
    """List recommended fast routing models."""
    registry = get_registry()
    current = registry.get_routing_model()
    default = get_default_model()

    table = Table(title="Routing Models")
    table.add_column("Model", style="cyan")
    table.add_column("Provider")
    table.add_column("Tier")
    table.add_column("Description")
    table.add_column("", style="green")

    for model in FAST_MODELS:
        marks = []
        if model.id == current:
            marks.append("current")
        if model.id == default:
            marks.append("recommended")
        table.add_row(model.id, model.provider, model.tier, model.description, ", ".join(marks))

    console.print(table)


@model_app.command("show")
def model_show():
    """Show the configured routing model."""
    model = get_registry().get_routing_model()
    if model:
        info = get_model_by_id(model)
        console.print(f"Routing model: [cyan]{info.name if info else model}[/cyan] ({model})")
    else:
        console.print(
            f"[yellow]No routing model configured.[/yellow] Recommended: {get_default_model()}"
        )


@model_app.command("set")
def model_set(
    model_id: str = typer.Argument(..., help="Model id (see 'ai-skills model list')"),
    force: bool = typer.Option(False, "--force", help="Allow a model that is not in the catalog"),
):
    """Set the routing model."""
    if get_model_by_id(model_id) is None and not force:
        _fail(f"Unknown routing model '{model_id}'. Use --force to set it anyway.")

    get_registry().set_routing_model(model_id)
    console.print(f"[green]Routing model updated: {model_id}[/green]")


@model_app.command("reset")
def model_reset():
    """Reset the routing model to the recommended default."""
    default = get_default_model()
    get_registry().set_routing_model(default)
    console.print(f"[green]Routing model reset to {default}[/green]")


@model_app.command("clear")
def model_clear():
    """Forget the routing model preference."""
    get_registry().clear_routing_model()
    console.print("[yellow]Routing model cleared[/yellow]")


if __name__ == "__main__":
    app()
