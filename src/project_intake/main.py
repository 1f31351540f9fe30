"""
Project Intake - CLI Entry Point.

Usage:
    intake create                      Walk through the project creation wizard
    intake questionnaire PROJECT_ID    Answer the adaptive questionnaire
    intake generate PROJECT_ID         Start Scope of Work generation and track it
    intake track PROJECT_ID SOW_ID     Track a generation job already running
    intake draft show|clear            Inspect or discard the saved draft
    intake health                      Check configuration
"""

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table

app = typer.Typer(
    name="intake",
    help="Project Intake - create projects, answer the questionnaire, generate the Scope of Work.",
    add_completion=False,
)
draft_app = typer.Typer(help="Inspect or discard the saved project draft.")
app.add_typer(draft_app, name="draft")
console = Console()


def _draft_repository():
    from project_intake.config import settings
    from project_intake.wizard.draft_store import JsonFileDraftRepository

    return JsonFileDraftRepository(settings.draft_dir, settings.draft_key)


# =============================================================================
# Wizard
# =============================================================================


def _prompt_step(controller, step_kind) -> None:
    from project_intake.models.draft import LocalDocument
    from project_intake.wizard.steps import StepKind

    draft = controller.draft
    if step_kind == StepKind.ADDRESS:
        address = draft.property_address
        controller.update_address(
            line1=typer.prompt("Address line 1", default=address.line1 or None),
            line2=typer.prompt("Address line 2", default=address.line2 or "", show_default=False) or None,
            city=typer.prompt("City", default=address.city or None),
            postcode=typer.prompt("Postcode", default=address.postcode or None),
            country=typer.prompt("Country", default=address.country),
        )
    elif step_kind == StepKind.ASSESSMENT:
        notes = typer.prompt("Property assessment notes (optional)", default="", show_default=False)
        controller.set_property_assessment({"notes": notes} if notes else None)
    elif step_kind == StepKind.PROJECT_TYPE:
        controller.set_project_type(
            typer.prompt("Project type (e.g. loft_conversion)", default=draft.project_type or None)
        )
    elif step_kind in (StepKind.VISION, StepKind.REQUIREMENTS):
        controller.update_requirements(
            description=typer.prompt(
                "Describe the project", default=draft.requirements.description or None
            ),
            timeline=typer.prompt("Timeline (optional)", default=draft.requirements.timeline or "", show_default=False) or None,
        )
    elif step_kind == StepKind.DOCUMENTS:
        while True:
            raw = typer.prompt("Add a document path (blank to continue)", default="", show_default=False)
            if not raw:
                break
            path = Path(raw).expanduser()
            if not path.is_file():
                console.print(f"[yellow]No such file: {path}[/yellow]")
                continue
            doc_type = typer.prompt("Document type", default="other")
            controller.add_document(LocalDocument.from_path(path, doc_type))
    elif step_kind == StepKind.REVIEW:
        table = Table(title="Review", show_header=False)
        table.add_row("Address", f"{draft.property_address.line1}, {draft.property_address.city} {draft.property_address.postcode}")
        table.add_row("Project type", draft.project_type)
        table.add_row("Description", draft.requirements.description)
        table.add_row("Documents", ", ".join(d.file_name for d in draft.documents) or "none")
        console.print(table)


async def _run_wizard(assessment: bool) -> None:
    from project_intake.api.client import build_client
    from project_intake.documents.gateway import DocumentGateway
    from project_intake.services import Services
    from project_intake.wizard.controller import WizardController
    from project_intake.wizard.steps import WizardVariant

    variant = WizardVariant.WITH_ASSESSMENT if assessment else WizardVariant.STANDARD
    async with build_client() as client:
        services = Services.from_client(client)
        controller = WizardController(
            _draft_repository(), services.projects, DocumentGateway(services.documents), variant
        )

        while True:
            step = controller.current
            console.print(f"\n[bold]Step {controller.current_step + 1} of {controller.step_count}: {step.title}[/bold]")
            _prompt_step(controller, step.kind)

            if controller.is_last_step:
                if not typer.confirm("Create project?", default=True):
                    controller.back()
                    continue
                with console.status("Creating project..."):
                    result = await controller.submit()
                if not result.success:
                    console.print(f"[red]{result.error}[/red]")
                    if typer.confirm("Retry?", default=True):
                        continue
                    raise typer.Exit(1)
                console.print(f"[green]✅ Project created: {result.project.id}[/green]")
                for document, message in result.failed_documents:
                    console.print(f"[yellow]⚠️  {document.file_name} was not uploaded: {message}[/yellow]")
                return

            if not controller.next():
                console.print("[yellow]Please complete this step before continuing.[/yellow]")


@app.command()
def create(
    assessment: bool = typer.Option(False, "--assessment", "-a", help="Include the property assessment step"),
) -> None:
    """Walk through the project creation wizard. Progress is saved after every answer."""
    asyncio.run(_run_wizard(assessment))


# =============================================================================
# Questionnaire
# =============================================================================


_YES = {"y", "yes", "true", "1"}
_NO = {"n", "no", "false", "0"}


def _coerce_answer(question_type, raw: str):
    """Turn prompt text into the answer type the question expects. Unparseable input stays text."""
    from project_intake.models.questionnaire import QuestionType

    text = raw.strip()
    if question_type == QuestionType.BOOLEAN:
        if text.lower() in _YES:
            return True
        if text.lower() in _NO:
            return False
        return raw
    if question_type in (QuestionType.NUMBER, QuestionType.SCALE):
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return raw
    return raw


async def _run_questionnaire(project_id: str) -> None:
    from project_intake.api.client import build_client
    from project_intake.questionnaire.engine import EngineState, QuestionnaireEngine, SubmitOutcome
    from project_intake.services import Services

    async with build_client() as client:
        engine = QuestionnaireEngine(Services.from_client(client).questionnaire)

        with console.status("Loading questionnaire..."):
            await engine.initialize(project_id)

        while engine.state == EngineState.ERROR:
            console.print(f"[red]{engine.error}[/red]")
            if not typer.confirm("Retry?", default=True):
                raise typer.Exit(1)
            await engine.retry()

        while engine.state == EngineState.IN_PROGRESS and engine.current is not None:
            question = engine.current.question
            badge = "AI generated" if engine.current.is_ai_generated else "Standard question"
            console.print(
                f"\n[bold]Question {engine.current_question_index + 1}[/bold] "
                f"[dim]({engine.completion_percentage:.0f}% complete, {badge})[/dim]"
            )
            if engine.current.reasoning:
                console.print(f"[dim]💡 {engine.current.reasoning}[/dim]")
            if question.options:
                console.print(f"[dim]Options: {', '.join(question.options)}[/dim]")

            hint = " (or 'done' to finish now)" if engine.can_force_complete else ""
            default = str(engine.current_answer) if engine.current_answer is not None else ""
            answer = typer.prompt(f"{question.text}{hint}", default=default, show_default=bool(default))

            if hint and answer.strip().lower() == "done":
                outcome = await engine.force_complete()
            else:
                outcome = await engine.submit_answer(_coerce_answer(question.type, answer))

            if outcome == SubmitOutcome.REJECTED:
                console.print("[yellow]This question needs an answer.[/yellow]")
            elif outcome == SubmitOutcome.FAILED:
                console.print(f"[red]{engine.error}[/red]")
                if engine.state == EngineState.ERROR:
                    await engine.retry()

        if engine.is_complete:
            console.print(
                Panel.fit(
                    f"Questionnaire complete!\nResponses collected: {len(engine.responses)}",
                    border_style="green",
                )
            )


@app.command()
def questionnaire(project_id: str = typer.Argument(..., help="Project to collect details for")) -> None:
    """Answer the adaptive questionnaire for a project. Resumes where you left off."""
    asyncio.run(_run_questionnaire(project_id))


# =============================================================================
# Generation
# =============================================================================


async def _track(project_id: str, sow_id: str | None) -> None:
    from project_intake.api.client import build_client
    from project_intake.generation.tracker import GenerationTracker, TrackerState, start_generation
    from project_intake.services import Services

    async with build_client() as client:
        services = Services.from_client(client)
        if sow_id is None:
            started = await start_generation(services.sow, project_id)
            sow_id = started.sow_id
            console.print(f"[dim]Generation started: {sow_id}[/dim]")

        progress = Progress(
            TextColumn("{task.description}"),
            BarColumn(),
            TextColumn("{task.percentage:>3.0f}%"),
            TextColumn("[dim]{task.fields[eta]}[/dim]"),
            console=console,
        )
        task_id = progress.add_task("Starting SoW generation...", total=100, eta="")

        def on_update(tracker: GenerationTracker) -> None:
            description = f"{tracker.stage.icon} {tracker.stage.message}"
            if tracker.reconnect_message:
                description = f"[yellow]{tracker.reconnect_message}[/yellow]"
            progress.update(task_id, completed=tracker.progress, description=description, eta=tracker.time_remaining)

        tracker = GenerationTracker(services.sow, project_id, sow_id, on_update=on_update)
        with Live(progress, console=console, transient=True):
            handle = tracker.start()
            try:
                await handle.wait()
            except asyncio.CancelledError:
                handle.cancel()
                raise

        if tracker.state == TrackerState.COMPLETED:
            console.print(f"[green]✅ Statement of Work ready: {tracker.sow.id}[/green]")
        else:
            console.print(f"[red]{tracker.failure.message if tracker.failure else 'Tracking stopped'}[/red]")
            raise typer.Exit(1)


@app.command()
def track(
    project_id: str = typer.Argument(..., help="Project id"),
    sow_id: str = typer.Argument(..., help="Scope of Work id returned when generation started"),
) -> None:
    """Track a running Scope of Work generation job."""
    asyncio.run(_track(project_id, sow_id))


@app.command()
def generate(project_id: str = typer.Argument(..., help="Project id")) -> None:
    """Start Scope of Work generation for a project and track it to completion."""
    asyncio.run(_track(project_id, None))


# =============================================================================
# Draft / housekeeping
# =============================================================================


@draft_app.command("show")
def draft_show() -> None:
    """Show the saved project draft."""
    draft = _draft_repository().load()
    if draft is None:
        console.print("[dim]No saved draft.[/dim]")
        return
    console.print_json(draft.to_json())


@draft_app.command("clear")
def draft_clear() -> None:
    """Discard the saved project draft."""
    _draft_repository().clear()
    console.print("[green]Draft cleared.[/green]")


@app.command()
def health() -> None:
    """Check configuration."""
    from project_intake.config import get_settings

    console.print("\n[bold]Project Intake Health Check[/bold]\n")
    try:
        settings = get_settings()
    except Exception as e:
        console.print(f"\n[red]❌ Configuration error: {e}[/red]")
        raise typer.Exit(1)

    console.print("✅ Configuration loaded")
    console.print(f"   Environment: {settings.intake_env}")
    console.print(f"   API: {settings.intake_api_url}")
    console.print(f"   Draft store: {settings.draft_dir / (settings.draft_key + '.json')}")
    if settings.intake_api_token:
        console.print("✅ API token configured")
    else:
        console.print("ℹ️  No API token configured (unauthenticated requests)")


@app.command()
def version() -> None:
    """Show version information."""
    from project_intake import __version__

    console.print(f"Project Intake version {__version__}")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")) -> None:
    from project_intake.logging_setup import setup_logging

    setup_logging(verbose)


if __name__ == "__main__":
    app()
