"""Main CLI application using Typer."""
import asyncio
import os

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..audio import loop_dispatcher
from ..conversation import ChatSession, Message, PlaybackResult, SessionEvent, TurnStatus
from ..llm import ModelRouter
from ..ui.formatting import format_sources_plain
from .providers import build_session, env_flag

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="inklusi",
    help="Inclusive-education chatbot grounded in Universal Design for Learning",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()


@app.command(name="tui")
def tui_command(
    no_speech: bool = typer.Option(
        False,
        "--no-speech",
        help="Disable speech synthesis (text only)"
    ),
    audio_backend: str | None = typer.Option(
        None,
        "--audio",
        "-a",
        help="Audio backend: 'sounddevice' or 'none' (default: $INKLUSI_AUDIO_BACKEND)"
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch the interactive chat interface."""
    async def _tui():
        from ..ui import run_textual_tui

        session = build_session(
            speech=not no_speech,
            audio_backend=audio_backend,
            console=console,
        )
        try:
            await run_textual_tui(session=session, log_level=log_level)
        finally:
            console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_tui())
    except KeyboardInterrupt:
        pass


def _print_debug(level: str, component: str, message: str) -> None:
    """Route session debug messages to the console."""
    color = {"warning": "yellow", "error": "red"}.get(level, "dim")
    console.print(f"[{color}]{level.upper():<7} \\[{component}] {escape(message)}[/{color}]")


async def _play_to_end(session: ChatSession, message: Message) -> PlaybackResult:
    """Play a message's audio and wait until it finishes or is stopped."""
    finished = asyncio.Event()

    def on_update(event: SessionEvent, updated: Message | None) -> None:
        if (
            event == SessionEvent.MESSAGE_UPDATED
            and updated is not None
            and updated.id == message.id
            and not updated.audio_playing
        ):
            finished.set()

    session.set_update_callback(on_update)
    result = session.play(message.id)
    if result == PlaybackResult.STARTED:
        await finished.wait()
    return result


@app.command()
def ask(
    text: str = typer.Argument(..., help="Message to send"),
    speak: bool = typer.Option(
        False,
        "--speak",
        "-s",
        help="Synthesize the reply and play it"
    ),
    audio_backend: str | None = typer.Option(
        None,
        "--audio",
        "-a",
        help="Audio backend: 'sounddevice' or 'none' (default: $INKLUSI_AUDIO_BACKEND)"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Print routing, model and audio trace messages"
    ),
):
    """Ask a single question and print the reply."""
    async def _ask():
        session = build_session(
            speech=speak,
            audio_backend=audio_backend,
            console=console,
        )
        async with session:
            if verbose:
                session.set_debug_callback(_print_debug)
            engine = session.playback.engine
            if engine is not None:
                engine.set_dispatcher(loop_dispatcher(asyncio.get_running_loop()))

            with console.status("[dim]Thinking...[/dim]"):
                result = await session.submit(text)

            if result is None:
                console.print("[yellow]Nothing to ask.[/yellow]")
                raise typer.Exit(code=1)

            if result.status == TurnStatus.FAILURE:
                console.print(f"[red]{escape(result.message.text)}[/red]")
                raise typer.Exit(code=1)

            console.print(Panel(
                Markdown(result.message.text),
                title="[bold]UDL Assistant[/bold]",
                subtitle=f"[dim]{result.variant.value}[/dim]",
                border_style="blue",
            ))

            sources = format_sources_plain(result.message.sources)
            if sources:
                console.print("[bold]Sources:[/bold]")
                for i, line in enumerate(sources, 1):
                    console.print(f"  {i}. {escape(line)}")

            if not speak:
                return

            if not result.audio_available:
                reason = result.synthesis.error if result.synthesis else None
                suffix = f": {escape(reason)}" if reason else ""
                console.print(f"[yellow]Audio unavailable{suffix}[/yellow]")
                return

            playback = await _play_to_end(session, result.message)
            if playback == PlaybackResult.NO_ENGINE:
                console.print("[yellow]Audio output is not available[/yellow]")
            elif playback == PlaybackResult.FAILED:
                console.print("[red]Could not play audio[/red]")
                raise typer.Exit(code=1)

    try:
        asyncio.run(_ask())
    except KeyboardInterrupt:
        pass


@app.command()
def route(
    text: str = typer.Argument(..., help="Message to classify"),
):
    """Show which model variant a message would be routed to."""
    variant = ModelRouter().select_variant(text)
    console.print(variant.value)


@app.command()
def health():
    """Check API configuration and audio output devices."""
    all_healthy = True

    if os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY"):
        console.print("[green]+[/green] Gemini API key: SET")
    else:
        console.print("[red]x[/red] Gemini API key: NOT SET")
        all_healthy = False

    if env_flag("INKLUSI_SPEECH", True):
        console.print("[green]+[/green] Speech synthesis: ENABLED")
    else:
        console.print("[yellow]![/yellow] Speech synthesis: DISABLED")

    backend = os.getenv("INKLUSI_AUDIO_BACKEND", "sounddevice")
    if backend.lower() in ("none", "off", ""):
        console.print("[yellow]![/yellow] Audio output: DISABLED")
    else:
        try:
            from ..audio.sounddevice_engine import list_output_devices
            devices = list_output_devices()
        except (ImportError, OSError) as e:
            console.print(f"[red]x[/red] Audio output: FAILED ({e})")
            all_healthy = False
        else:
            if devices:
                console.print(f"[green]+[/green] Audio output: {len(devices)} device(s)")
                table = Table(show_header=False, box=None)
                table.add_column("Index", style="bold cyan", width=6)
                table.add_column("Device")
                table.add_column("Channels", style="dim")
                for device in devices:
                    table.add_row(str(device["index"]), device["name"], str(device["channels"]))
                console.print(table)
            else:
                console.print("[yellow]![/yellow] Audio output: NO DEVICES")

    if not all_healthy:
        raise typer.Exit(code=1)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
