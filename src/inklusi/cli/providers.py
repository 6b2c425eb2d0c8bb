"""Provider factory functions for CLI.

Centralizes creation of the model client, speech synthesizer, audio engine
and chat session from environment variables. Hides configuration details
from command implementations.
"""

import os
from typing import Any

import typer
from rich.console import Console

from ..audio import AudioEngine, create_audio_engine
from ..conversation import ChatSession
from ..llm import ModelClient, ModelVariant, create_model_client
from ..speech import SpeechSynthesizer, create_speech_synthesizer

_console = Console()

_MODEL_ENV_VARS = {
    ModelVariant.LITE: "INKLUSI_LITE_MODEL",
    ModelVariant.SEARCH: "INKLUSI_SEARCH_MODEL",
    ModelVariant.THINKING: "INKLUSI_THINKING_MODEL",
}

_TRUTHY = {"1", "true", "yes", "on"}


def env_flag(name: str, default: bool) -> bool:
    """Read a boolean environment variable."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUTHY


def get_api_key(console: Console | None = None) -> str:
    """Read the Gemini API key.

    Raises:
        SystemExit: If neither GEMINI_API_KEY nor GOOGLE_API_KEY is set
    """
    con = console or _console
    api_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
    if not api_key:
        con.print("[red]Error: GEMINI_API_KEY not set in environment[/red]")
        raise typer.Exit(code=1)
    return api_key


def get_model_client(console: Console | None = None) -> ModelClient:
    """Create the Gemini model client from environment variables.

    Environment variables:
        GEMINI_API_KEY: Gemini API key (required)
        INKLUSI_LITE_MODEL: Model for the lite variant (default: gemini-2.5-flash-lite)
        INKLUSI_SEARCH_MODEL: Model for the search variant (default: gemini-2.5-flash)
        INKLUSI_THINKING_MODEL: Model for the thinking variant (default: gemini-2.5-pro)
    """
    models = {
        variant: os.environ[env_var]
        for variant, env_var in _MODEL_ENV_VARS.items()
        if os.getenv(env_var)
    }
    return create_model_client("gemini", api_key=get_api_key(console), models=models)


def get_synthesizer(console: Console | None = None) -> SpeechSynthesizer | None:
    """Create the speech synthesizer, or None when speech is disabled.

    Environment variables:
        INKLUSI_SPEECH: Enable speech synthesis (default: 1)
        INKLUSI_TTS_MODEL: TTS model (default: gemini-2.5-flash-preview-tts)
        INKLUSI_TTS_VOICE: Prebuilt voice (default: Kore)
    """
    if not env_flag("INKLUSI_SPEECH", True):
        return None

    config: dict[str, Any] = {"api_key": get_api_key(console)}
    if os.getenv("INKLUSI_TTS_MODEL"):
        config["model"] = os.environ["INKLUSI_TTS_MODEL"]
    if os.getenv("INKLUSI_TTS_VOICE"):
        config["voice"] = os.environ["INKLUSI_TTS_VOICE"]
    return create_speech_synthesizer("gemini", **config)


def get_audio_engine(
    backend: str | None = None,
    console: Console | None = None,
) -> AudioEngine | None:
    """Create the audio engine, or None when no output is available.

    Environment variables:
        INKLUSI_AUDIO_BACKEND: sounddevice or none (default: sounddevice)
    """
    con = console or _console
    backend = backend or os.getenv("INKLUSI_AUDIO_BACKEND", "sounddevice")
    try:
        return create_audio_engine(backend)
    except ValueError as e:
        con.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    except (ImportError, OSError) as e:
        # PortAudio missing on this machine
        con.print(f"[yellow]Warning: audio output unavailable ({e}), playback disabled[/yellow]")
        return None


def build_session(
    speech: bool = True,
    audio_backend: str | None = None,
    console: Console | None = None,
) -> ChatSession:
    """Assemble a ChatSession from environment configuration."""
    model_client = get_model_client(console)
    synthesizer = get_synthesizer(console) if speech else None
    engine = get_audio_engine(audio_backend, console) if synthesizer is not None else None
    if synthesizer is not None and engine is None:
        con = console or _console
        con.print("[dim]Speech will be generated but cannot be played[/dim]")
    return ChatSession(
        model_client=model_client,
        synthesizer=synthesizer,
        audio_engine=engine,
    )
