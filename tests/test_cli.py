"""Tests for the command-line interface."""
import pytest
import typer
from typer.testing import CliRunner

from inklusi.cli.app import app
from inklusi.cli.providers import (
    build_session,
    env_flag,
    get_audio_engine,
    get_model_client,
    get_synthesizer,
)
from inklusi.llm import GeminiModelClient, ModelVariant
from inklusi.speech import GeminiSpeechSynthesizer

runner = CliRunner()


@pytest.fixture
def gemini_env(monkeypatch):
    """Minimal environment for building a session without audio output."""
    monkeypatch.setenv("GEMINI_API_KEY", "fake-key")
    monkeypatch.setenv("INKLUSI_AUDIO_BACKEND", "none")
    monkeypatch.delenv("INKLUSI_SPEECH", raising=False)
    monkeypatch.delenv("INKLUSI_TTS_VOICE", raising=False)
    monkeypatch.delenv("INKLUSI_LITE_MODEL", raising=False)


class TestRouteCommand:
    """Tests for `inklusi route`."""

    @pytest.mark.parametrize("text, expected", [
        ("Hello", "flash-lite"),
        ("What is the latest news on X?", "flash-search"),
        ("a" * 150, "pro-thinking"),
    ])
    def test_prints_variant(self, text, expected):
        result = runner.invoke(app, ["route", text])
        assert result.exit_code == 0
        assert result.output.strip() == expected


class TestHealthCommand:
    """Tests for `inklusi health`."""

    def test_healthy_without_audio(self, gemini_env):
        result = runner.invoke(app, ["health"])
        assert result.exit_code == 0
        assert "Gemini API key: SET" in result.output
        assert "Audio output: DISABLED" in result.output

    def test_missing_key_fails(self, gemini_env, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY")
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        result = runner.invoke(app, ["health"])
        assert result.exit_code == 1
        assert "NOT SET" in result.output


class TestProviders:
    """Tests for environment-based construction."""

    @pytest.mark.parametrize("value, expected", [
        ("1", True), ("true", True), ("YES", True), ("0", False), ("off", False), ("", True),
    ])
    def test_env_flag(self, monkeypatch, value, expected):
        monkeypatch.setenv("INKLUSI_TEST_FLAG", value)
        assert env_flag("INKLUSI_TEST_FLAG", True) is expected

    def test_env_flag_default(self, monkeypatch):
        monkeypatch.delenv("INKLUSI_TEST_FLAG", raising=False)
        assert env_flag("INKLUSI_TEST_FLAG", False) is False

    def test_model_client_from_env(self, gemini_env, monkeypatch):
        monkeypatch.setenv("INKLUSI_LITE_MODEL", "custom-lite")
        client = get_model_client()
        assert isinstance(client, GeminiModelClient)
        assert client.model_for(ModelVariant.LITE) == "custom-lite"

    def test_missing_key_exits(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        with pytest.raises(typer.Exit):
            get_model_client()

    def test_synthesizer_voice_from_env(self, gemini_env, monkeypatch):
        monkeypatch.setenv("INKLUSI_TTS_VOICE", "Puck")
        synthesizer = get_synthesizer()
        assert isinstance(synthesizer, GeminiSpeechSynthesizer)
        assert synthesizer.voice == "Puck"

    def test_speech_disabled(self, gemini_env, monkeypatch):
        monkeypatch.setenv("INKLUSI_SPEECH", "0")
        assert get_synthesizer() is None

    def test_audio_disabled(self, gemini_env):
        assert get_audio_engine() is None

    def test_unknown_audio_backend_exits(self, gemini_env):
        with pytest.raises(typer.Exit):
            get_audio_engine("pyaudio")

    def test_build_session_text_only(self, gemini_env):
        session = build_session(speech=False)
        assert not session.audio_enabled
        assert session.playback.engine is None

    def test_build_session_with_speech(self, gemini_env):
        session = build_session(speech=True)
        assert session.audio_enabled
        assert session.playback.engine is None
