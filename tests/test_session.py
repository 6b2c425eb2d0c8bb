"""Unit tests for ChatSession."""
import asyncio

import pytest

from inklusi.conversation import (
    ChatSession,
    PlaybackResult,
    Sender,
    SessionBusyError,
    SessionEvent,
    SynthesisOutcome,
    TurnState,
    TurnStatus,
)
from inklusi.conversation.config import WELCOME_MESSAGE
from inklusi.llm import ModelReply, ModelVariant, Source

from conftest import FakeAudioEngine, FakeModelClient, FakeSynthesizer


class TestSubmit:
    """Tests for one round trip."""

    @pytest.mark.asyncio
    async def test_success_appends_user_then_bot(self, session, model_client):
        model_client.replies = ["UDL has three principles."]

        result = await session.submit("What is UDL?")

        assert result.status == TurnStatus.SUCCESS
        senders = [m.sender for m in session.messages]
        assert senders == [Sender.USER, Sender.BOT]
        assert session.messages[0].text == "What is UDL?"
        assert session.messages[1].text == "UDL has three principles."
        assert result.message is session.messages[1]
        assert not session.is_loading
        assert session.state == TurnState.IDLE

    @pytest.mark.asyncio
    async def test_user_message_visible_while_waiting(self, session, model_client):
        model_client.gate = asyncio.Event()

        task = asyncio.create_task(session.submit("Hello"))
        await asyncio.sleep(0)

        assert [m.sender for m in session.messages] == [Sender.USER]
        assert session.is_loading
        assert session.state == TurnState.SENDING

        model_client.gate.set()
        await task
        assert not session.is_loading

    @pytest.mark.asyncio
    async def test_submit_while_loading_is_rejected(self, session, model_client):
        model_client.gate = asyncio.Event()
        task = asyncio.create_task(session.submit("First"))
        await asyncio.sleep(0)

        with pytest.raises(SessionBusyError):
            await session.submit("Second")

        model_client.gate.set()
        await task
        assert [m.text for m in session.messages if m.sender == Sender.USER] == ["First"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_blank_text_ignored(self, session, model_client, text):
        assert await session.submit(text) is None
        assert session.messages == ()
        assert model_client.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text, variant", [
        ("Hello", ModelVariant.LITE),
        ("What is the latest news on inclusive schools?", ModelVariant.SEARCH),
        ("a" * 150, ModelVariant.THINKING),
    ])
    async def test_routes_variant(self, session, model_client, text, variant):
        result = await session.submit(text)
        assert model_client.calls == [(text, variant)]
        assert result.variant == variant

    @pytest.mark.asyncio
    async def test_sources_attached_to_bot_message(self, session, model_client):
        source = Source(uri="https://cast.org", title="CAST")
        model_client.replies = [ModelReply(text="See CAST.", sources=(source,))]

        result = await session.submit("latest UDL guidelines")

        assert result.message.sources == (source,)

    @pytest.mark.asyncio
    async def test_events_in_order(self, session):
        events = []
        session.set_update_callback(lambda event, message: events.append(
            (event, message.sender if message else None)
        ))

        await session.submit("Hello")

        assert events == [
            (SessionEvent.MESSAGE_ADDED, Sender.USER),
            (SessionEvent.LOADING_CHANGED, None),
            (SessionEvent.MESSAGE_ADDED, Sender.BOT),
            (SessionEvent.LOADING_CHANGED, None),
        ]

    @pytest.mark.asyncio
    async def test_cancellation_clears_loading(self, session, model_client):
        model_client.gate = asyncio.Event()
        task = asyncio.create_task(session.submit("Hello"))
        await asyncio.sleep(0)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert not session.is_loading
        assert session.state == TurnState.IDLE


class TestGenerationFailure:
    """Tests for model client failures."""

    @pytest.mark.asyncio
    async def test_request_error_becomes_error_message(self, failing_model_client, synthesizer):
        session = ChatSession(failing_model_client, synthesizer, welcome_message=None)

        result = await session.submit("Hello")

        assert result.status == TurnStatus.FAILURE
        assert result.error == "quota exceeded"
        assert result.message.sender == Sender.ERROR
        assert result.message.text == "An error occurred: quota exceeded"
        assert [m.sender for m in session.messages] == [Sender.USER, Sender.ERROR]
        assert not session.is_loading
        assert synthesizer.calls == []

    @pytest.mark.asyncio
    async def test_unexpected_error_wrapped(self):
        session = ChatSession(FakeModelClient([RuntimeError("boom")]), welcome_message=None)

        result = await session.submit("Hello")

        assert result.status == TurnStatus.FAILURE
        assert result.message.text == "An error occurred: boom"

    @pytest.mark.asyncio
    async def test_empty_error_uses_default_reason(self):
        session = ChatSession(FakeModelClient([RuntimeError()]), welcome_message=None)

        result = await session.submit("Hello")

        assert result.message.text == "An error occurred: Unable to reach the AI."
        assert result.error == "Unable to reach the AI."

    @pytest.mark.asyncio
    async def test_session_usable_after_failure(self, failing_model_client):
        session = ChatSession(failing_model_client, welcome_message=None)

        await session.submit("First")
        result = await session.submit("Second")

        assert result.status == TurnStatus.SUCCESS
        assert [m.sender for m in session.messages] == [
            Sender.USER, Sender.ERROR, Sender.USER, Sender.BOT,
        ]

    @pytest.mark.asyncio
    async def test_listener_error_on_error_message_clears_loading(self, failing_model_client):
        session = ChatSession(failing_model_client, welcome_message=None)

        def listener(event, message):
            if event == SessionEvent.MESSAGE_ADDED and message.sender == Sender.ERROR:
                raise RuntimeError("render failed")

        session.set_update_callback(listener)

        with pytest.raises(RuntimeError, match="render failed"):
            await session.submit("Hello")

        assert not session.is_loading
        assert session.state == TurnState.IDLE

        session.set_update_callback(None)
        result = await session.submit("Again")
        assert result.status == TurnStatus.SUCCESS

    @pytest.mark.asyncio
    async def test_failure_is_logged(self, failing_model_client):
        logs = []
        session = ChatSession(failing_model_client, welcome_message=None)
        session.set_debug_callback(lambda level, component, message: logs.append((level, component)))

        await session.submit("Hello")

        assert ("error", "LLM") in logs


class TestSynthesis:
    """Tests for best-effort speech."""

    @pytest.mark.asyncio
    async def test_audio_available_after_success(self, session, synthesizer, model_client):
        model_client.replies = ["Spoken reply"]

        result = await session.submit("Hello")

        assert result.synthesis.outcome == SynthesisOutcome.AVAILABLE
        assert result.audio_available
        assert session.is_audio_available(result.message.id)
        assert synthesizer.calls == ["Spoken reply"]

    @pytest.mark.asyncio
    async def test_synthesis_failure_degrades_to_text(self, model_client, failing_synthesizer, audio_engine):
        logs = []
        session = ChatSession(model_client, failing_synthesizer, audio_engine, welcome_message=None)
        session.set_debug_callback(lambda level, component, message: logs.append((level, message)))

        result = await session.submit("Hello")

        assert result.status == TurnStatus.SUCCESS
        assert result.synthesis.outcome == SynthesisOutcome.DEGRADED
        assert result.synthesis.error == "TTS service unavailable"
        assert not session.is_audio_available(result.message.id)
        assert [m.sender for m in session.messages] == [Sender.USER, Sender.BOT]
        assert any(level == "warning" and "Failed to generate TTS audio" in msg for level, msg in logs)

    @pytest.mark.asyncio
    async def test_undecodable_audio_degrades(self, model_client, audio_engine):
        session = ChatSession(model_client, FakeSynthesizer(audio=b"\x00"), audio_engine, welcome_message=None)

        result = await session.submit("Hello")

        assert result.synthesis.outcome == SynthesisOutcome.DEGRADED
        assert len(session.store) == 0

    @pytest.mark.asyncio
    async def test_unexpected_synthesis_error_degrades(self, model_client):
        session = ChatSession(model_client, FakeSynthesizer(error=KeyError("voice")), welcome_message=None)

        result = await session.submit("Hello")

        assert result.status == TurnStatus.SUCCESS
        assert result.synthesis.outcome == SynthesisOutcome.DEGRADED

    @pytest.mark.asyncio
    async def test_no_synthesizer_skips(self, model_client):
        session = ChatSession(model_client, welcome_message=None)

        result = await session.submit("Hello")

        assert result.synthesis.outcome == SynthesisOutcome.SKIPPED
        assert not session.audio_enabled

    @pytest.mark.asyncio
    async def test_audio_stored_without_engine(self, model_client, synthesizer):
        session = ChatSession(model_client, synthesizer, audio_engine=None, welcome_message=None)

        result = await session.submit("Hello")

        assert session.is_audio_available(result.message.id)
        assert session.store.get(result.message.id).sample_rate == 24000
        assert session.play(result.message.id) == PlaybackResult.NO_ENGINE


class TestStart:
    """Tests for the welcome message."""

    @pytest.mark.asyncio
    async def test_welcome_message_with_audio(self, model_client, synthesizer, audio_engine):
        session = ChatSession(model_client, synthesizer, audio_engine)

        result = await session.start()

        assert result.outcome == SynthesisOutcome.AVAILABLE
        assert len(session.messages) == 1
        welcome = session.messages[0]
        assert welcome.sender == Sender.BOT
        assert welcome.text == WELCOME_MESSAGE
        assert session.is_audio_available(welcome.id)
        assert model_client.calls == []

    @pytest.mark.asyncio
    async def test_welcome_updated_event_when_audio_ready(self, model_client, synthesizer):
        session = ChatSession(model_client, synthesizer)
        events = []
        session.set_update_callback(lambda event, message: events.append(event))

        await session.start()

        assert events == [SessionEvent.MESSAGE_ADDED, SessionEvent.MESSAGE_UPDATED]

    @pytest.mark.asyncio
    async def test_welcome_without_speech(self, model_client):
        session = ChatSession(model_client)

        result = await session.start()

        assert result.outcome == SynthesisOutcome.SKIPPED
        assert len(session.messages) == 1

    @pytest.mark.asyncio
    async def test_no_welcome(self, session):
        assert await session.start() is None
        assert session.messages == ()

    @pytest.mark.asyncio
    async def test_start_twice(self, session):
        await session.start()
        with pytest.raises(RuntimeError, match="already started"):
            await session.start()


class TestPlaybackDelegation:
    """Tests for play/stop through the session."""

    @pytest.mark.asyncio
    async def test_play_and_stop(self, session, audio_engine):
        result = await session.submit("Hello")
        message_id = result.message.id

        assert session.play(message_id) == PlaybackResult.STARTED
        assert session.conversation.get(message_id).audio_playing
        assert audio_engine.handles[0].started

        assert session.stop(message_id) == PlaybackResult.STOPPED
        assert not session.conversation.get(message_id).audio_playing

    @pytest.mark.asyncio
    async def test_play_emits_update(self, session):
        result = await session.submit("Hello")
        updates = []
        session.set_update_callback(
            lambda event, message: updates.append((event, message.audio_playing))
        )

        session.play(result.message.id)
        session.stop(result.message.id)

        assert updates == [
            (SessionEvent.MESSAGE_UPDATED, True),
            (SessionEvent.MESSAGE_UPDATED, False),
        ]

    @pytest.mark.asyncio
    async def test_play_user_message_is_noop(self, session):
        await session.submit("Hello")
        user_message = session.messages[0]

        assert session.play(user_message.id) == PlaybackResult.NO_AUDIO
        assert not any(m.audio_playing for m in session.messages)


class TestClose:
    """Tests for releasing session resources."""

    @pytest.mark.asyncio
    async def test_close_releases_everything(self, session, model_client, synthesizer, audio_engine):
        result = await session.submit("Hello")
        session.play(result.message.id)

        await session.close()

        assert audio_engine.handles[0].stopped
        assert audio_engine.closed
        assert synthesizer.closed
        assert model_client.closed
        assert len(session.store) == 0
        assert not session.playback.is_playing

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, session, model_client):
        await session.close()
        model_client.closed = False
        await session.close()
        assert model_client.closed is False

    @pytest.mark.asyncio
    async def test_context_manager(self, model_client, audio_engine):
        async with ChatSession(model_client, audio_engine=audio_engine, welcome_message=None) as session:
            await session.submit("Hello")
        assert model_client.closed
        assert audio_engine.closed

    @pytest.mark.asyncio
    async def test_synthesizer_close_error_logged(self, model_client, audio_engine):
        synthesizer = FakeSynthesizer()
        logs = []

        async def broken_close():
            raise RuntimeError("connection reset")

        synthesizer.close = broken_close
        session = ChatSession(model_client, synthesizer, audio_engine, welcome_message=None)
        session.set_debug_callback(lambda level, component, message: logs.append((level, component)))
        await session.submit("Hello")

        await session.close()

        assert ("error", "TTS") in logs
        assert model_client.closed
        assert audio_engine.closed
        assert len(session.store) == 0

    @pytest.mark.asyncio
    async def test_engine_close_error_logged(self, model_client):
        engine = FakeAudioEngine()
        logs = []

        def broken_close():
            raise RuntimeError("device gone")

        engine.close = broken_close
        session = ChatSession(model_client, audio_engine=engine, welcome_message=None)
        session.set_debug_callback(lambda level, component, message: logs.append((level, component)))

        await session.close()

        assert ("error", "Audio") in logs
        assert model_client.closed
