from typing import List, Optional, Sequence
from datetime import datetime
import logging
from returns.pipeline import is_successful
from returns.result import Failure, Result, Success
from ..core.errors import (
    ConversationError,
    ConversationBusyError,
    EntryNotFoundError,
)
from ..models.conversation import (
    ConversationMode,
    ConversationState,
    DisplayEntry,
    Message,
)
from ..models.dream import EMOTIONS, SYMBOLS, SubmitOutcome, VisualizeOutcome
from .ai_gateway import AIGateway, ai_gateway
from .websocket_manager import ConnectionManager, manager

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a Jungian dream analyst. Provide insightful interpretations of dreams "
    "based on Jungian psychology, focusing on archetypes, symbols, and the collective "
    "unconscious. Maintain context of our conversation for follow-up questions."
)

NONE_SPECIFIED = "None specified"

APOLOGY = "I apologize, but I couldn't analyze your message right now."


def build_initial_prompt(dream_text: str, symbols: Sequence[str], emotions: Sequence[str]) -> str:
    """User prompt for the first submission: dream, then symbols, then emotions"""
    symbol_text = ", ".join(symbols) if symbols else NONE_SPECIFIED
    emotion_text = ", ".join(emotions) if emotions else NONE_SPECIFIED
    return f"""Please analyze this dream from a Jungian perspective:

Dream: {dream_text}

Symbols noticed: {symbol_text}
Emotions felt: {emotion_text}

Please provide a thoughtful analysis focusing on archetypal meanings and psychological insights."""


def _failure_message(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc) or exc.__class__.__name__


def _toggle(selected: List[str], label: str) -> List[str]:
    if label in selected:
        return [item for item in selected if item != label]
    return [*selected, label]


class DreamConversationManager:
    """
    Owns the dream conversation: message history, display entries,
    tag selection and loading flags.

    All state changes go through the methods below. The first submit moves
    the conversation from collecting tags to free-form follow-up chat; only
    reset() moves it back.
    """

    def __init__(
        self,
        gateway: Optional[AIGateway] = None,
        notifier: Optional[ConnectionManager] = None
    ):
        self.gateway = gateway or ai_gateway
        self.notifier = notifier or manager
        self.state = ConversationState()

    def get_state(self) -> ConversationState:
        """Get the current conversation state"""
        return self.state

    def _touch(self):
        self.state.updated_at = datetime.now()

    def _ensure_collecting_tags(self):
        if self.state.mode != ConversationMode.COLLECTING_TAGS:
            raise ConversationError("Tags can only be selected before the dream is submitted")

    def set_draft(self, text: str) -> str:
        """Store the pending input text"""
        self.state.draft_text = text
        self._touch()
        return text

    def toggle_emotion(self, emotion: str) -> List[str]:
        """Select or deselect an emotion tag"""
        self._ensure_collecting_tags()
        if emotion not in EMOTIONS:
            raise ConversationError(f"Unknown emotion: {emotion}")
        self.state.selected_emotions = _toggle(self.state.selected_emotions, emotion)
        self._touch()
        return self.state.selected_emotions

    def toggle_symbol(self, symbol: str) -> List[str]:
        """Select or deselect a symbol tag"""
        self._ensure_collecting_tags()
        if symbol not in SYMBOLS:
            raise ConversationError(f"Unknown symbol: {symbol}")
        self.state.selected_symbols = _toggle(self.state.selected_symbols, symbol)
        self._touch()
        return self.state.selected_symbols

    async def _request_analysis(self, messages: List[Message]) -> Result[str, Exception]:
        try:
            return Success(await self.gateway.complete_conversation(messages))
        except Exception as exc:
            return Failure(exc)

    async def _request_image(self, entry: DisplayEntry) -> Result[str, Exception]:
        try:
            return Success(await self.gateway.generate_visualization(
                entry.dream_text or "",
                entry.symbols,
                entry.emotions
            ))
        except Exception as exc:
            return Failure(exc)

    async def submit(
        self,
        raw_text: str,
        emotions: Optional[Sequence[str]] = None,
        symbols: Optional[Sequence[str]] = None
    ) -> SubmitOutcome:
        """
        Submit a dream (first turn) or a follow-up question

        Args:
            raw_text: Text typed by the user
            emotions: Emotion tags; defaults to the current selection.
                Ignored on follow-ups.
            symbols: Symbol tags; defaults to the current selection.
                Ignored on follow-ups.

        Returns:
            SubmitOutcome with the user's entry and the assistant's reply,
            which is an apology carrying the error when the request failed
        """
        if not raw_text or not raw_text.strip():
            raise ConversationError("Cannot submit an empty message")
        if self.state.is_loading:
            raise ConversationBusyError("A message is already being analyzed")

        state = self.state
        is_first = state.mode == ConversationMode.COLLECTING_TAGS

        if is_first:
            current_emotions = list(state.selected_emotions if emotions is None else emotions)
            current_symbols = list(state.selected_symbols if symbols is None else symbols)
            unknown = [e for e in current_emotions if e not in EMOTIONS] + \
                [s for s in current_symbols if s not in SYMBOLS]
            if unknown:
                raise ConversationError(f"Unknown tags: {', '.join(unknown)}")
        else:
            # Follow-ups never resend tags
            current_emotions = []
            current_symbols = []

        user_entry = DisplayEntry(
            text=raw_text,
            author="user",
            emotions=current_emotions,
            symbols=current_symbols
        )
        state.entries.append(user_entry)
        state.draft_text = ""

        if is_first:
            logger.info("Analyzing initial dream for conversation %s", state.id)
            state.selected_emotions = []
            state.selected_symbols = []
            state.mode = ConversationMode.IN_CONVERSATION
            state.opening_messages = [
                Message(role="system", content=SYSTEM_PROMPT),
                Message(
                    role="user",
                    content=build_initial_prompt(raw_text, current_symbols, current_emotions)
                )
            ]
            payload = list(state.opening_messages)
        else:
            logger.info("Processing follow-up question for conversation %s", state.id)
            # History stays empty until a reply arrives; resend the opening turn
            context = state.history or state.opening_messages
            payload = [*context, Message(role="user", content=raw_text)]

        state.is_loading = True
        self._touch()

        try:
            await self.notifier.broadcast_entry_added(user_entry)
            await self.notifier.broadcast_loading(True)
            result = await self._request_analysis(payload)
        finally:
            state.is_loading = False

        if state is not self.state:
            logger.info("Conversation %s was reset before its analysis arrived", state.id)
            return SubmitOutcome(
                success=False,
                user_entry=user_entry,
                error="The conversation was reset before the analysis completed."
            )

        await self.notifier.broadcast_loading(False)

        if is_successful(result):
            analysis = result.unwrap()
            state.history = [*payload, Message(role="assistant", content=analysis)]
            assistant_entry = DisplayEntry(
                text=analysis,
                author="assistant",
                is_initial_analysis=is_first,
                dream_text=raw_text if is_first else None,
                emotions=current_emotions,
                symbols=current_symbols
            )
            error = None
            logger.info("Analysis complete with context preserved (%d messages)", len(state.history))
        else:
            error = _failure_message(result.failure())
            assistant_entry = DisplayEntry(text=f"{APOLOGY} {error}", author="assistant")
            logger.warning("Analysis failed: %s", error)

        state.entries.append(assistant_entry)
        self._touch()
        await self.notifier.broadcast_entry_added(assistant_entry)

        return SubmitOutcome(
            success=error is None,
            user_entry=user_entry,
            assistant_entry=assistant_entry,
            error=error
        )

    async def visualize(self, entry_id: str) -> VisualizeOutcome:
        """
        Generate a cartoon image for the initial dream analysis entry

        On failure the entry keeps its analysis text and gets an image_error.
        """
        state = self.state
        entry = state.find_entry(entry_id)
        if entry is None:
            raise EntryNotFoundError(f"No entry found with id {entry_id}")
        if entry.author != "assistant" or not entry.is_initial_analysis:
            raise ConversationError("Only the initial dream analysis can be visualized")
        if entry.image_url or entry.image_error:
            raise ConversationError("This dream has already been visualized")
        if entry_id in state.generating_images:
            raise ConversationBusyError("An image is already being generated for this entry")

        state.generating_images.add(entry_id)
        logger.info("Generating cartoon dream visualization for entry %s", entry_id)

        try:
            await self.notifier.broadcast_loading(True, entry_id)
            result = await self._request_image(entry)
        finally:
            state.generating_images.discard(entry_id)

        if is_successful(result):
            entry.image_url = result.unwrap()
            error = None
        else:
            error = _failure_message(result.failure())
            entry.image_error = error
            logger.warning("Image generation failed: %s", error)

        if state is self.state:
            self._touch()
            await self.notifier.broadcast_loading(False, entry_id)
            await self.notifier.broadcast_entry_updated(entry)

        return VisualizeOutcome(success=error is None, entry=entry, error=error)

    async def reset(self) -> ConversationState:
        """Start a new dream: clear history, entries, selections and flags"""
        self.state = ConversationState()
        await self.notifier.broadcast_reset(self.state.id)
        return self.state


# Global instance
conversation_manager = DreamConversationManager()
