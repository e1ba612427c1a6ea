"""Gateway to the OpenAI chat completion and image generation APIs"""
import logging
from typing import Any, Dict, List, Literal, Optional, Sequence

import openai
from openai import AsyncOpenAI

from ..core.config import settings
from ..core.errors import (
    DreamServiceError,
    MissingCredentialError,
    AuthError,
    RateLimitError,
    QuotaError,
    ContentPolicyError,
    GatewayError,
)
from ..models.conversation import Message

logger = logging.getLogger(__name__)

Operation = Literal["analysis", "image", "connection"]

# Style keyword used for the cartoon, keyed by the first selected emotion
EMOTION_STYLES: Dict[str, str] = {
    "Happy": "joyful cartoon",
    "Excited": "energetic cartoon scene",
    "Peaceful": "calm peaceful cartoon",
    "Anxious": "gentle cartoon (avoiding scary elements)",
    "Scared": "gentle cartoon (avoiding frightening elements)",
    "Confused": "whimsical cartoon",
    "Sad": "gentle melancholy cartoon",
    "Angry": "expressive cartoon",
    "Curious": "adventurous cartoon",
    "Nostalgic": "warm nostalgic cartoon",
    "Empowered": "confident cartoon",
    "Vulnerable": "gentle caring cartoon",
}
DEFAULT_STYLE = "cheerful cartoon"
STYLE_SUFFIX = "simple cartoon drawing, crayon or colored pencil texture, simple backgrounds"

MISSING_KEY_MESSAGE = (
    "API key is missing. Please add OPENAI_API_KEY to your environment or .env file."
)

# Human-readable messages per operation and failure kind
_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "analysis": {
        "auth": "Invalid API key. Please check your OPENAI_API_KEY setting.",
        "rate_limit": "API rate limit exceeded. Please try again later.",
        "quota": "OpenAI API quota exceeded. Please check your billing.",
        "other": "Dream analysis failed: {detail}",
    },
    "image": {
        "auth": "Invalid API key for image generation.",
        "rate_limit": "Image generation rate limit exceeded. Please try again later.",
        "quota": "OpenAI API quota exceeded for image generation.",
        "policy": "The dream content cannot be visualized due to content policy restrictions.",
        "other": "Image generation failed: {detail}",
    },
    "connection": {
        "auth": "Invalid API key. Please check your OPENAI_API_KEY setting.",
        "rate_limit": "API rate limit exceeded. Please try again later.",
        "quota": "OpenAI API quota exceeded. Please check your billing.",
        "other": "API connection failed: {detail}",
    },
}


def get_emotion_style(emotions: Sequence[str]) -> str:
    """Style keyword for the first emotion, or the cheerful default"""
    if not emotions:
        return DEFAULT_STYLE
    return EMOTION_STYLES.get(emotions[0], DEFAULT_STYLE)


def build_visualization_prompt(
    dream_text: str,
    symbols: Sequence[str],
    emotions: Sequence[str]
) -> str:
    """
    Build the image prompt for a dream

    The prompt always reads: dream text, then the featured symbols (if any),
    then the style chosen from the first emotion.
    """
    symbol_text = f", featuring {', '.join(symbols)}" if symbols else ""
    style = get_emotion_style(emotions)
    return (
        f"Children's cartoon illustration depicting: {dream_text}{symbol_text}. "
        f"Style: {style}, {STYLE_SUFFIX}"
    )


def classify_error(exc: Exception, operation: Operation) -> DreamServiceError:
    """Rewrap any failure from the OpenAI SDK into the gateway taxonomy"""
    if isinstance(exc, DreamServiceError):
        return exc

    messages = _ERROR_MESSAGES[operation]
    status_code = getattr(exc, "status_code", None)
    code = getattr(exc, "code", None)

    if code == "insufficient_quota":
        return QuotaError(messages["quota"])
    if isinstance(exc, openai.AuthenticationError) or status_code == 401:
        return AuthError(messages["auth"])
    if isinstance(exc, openai.RateLimitError) or status_code == 429:
        return RateLimitError(messages["rate_limit"])
    if operation == "image" and (
        code == "content_policy_violation"
        or isinstance(exc, openai.BadRequestError)
        or status_code == 400
    ):
        return ContentPolicyError(messages["policy"])

    detail = getattr(exc, "message", None) or str(exc) or exc.__class__.__name__
    return GatewayError(messages["other"].format(detail=detail))


class AIGateway:
    """Stateless request/response wrapper around the OpenAI APIs"""

    def __init__(self, api_key: Optional[str] = None, client: Optional[Any] = None):
        self.api_key = api_key if api_key is not None else settings.OPENAI_API_KEY
        self.client = client

    def _get_client(self) -> Any:
        """Return the SDK client, failing before any network call without a key"""
        if not self.api_key:
            raise MissingCredentialError(MISSING_KEY_MESSAGE)
        if self.client is None:
            self.client = AsyncOpenAI(api_key=self.api_key)
        return self.client

    async def complete_conversation(self, messages: List[Message]) -> str:
        """
        Send a full message history to the completion service

        Args:
            messages: Ordered system/user/assistant messages, sent verbatim

        Returns:
            The assistant's reply text
        """
        try:
            client = self._get_client()
            response = await client.chat.completions.create(
                model=settings.COMPLETION_MODEL,
                messages=[message.model_dump() for message in messages],
                max_tokens=settings.COMPLETION_MAX_TOKENS,
                temperature=settings.COMPLETION_TEMPERATURE
            )
            text = response.choices[0].message.content if response.choices else None
            if not text:
                raise GatewayError("Dream analysis failed: no content returned from the language model")
            return text
        except Exception as e:
            error = classify_error(e, "analysis")
            logger.warning("Dream analysis request failed: %s", error.message)
            raise error from e

    async def generate_visualization(
        self,
        dream_text: str,
        symbols: Sequence[str],
        emotions: Sequence[str]
    ) -> str:
        """
        Render a cartoon of the dream

        Args:
            dream_text: The dream as the user wrote it
            symbols: Symbol labels to feature in the picture
            emotions: Emotion labels; only the first one picks the style

        Returns:
            URL of the generated image
        """
        prompt = build_visualization_prompt(dream_text, symbols, emotions)
        try:
            client = self._get_client()
            logger.info("Cartoon prompt: %s", prompt)
            response = await client.images.generate(
                model=settings.IMAGE_MODEL,
                prompt=prompt,
                size=settings.IMAGE_SIZE,
                quality=settings.IMAGE_QUALITY,
                n=1
            )
            url = response.data[0].url if response.data else None
            if not url:
                raise GatewayError("Image generation failed: no image returned")
            return url
        except Exception as e:
            error = classify_error(e, "image")
            logger.warning("Image generation request failed: %s", error.message)
            raise error from e

    async def test_connection(self) -> str:
        """Ask for a tiny fixed reply to check the key and connectivity"""
        try:
            client = self._get_client()
            response = await client.chat.completions.create(
                model=settings.CONNECTION_TEST_MODEL,
                messages=[{"role": "user", "content": "Say 'Connection successful!'"}],
                max_tokens=10,
                temperature=0
            )
            reply = response.choices[0].message.content
            logger.info("OpenAI API response: %s", reply)
            return reply or ""
        except Exception as e:
            error = classify_error(e, "connection")
            logger.warning("OpenAI API connection test failed: %s", error.message)
            raise error from e


# Global instance
ai_gateway = AIGateway()
