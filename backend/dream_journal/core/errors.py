"""Exceptions raised by the AI gateway and the dream conversation manager"""


class DreamServiceError(Exception):
    """Base class for failures talking to the remote AI services.

    Every subclass carries a message that can be shown to the user as-is.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingCredentialError(DreamServiceError):
    """No API key configured; raised before any network call"""


class AuthError(DreamServiceError):
    """The provider rejected the API key"""


class RateLimitError(DreamServiceError):
    """The provider is throttling requests"""


class QuotaError(DreamServiceError):
    """The account's quota or billing limit is exhausted"""


class ContentPolicyError(DreamServiceError):
    """The image prompt was refused for content policy reasons"""


class GatewayError(DreamServiceError):
    """Any other failure, including network errors"""


class ConversationError(ValueError):
    """A conversation operation was called in a state that does not allow it"""


class ConversationBusyError(ConversationError):
    """A request for the same conversation (or entry) is already in flight"""


class EntryNotFoundError(ConversationError):
    """No display entry with the given id exists"""
