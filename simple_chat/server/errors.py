"""Error types raised inside the chat server core."""


class ChatError(Exception):
    """Base class for chat server errors."""


class ProtocolError(ChatError):
    """The peer broke the wire protocol (e.g. first frame is not a username)."""


class PersistenceError(ChatError):
    """The message log could not be written or read."""


class DeliveryError(ChatError):
    """A frame could not be handed to a recipient's outbound queue."""


class TransportClosed(ChatError):
    """The underlying connection reached EOF or failed."""
