"""Exception types for the playback engine."""


class CollabError(Exception):
    """Base class for playback engine errors."""


class ScriptError(CollabError, ValueError):
    """Raised when a script is malformed: unknown step kind, unknown actor, bad field."""


class PlaybackCancelled(CollabError):
    """Raised by a cancelled token when the sequencer tries to sleep or write state."""
