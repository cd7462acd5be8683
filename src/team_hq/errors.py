"""Exception types for team-hq."""


class HQError(RuntimeError):
    """Base error for expected operational failures."""


class ConfigError(HQError):
    """The agent roster configuration could not be read."""


class StateError(HQError):
    """The persisted sync state could not be read or written."""


class DeliveryError(HQError):
    """A chat-log message was not accepted by the remote endpoint."""


class SessionNotFoundError(HQError):
    """The requested session file does not exist."""


class TakeawayNotFoundError(HQError):
    """No takeaway with the requested id exists."""


class TakeawayStoreError(HQError):
    """The takeaways file could not be read."""
