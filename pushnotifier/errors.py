"""Exception hierarchy for Pushover Notifier.

Validation errors block a user action.  Persistence errors are reported
and defaults are substituted.  Notification errors end a timer session
in the FAILED state.  None of them is fatal to the process.
"""


class NotifierError(Exception):
    """Base class for every error raised by the application."""


class ValidationError(NotifierError):
    """User input was rejected before any state changed."""


class PersistenceError(NotifierError):
    """Reading, writing or protecting the settings file failed."""


class SecretBoxError(PersistenceError):
    """A secret could not be wrapped or unwrapped."""


class NotificationError(NotifierError):
    """The push notification could not be delivered over the network."""
