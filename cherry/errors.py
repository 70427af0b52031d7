"""
Root of the Cherry exception hierarchy.

Every error the front end raises on purpose derives from `CherryError`, so
callers can separate compiler failures from programming errors.
"""


class CherryError(Exception):
    """Base class for all errors raised by the Cherry front end."""


class ConfigError(CherryError):
    """Raised when a configuration file is malformed."""


class OrchestratorInterruptedError(CherryError):
    """
    Raised or recorded when waiting on scan tasks is cut short.

    The orchestrator records it as the failure of every file whose task had
    not finished; results that did finish are kept.
    """
