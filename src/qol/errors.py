"""Error types raised by qol.

Every failure surfaced to the command line derives from QolError so the
CLI can report it and exit non-zero without a traceback.
"""

from typing import Optional


class QolError(Exception):
    """Base class for all qol errors."""


class ConfigError(QolError):
    """The user configuration file could not be parsed."""


class SchemaLoadError(QolError):
    """The schema file is missing or unreadable."""


class SchemaApplyError(QolError):
    """A statement in the schema batch failed.

    Statements that ran before the failing one stay applied.
    """


class DatabaseConnectionError(QolError):
    """The database file could not be opened."""


class NotFoundError(QolError):
    """A lookup matched zero rows."""


class ConstraintError(QolError):
    """A write violated a uniqueness or other storage constraint."""


class QueryError(QolError):
    """Any other storage failure while executing a statement."""


class GitCommandError(QolError):
    """git is not installed or exited with a non-zero status."""

    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr
