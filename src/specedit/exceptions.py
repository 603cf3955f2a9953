"""Exception hierarchy for specedit.

All exceptions inherit from :class:`SpecEditError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specedit.exit_codes`.
CLI commands catch ``SpecEditError`` at the command boundary, print the
message and exit with the matching code, while unexpected exceptions reaching
:func:`specedit.app.main` produce a crash log.

The request runner and the connectivity prober never raise these to their
callers: their failures are stored as part of the per-request result or as an
``unreachable`` status instead.

Subclass hierarchy::

    SpecEditError (exit 1)
    +-- InvalidUsageError              (exit 2)
    +-- NoDocumentError                (exit 4)
    +-- NotFoundError                  (exit 4)
    +-- ConnectionError_               (exit 6)
    +-- SpecParseError                 (exit 7)
    |   +-- UnrecognizedStandardError
    |   +-- UnsupportedStandardError
    +-- ConfigError                    (exit 1)
"""

from specedit.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SPEC_PARSE_ERROR,
)


class SpecEditError(Exception):
    """Base exception for all specedit errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecEditError):
    """Raised for invalid CLI arguments and rejected edits (duplicates, bad definitions)."""

    exit_code = EXIT_INVALID_USAGE


class NoDocumentError(SpecEditError):
    """Raised when a section editor is used while no document is loaded."""

    exit_code = EXIT_NOT_FOUND


class NotFoundError(SpecEditError):
    """Raised when an edit targets a server, path, tag or component that does not exist."""

    exit_code = EXIT_NOT_FOUND


class ConnectionError_(SpecEditError):
    """Raised on network-level failures while importing from a URL.

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class SpecParseError(SpecEditError):
    """Raised when imported text is not valid JSON/YAML or not a valid document tree."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class UnrecognizedStandardError(SpecParseError):
    """Raised when parsed content has neither an ``openapi`` nor an ``arazzo`` key."""


class UnsupportedStandardError(SpecParseError):
    """Raised for a recognised but unimplemented standard (Arazzo)."""


class ConfigError(SpecEditError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE
