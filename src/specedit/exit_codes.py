"""Process exit codes used by specedit commands.

Every :class:`~specedit.exceptions.SpecEditError` subclass carries one of
these, so a wrapping script can tell a rejected import from a missing
document by the status alone::

    $ specedit import swagger2.json
    $ echo $?
    7
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments, or an edit was rejected."""

EXIT_NOT_FOUND = 4
"""No document is loaded, or the requested path, server, tag or component does not exist."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred while fetching a document (timeout, DNS failure, connection refused)."""

EXIT_SPEC_PARSE_ERROR = 7
"""The imported text is not valid JSON/YAML, or not a supported OpenAPI document."""
