"""specedit -- edit, inspect, and try out OpenAPI 3.x description documents.

Import a document from a URL, a file or stdin, edit its sections (info,
servers, paths, components, tags, security schemes), export it as JSON or
YAML, probe its servers and send requests for its operations.
"""

__version__ = "0.1.0"
