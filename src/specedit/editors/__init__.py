"""Section editors -- one per slice of the document.

Each editor reads the current document from a
:class:`~specedit.store.DocumentStore` and writes a complete replacement
back on every change.
"""

from specedit.editors.base import SectionEditor, matches_query
from specedit.editors.components import ROOT_GROUP, ComponentEditor, component_groups
from specedit.editors.info import InfoEditor
from specedit.editors.paths import PathEditor
from specedit.editors.security import CredentialBag, SecurityEditor
from specedit.editors.servers import ServerEditor
from specedit.editors.tags import TagEditor

__all__ = [
    "ROOT_GROUP",
    "ComponentEditor",
    "CredentialBag",
    "InfoEditor",
    "PathEditor",
    "SectionEditor",
    "SecurityEditor",
    "ServerEditor",
    "TagEditor",
    "component_groups",
    "matches_query",
]
