"""Editor for the document's ``info`` section."""

from __future__ import annotations

from typing import Optional

from specedit.editors.base import SectionEditor, edit_changes, evolve_or_reject
from specedit.models import Contact, Info, License

DEFAULT_LICENSE_NAME = "MIT"


class InfoEditor(SectionEditor):
    """Reads and edits title, version, description, contact and license.

    A document without an ``info`` section is edited as if it had an empty
    title and version.
    """

    def get(self) -> Optional[Info]:
        return self.document.info

    def _current(self) -> Info:
        return self.document.info or Info(title="", version="")

    def update(
        self,
        title: Optional[str] = None,
        version: Optional[str] = None,
        description: Optional[str] = None,
        terms_of_service: Optional[str] = None,
    ) -> Info:
        """Change top-level info fields.

        Arguments left as ``None`` are unchanged; an empty string removes
        an optional field.

        Raises:
            InvalidUsageError: If title or version would be removed.
        """
        changes = edit_changes(
            title=title,
            version=version,
            description=description,
            terms_of_service=terms_of_service,
        )
        info = evolve_or_reject(self._current(), **changes)
        self._commit(info=info)
        return info

    def update_contact(
        self,
        name: Optional[str] = None,
        email: Optional[str] = None,
        url: Optional[str] = None,
    ) -> Info:
        current = self._current()
        contact = evolve_or_reject(
            current.contact or Contact(),
            **edit_changes(name=name, email=email, url=url),
        )
        info = current.evolve(contact=contact if contact.to_dict() else None)
        self._commit(info=info)
        return info

    def update_license(
        self,
        name: Optional[str] = None,
        url: Optional[str] = None,
    ) -> Info:
        """Change the license; a new license without a name is called ``MIT``."""
        current = self._current()
        license_ = current.license or License(name=DEFAULT_LICENSE_NAME)
        license_ = evolve_or_reject(license_, **edit_changes(name=name, url=url))
        info = current.evolve(license=license_)
        self._commit(info=info)
        return info
