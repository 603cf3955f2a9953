"""Info commands -- view and edit title, version, contact and license."""

from __future__ import annotations

from typing import Optional

import typer

from specedit.commands import handle_errors, open_store
from specedit.editors.info import InfoEditor
from specedit.output import format_response, info, success

info_app = typer.Typer(no_args_is_help=True)


@info_app.command("show")
def info_show(ctx: typer.Context) -> None:
    """Show the document's info section.

    Example::

        specedit info show
        specedit --json info show
    """
    with handle_errors(), open_store(ctx) as store:
        current = InfoEditor(store).get()

    if current is None:
        info("The document has no info section.")
        return
    format_response(current.to_dict())


@info_app.command("set")
def info_set(
    ctx: typer.Context,
    title: Optional[str] = typer.Option(None, "--title", help="API title."),
    version: Optional[str] = typer.Option(None, "--version", help="API version."),
    description: Optional[str] = typer.Option(
        None, "--description", help="Description (empty string removes it)."
    ),
    terms: Optional[str] = typer.Option(
        None, "--terms-of-service", help="Terms of service URL."
    ),
    contact_name: Optional[str] = typer.Option(None, "--contact-name"),
    contact_email: Optional[str] = typer.Option(None, "--contact-email"),
    contact_url: Optional[str] = typer.Option(None, "--contact-url"),
    license_name: Optional[str] = typer.Option(
        None, "--license-name", help="License name (defaults to MIT)."
    ),
    license_url: Optional[str] = typer.Option(None, "--license-url"),
) -> None:
    """Change info fields. Options left out are unchanged.

    Example::

        specedit info set --title "Pet Store" --version 1.0.1
        specedit info set --license-url https://opensource.org/licenses/MIT
    """
    with handle_errors(), open_store(ctx) as store:
        editor = InfoEditor(store)
        if any(v is not None for v in (title, version, description, terms)):
            editor.update(
                title=title,
                version=version,
                description=description,
                terms_of_service=terms,
            )
        if any(v is not None for v in (contact_name, contact_email, contact_url)):
            editor.update_contact(name=contact_name, email=contact_email, url=contact_url)
        if license_name is not None or license_url is not None:
            editor.update_license(name=license_name, url=license_url)
        current = editor.get()

    success("Info updated")
    if current is not None:
        format_response(current.to_dict())
