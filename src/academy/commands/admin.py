"""Admin commands -- login, session status, and content maintenance.

Admin credentials are read from ``ACADEMY_ADMIN_USERNAME[_n]`` /
``ACADEMY_ADMIN_PASSWORD[_n]`` environment variables. A successful
``academy admin login`` stores a session that lasts 24 hours; every other
admin command refuses to run without one.
"""

from __future__ import annotations

from typing import Optional

import typer

from academy.commands import build_cache, context_options, render_records, run_api
from academy.output import format_response, info, success, suggest

admin_app = typer.Typer(no_args_is_help=True)

_ENQUIRY_COLUMNS = ["_id", "name", "email", "phone", "course", "status", "createdAt"]


@admin_app.command("login")
def admin_login(
    ctx: typer.Context,
    username: Optional[str] = typer.Option(None, "--username", "-u", help="Admin username."),
    password: Optional[str] = typer.Option(
        None, "--password", help="Admin password (prompted when omitted)."
    ),
) -> None:
    """Log in as an admin.

    Logging in discards cached responses so admin reads never see data
    cached for an anonymous caller. A fresh ``academy`` process has an
    empty cache, so from the command line there is nothing to discard.

    Example::

        academy admin login -u admin
    """
    from academy.auth import login

    if username is None:
        username = typer.prompt("Username")
    if password is None:
        password = typer.prompt("Password", hide_input=True)

    session = login(username, password, build_cache(ctx))
    success(f"Logged in as {session.username}.")
    info(f"Session expires at {session.expires_at.isoformat()}")


@admin_app.command("logout")
def admin_logout(ctx: typer.Context) -> None:
    """End the admin session.

    Like ``login``, this clears the process's response cache, which is
    always empty at the start of a command-line run.
    """
    from academy.auth import logout

    logout(build_cache(ctx))
    success("Logged out.")


@admin_app.command("status")
def admin_status() -> None:
    """Show the current admin session."""
    from academy.auth import current_session

    session = current_session()
    if session is None:
        info("Not logged in.")
        suggest("Run 'academy admin login' to start a session.")
        return
    format_response(session.model_dump(mode="json"))


@admin_app.command("enquiries")
def admin_enquiries(ctx: typer.Context) -> None:
    """List all enquiries, newest first. Never cached."""
    from academy.auth import require_admin

    require_admin()
    payload = run_api(ctx, lambda api: api.get_enquiries())
    render_records(payload, _ENQUIRY_COLUMNS, title="Enquiries")


@admin_app.command("publish")
def admin_publish(
    ctx: typer.Context,
    blog_id: str = typer.Argument(help="Blog post id."),
) -> None:
    """Toggle a blog post between draft and published."""
    from academy.auth import require_admin

    require_admin()
    payload = run_api(ctx, lambda api: api.toggle_blog_publish(blog_id))
    format_response(payload)
    success(f"Toggled publish state of {blog_id}.")


@admin_app.command("delete-course")
def admin_delete_course(
    ctx: typer.Context,
    course_id: str = typer.Argument(help="Course id."),
) -> None:
    """Delete a course. Asks for confirmation unless ``--force`` is given."""
    from academy.auth import require_admin

    require_admin()
    if not context_options(ctx).get("force", False):
        if not typer.confirm(f"Delete course {course_id}?"):
            info("Cancelled.")
            raise typer.Exit()

    payload = run_api(ctx, lambda api: api.delete_course(course_id))
    format_response(payload)
    success(f"Deleted course {course_id}.")
