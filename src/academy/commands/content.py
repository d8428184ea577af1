"""Public content commands -- courses, placements, blog posts, site content.

Every command here is a cached read. Within one invocation repeated reads
of the same resource are answered from the response cache; across
invocations the cache starts empty.
"""

from __future__ import annotations

from typing import Optional

import typer

from academy.commands import render_records, run_api
from academy.output import format_response

courses_app = typer.Typer(no_args_is_help=True)
placements_app = typer.Typer(no_args_is_help=True)
blog_app = typer.Typer(no_args_is_help=True)
content_app = typer.Typer(no_args_is_help=True)

_COURSE_COLUMNS = ["_id", "title", "duration", "level", "price"]
_PLACEMENT_COLUMNS = ["_id", "studentName", "course", "company", "position"]
_BLOG_COLUMNS = ["slug", "title", "category", "author", "publishedAt"]


# ------------------------------------------------------------------ #
# Courses
# ------------------------------------------------------------------ #


@courses_app.command("list")
def courses_list(ctx: typer.Context) -> None:
    """List all active courses.

    Example::

        academy courses list
        academy --json courses list
    """
    payload = run_api(ctx, lambda api: api.get_courses())
    render_records(payload, _COURSE_COLUMNS, title="Courses")


@courses_app.command("show")
def courses_show(
    ctx: typer.Context,
    course_id: str = typer.Argument(help="Course id."),
) -> None:
    """Show one course with its full syllabus."""
    format_response(run_api(ctx, lambda api: api.get_course(course_id)))


# ------------------------------------------------------------------ #
# Placements
# ------------------------------------------------------------------ #


@placements_app.command("list")
def placements_list(ctx: typer.Context) -> None:
    """List student placements."""
    payload = run_api(ctx, lambda api: api.get_placements())
    render_records(payload, _PLACEMENT_COLUMNS, title="Placements")


@placements_app.command("show")
def placements_show(
    ctx: typer.Context,
    placement_id: str = typer.Argument(help="Placement id."),
) -> None:
    """Show one placement record."""
    format_response(run_api(ctx, lambda api: api.get_placement(placement_id)))


@placements_app.command("stats")
def placements_stats(ctx: typer.Context) -> None:
    """Show aggregate placement statistics."""
    format_response(run_api(ctx, lambda api: api.get_placement_stats()))


# ------------------------------------------------------------------ #
# Blog
# ------------------------------------------------------------------ #


@blog_app.command("list")
def blog_list(
    ctx: typer.Context,
    category: Optional[str] = typer.Option(
        None, "--category", "-c", help="Only posts in this category ('all' for every post)."
    ),
) -> None:
    """List published blog posts.

    Example::

        academy blog list
        academy blog list --category python
    """
    payload = run_api(ctx, lambda api: api.get_blogs(category))
    render_records(payload, _BLOG_COLUMNS, title="Blog")


@blog_app.command("show")
def blog_show(
    ctx: typer.Context,
    slug: str = typer.Argument(help="Post slug."),
) -> None:
    """Show one published blog post."""
    format_response(run_api(ctx, lambda api: api.get_blog(slug)))


# ------------------------------------------------------------------ #
# Site content
# ------------------------------------------------------------------ #


@content_app.command("home")
def content_home(ctx: typer.Context) -> None:
    """Show the home page content."""
    format_response(run_api(ctx, lambda api: api.get_home_content()))


@content_app.command("about")
def content_about(ctx: typer.Context) -> None:
    """Show the about page content."""
    format_response(run_api(ctx, lambda api: api.get_about_info()))


@content_app.command("contact")
def content_contact(ctx: typer.Context) -> None:
    """Show contact details."""
    format_response(run_api(ctx, lambda api: api.get_contact_info()))


@content_app.command("navbar")
def content_navbar(ctx: typer.Context) -> None:
    """Show the navigation bar configuration."""
    format_response(run_api(ctx, lambda api: api.get_navbar()))


@content_app.command("footer")
def content_footer(ctx: typer.Context) -> None:
    """Show the footer content."""
    format_response(run_api(ctx, lambda api: api.get_footer_content()))


@content_app.command("trust")
def content_trust(ctx: typer.Context) -> None:
    """Show the trust statistics banner."""
    format_response(run_api(ctx, lambda api: api.get_trust_stats()))
