"""Enquiry command -- submit a course enquiry.

Input is validated locally with :class:`~academy.models.EnquiryCreate`
before anything is sent, so typos in the email or course name fail fast
with exit code 8.
"""

from __future__ import annotations

from typing import Optional

import typer

from academy.commands import run_api
from academy.models import COURSE_CHOICES
from academy.output import format_response, success, suggest

enquiry_app = typer.Typer(no_args_is_help=True)


@enquiry_app.command("submit")
def enquiry_submit(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", help="Your full name."),
    email: str = typer.Option(..., "--email", help="Contact email."),
    phone: str = typer.Option(..., "--phone", help="Contact phone number."),
    course: str = typer.Option(
        ..., "--course", help=f"Course of interest: {', '.join(COURSE_CHOICES)}."
    ),
    qualification: str = typer.Option("", "--qualification", help="Highest qualification."),
    experience: str = typer.Option("", "--experience", help="Years of experience."),
    placement: str = typer.Option(
        "", "--placement", help="Placement assistance required: yes, no, maybe."
    ),
    message: Optional[str] = typer.Option(None, "--message", "-m", help="Anything else."),
) -> None:
    """Submit an enquiry to the institute.

    Example::

        academy enquiry submit --name "Asha Rao" --email asha@example.com \\
            --phone "+91 98765 43210" --course python
    """
    enquiry = {
        "name": name,
        "email": email,
        "phone": phone,
        "course": course,
        "qualification": qualification,
        "experience": experience,
        "placementRequired": placement,
        "message": message,
    }
    payload = run_api(ctx, lambda api: api.post_enquiry(enquiry))
    format_response(payload)
    success("Enquiry submitted.")
    suggest("The admissions team will contact you shortly.")
