"""academy -- command-line client for the training institute's content API.

Browse courses, placements, blog posts and site content, submit enquiries,
and run admin maintenance against the institute's REST API. Reads are
served through an in-memory, tiered TTL cache that lives for the duration
of a single process.

Typical usage::

    academy courses list
    academy blog list --category python
    academy admin login

Modules:
    app: Typer application and CLI entry point.
    api: Cached access layer over the REST API.
    cache: In-memory response cache.
    client: Async HTTP transport with retry and error mapping.
    auth: Admin accounts and sessions.
    config: XDG-aware configuration and precedence resolution.
    models: Pydantic models shared across the package.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
