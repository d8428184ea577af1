"""End-to-end CLI tests driven through Typer's CliRunner against a fake API."""

from __future__ import annotations

import json
import sys

import pytest

from academy import __version__
from academy.app import app, main
from academy.commands.cache import WARM_ENDPOINTS
from academy.config import get_data_dir, load_global_config
from academy.exceptions import AuthError, ValidationError


def _ok(data):
    return {"success": True, "data": data}


COURSES = [
    {"_id": "c1", "title": "Python Full Stack", "duration": "6 months", "level": "Beginner", "price": 45000},
    {"_id": "c2", "title": "Data Science", "duration": "4 months", "level": "Intermediate", "price": 55000},
]


@pytest.fixture()
def invoke(cli_runner, fake_api, isolated_config):
    """Run the CLI with the fake API transport injected."""

    def _invoke(*args: str, input: str | None = None):
        return cli_runner.invoke(
            app, list(args), obj={"transport": fake_api.transport}, input=input
        )

    return _invoke


@pytest.fixture()
def admin_env(monkeypatch: pytest.MonkeyPatch, isolated_config) -> None:
    monkeypatch.setenv("ACADEMY_ADMIN_USERNAME_1", "priya")
    monkeypatch.setenv("ACADEMY_ADMIN_PASSWORD_1", "s3cret")


@pytest.fixture()
def logged_in(invoke, admin_env) -> None:
    result = invoke("admin", "login", "-u", "priya", "--password", "s3cret")
    assert result.exit_code == 0, result.output


class TestGlobalOptions:
    def test_version(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"academy {__version__}" in result.stdout

    def test_no_args_shows_help(self, cli_runner, isolated_config) -> None:
        result = cli_runner.invoke(app, [])
        assert "courses" in result.output

    def test_base_url_option(self, invoke, fake_api) -> None:
        fake_api.add("GET", "/api/about", _ok({}))
        result = invoke("--base-url", "http://staging.test/", "content", "about")
        assert result.exit_code == 0, result.output
        assert str(fake_api.calls[0].url) == "http://staging.test/api/about"

    def test_dry_run_sends_nothing(self, invoke, fake_api) -> None:
        result = invoke("--dry-run", "courses", "list")
        assert result.exit_code == 0, result.output
        assert fake_api.calls == []
        assert "[dry-run] GET http://localhost:5000/api/courses" in result.output


class TestContentCommands:
    def test_courses_list_plain_table(self, invoke, fake_api) -> None:
        fake_api.add("GET", "/api/courses", _ok(COURSES))
        result = invoke("--plain", "courses", "list")
        assert result.exit_code == 0, result.output
        assert "_id\ttitle\tduration\tlevel\tprice" in result.stdout
        assert "c1\tPython Full Stack\t6 months\tBeginner\t45000" in result.stdout

    def test_courses_list_json_is_raw_payload(self, invoke, fake_api) -> None:
        fake_api.add("GET", "/api/courses", _ok(COURSES))
        result = invoke("--json", "--quiet", "courses", "list")
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == _ok(COURSES)

    def test_course_show(self, invoke, fake_api) -> None:
        fake_api.add("GET", "/api/courses/c2", _ok(COURSES[1]))
        result = invoke("--json", "--quiet", "courses", "show", "c2")
        assert json.loads(result.stdout)["data"]["title"] == "Data Science"

    def test_course_show_not_found(self, invoke) -> None:
        result = invoke("courses", "show", "missing")
        assert result.exit_code != 0
        assert "404" in str(result.exception)

    def test_blog_list_category(self, invoke, fake_api) -> None:
        fake_api.add("GET", "/api/blogs", _ok([{"slug": "why-python", "title": "Why Python"}]))
        result = invoke("--plain", "blog", "list", "--category", "python")
        assert result.exit_code == 0, result.output
        assert fake_api.calls[0].url.params["category"] == "python"
        assert "why-python\tWhy Python" in result.stdout

    def test_placements_stats(self, invoke, fake_api) -> None:
        fake_api.add("GET", "/api/placement-stats", _ok({"placementRate": "95%"}))
        result = invoke("--json", "--quiet", "placements", "stats")
        assert json.loads(result.stdout) == _ok({"placementRate": "95%"})

    @pytest.mark.parametrize(
        "command,path",
        [
            ("home", "/api/home-content"),
            ("about", "/api/about"),
            ("contact", "/api/contact-info"),
            ("navbar", "/api/navbar"),
            ("footer", "/api/footer-content"),
            ("trust", "/api/trust-stats"),
        ],
    )
    def test_content_blocks(self, invoke, fake_api, command, path) -> None:
        fake_api.add("GET", path, _ok({"block": command}))
        result = invoke("--json", "--quiet", "content", command)
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["data"] == {"block": command}


class TestEnquiryCommand:
    def test_submit(self, invoke, fake_api) -> None:
        fake_api.add("POST", "/api/enquiries", {"success": True, "message": "Enquiry submitted"}, 201)
        result = invoke(
            "enquiry", "submit",
            "--name", "Asha Rao",
            "--email", "asha@example.com",
            "--phone", "+91 98765 43210",
            "--course", "ai",
            "--placement", "yes",
        )
        assert result.exit_code == 0, result.output
        body = fake_api.last_json()
        assert body["course"] == "ai"
        assert body["placementRequired"] == "yes"

    def test_invalid_input_not_sent(self, invoke, fake_api) -> None:
        result = invoke(
            "enquiry", "submit",
            "--name", "Asha Rao",
            "--email", "nope",
            "--phone", "+91 98765 43210",
            "--course", "ai",
        )
        assert isinstance(result.exception, ValidationError)
        assert fake_api.calls == []


class TestAdminCommands:
    def test_login_and_status(self, invoke, logged_in) -> None:
        result = invoke("--json", "admin", "status")
        assert result.exit_code == 0, result.output
        assert '"username": "priya"' in result.output

    def test_login_prompts(self, invoke, admin_env) -> None:
        result = invoke("admin", "login", input="priya\ns3cret\n")
        assert result.exit_code == 0, result.output
        assert "Logged in as priya" in result.output

    def test_login_rejected(self, invoke, admin_env) -> None:
        result = invoke("admin", "login", "-u", "priya", "--password", "wrong")
        assert isinstance(result.exception, AuthError)

    def test_status_logged_out(self, invoke) -> None:
        result = invoke("admin", "status")
        assert result.exit_code == 0
        assert "Not logged in" in result.output

    def test_enquiries_requires_login(self, invoke, fake_api) -> None:
        result = invoke("admin", "enquiries")
        assert isinstance(result.exception, AuthError)
        assert fake_api.calls == []

    def test_enquiries_listed(self, invoke, fake_api, logged_in) -> None:
        fake_api.add("GET", "/api/enquiries", _ok([{"_id": "e1", "name": "Asha", "status": "new"}]))
        result = invoke("--plain", "admin", "enquiries")
        assert result.exit_code == 0, result.output
        assert "e1\tAsha" in result.stdout

    def test_publish(self, invoke, fake_api, logged_in) -> None:
        fake_api.add("PATCH", "/api/blogs/b1/publish", {"success": True, "data": {"published": True}})
        result = invoke("admin", "publish", "b1")
        assert result.exit_code == 0, result.output
        assert fake_api.count("PATCH", "/api/blogs/b1/publish") == 1

    def test_delete_course_force(self, invoke, fake_api, logged_in) -> None:
        fake_api.add("DELETE", "/api/courses/c1", {"success": True, "message": "Course deleted"})
        result = invoke("--force", "admin", "delete-course", "c1")
        assert result.exit_code == 0, result.output
        assert fake_api.count("DELETE", "/api/courses/c1") == 1

    def test_delete_course_declined(self, invoke, fake_api, logged_in) -> None:
        result = invoke("admin", "delete-course", "c1", input="n\n")
        assert result.exit_code == 0
        assert fake_api.calls == []

    def test_logout(self, invoke, logged_in) -> None:
        assert invoke("admin", "logout").exit_code == 0
        assert "Not logged in" in invoke("admin", "status").output

    def test_login_help_mentions_per_process_cache(self, invoke) -> None:
        result = invoke("admin", "login", "--help")
        assert result.exit_code == 0
        assert "empty" in result.output


class TestCacheCommands:
    @pytest.fixture()
    def site(self, fake_api):
        for path in WARM_ENDPOINTS:
            fake_api.add("GET", path, _ok({"path": path}))
        return fake_api

    def test_stats_after_warming(self, invoke, site) -> None:
        result = invoke("--json", "--quiet", "cache", "stats")
        assert result.exit_code == 0, result.output
        stats = json.loads(result.stdout)
        assert stats["size"] == len(WARM_ENDPOINTS)
        assert stats["misses"] == len(WARM_ENDPOINTS)
        assert stats["hits"] == len(WARM_ENDPOINTS)
        assert all(site.count("GET", path) == 1 for path in WARM_ENDPOINTS)

    def test_stats_with_cache_disabled(self, invoke, site) -> None:
        assert invoke("config", "set", "cache.enabled", "false").exit_code == 0
        result = invoke("--json", "--quiet", "cache", "stats")
        stats = json.loads(result.stdout)
        assert stats["enabled"] is False
        assert stats["size"] == 0
        assert all(site.count("GET", path) == 2 for path in WARM_ENDPOINTS)

    def test_clear_one_resource(self, invoke, site) -> None:
        result = invoke(
            "--json", "--quiet", "cache", "clear", "--warm", "--resource", "/api/courses"
        )
        remaining = json.loads(result.stdout)
        assert "/api/courses" not in remaining
        assert len(remaining) == len(WARM_ENDPOINTS) - 1

    def test_clear_all(self, invoke, site) -> None:
        result = invoke("--json", "--quiet", "cache", "clear")
        assert json.loads(result.stdout) == []

    def test_clear_sends_no_requests_without_warm(self, invoke, site) -> None:
        result = invoke("--json", "--quiet", "cache", "clear")
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == []
        assert site.calls == []


class TestConfigCommands:
    def test_set_and_show(self, invoke) -> None:
        result = invoke("config", "set", "cache.short_ttl_seconds", "30")
        assert result.exit_code == 0, result.output
        assert load_global_config().cache.short_ttl_seconds == 30

        shown = invoke("--json", "--quiet", "config", "show")
        assert json.loads(shown.stdout)["cache"]["short_ttl_seconds"] == 30

    def test_set_float(self, invoke) -> None:
        assert invoke("config", "set", "api.request.slow_call_seconds", "2.5").exit_code == 0
        assert load_global_config().api.request.slow_call_seconds == 2.5

    def test_set_nested_int(self, invoke) -> None:
        assert invoke("config", "set", "api.request.max_retries", "1").exit_code == 0
        assert load_global_config().api.request.max_retries == 1

    def test_set_without_section_prefix_rejected(self, invoke) -> None:
        assert invoke("config", "set", "request.max_retries", "1").exit_code == 2

    def test_set_unknown_key(self, invoke) -> None:
        assert invoke("config", "set", "cache.nope", "1").exit_code == 2

    def test_set_invalid_value(self, invoke) -> None:
        assert invoke("config", "set", "cache.long_ttl_seconds", "-5").exit_code == 2

    def test_reset_force(self, invoke) -> None:
        invoke("config", "set", "api.base_url", "http://elsewhere:5000")
        result = invoke("--force", "config", "reset")
        assert result.exit_code == 0, result.output
        assert load_global_config().api.base_url == "http://localhost:5000"

    def test_output_format_from_config(self, invoke, fake_api) -> None:
        invoke("config", "set", "output.format", "json")
        fake_api.add("GET", "/api/courses", _ok(COURSES))
        result = invoke("--quiet", "courses", "list")
        assert json.loads(result.stdout) == _ok(COURSES)


class TestMain:
    @pytest.fixture(autouse=True)
    def _no_signal_handlers(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("academy.app._setup_signal_handlers", lambda: None)

    def test_academy_error_sets_exit_code(self, isolated_config, monkeypatch, capsys) -> None:
        monkeypatch.setattr(sys, "argv", ["academy", "--no-color", "admin", "enquiries"])
        with pytest.raises(SystemExit) as excinfo:
            main()
        assert excinfo.value.code == 3
        assert "Admin login required" in capsys.readouterr().err

    def test_unexpected_error_writes_crash_log(self, isolated_config, monkeypatch, capsys) -> None:
        def explode() -> None:
            raise RuntimeError("boom")

        monkeypatch.setattr("academy.app.app", explode)
        with pytest.raises(SystemExit) as excinfo:
            main()
        assert excinfo.value.code == 1
        logs = list((get_data_dir() / "logs").iterdir())
        assert len(logs) == 1
        assert "RuntimeError: boom" in logs[0].read_text()
