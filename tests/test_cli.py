"""Tests for the command line interface."""

from unittest.mock import patch

import pytest

from conftest import make_record
from docsite import SiteContext, cli


@pytest.fixture
def fake_context(config, listing):
    """Patch SiteContext.create to hand out a fake-backed context."""
    context = SiteContext.for_test(listing=listing, records={"router-name": make_record()}, config=config)
    with patch.object(SiteContext, "create", return_value=context):
        yield context


def test_main_without_command(capsys):
    with patch("sys.argv", ["docsite"]), pytest.raises(SystemExit) as exc:
        cli.main()

    assert exc.value.code == 1
    assert "Usage: docsite <command>" in capsys.readouterr().out


def test_main_unknown_command(capsys):
    with patch("sys.argv", ["docsite", "deploy"]), pytest.raises(SystemExit):
        cli.main()

    assert "Unknown command: deploy" in capsys.readouterr().out


def test_list(fake_context, capsys):
    cli.list_middleware()

    out = capsys.readouterr().out
    assert "Found 2 package(s)" in out
    assert "logger" in out
    assert "etag" not in out
    assert fake_context.client.closed


def test_list_query(fake_context, capsys):
    cli.list_middleware(query="eta")

    assert "etag" in capsys.readouterr().out


def test_list_no_matches(fake_context, capsys):
    cli.list_middleware(query="xyz")

    assert "No middleware found." in capsys.readouterr().out


def test_list_failure(fake_context, capsys):
    fake_context.client.failing.add(fake_context.config.listing_url)

    with pytest.raises(SystemExit):
        cli.list_middleware()

    assert "Failed" in capsys.readouterr().out


def test_info(fake_context, capsys):
    cli.info("router-name")

    out = capsys.readouterr().out
    assert "Package: @tinyhttp/router-name" in out
    assert "Version: 1.2.0" in out
    assert "Repository: https://host/org/repo" in out
    assert "Directory: pkg" in out


def test_info_core_package(fake_context, capsys):
    cli.info("etag")

    assert "core package" in capsys.readouterr().out


def test_info_not_found(fake_context, capsys):
    with pytest.raises(SystemExit):
        cli.info("unknown-pkg")

    assert "Package not found: @tinyhttp/unknown-pkg" in capsys.readouterr().out


def test_info_accepts_purl_with_version(fake_context, capsys):
    cli.info("pkg:npm/%40tinyhttp/router-name@0.0.1")

    out = capsys.readouterr().out
    assert "Version: 1.2.0" in out
    assert "requested 0.0.1" in out
    assert fake_context.client.requested == ["https://registry.npmjs.org/@tinyhttp/router-name"]


def test_info_rejects_other_scope(fake_context, capsys):
    with pytest.raises(SystemExit):
        cli.info("@other/router-name")

    assert "not a @tinyhttp package" in capsys.readouterr().out
    assert fake_context.client.requested == []


def test_main_dispatches_info(fake_context, capsys):
    with patch("sys.argv", ["docsite", "info", "router-name"]):
        cli.main()

    assert "Version: 1.2.0" in capsys.readouterr().out


def test_serve_overrides(tmp_path):
    with patch("docsite.server.run") as run:
        cli.serve(port=4321, host="127.0.0.1")

    config = run.call_args.args[0]
    assert config.port == 4321
    assert config.host == "127.0.0.1"
