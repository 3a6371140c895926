"""Tests for the command line entry point."""

from pathlib import Path

import pytest

from svbisect import cli
from svbisect.exceptions import BisectError
from svbisect.oracle import SvnOracle


@pytest.fixture
def wired(bisect, monkeypatch):
    """Route CLI commands to the in-memory bisect fixture."""
    monkeypatch.setattr(cli, "build_context", lambda config: (bisect.context(), bisect.effects))
    return bisect


def test_start_and_mark(wired, oracle):
    assert cli.main(["start", "--bad=100", "--good=70"]) == 0
    assert cli.main(["go"]) == 0

    assert wired.session.good_revision == 85
    assert oracle.current == 90


def test_no_command_prints_summary(capsys):
    assert cli.main([]) == 0

    assert "Available bisect commands:" in capsys.readouterr().out


def test_help_for_command(wired):
    assert cli.main(["help", "reset"]) == 0

    assert "--no-update" in wired.output


def test_help_for_custom_term(wired):
    """Test that help knows the custom terms of the active session."""
    assert cli.main(["start", "--term-bad=new", "--term-good=old"]) == 0

    assert cli.main(["help", "new"]) == 0

    assert "usage: svbisect new" in wired.output


def test_unknown_command(wired, capsys):
    assert cli.main(["frobnicate"]) == 1

    err = capsys.readouterr().err
    assert "error: Unknown bisect command 'frobnicate'" in err
    assert "Available bisect commands:" in err


def test_ambiguous_command(wired, capsys):
    assert cli.main(["s"]) == 1

    assert "is ambiguous.  (start, skip, status)" in capsys.readouterr().err


def test_invalid_arguments_print_usage(wired, capsys):
    """Test that argument errors print usage and exit with 2."""
    assert cli.main(["start", "--bad=tip"]) == 2

    err = capsys.readouterr().err
    assert "usage: svbisect start" in err
    assert "error:" in err
    assert wired.session is None


def test_bisect_error_exit_code(wired, capsys):
    assert cli.main(["good", "70"]) == 1

    assert "error: You must first start the bisect process" in capsys.readouterr().err


def test_keyboard_interrupt(monkeypatch):
    def interrupted(config, command, args):
        raise KeyboardInterrupt

    monkeypatch.setattr(cli, "run_command", interrupted)

    assert cli.main(["status"]) == 130


def test_missing_explicit_config(tmp_path, capsys):
    assert cli.main(["-c", str(tmp_path / "missing.yaml"), "status"]) == 1

    assert "Config file not found" in capsys.readouterr().err


def test_invalid_config_value(tmp_path, capsys):
    config_file = tmp_path / "svbisect.yaml"
    config_file.write_text("run:\n  max_iterations: 0\n")

    assert cli.main(["-c", str(config_file), "status"]) == 1

    assert "Invalid configuration" in capsys.readouterr().err


def test_load_config_default_file(tmp_path, monkeypatch):
    """Test that svbisect.yaml in the current directory is picked up."""
    monkeypatch.chdir(tmp_path)
    assert cli.load_config(None) == {}

    (tmp_path / "svbisect.yaml").write_text("svn:\n  command: /opt/svn/bin/svn\n")
    assert cli.load_config(None) == {"svn": {"command": "/opt/svn/bin/svn"}}


def test_load_config_rejects_non_mapping(tmp_path):
    config_file = tmp_path / "svbisect.yaml"
    config_file.write_text("- just\n- a list\n")

    with pytest.raises(BisectError, match="mapping"):
        cli.load_config(str(config_file))


def test_build_context_requires_top_of_working_copy(tmp_path, monkeypatch, config):
    monkeypatch.setattr(SvnOracle, "working_copy_root", lambda self: "/somewhere/else")

    with pytest.raises(BisectError, match="top of a subversion working copy"):
        cli.build_context(config, cwd=str(tmp_path))


def test_build_context_binds_state_paths(tmp_path, monkeypatch, config):
    """Test that state lives in the working copy's private area."""
    root = str(tmp_path.resolve())
    monkeypatch.setattr(SvnOracle, "working_copy_root", lambda self: root)

    ctx, effects = cli.build_context(config, cwd=root)

    assert ctx.session is None
    assert ctx.working_copy_path == root
    assert Path(effects.store.db_path) == Path(root) / ".svn" / "tmp" / "svbisect.db"
    assert ctx.audit_log.path == Path(root) / ".svn" / "tmp" / "svbisect_log"
    assert not Path(effects.store.db_path).exists()
