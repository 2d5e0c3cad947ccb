"""Tests for the CLI entry point."""

from types import SimpleNamespace

import pytest

from vps_init import main as cli
from vps_init.types import CommandResult


@pytest.fixture
def patched(monkeypatch, settings, host):
    """Run main() against the fake host and tmp settings."""
    monkeypatch.setattr(cli, "InitSettings", SimpleNamespace(from_env=lambda: settings))
    monkeypatch.setattr(cli, "CommandExecutor", lambda: host)
    monkeypatch.setattr(cli, "preflight_checks", lambda system: None)
    return host


def answer(monkeypatch, *replies):
    it = iter(replies)
    monkeypatch.setattr("builtins.input", lambda message="": next(it))
    monkeypatch.setattr("getpass.getpass", lambda message="": "")


def run_main(argv):
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)
    return exc.value.code


def test_version(capsys):
    assert run_main(["--version"]) == 0
    assert cli.__version__ in capsys.readouterr().out


def test_declining_changes_nothing(monkeypatch, patched, settings):
    answer(monkeypatch, "y", "web01", "n", "n", "y", "n")
    hosts_before = settings.paths.hosts_file.read_text()

    assert run_main([]) == 0
    assert patched.hostname == "old-host"
    assert not patched.ran("hostnamectl")
    assert not patched.ran("apt-get")
    assert settings.paths.hosts_file.read_text() == hosts_before


def test_nothing_selected(monkeypatch, patched):
    answer(monkeypatch, "n", "n", "n", "n")
    assert run_main([]) == 0
    assert not patched.ran("hostnamectl")


def test_applies_and_logs(monkeypatch, patched, tmp_path):
    log_file = tmp_path / "logs" / "init.log"
    answer(monkeypatch, "y", "web01", "n", "n", "n", "y")

    assert run_main(["--log-file", str(log_file)]) == 0
    assert patched.hostname == "web01"

    log = log_file.read_text()
    assert log.startswith("VPS Mini Init Log - ")
    assert "event='step_done'" in log
    assert "event='hostname_set'" in log


def test_password_never_logged(monkeypatch, patched, tmp_path):
    log_file = tmp_path / "init.log"
    replies = iter(["n", "n", "y", "", "n", "y"])
    monkeypatch.setattr("builtins.input", lambda message="": next(replies))
    monkeypatch.setattr("getpass.getpass", lambda message="": "t0p-s3cret")

    assert run_main(["--log-file", str(log_file)]) == 0
    assert patched.inputs == ["root:t0p-s3cret\n"]
    assert "t0p-s3cret" not in log_file.read_text()


def test_command_failure_exit_code(monkeypatch, patched, tmp_path):
    patched.failures["hostnamectl"] = CommandResult(False, "", "denied", 1)
    answer(monkeypatch, "y", "web01", "n", "n", "n", "y")

    assert run_main(["--log-file", str(tmp_path / "init.log")]) == 4


def test_not_root_exit_code(monkeypatch, settings, host):
    monkeypatch.setattr(cli, "InitSettings", SimpleNamespace(from_env=lambda: settings))
    monkeypatch.setattr(cli, "CommandExecutor", lambda: host)
    monkeypatch.setattr("vps_init.system_info.os.geteuid", lambda: 1000)

    assert run_main([]) == 3
    assert not host.ran("hostnamectl")


def test_interrupt_exit_code(monkeypatch, patched):
    def interrupt(message=""):
        raise KeyboardInterrupt

    monkeypatch.setattr("builtins.input", interrupt)
    assert run_main([]) == 130
