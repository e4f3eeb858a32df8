import json
from pathlib import Path
from typing import Sequence

import pytest

from keysecret import main as cli
from keysecret.secrets.keychain_client import KeychainClient
from keysecret.secrets.process import ProcessResult

_OUTPUT = """keychain: "/Users/bob/Library/Keychains/login.keychain-db"
attributes:
    "acct"<blob>="bob"
    "svce"<blob>="my-service"
password: "s3cret"
"""


class _FakeRunner:
    def __init__(self, results: list[ProcessResult]) -> None:
        self._results = list(results)
        self.calls: list[list[str]] = []

    def run(self, command: str, args: Sequence[str]) -> ProcessResult:
        self.calls.append(list(args))
        return self._results.pop(0)


class _DecliningPrompter:
    def ask(self, text: str) -> str:
        return ""

    def ask_hidden(self, text: str) -> str:
        raise AssertionError("ask_hidden should not be called")

    def confirm(self, text: str) -> bool:
        return False


def _install(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, runner: _FakeRunner) -> Path:
    config = tmp_path / "config.yaml"
    config.write_text("default_account: bob\n", encoding="utf-8")
    monkeypatch.setattr(
        cli,
        "create_keychain_client",
        lambda settings: KeychainClient(command=settings.security_command, runner=runner),
    )
    monkeypatch.setattr(cli, "ConsolePrompter", _DecliningPrompter)
    return config


def test_get_prints_password(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    runner = _FakeRunner([ProcessResult(exit_code=0, output=_OUTPUT)])
    config = _install(monkeypatch, tmp_path, runner)

    assert cli.main(["--config", str(config), "get", "my-service"]) == 0
    assert capsys.readouterr().out.strip() == "s3cret"
    assert runner.calls[0] == ["find-generic-password", "-a", "bob", "-s", "my-service", "-g"]


def test_get_json_omits_password(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    runner = _FakeRunner([ProcessResult(exit_code=0, output=_OUTPUT)])
    config = _install(monkeypatch, tmp_path, runner)

    assert cli.main(["--config", str(config), "get", "my-service", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["name"] == "my-service"
    assert "password" not in payload


def test_get_missing_and_declined_returns_not_found(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    runner = _FakeRunner([ProcessResult(exit_code=44, output="could not be found")])
    config = _install(monkeypatch, tmp_path, runner)

    assert cli.main(["--config", str(config), "get", "missing"]) == cli.EXIT_NOT_FOUND
    assert "Not found" in capsys.readouterr().err


def test_process_failure_returns_failure_code(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    runner = _FakeRunner([ProcessResult(exit_code=51, output="interaction not allowed")])
    config = _install(monkeypatch, tmp_path, runner)

    assert cli.main(["--config", str(config), "delete", "svc"]) == cli.EXIT_FAILURE
    assert "process_failure" in capsys.readouterr().err


def test_invalid_type_returns_failure_code(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    runner = _FakeRunner([])
    config = _install(monkeypatch, tmp_path, runner)

    assert cli.main(["--config", str(config), "get", "svc", "--type", "certificate"]) == cli.EXIT_FAILURE
    assert runner.calls == []


def test_explicit_type_overrides_classification(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    runner = _FakeRunner([ProcessResult(exit_code=0, output="")])
    config = _install(monkeypatch, tmp_path, runner)

    assert cli.main(["--config", str(config), "delete", "example.com", "--type", "internet", "--account", ""]) == 0
    assert runner.calls[0] == ["delete-internet-password", "-a", "", "-s", "example.com"]


def test_missing_service_is_failure(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    runner = _FakeRunner([])
    config = _install(monkeypatch, tmp_path, runner)

    assert cli.main(["--config", str(config), "delete"]) == cli.EXIT_FAILURE


def test_invalid_config_returns_failure_code(tmp_path: Path) -> None:
    config = tmp_path / "config.yaml"
    config.write_text("log_level: LOUD\n", encoding="utf-8")
    assert cli.main(["--config", str(config), "get", "svc"]) == cli.EXIT_FAILURE
