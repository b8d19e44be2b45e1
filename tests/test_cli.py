from pathlib import Path

import pytest

from swechain_mcp import cli


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("swechain_mcp.config.DEFAULT_CONFIG_PATH", tmp_path / "absent.yaml")
    for name in ("SWECHAIN_BINARY", "SWECHAIN_ALLOW_KEY_CREATION", "SWECHAIN_MCP_DEBUG"):
        monkeypatch.delenv(name, raising=False)


def test_list_tools_prints_default_tools(capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["list-tools"])

    names = capsys.readouterr().out.split()
    assert len(names) == 11
    assert names[0] == "get-address-for-key"
    assert "create-and-fund-address" not in names


def test_list_tools_includes_key_creation_when_enabled(
    capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("SWECHAIN_ALLOW_KEY_CREATION", "true")

    cli.main(["list-tools"])

    assert "create-and-fund-address" in capsys.readouterr().out.split()


def test_serve_exits_when_binary_missing(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--binary", "swechaind-does-not-exist", "serve"])

    assert excinfo.value.code == 1
    assert "swechaind-does-not-exist not found in PATH" in capsys.readouterr().err


def test_call_rejects_bad_json(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["call", "get-keys", "--args-json", "[1, 2]"])

    assert excinfo.value.code == 2
    assert "--args-json must be a JSON object" in capsys.readouterr().err


def test_unknown_log_level_is_rejected() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--log-level", "chatty", "list-tools"])

    assert excinfo.value.code == 2
