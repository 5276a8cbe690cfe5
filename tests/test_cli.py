from __future__ import annotations

from click.testing import CliRunner

from challenger.cli.main import cli
from challenger.config import ENV_FIELDS


def test_run_without_config_exits_with_error(tmp_path, monkeypatch) -> None:
    for var in ENV_FIELDS:
        monkeypatch.delenv(var, raising=False)
    result = CliRunner().invoke(cli, ["run", "--env-file", str(tmp_path / "none.env")])
    assert result.exit_code == 1


def test_help_lists_commands() -> None:
    result = CliRunner().invoke(cli, ["--help"])
    assert result.exit_code == 0
    for command in ("run", "scan", "bond"):
        assert command in result.output


def test_run_with_invalid_private_key_exits_with_error(tmp_path, monkeypatch) -> None:
    for var in ENV_FIELDS:
        monkeypatch.delenv(var, raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text(
        "L1_RPC=http://localhost:8545\n"
        f"FACTORY_ADDRESS=0x{'fa' * 20}\n"
        "GAME_TYPE=1\n"
        "PRIVATE_KEY=0x1234\n"
    )
    result = CliRunner().invoke(cli, ["run", "--env-file", str(env_file)])
    assert result.exit_code == 1
