"""Unit tests for the nexus-init command line."""

from __future__ import annotations

import json
import typing as typ

import pytest

from nexus_init import cli
from nexus_init.config import CONFIG_FILE_ENV, CONFIG_PATH_ENV
from nexus_init.context import ProvisioningContext
from nexus_init.errors import NexusAPIError
from tests.helpers.fake_nexus import FakeNexus
from tests.helpers.log_capture import FakeLogger

if typ.TYPE_CHECKING:
    from pathlib import Path

    from nexus_init.config import NexusConfig

_DOCUMENT = {
    "address": "nexus.test",
    "port": 8081,
    "password": "s3cret",
    "blobStores": [{"name": "docker", "capacity": 10}],
    "dockerGroup": [{"name": "dockerHub", "url": "https://registry-1.docker.io"}],
}


@pytest.fixture
def config_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Write a valid configuration document and isolate the environment."""
    monkeypatch.delenv(CONFIG_FILE_ENV, raising=False)
    monkeypatch.delenv(CONFIG_PATH_ENV, raising=False)
    path = tmp_path / "config.json"
    path.write_text(json.dumps(_DOCUMENT), encoding="utf-8")
    return path


@pytest.fixture
def cli_logger(monkeypatch: pytest.MonkeyPatch) -> FakeLogger:
    """Replace femtologging setup in the CLI with a recording logger."""
    logger = FakeLogger()
    monkeypatch.setattr(
        cli, "configure_logging", lambda level: (str(level).upper(), False)
    )
    monkeypatch.setattr(cli, "get_logger", lambda _name: logger)
    return logger


class TestCheck:
    """Tests for the check command."""

    def test_valid_configuration(
        self, config_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """A valid document prints a one-line summary."""
        assert cli.check(config=config_path) == 0

        out = capsys.readouterr().out
        assert out.strip() == (
            "configuration for http://nexus.test:8081/service/rest/v1/ is valid "
            "(1 blob stores / 1 proxies / raw repository off)"
        )

    def test_invalid_configuration_lists_issues(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Every issue is printed and the exit code is 1."""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"address": "nexus", "port": 0}), encoding="utf-8")

        assert cli.check(config=path) == 1

        out = capsys.readouterr().out
        assert "Configuration is invalid:" in out
        assert "  - port 0 outside valid range 1-65535" in out


class TestProvision:
    """Tests for the provision command."""

    def test_successful_run_against_fake_server(
        self,
        config_path: Path,
        cli_logger: FakeLogger,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """The command wires configuration, client and logger together."""
        fake = FakeNexus()
        build = ProvisioningContext.from_config

        def _from_config(
            config: NexusConfig, *, logger: object = None
        ) -> ProvisioningContext:
            return build(config, http_client=fake.http_client(), logger=logger)

        monkeypatch.setattr(cli.ProvisioningContext, "from_config", _from_config)

        assert cli.provision(config=config_path, probe_interval=0.0) == 0

        assert "blobstores/file" in [call.path for call in fake.calls_to("POST")]
        assert fake.password == "s3cret"
        assert (
            "Nexus at http://nexus.test:8081/service/rest/v1/ is provisioned"
            in cli_logger.messages("INFO")
        )

    def test_failure_returns_one(
        self,
        config_path: Path,
        cli_logger: FakeLogger,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Provisioning errors are logged and mapped to exit code 1."""
        error = NexusAPIError.unexpected_status("create blob store docker", 500)

        def _fail(*_args: object, **_kwargs: object) -> None:
            raise error

        monkeypatch.setattr(cli, "run_provisioning", _fail)

        assert cli.provision(config=config_path) == 1

        (failure,) = [call for call in cli_logger.calls if call[0] == "ERROR"]
        assert failure[1].startswith("Provisioning failed: create blob store docker")
        assert failure[2] is error

    def test_invalid_configuration_returns_one(
        self,
        tmp_path: Path,
        cli_logger: FakeLogger,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """No connection is attempted when the configuration is invalid."""
        calls: list[object] = []
        monkeypatch.setattr(cli, "run_provisioning", lambda *args, **_: calls.append(args))
        missing = tmp_path / "missing.json"

        assert cli.provision(config=missing) == 1

        assert calls == []
        assert cli_logger.messages("ERROR") == ["Configuration is invalid"]

    def test_invalid_log_level_is_reported(
        self,
        config_path: Path,
        cli_logger: FakeLogger,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """An unknown level falls back to INFO with a warning."""
        monkeypatch.setattr(cli, "configure_logging", lambda _level: ("INFO", True))
        monkeypatch.setattr(cli, "run_provisioning", lambda *_args, **_kwargs: None)

        assert cli.provision(config=config_path, log_level="loud") == 0

        assert cli_logger.messages("WARNING") == [
            "Invalid log level 'loud', falling back to INFO"
        ]
