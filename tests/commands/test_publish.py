"""Tests for the publish command."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from expcli.cli import cli
from expcli.errors import ApiError
from expcli.xdl import ProjectStatus, PublishResult
from tests.conftest import Fakes


class TestPublish:
    def test_starts_publishes_and_stops_when_not_running(
        self, cli_runner: CliRunner, fakes: Fakes, project_dir: Path
    ) -> None:
        result = cli_runner.invoke(cli, ["publish"], obj=fakes.toolkit)
        assert result.exit_code == 0, result.output
        assert fakes.projects.names() == ["status", "start", "publish", "stop"]
        assert "starting a new one" in result.output
        assert "Published" in result.output
        assert fakes.projects.url in result.output
        assert fakes.doctor.validated == []

    def test_reuses_running_server(
        self, cli_runner: CliRunner, fakes: Fakes, project_dir: Path
    ) -> None:
        fakes.projects.status = ProjectStatus.RUNNING
        result = cli_runner.invoke(cli, ["p"], obj=fakes.toolkit)
        assert result.exit_code == 0, result.output
        assert fakes.projects.names() == ["status", "publish"]

    def test_project_dir_argument(
        self, cli_runner: CliRunner, fakes: Fakes, project_dir: Path
    ) -> None:
        (project_dir / "sub").mkdir()
        result = cli_runner.invoke(cli, ["publish", "sub"], obj=fakes.toolkit)
        assert result.exit_code == 0, result.output
        assert ("publish", project_dir / "sub") in fakes.projects.calls

    def test_send_to(self, cli_runner: CliRunner, fakes: Fakes, project_dir: Path) -> None:
        result = cli_runner.invoke(
            cli, ["publish", "--send-to", "bob@example.com"], obj=fakes.toolkit
        )
        assert result.exit_code == 0, result.output
        assert ("send_url", fakes.projects.url, "bob@example.com") in fakes.projects.calls

    def test_raw_output_prints_only_url(
        self, cli_runner: CliRunner, fakes: Fakes, project_dir: Path
    ) -> None:
        fakes.projects.status = ProjectStatus.RUNNING
        result = cli_runner.invoke(cli, ["-o", "raw", "publish"], obj=fakes.toolkit)
        assert result.exit_code == 0, result.output
        assert result.output.strip() == fakes.projects.url

    def test_requires_login(self, cli_runner: CliRunner, fakes: Fakes, project_dir: Path) -> None:
        fakes.users.user = None
        result = cli_runner.invoke(cli, ["publish", "--non-interactive"], obj=fakes.toolkit)
        assert result.exit_code == 1
        assert fakes.projects.calls == []

    def test_publish_failure_is_reported(
        self, cli_runner: CliRunner, fakes: Fakes, project_dir: Path
    ) -> None:
        async def fail(path: Path) -> PublishResult:
            raise ApiError("Upload rejected")

        fakes.projects.status = ProjectStatus.RUNNING
        fakes.projects.publish = fail  # type: ignore[method-assign]
        result = cli_runner.invoke(cli, ["publish"], obj=fakes.toolkit)
        assert result.exit_code == 1
        assert "Upload rejected" in result.output
        assert "stop" not in fakes.projects.names()

    def test_failed_publish_stops_started_project(
        self, cli_runner: CliRunner, fakes: Fakes, project_dir: Path
    ) -> None:
        async def fail(path: Path) -> PublishResult:
            fakes.projects.calls.append(("publish", path))
            raise ApiError("Upload rejected")

        fakes.projects.publish = fail  # type: ignore[method-assign]
        result = cli_runner.invoke(cli, ["publish"], obj=fakes.toolkit)
        assert result.exit_code == 1
        assert "Upload rejected" in result.output
        assert fakes.projects.names() == ["status", "start", "publish", "stop"]

    def test_failed_send_stops_started_project(
        self, cli_runner: CliRunner, fakes: Fakes, project_dir: Path
    ) -> None:
        async def fail(url: str, recipient: str) -> None:
            raise ApiError("Could not send link")

        fakes.projects.send_url = fail  # type: ignore[method-assign]
        result = cli_runner.invoke(
            cli, ["publish", "--send-to", "bob@example.com"], obj=fakes.toolkit
        )
        assert result.exit_code == 1
        assert fakes.projects.names()[-1] == "stop"
        assert fakes.projects.names().count("stop") == 1

    def test_interrupt_stops_started_project(
        self, cli_runner: CliRunner, fakes: Fakes, project_dir: Path
    ) -> None:
        async def interrupted(path: Path) -> PublishResult:
            raise KeyboardInterrupt

        fakes.projects.publish = interrupted  # type: ignore[method-assign]
        result = cli_runner.invoke(cli, ["publish"], obj=fakes.toolkit)
        assert result.exit_code == 1
        assert fakes.projects.names()[-1] == "stop"
        assert "Packager stopped." in result.output


@pytest.mark.parametrize("quiet", [True, False])
def test_quiet_flag_is_passed_as_verbose(
    cli_runner: CliRunner, fakes: Fakes, project_dir: Path, quiet: bool
) -> None:
    args = ["publish", "--quiet"] if quiet else ["publish"]
    result = cli_runner.invoke(cli, args, obj=fakes.toolkit)
    assert result.exit_code == 0, result.output
    assert fakes.projects.verbose == [not quiet]
