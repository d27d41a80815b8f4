"""Docker daemon, compose and container access for the local node stack."""

from __future__ import annotations

import asyncio
import errno
import logging
import os
import re
import signal
import socket
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, Sequence

import docker
from docker.errors import DockerException

from ln_common.errors import DockerServiceError
from ln_common.logging import TRACE
from ln_controller.constants import (
    CONTAINERS,
    MIN_COMPOSE_VERSION,
    NECESSARY_PORTS,
    OPTIONAL_PORTS,
    UNKNOWN_VERSION,
)
from ln_controller.models.cli_options import CLIOptions

logger = logging.getLogger(__name__)

IS_WINDOWS = sys.platform == "win32"
DEFAULT_SOCKET = "//./pipe/docker_engine" if IS_WINDOWS else "/var/run/docker.sock"
COMMAND_NOT_FOUND = 127

Runner = Callable[..., subprocess.CompletedProcess]

_VERSION_RE = re.compile(r"(\d+)\.(\d+)\.(\d+)")


def parse_version(raw: str) -> tuple[int, int, int] | None:
    match = _VERSION_RE.search(raw or "")
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2)), int(match.group(3))


@dataclass
class PortReport:
    """Ports already bound on the host before the stack starts."""

    necessary_in_use: list[int] = field(default_factory=list)
    optional_in_use: list[int] = field(default_factory=list)

    @property
    def can_start(self) -> bool:
        return not self.necessary_in_use


def _port_in_use(port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind(("", port))
        except OSError as exc:
            return exc.errno in {errno.EADDRINUSE, errno.EACCES}
    return False


class DockerService:
    """Wrap the docker CLI (compose) and the docker SDK (containers)."""

    def __init__(
        self,
        options: CLIOptions,
        *,
        runner: Runner = subprocess.run,
        client_factory: Callable[[str], Any] | None = None,
        port_probe: Callable[[int], bool] = _port_in_use,
    ) -> None:
        self._options = options
        self._run = runner
        self._client_factory = client_factory or _default_client_factory
        self._port_probe = port_probe
        self._client: Any = None
        self.docker_socket = os.environ.get("DOCKER_SOCKET") or DEFAULT_SOCKET
        logger.log(TRACE, "Docker Service Initialized!")

    @property
    def null_output(self) -> str:
        return os.devnull

    def _docker(self) -> Any:
        if self._client is None:
            self._client = self._client_factory(self.docker_socket)
        return self._client

    def check_docker(self) -> bool:
        """Return True when the docker daemon answers."""
        try:
            self._docker().ping()
        except (DockerException, OSError) as exc:
            logger.error("Docker is not running: %s", exc)
            return False
        logger.log(TRACE, "Docker is running.")
        return True

    def _command(self, cmd: Sequence[str], *, cwd: Path | None = None) -> subprocess.CompletedProcess:
        try:
            return self._run(list(cmd), check=False, capture_output=True, text=True, cwd=cwd)
        except FileNotFoundError:
            return subprocess.CompletedProcess(list(cmd), COMMAND_NOT_FOUND, "", "command not found")

    def is_correct_docker_compose_version(self) -> bool:
        """Require docker compose V2 newer than 2.12.2."""
        logger.log(TRACE, "Checking docker compose version...")
        plugin = self._command(["docker", "compose", "version", "--short"])
        standalone = self._command(["docker-compose", "version", "--short"])

        if plugin.returncode == COMMAND_NOT_FOUND and standalone.returncode == COMMAND_NOT_FOUND:
            logger.error("Please install docker compose V2.")
            return False
        if plugin.returncode == COMMAND_NOT_FOUND and standalone.returncode == 0:
            logger.error("Looks like you have docker-compose V1, but you need docker compose V2")
            return False
        version = parse_version(plugin.stdout if plugin.returncode == 0 else standalone.stdout)
        if version is not None and version > MIN_COMPOSE_VERSION:
            return True
        logger.error("You are using docker compose version prior to 2.12.2, please upgrade")
        return False

    def check_ports(
        self,
        necessary: Iterable[int] = NECESSARY_PORTS,
        optional: Iterable[int] = OPTIONAL_PORTS,
    ) -> PortReport:
        report = PortReport(
            necessary_in_use=[port for port in necessary if self._port_probe(port)],
            optional_in_use=[port for port in optional if self._port_probe(port)],
        )
        for port in report.optional_in_use:
            logger.info("Port %s is in use.", port)
        for port in report.necessary_in_use:
            logger.error("Port %s is in use.", port)
        if not report.can_start:
            logger.error("Node cannot start properly because necessary ports are in use")
        return report

    def compose_up(self, compose_files: Sequence[str], cwd: Path) -> subprocess.CompletedProcess:
        cmd = ["docker", "compose"]
        for compose_file in compose_files:
            cmd.extend(["-f", compose_file])
        cmd.extend(["up", "-d"])
        logger.log(TRACE, "Running %s in %s", " ".join(cmd), cwd)
        return self._command(cmd, cwd=cwd)

    def compose_down(self, cwd: Path) -> None:
        """Kill and remove the stack with its volumes; failures are logged only."""
        for cmd in (
            ["docker", "compose", "kill", "--remove-orphans"],
            ["docker", "compose", "down", "-v", "--remove-orphans"],
        ):
            result = self._command(cmd, cwd=cwd)
            if result.returncode != 0:
                logger.debug("%s exited with %s: %s", " ".join(cmd), result.returncode, result.stderr)

    def prune_networks(self) -> None:
        self._command(["docker", "network", "prune", "-f"])

    def exec_in_container(self, container: str, command: Sequence[str]) -> subprocess.CompletedProcess:
        result = self._command(["docker", "exec", container, *command])
        if result.returncode != 0:
            raise DockerServiceError(
                f"Command failed in container {container}: {result.stderr or result.stdout}",
                context={"container": container, "returncode": result.returncode},
            )
        return result

    def get_container(self, label: str) -> Any:
        try:
            containers = self._docker().containers.list(filters={"name": label}, limit=1)
        except DockerException as exc:
            raise DockerServiceError(
                f"Failed to look up container {label}", context={"label": label}, cause=exc
            ) from exc
        if not containers:
            raise DockerServiceError(f"Container {label} is not running", context={"label": label})
        return containers[0]

    def get_container_version(self, label: str) -> str:
        try:
            container = self.get_container(label)
            tags = container.image.tags
        except DockerServiceError:
            return UNKNOWN_VERSION
        if not tags or ":" not in tags[0]:
            return UNKNOWN_VERSION
        return tags[0].rsplit(":", 1)[1]

    def status_rows(self) -> list[tuple[str, str, str]]:
        """Name, image version and endpoint of every service container."""
        return [
            (spec.name, self.get_container_version(spec.label), f"{self._options.host}:{spec.port}")
            for spec in CONTAINERS
        ]

    def stream_logs(self, label: str, since: float) -> Iterator[str]:
        """Yield decoded log lines of a container from *since* onwards."""
        container = self.get_container(label)
        buffer = ""
        for chunk in container.logs(stream=True, follow=True, stdout=True, stderr=True, since=int(since)):
            buffer += chunk.decode("utf-8", errors="replace")
            while "\n" in buffer:
                line, buffer = buffer.split("\n", 1)
                yield line
        if buffer:
            yield buffer

    async def wait_for_log_line(self, container: str, text: str) -> None:
        """Follow `docker logs` of *container* until a line contains *text*.

        The follower process is interrupted as soon as the match is seen.
        """
        proc = await asyncio.create_subprocess_exec(
            "docker",
            "logs",
            "-f",
            container,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
        try:
            assert proc.stdout is not None
            async for raw in proc.stdout:
                if text in raw.decode("utf-8", errors="replace"):
                    return
            raise DockerServiceError(
                f"Log stream of {container} ended before '{text}' appeared",
                context={"container": container},
            )
        finally:
            if proc.returncode is None:
                proc.send_signal(signal.SIGINT)
                await proc.wait()


def _default_client_factory(socket_path: str) -> Any:
    scheme = "npipe" if IS_WINDOWS else "unix"
    return docker.DockerClient(base_url=f"{scheme}://{socket_path}")
