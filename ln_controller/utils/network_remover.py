"""Remove the docker networks created by the compose stack."""

from __future__ import annotations

import logging
import re
import subprocess
from typing import Callable

logger = logging.getLogger(__name__)

NETWORK_PREFIX = "hedera-"
_DOCKER_ID_RE = re.compile(r"^[a-f0-9]{12}$")

Runner = Callable[..., subprocess.CompletedProcess]


def is_docker_network_id(value: str) -> bool:
    return bool(value.strip()) and bool(_DOCKER_ID_RE.match(value.strip()))


class SafeDockerNetworkRemover:
    """Delete prefixed networks, touching only well-formed network IDs."""

    def __init__(self, runner: Runner = subprocess.run, prefix: str = NETWORK_PREFIX) -> None:
        self._run = runner
        self._prefix = prefix

    def remove_all(self) -> list[str]:
        result = self._run(
            ["docker", "network", "ls", "--filter", f"name={self._prefix}", "--format", "{{.ID}}"],
            check=False,
            capture_output=True,
            text=True,
        )
        if result.returncode != 0 or (result.stderr or "").strip():
            logger.debug("Listing docker networks failed: %s", result.stderr)
            return []
        removed: list[str] = []
        for network_id in (result.stdout or "").splitlines():
            network_id = network_id.strip()
            if not is_docker_network_id(network_id):
                continue
            self._run(
                ["docker", "network", "rm", network_id, "-f"],
                check=False,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
            removed.append(network_id)
        return removed
