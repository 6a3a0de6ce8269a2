"""Docker Compose runtime - the container tool gatefleet shells out to."""

import os
import subprocess
from collections.abc import Sequence
from pathlib import Path

from .console import debug
from .errors import RuntimeFailureError, RuntimeUnavailableError
from .models import Instance


class ComposeRuntime:
    """Run docker / docker compose commands on behalf of instances."""

    def __init__(self, docker: str = "docker", probe_timeout: float = 10) -> None:
        """Initialize runtime.

        Args:
            docker: Docker executable
            probe_timeout: Timeout in seconds for status queries
        """
        self.docker = docker
        self.probe_timeout = probe_timeout

    def _run(
        self,
        args: Sequence[str],
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
        capture: bool = True,
        timeout: float | None = None,
    ) -> subprocess.CompletedProcess[str]:
        """Run a docker command.

        Raises:
            RuntimeUnavailableError: If docker cannot be executed
        """
        cmd = [self.docker, *args]
        debug(f"Running: {' '.join(cmd)}" + (f" (cwd={cwd})" if cwd else ""))
        try:
            return subprocess.run(
                cmd,
                cwd=cwd,
                env=env,
                capture_output=capture,
                text=True,
                timeout=timeout,
            )
        except (FileNotFoundError, PermissionError) as e:
            raise RuntimeUnavailableError(
                "Docker is not installed or not running"
            ) from e
        except subprocess.TimeoutExpired as e:
            raise RuntimeUnavailableError(f"'{' '.join(cmd)}' timed out") from e

    def _compose(
        self, instance: Instance, args: Sequence[str], capture: bool = False
    ) -> subprocess.CompletedProcess[str]:
        """Run ``docker compose`` in the instance directory under its project name."""
        instance_dir = Path(instance.config_dir)
        if not instance_dir.is_dir():
            raise RuntimeFailureError(f"Instance directory {instance_dir} is missing")
        env = {**os.environ, "COMPOSE_PROJECT_NAME": instance.project_name}
        return self._run(["compose", *args], cwd=instance_dir, env=env, capture=capture)

    @staticmethod
    def _check(result: subprocess.CompletedProcess[str], action: str) -> None:
        if result.returncode != 0:
            detail = (result.stderr or "").strip()
            message = f"{action} failed with exit code {result.returncode}"
            if detail:
                message = f"{message}: {detail}"
            raise RuntimeFailureError(message, returncode=result.returncode)

    # Availability -----------------------------------------------------
    def is_available(self) -> bool:
        """Return True if the docker CLI answers."""
        try:
            result = self._run(["--version"], timeout=self.probe_timeout)
        except RuntimeUnavailableError:
            return False
        return result.returncode == 0

    def image_exists(self, image: str) -> bool:
        result = self._run(["image", "inspect", image], timeout=self.probe_timeout)
        return result.returncode == 0

    def build_image(self, image: str, context_dir: Path, dockerfile: str = "Dockerfile") -> None:
        """Build *image* from *context_dir*, streaming output to the terminal."""
        result = self._run(
            ["build", "-t", image, "-f", dockerfile, "."], cwd=context_dir, capture=False
        )
        self._check(result, "Docker build")

    # Status -----------------------------------------------------------
    def running_containers(self) -> set[str]:
        """Return the names of running containers.

        Raises:
            RuntimeUnavailableError: If docker cannot be queried
        """
        result = self._run(["ps", "--format", "{{.Names}}"], timeout=self.probe_timeout)
        if result.returncode != 0:
            raise RuntimeUnavailableError(
                f"docker ps failed: {(result.stderr or '').strip()}"
            )
        return {line.strip() for line in result.stdout.splitlines() if line.strip()}

    # Lifecycle verbs --------------------------------------------------
    def up(self, instance: Instance) -> None:
        self._check(self._compose(instance, ["up", "-d", "gateway"]), "docker compose up")

    def stop(self, instance: Instance) -> None:
        self._check(self._compose(instance, ["stop"]), "docker compose stop")

    def down(self, instance: Instance) -> None:
        """Stop and remove the instance's containers and volumes."""
        result = self._compose(instance, ["down", "-v", "--remove-orphans"], capture=True)
        self._check(result, "docker compose down")

    def logs(self, instance: Instance, follow: bool = True) -> int:
        args = ["logs"]
        if follow:
            args.append("-f")
        args.append("gateway")
        return self._compose(instance, args).returncode

    def run_cli(self, instance: Instance, args: Sequence[str]) -> int:
        return self._compose(instance, ["run", "--rm", "cli", *args]).returncode
