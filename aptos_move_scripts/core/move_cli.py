"""
Aptos CLI wrapper for compiling and testing Move packages
"""
import logging
import subprocess
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Sequence, Union

from ..utils.exceptions import MoveCliError

LOG = logging.getLogger(__name__)

TEST_EXTRA_ARGUMENTS = ("--skip-fetch-latest-git-deps", "--coverage")
COVERAGE_DIR_NAME = ".coverage"


def format_named_addresses(named_addresses: Mapping[str, str]) -> str:
    """Format named addresses as the CLI expects: name=addr,name=addr"""
    return ",".join(f"{name}={address}" for name, address in named_addresses.items())


class MoveCli:
    """Runs `aptos move` subcommands"""

    def __init__(
        self,
        command: Optional[Sequence[str]] = None,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ):
        """
        Args:
            command: Aptos CLI argv prefix (default: ["aptos"])
            runner: subprocess.run compatible callable
        """
        self.command: List[str] = list(command) if command else ["aptos"]
        self._runner = runner

    def build_command(
        self,
        action: str,
        package_dir: Union[str, Path],
        named_addresses: Mapping[str, str],
        extra_arguments: Sequence[str] = (),
    ) -> List[str]:
        cmd = [*self.command, "move", action, "--package-dir", str(package_dir)]
        if named_addresses:
            cmd += ["--named-addresses", format_named_addresses(named_addresses)]
        cmd += list(extra_arguments)
        return cmd

    def compile(
        self,
        package_dir: Union[str, Path],
        named_addresses: Mapping[str, str],
        extra_arguments: Sequence[str] = (),
    ) -> None:
        """Compile a Move package"""
        self._run("compile", package_dir, named_addresses, extra_arguments)

    def test(
        self,
        package_dir: Union[str, Path],
        named_addresses: Mapping[str, str],
        extra_arguments: Sequence[str] = TEST_EXTRA_ARGUMENTS,
    ) -> None:
        """Run a Move package's unit tests, collecting coverage"""
        coverage_dir = Path(package_dir) / COVERAGE_DIR_NAME
        coverage_dir.mkdir(parents=True, exist_ok=True)
        self._run("test", package_dir, named_addresses, extra_arguments)

    def _run(
        self,
        action: str,
        package_dir: Union[str, Path],
        named_addresses: Mapping[str, str],
        extra_arguments: Sequence[str],
    ) -> None:
        cmd = self.build_command(action, package_dir, named_addresses, extra_arguments)
        LOG.info(f"Running: {' '.join(cmd)}")

        try:
            result = self._runner(cmd, check=False)
        except FileNotFoundError:
            raise MoveCliError(
                f"Aptos CLI not found: {self.command[0]}", action=action
            )

        if result.returncode != 0:
            raise MoveCliError(
                f"aptos move {action} failed with exit code {result.returncode}",
                action=action,
                returncode=result.returncode,
            )
        LOG.info(f"aptos move {action} succeeded")
