"""External Command Runner.

This module runs the external tools of the pipeline (go, gobind, javac)
synchronously and turns failures into ToolInvocationError.

Design:
    - Wraps subprocess.Popen with captured stdout/stderr
    - Echoes commands (with the environment overrides they need) when asked
    - Dry-run prints commands without starting a process
    - Optional timeout kills the whole process tree (go spawns compilers)
"""

import shlex
import subprocess
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

import psutil

from ..errors import ToolInvocationError
from ..interrupt_utils import handle_keyboard_interrupt_properly


class CommandRunner:
    """Runs external build tools.

    This class handles:
    - Layering per-command environment overrides over the base environment
    - Printing commands for -x and dry-run
    - Capturing tool diagnostics verbatim on failure
    - Terminating hung tools and their children on timeout
    """

    def __init__(
        self,
        base_env: Optional[Mapping[str, str]] = None,
        dry_run: bool = False,
        print_commands: bool = False,
        timeout: Optional[float] = None,
    ):
        """Initialize command runner.

        Args:
            base_env: Environment every command starts from
            dry_run: Print commands instead of running them
            print_commands: Print every command before running it
            timeout: Seconds before a command is killed (None = no limit)
        """
        self.base_env: Dict[str, str] = dict(base_env or {})
        self.dry_run = dry_run
        self.print_commands = print_commands
        self.timeout = timeout

    def format_command(
        self,
        cmd: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
    ) -> str:
        """Format a command line as a shell would print it.

        Only environment variables that differ from the base environment are
        shown.
        """
        parts: List[str] = []
        if cwd is not None:
            parts.append(f"cd {shlex.quote(str(cwd))} &&")
        for key, value in sorted((env or {}).items()):
            if self.base_env.get(key) != value:
                parts.append(f"{key}={shlex.quote(value)}")
        parts.append(shlex.join(str(c) for c in cmd))
        return " ".join(parts)

    def run(
        self,
        cmd: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
    ) -> Optional[str]:
        """Run a build command.

        Args:
            cmd: Command and arguments
            env: Environment overrides layered over the base environment
            cwd: Working directory

        Returns:
            Captured stdout, or None in dry-run mode

        Raises:
            ToolInvocationError: If the tool is missing, fails or times out
        """
        if self.print_commands or self.dry_run:
            print(self.format_command(cmd, env, cwd))
        if self.dry_run:
            return None
        return self._execute(cmd, env, cwd)

    def query(
        self,
        cmd: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
    ) -> str:
        """Run a read-only command, also in dry-run mode.

        Used for lookups such as ``go list`` whose answers the rest of the
        pipeline needs even when nothing is built.
        """
        if self.print_commands:
            print(self.format_command(cmd, env, cwd))
        return self._execute(cmd, env, cwd)

    def _execute(
        self,
        cmd: Sequence[str],
        env: Optional[Mapping[str, str]],
        cwd: Optional[Path],
    ) -> str:
        args = [str(c) for c in cmd]
        full_env = dict(self.base_env)
        full_env.update(env or {})
        tool = Path(args[0]).name

        try:
            with subprocess.Popen(
                args,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                env=full_env,
                cwd=str(cwd) if cwd is not None else None,
            ) as proc:
                try:
                    stdout, stderr = proc.communicate(timeout=self.timeout)
                except subprocess.TimeoutExpired as e:
                    self._kill_tree(proc.pid)
                    stdout, stderr = proc.communicate()
                    raise ToolInvocationError(
                        f"{tool} timed out after {self.timeout}s",
                        command=args,
                        returncode=proc.returncode,
                        stderr=stderr or "",
                    ) from e
        except FileNotFoundError as e:
            raise ToolInvocationError(
                f"{tool}: executable not found in PATH",
                command=args,
            ) from e
        except KeyboardInterrupt as ke:
            handle_keyboard_interrupt_properly(ke)
            raise  # Never reached, but satisfies type checker

        if proc.returncode != 0:
            raise ToolInvocationError(
                f"{tool} failed with exit status {proc.returncode}: {shlex.join(args)}",
                command=args,
                returncode=proc.returncode,
                stderr=stderr or stdout or "",
            )
        return stdout

    @staticmethod
    def _kill_tree(pid: int) -> None:
        """Terminate a process and all of its children."""
        try:
            root = psutil.Process(pid)
            procs = root.children(recursive=True) + [root]
        except psutil.NoSuchProcess:
            return

        for proc in procs:
            try:
                proc.terminate()
            except psutil.NoSuchProcess:
                pass  # Already dead

        _gone, alive = psutil.wait_procs(procs, timeout=3)
        for proc in alive:
            try:
                proc.kill()
            except psutil.NoSuchProcess:
                pass
