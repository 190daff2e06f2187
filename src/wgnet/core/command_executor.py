"""
Command Execution

Single chokepoint for every state-changing command wgnet issues. In live
mode commands run through subprocess and their exit status is reported
unchanged; in dry-run mode nothing is executed, every command is logged
and reported as successful. The mode is fixed at construction.
"""

import shlex
import subprocess
import time
from typing import List, Optional, Dict, Any, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from wgnet.config.settings import RunOptions
from wgnet.core.unified_logger import get_logger, UnifiedLogger

import logging


# Conventional shell statuses for a missing / non-executable program
EXIT_NOT_FOUND = 127
EXIT_NOT_EXECUTABLE = 126


@dataclass
class CommandResult:
    """Result of a single command execution"""
    argv: List[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    execution_time: float = 0.0
    dry_run: bool = False
    success: bool = False
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        self.success = self.exit_code == 0

    @property
    def command(self) -> str:
        return shlex.join(self.argv)


class CommandExecutor:
    """
    Runs state-changing commands, live or dry-run.

    The executor never retries and never interprets exit statuses; callers
    decide what a non-zero status means. Every result is kept in `history`
    for the duration of the run.
    """

    def __init__(self, options: Optional[RunOptions] = None, logger: Optional[UnifiedLogger] = None):
        self.options = options or RunOptions()
        self.logger = logger or get_logger(__name__, "executor")
        self.history: List[CommandResult] = []

        # Command execution statistics
        self.commands_executed = 0
        self.commands_successful = 0
        self.commands_failed = 0

    @property
    def dry_run(self) -> bool:
        return self.options.dry_run

    def run(self, argv: Sequence[str]) -> CommandResult:
        """
        Execute a command given as an argument vector.

        Args:
            argv: Program and arguments, no shell interpretation

        Returns:
            CommandResult with the real exit status (live) or 0 (dry-run)
        """
        argv = [str(arg) for arg in argv]
        command_str = shlex.join(argv)
        level = logging.INFO if (self.options.verbose or self.options.dry_run) else logging.DEBUG

        self.logger.log(level, f"SYS: '{command_str}'")
        self.commands_executed += 1

        if self.options.dry_run:
            result = CommandResult(argv=argv, exit_code=0, dry_run=True)
        else:
            result = self._execute(argv)

        if result.success:
            self.commands_successful += 1
        else:
            self.commands_failed += 1
            self.logger.debug(
                f"Command exited with status {result.exit_code}: {command_str}",
                stderr=result.stderr.strip()
            )

        self.history.append(result)
        return result

    def _execute(self, argv: List[str]) -> CommandResult:
        start_time = time.monotonic()
        try:
            completed = subprocess.run(
                argv,
                capture_output=True,
                text=True
            )
        except FileNotFoundError as e:
            return CommandResult(
                argv=argv,
                exit_code=EXIT_NOT_FOUND,
                stderr=f"{argv[0]}: command not found ({e})",
                execution_time=time.monotonic() - start_time
            )
        except PermissionError as e:
            return CommandResult(
                argv=argv,
                exit_code=EXIT_NOT_EXECUTABLE,
                stderr=f"{argv[0]}: permission denied ({e})",
                execution_time=time.monotonic() - start_time
            )

        return CommandResult(
            argv=argv,
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            execution_time=time.monotonic() - start_time
        )

    def get_execution_statistics(self) -> Dict[str, Any]:
        """Get command execution statistics"""
        return {
            'commands_executed': self.commands_executed,
            'commands_successful': self.commands_successful,
            'commands_failed': self.commands_failed,
            'success_rate': (self.commands_successful / max(self.commands_executed, 1)) * 100,
            'dry_run': self.options.dry_run
        }
