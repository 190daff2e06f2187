"""
Tests for the command executor
"""
import logging
from unittest.mock import patch, Mock

from wgnet.config.settings import RunOptions
from wgnet.core.command_executor import (
    CommandExecutor, CommandResult, EXIT_NOT_EXECUTABLE, EXIT_NOT_FOUND
)


class TestCommandResult:

    def test_success_follows_exit_code(self):
        assert CommandResult(argv=["true"], exit_code=0).success
        assert not CommandResult(argv=["false"], exit_code=1).success

    def test_command_string_is_quoted(self):
        result = CommandResult(argv=["echo", "two words"], exit_code=0)

        assert result.command == "echo 'two words'"


class TestLiveExecution:

    @patch('wgnet.core.command_executor.subprocess.run')
    def test_runs_argv_without_shell(self, mock_run):
        mock_run.return_value = Mock(returncode=0, stdout="ok\n", stderr="")
        executor = CommandExecutor()

        result = executor.run(["wg-quick", "up", "wg0"])

        mock_run.assert_called_once_with(["wg-quick", "up", "wg0"], capture_output=True, text=True)
        assert result.success
        assert result.stdout == "ok\n"
        assert not result.dry_run

    @patch('wgnet.core.command_executor.subprocess.run')
    def test_exit_status_is_reported_unchanged(self, mock_run):
        mock_run.return_value = Mock(returncode=4, stdout="", stderr="resource busy\n")
        executor = CommandExecutor()

        result = executor.run(["iptables", "-t", "filter", "-D", "INPUT", "-i", "wg0", "-j", "DROP"])

        assert result.exit_code == 4
        assert result.stderr == "resource busy\n"
        assert executor.commands_failed == 1

    @patch('wgnet.core.command_executor.subprocess.run')
    def test_missing_program(self, mock_run):
        mock_run.side_effect = FileNotFoundError(2, "No such file or directory")

        result = CommandExecutor().run(["wg-quick", "up", "wg0"])

        assert result.exit_code == EXIT_NOT_FOUND
        assert "command not found" in result.stderr

    @patch('wgnet.core.command_executor.subprocess.run')
    def test_program_not_executable(self, mock_run):
        mock_run.side_effect = PermissionError(13, "Permission denied")

        result = CommandExecutor().run(["wg-quick", "up", "wg0"])

        assert result.exit_code == EXIT_NOT_EXECUTABLE

    @patch('wgnet.core.command_executor.subprocess.run')
    def test_arguments_are_stringified(self, mock_run):
        mock_run.return_value = Mock(returncode=0, stdout="", stderr="")

        CommandExecutor().run(["iptables", "--dport", 22])

        assert mock_run.call_args[0][0] == ["iptables", "--dport", "22"]


class TestDryRun:

    @patch('wgnet.core.command_executor.subprocess.run')
    def test_nothing_is_executed(self, mock_run):
        executor = CommandExecutor(RunOptions(dry_run=True))

        result = executor.run(["wg-quick", "up", "wg0"])

        mock_run.assert_not_called()
        assert result.success
        assert result.dry_run
        assert executor.dry_run

    @patch('wgnet.core.command_executor.subprocess.run')
    def test_commands_logged_at_info(self, mock_run):
        logger = Mock()
        executor = CommandExecutor(RunOptions(dry_run=True), logger=logger)

        executor.run(["wg-quick", "up", "wg0"])

        logger.log.assert_called_once_with(logging.INFO, "SYS: 'wg-quick up wg0'")

    @patch('wgnet.core.command_executor.subprocess.run')
    def test_live_commands_logged_at_debug_unless_verbose(self, mock_run):
        mock_run.return_value = Mock(returncode=0, stdout="", stderr="")

        quiet = Mock()
        CommandExecutor(logger=quiet).run(["wg", "show"])
        quiet.log.assert_called_once_with(logging.DEBUG, "SYS: 'wg show'")

        loud = Mock()
        CommandExecutor(RunOptions(verbose=True), logger=loud).run(["wg", "show"])
        loud.log.assert_called_once_with(logging.INFO, "SYS: 'wg show'")


class TestStatistics:

    @patch('wgnet.core.command_executor.subprocess.run')
    def test_counters_and_history(self, mock_run):
        mock_run.side_effect = [
            Mock(returncode=0, stdout="", stderr=""),
            Mock(returncode=1, stdout="", stderr="failed"),
        ]
        executor = CommandExecutor()

        executor.run(["true"])
        executor.run(["false"])
        stats = executor.get_execution_statistics()

        assert stats['commands_executed'] == 2
        assert stats['commands_successful'] == 1
        assert stats['commands_failed'] == 1
        assert stats['success_rate'] == 50.0
        assert stats['dry_run'] is False
        assert [r.argv for r in executor.history] == [["true"], ["false"]]

    def test_empty_statistics(self):
        stats = CommandExecutor().get_execution_statistics()

        assert stats['commands_executed'] == 0
        assert stats['success_rate'] == 0.0
