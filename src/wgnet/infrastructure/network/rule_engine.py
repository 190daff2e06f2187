"""
iptables Rule Engine

Renders FilterRule descriptors into iptables argument vectors and issues
them through the command executor. Appending reports plain success or
failure; deleting distinguishes a rule that was never there from a real
execution failure, and neither is raised to the caller.
"""

from typing import List, Optional

from wgnet.core.command_executor import CommandExecutor, CommandResult
from wgnet.core.unified_logger import get_logger, UnifiedLogger
from wgnet.domain.entities.filter_rule import (
    FilterRule, RuleOperation, RemovalOutcome
)


# iptables exits 1 for "Bad rule (does a matching rule exist in that chain?)"
IPTABLES_RULE_MISSING_EXIT = 1
_RULE_MISSING_MARKERS = (
    "does a matching rule exist",
    "bad rule",
    "no chain/target/match by that name",
)


class IptablesRuleEngine:
    """Applies and removes filter rules with iptables"""

    def __init__(self, executor: CommandExecutor, iptables_cmd: str = "iptables",
                 logger: Optional[UnifiedLogger] = None):
        self.executor = executor
        self.iptables_cmd = iptables_cmd
        self.logger = logger or get_logger(__name__, "rule_engine")

    def render(self, rule: FilterRule, operation: RuleOperation) -> List[str]:
        """Build the iptables argument vector for a rule"""
        cmd = [self.iptables_cmd, "-t", rule.table.value, operation.value, rule.chain.value]

        if rule.in_interface:
            cmd.extend(["-i", rule.in_interface])

        if rule.out_interface:
            cmd.extend(["-o", rule.out_interface])

        if rule.destination:
            cmd.extend(["-d", rule.destination])

        if rule.protocol:
            cmd.extend(["-p", rule.protocol.value])

            if rule.destination_port is not None:
                cmd.extend(["--dport", str(rule.destination_port)])

        cmd.extend(["-j", rule.action.value])
        return cmd

    def apply(self, rule: FilterRule) -> bool:
        """Append a rule; returns False when iptables reports failure"""
        result = self.executor.run(self.render(rule, RuleOperation.APPEND))
        if not result.success:
            self.logger.error(
                f"Failed to apply rule {rule.describe()}: "
                f"exit {result.exit_code}: {result.stderr.strip()}"
            )
            return False
        return True

    def remove(self, rule: FilterRule) -> RemovalOutcome:
        """Delete a rule, classifying the outcome"""
        result = self.executor.run(self.render(rule, RuleOperation.DELETE))
        outcome = self.classify_removal(result)

        if outcome == RemovalOutcome.NOT_FOUND:
            self.logger.debug(f"Rule not present, nothing to remove: {rule.describe()}")
        elif outcome == RemovalOutcome.EXECUTION_ERROR:
            self.logger.warning(
                f"Failed to remove rule {rule.describe()}: "
                f"exit {result.exit_code}: {result.stderr.strip()}"
            )
        return outcome

    @staticmethod
    def classify_removal(result: CommandResult) -> RemovalOutcome:
        if result.success:
            return RemovalOutcome.REMOVED

        stderr = result.stderr.lower()
        if result.exit_code == IPTABLES_RULE_MISSING_EXIT and any(
            marker in stderr for marker in _RULE_MISSING_MARKERS
        ):
            return RemovalOutcome.NOT_FOUND

        return RemovalOutcome.EXECUTION_ERROR
