"""
Tests for iptables rule rendering and removal classification
"""
import pytest

from wgnet.core.command_executor import CommandResult
from wgnet.domain.entities.filter_rule import (
    FilterRule, RemovalOutcome, RuleAction, RuleChain, RuleOperation, RuleProtocol
)
from wgnet.infrastructure.network.rule_engine import IptablesRuleEngine


RULE_MISSING = "iptables: Bad rule (does a matching rule exist in that chain?).\n"


@pytest.fixture
def engine(executor):
    return IptablesRuleEngine(executor)


class TestRender:

    def test_forward_accept(self, engine):
        rule = FilterRule(RuleChain.FORWARD, RuleAction.ACCEPT, in_interface="wg0", destination="10.0.1.0/24")

        assert engine.render(rule, RuleOperation.APPEND) == [
            "iptables", "-t", "filter", "-A", "FORWARD", "-i", "wg0", "-d", "10.0.1.0/24", "-j", "ACCEPT"
        ]

    def test_port_rule(self, engine):
        rule = FilterRule(
            RuleChain.FORWARD, RuleAction.ACCEPT, in_interface="wg0",
            destination="10.0.0.5", protocol=RuleProtocol.TCP, destination_port=22
        )

        assert engine.render(rule, RuleOperation.DELETE) == [
            "iptables", "-t", "filter", "-D", "FORWARD", "-i", "wg0", "-d", "10.0.0.5",
            "-p", "tcp", "--dport", "22", "-j", "ACCEPT"
        ]

    def test_input_drop_without_destination(self, engine):
        rule = FilterRule(RuleChain.INPUT, RuleAction.DROP, in_interface="wg0")

        assert engine.render(rule, RuleOperation.APPEND) == [
            "iptables", "-t", "filter", "-A", "INPUT", "-i", "wg0", "-j", "DROP"
        ]

    def test_custom_binary(self, executor):
        engine = IptablesRuleEngine(executor, iptables_cmd="/usr/sbin/iptables-legacy")
        rule = FilterRule(RuleChain.INPUT, RuleAction.DROP, in_interface="wg0")

        assert engine.render(rule, RuleOperation.APPEND)[0] == "/usr/sbin/iptables-legacy"

    def test_rendering_is_deterministic(self, engine):
        rule = FilterRule(RuleChain.FORWARD, RuleAction.DROP, in_interface="wg0", destination="10.0.0.0/24")

        assert engine.render(rule, RuleOperation.APPEND) == engine.render(rule, RuleOperation.APPEND)


class TestApplyAndRemove:

    def test_apply_success(self, engine, executor):
        rule = FilterRule(RuleChain.INPUT, RuleAction.DROP, in_interface="wg0")

        assert engine.apply(rule) is True
        assert executor.commands == ["iptables -t filter -A INPUT -i wg0 -j DROP"]

    def test_apply_failure(self, engine, executor):
        executor.fail_when = lambda argv: (2, "iptables v1.8: unknown option\n")
        rule = FilterRule(RuleChain.INPUT, RuleAction.DROP, in_interface="wg0")

        assert engine.apply(rule) is False

    def test_remove_outcomes(self, engine, executor):
        rule = FilterRule(RuleChain.INPUT, RuleAction.DROP, in_interface="wg0")
        assert engine.remove(rule) == RemovalOutcome.REMOVED

        executor.fail_when = lambda argv: (1, RULE_MISSING)
        assert engine.remove(rule) == RemovalOutcome.NOT_FOUND

        executor.fail_when = lambda argv: (4, "iptables: Resource temporarily unavailable.\n")
        assert engine.remove(rule) == RemovalOutcome.EXECUTION_ERROR


class TestClassifyRemoval:

    @pytest.mark.parametrize("exit_code,stderr,expected", [
        (0, "", RemovalOutcome.REMOVED),
        (1, RULE_MISSING, RemovalOutcome.NOT_FOUND),
        (1, "iptables: No chain/target/match by that name.\n", RemovalOutcome.NOT_FOUND),
        (1, "iptables: Permission denied (you must be root)\n", RemovalOutcome.EXECUTION_ERROR),
        (2, RULE_MISSING, RemovalOutcome.EXECUTION_ERROR),
        (127, "iptables: command not found\n", RemovalOutcome.EXECUTION_ERROR),
    ])
    def test_classify(self, exit_code, stderr, expected):
        result = CommandResult(argv=["iptables"], exit_code=exit_code, stderr=stderr)

        assert IptablesRuleEngine.classify_removal(result) == expected
