"""
Filter Rule Descriptors

Structured descriptions of packet filter rules. Sections build these as
plain data; only the rule engine renders them into command lines.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class RuleTable(Enum):
    FILTER = "filter"
    NAT = "nat"


class RuleChain(Enum):
    INPUT = "INPUT"
    FORWARD = "FORWARD"
    POSTROUTING = "POSTROUTING"


class RuleAction(Enum):
    ACCEPT = "ACCEPT"
    DROP = "DROP"
    MASQUERADE = "MASQUERADE"


class RuleOperation(Enum):
    """Append or delete a rule"""
    APPEND = "-A"
    DELETE = "-D"


class RuleProtocol(Enum):
    TCP = "tcp"
    UDP = "udp"


class RemovalOutcome(Enum):
    """Result of removing a single rule"""
    REMOVED = "removed"
    NOT_FOUND = "not_found"
    EXECUTION_ERROR = "execution_error"


@dataclass(frozen=True)
class FilterRule:
    """A single packet filter rule bound to an input interface"""
    chain: RuleChain
    action: RuleAction
    in_interface: Optional[str] = None
    destination: Optional[str] = None
    protocol: Optional[RuleProtocol] = None
    destination_port: Optional[int] = None
    out_interface: Optional[str] = None
    table: RuleTable = RuleTable.FILTER

    def describe(self) -> str:
        """Human readable one-line description"""
        parts = [f"{self.table.value}/{self.chain.value}"]
        if self.in_interface:
            parts.append(f"in={self.in_interface}")
        if self.out_interface:
            parts.append(f"out={self.out_interface}")
        if self.destination:
            parts.append(f"dst={self.destination}")
        if self.protocol:
            parts.append(f"proto={self.protocol.value}")
        if self.destination_port is not None:
            parts.append(f"dport={self.destination_port}")
        parts.append(self.action.value)
        return " ".join(parts)


@dataclass
class RuleSet:
    """Ordered list of rules; order is application order"""
    rules: List[FilterRule] = field(default_factory=list)

    def add(self, rule: FilterRule) -> 'RuleSet':
        self.rules.append(rule)
        return self

    def __iter__(self):
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def __bool__(self) -> bool:
        return bool(self.rules)


@dataclass
class RemovalReport:
    """Outcome counts for removing one section's rules"""
    stage: str
    removed: int = 0
    not_found: int = 0
    errors: int = 0

    def record(self, outcome: RemovalOutcome) -> None:
        if outcome == RemovalOutcome.REMOVED:
            self.removed += 1
        elif outcome == RemovalOutcome.NOT_FOUND:
            self.not_found += 1
        else:
            self.errors += 1

    @property
    def clean(self) -> bool:
        return self.errors == 0
