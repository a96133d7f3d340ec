"""Value types shared by the scanner, the updater and the CLI."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


def target_cidr(public_ip: str) -> str:
    """Single-host CIDR for an IPv4 address, e.g. ``9.9.9.9`` -> ``9.9.9.9/32``."""
    return f"{ipaddress.IPv4Address(public_ip)}/32"


@dataclass(frozen=True)
class MatchCriteria:
    """Description filters. A rule matches on prefix OR substring."""

    prefix: Optional[str] = None
    substring: Optional[str] = None

    def __post_init__(self):
        # empty flags mean "not given"
        object.__setattr__(self, "prefix", self.prefix or None)
        object.__setattr__(self, "substring", self.substring or None)
        if self.prefix is None and self.substring is None:
            raise ValueError("at least one of prefix or substring is required")

    def matches(self, description: str) -> bool:
        if self.prefix is not None and description.startswith(self.prefix):
            return True
        if self.substring is not None and self.substring in description:
            return True
        return False


@dataclass(frozen=True)
class IngressRule:
    """Snapshot of a security group rule as listed by the provider."""

    rule_id: str
    group_id: str
    ip_protocol: str
    from_port: int
    to_port: int
    cidr_ipv4: Optional[str] = None
    description: str = ""
    is_egress: bool = False

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "IngressRule":
        return cls(
            rule_id=item["SecurityGroupRuleId"],
            group_id=item["GroupId"],
            ip_protocol=item.get("IpProtocol", "-1"),
            from_port=item.get("FromPort", -1),
            to_port=item.get("ToPort", -1),
            cidr_ipv4=item.get("CidrIpv4"),
            description=item.get("Description") or "",
            is_egress=bool(item.get("IsEgress", False)),
        )

    @property
    def ports(self) -> str:
        return f"{self.from_port}-{self.to_port}"


class RuleState(str, Enum):
    PENDING = "pending"
    REVOKED = "revoked"
    AUTHORIZED = "authorized"
    DESCRIBED = "described"
    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class RuleOutcome:
    rule: IngressRule
    state: RuleState = RuleState.PENDING
    # last state reached before a failure
    failed_at: Optional[RuleState] = None
    new_rule_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def lost(self) -> bool:
        return self.failed_at == RuleState.REVOKED


@dataclass
class UpdateSummary:
    outcomes: List[RuleOutcome] = field(default_factory=list)

    def add(self, outcome: RuleOutcome) -> None:
        self.outcomes.append(outcome)

    def _count(self, state: RuleState) -> int:
        return sum(1 for o in self.outcomes if o.state == state)

    @property
    def updated(self) -> int:
        return self._count(RuleState.DONE)

    @property
    def skipped(self) -> int:
        return self._count(RuleState.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(RuleState.FAILED)

    @property
    def lost(self) -> List[IngressRule]:
        return [o.rule for o in self.outcomes if o.lost]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "matched": len(self.outcomes),
            "updated": self.updated,
            "skipped": self.skipped,
            "failed": self.failed,
            "lost": [r.rule_id for r in self.lost],
        }
