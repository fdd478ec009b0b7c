"""
Result types for city validation.

Issues carry a rule code such as "GRAPH-001"; the prefix before the dash
is the rule category (GRAPH, BLOCK or LOT) and results are reported
grouped by it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

# Report order of rule categories
CATEGORY_ORDER = ("GRAPH", "BLOCK", "LOT")


class Severity(Enum):
    """FAIL breaks a graph or block invariant; WARN leaves the city usable."""
    WARN = "warn"
    FAIL = "fail"

    def __str__(self) -> str:
        return self.name


class ValidationStage(Enum):
    GRAPH = "graph"
    BLOCKS = "blocks"

    def __str__(self) -> str:
        return self.value


@dataclass
class ValidationIssue:
    severity: Severity
    code: str
    message: str
    remediation: Optional[str] = None
    location: Optional[str] = None   # "segment 3-7", "block 12", "nodes 4,9"

    @property
    def category(self) -> str:
        return self.code.split("-", 1)[0]

    def format(self) -> str:
        where = f" {self.location}" if self.location else ""
        text = f"{self.severity} {self.code}{where}: {self.message}"
        if self.remediation:
            text += f" (fix: {self.remediation})"
        return text

    def __str__(self) -> str:
        return self.format()


@dataclass
class ValidationResult:
    issues: List[ValidationIssue] = field(default_factory=list)
    stage: Optional[ValidationStage] = None

    @property
    def failed(self) -> bool:
        return any(i.severity == Severity.FAIL for i in self.issues)

    @property
    def passed(self) -> bool:
        return not self.failed

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.FAIL]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.WARN]

    def add_issue(self, issue: ValidationIssue) -> None:
        self.issues.append(issue)

    def codes(self) -> List[str]:
        """Rule codes of all issues, in order."""
        return [i.code for i in self.issues]

    def merge(self, other: 'ValidationResult') -> 'ValidationResult':
        self.issues.extend(other.issues)
        return self

    def by_category(self) -> Dict[str, List[ValidationIssue]]:
        """Issues grouped by rule category, known categories first."""
        groups: Dict[str, List[ValidationIssue]] = {}
        ranked = sorted(self.issues, key=lambda i: (
            CATEGORY_ORDER.index(i.category) if i.category in CATEGORY_ORDER
            else len(CATEGORY_ORDER)))
        for issue in ranked:
            groups.setdefault(issue.category, []).append(issue)
        return groups

    def raise_for_failures(self) -> None:
        """Raise ValidationError if any FAIL issue is present."""
        if self.failed:
            raise ValidationError(self)

    def report(self) -> str:
        """Multi-line summary: a status line, then issues per rule category.

        Failures are listed before warnings inside each category.
        """
        if not self.issues:
            return "City validation passed: no issues"

        status = "FAILED" if self.failed else "passed"
        lines = [f"City validation {status}: "
                 f"{len(self.errors)} error(s), {len(self.warnings)} warning(s)"]
        for category, issues in self.by_category().items():
            lines.append(f"{category} ({len(issues)}):")
            issues = sorted(issues, key=lambda i: i.severity != Severity.FAIL)
            lines.extend(f"  {issue.format()}" for issue in issues)
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """JSON-ready form, issues keyed by rule category."""
        return {
            'passed': self.passed,
            'stage': str(self.stage) if self.stage else None,
            'fail_count': len(self.errors),
            'warn_count': len(self.warnings),
            'categories': {
                category: [
                    {
                        'code': issue.code,
                        'severity': str(issue.severity),
                        'location': issue.location,
                        'message': issue.message,
                        'remediation': issue.remediation,
                    }
                    for issue in issues
                ]
                for category, issues in self.by_category().items()
            },
        }


class ValidationError(Exception):
    """Raised by ``ValidationResult.raise_for_failures``; carries the result."""

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__(result.report())
