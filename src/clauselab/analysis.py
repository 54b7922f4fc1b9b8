"""Rule-based review of a single clause.

Keyword heuristics only: flags risky language, scores one-sidedness and
returns fixed drafting guidance. It cannot compare a clause against a
playbook, so compliance checks always come back as a warning.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Literal, get_args

from clauselab.textmatch import find_phrases

type AnalysisAction = Literal["analyze", "compliance", "improve", "balance", "alternatives"]

ANALYSIS_ACTIONS: tuple[str, ...] = get_args(AnalysisAction.__value__)

# (trigger phrases, suppressing phrases, message)
_RISK_RULES: tuple[tuple[tuple[str, ...], tuple[str, ...], str], ...] = (
    (("indemnif",), (), "Broad indemnification obligations detected. Check for reciprocity."),
    (("liability",), ("cap",), "No clear liability cap found in this text."),
    (("sole discretion", "sole option"), (), "One-sided discretionary power found."),
    (("consequential damages",), (), "Exclusion of consequential damages should be mutual."),
    (
        ("automatic renewal", "evergreen"),
        (),
        "Automatic renewal clause detected. Monitor expiration dates.",
    ),
)

NO_RISK_NOTES: tuple[str, ...] = (
    "Standard Clause Review: No high-risk keywords detected in this snippet.",
    "Note: Rule-based analysis is less comprehensive than AI.",
)

IMPROVEMENTS: tuple[str, ...] = (
    "Ensure all defined terms are used consistently.",
    "Consider adding a 'reasonableness' standard to discretionary actions.",
    "Be specific about timelines (e.g., 'within 30 days' instead of 'promptly').",
)

ALTERNATIVES: tuple[str, ...] = (
    "Alternative 1: [Standard mutual version of the clause]",
    "Alternative 2: [Version with limited liability cap]",
)

_DISCRETION_PHRASES = ("at its sole option", "sole discretion")
_ONE_SIDED_SCORE = 3


@dataclass(frozen=True, slots=True)
class BalanceAssessment:
    """0 = balanced; higher favors the party holding discretionary power."""

    score: int
    explanation: str


@dataclass(frozen=True, slots=True)
class ComplianceReport:
    status: str
    findings: tuple[str, ...]
    recommendations: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ClauseAnalysis:
    risks: tuple[str, ...]
    improvements: tuple[str, ...]
    alternatives: tuple[str, ...]
    balance_assessment: BalanceAssessment
    compliance: ComplianceReport


def find_risks(text: str) -> list[str]:
    """Risk messages for every rule whose trigger appears in ``text``."""
    lower = text.lower()
    risks: list[str] = []
    for triggers, suppressors, message in _RISK_RULES:
        if not find_phrases(lower, triggers):
            continue
        if suppressors and find_phrases(lower, suppressors):
            continue
        risks.append(message)
    return risks or list(NO_RISK_NOTES)


def assess_balance(text: str) -> BalanceAssessment:
    lower = text.lower()
    if find_phrases(lower, _DISCRETION_PHRASES):
        return BalanceAssessment(
            _ONE_SIDED_SCORE, "This clause favors the party with discretionary power.",
        )
    if "mutual" in lower:
        return BalanceAssessment(
            0, "This clause is mutual, which is generally considered balanced.",
        )
    return BalanceAssessment(
        0, "This clause appears to be relatively balanced based on standard keyword analysis.",
    )


def compliance_report(text: str) -> ComplianceReport:
    del text  # no playbook to compare against
    return ComplianceReport(
        status="warning",
        findings=("Rule-based engine cannot perform full playbook comparison.",),
        recommendations=("Manually compare this clause against your uploaded playbook rules.",),
    )


def suggest_improvements(text: str) -> list[str]:
    del text
    return list(IMPROVEMENTS)


def suggest_alternatives(text: str) -> list[str]:
    del text
    return list(ALTERNATIVES)


def analyze_clause(text: str) -> ClauseAnalysis:
    """Run every rule-based check over one clause."""
    return ClauseAnalysis(
        risks=tuple(find_risks(text)),
        improvements=tuple(suggest_improvements(text)),
        alternatives=tuple(suggest_alternatives(text)),
        balance_assessment=assess_balance(text),
        compliance=compliance_report(text),
    )


def analyze_clause_action(text: str, action: str) -> dict[str, Any]:
    """Run one named check and return its JSON-ready payload.

    Raises:
        ValueError: for an action outside ``ANALYSIS_ACTIONS``.
    """
    if action == "analyze":
        return {"risks": find_risks(text)}
    if action == "compliance":
        report = compliance_report(text)
        return {
            "compliance": {
                "status": report.status,
                "findings": list(report.findings),
                "recommendations": list(report.recommendations),
            },
        }
    if action == "improve":
        return {"improvements": suggest_improvements(text)}
    if action == "balance":
        return {"balance": asdict(assess_balance(text))}
    if action == "alternatives":
        return {"alternatives": suggest_alternatives(text)}
    raise ValueError(f"Unknown analysis action: {action!r} (expected one of {ANALYSIS_ACTIONS})")
