"""Tests for clauselab.analysis module."""
import pytest

from clauselab.analysis import (
    ALTERNATIVES,
    ANALYSIS_ACTIONS,
    IMPROVEMENTS,
    NO_RISK_NOTES,
    analyze_clause,
    analyze_clause_action,
    assess_balance,
    compliance_report,
    find_risks,
)


class TestFindRisks:
    def test_indemnification(self) -> None:
        risks = find_risks("Supplier shall indemnify Customer.")
        assert risks == ["Broad indemnification obligations detected. Check for reciprocity."]

    def test_liability_without_cap(self) -> None:
        assert "No clear liability cap found in this text." in find_risks("Liability is unlimited.")

    def test_liability_with_cap_suppressed(self) -> None:
        risks = find_risks("Liability is subject to a cap of fees paid.")
        assert risks == list(NO_RISK_NOTES)

    def test_multiple_rules_in_order(self) -> None:
        text = "At its sole discretion Supplier may renew by automatic renewal."
        assert find_risks(text) == [
            "One-sided discretionary power found.",
            "Automatic renewal clause detected. Monitor expiration dates.",
        ]

    def test_no_risks(self) -> None:
        assert find_risks("Headings are for convenience only.") == list(NO_RISK_NOTES)


class TestAssessBalance:
    def test_discretion_is_one_sided(self) -> None:
        result = assess_balance("Supplier may, in its sole discretion, suspend service.")
        assert result.score == 3

    def test_mutual(self) -> None:
        result = assess_balance("The obligations are mutual.")
        assert result.score == 0
        assert "mutual" in result.explanation

    def test_default(self) -> None:
        assert assess_balance("Fees are due monthly.").score == 0


class TestAnalyzeClause:
    def test_full_analysis(self) -> None:
        analysis = analyze_clause("Supplier shall indemnify Customer.")
        assert analysis.improvements == IMPROVEMENTS
        assert analysis.alternatives == ALTERNATIVES
        assert analysis.compliance == compliance_report("")
        assert analysis.compliance.status == "warning"
        assert len(analysis.risks) == 1

    def test_actions(self) -> None:
        assert set(ANALYSIS_ACTIONS) == {"analyze", "compliance", "improve", "balance", "alternatives"}

    def test_action_payloads(self) -> None:
        text = "Supplier may act at its sole option."
        assert set(analyze_clause_action(text, "analyze")) == {"risks"}
        assert analyze_clause_action(text, "compliance")["compliance"]["status"] == "warning"
        assert analyze_clause_action(text, "improve") == {"improvements": list(IMPROVEMENTS)}
        assert analyze_clause_action(text, "balance")["balance"]["score"] == 3
        assert analyze_clause_action(text, "alternatives") == {"alternatives": list(ALTERNATIVES)}

    def test_unknown_action(self) -> None:
        with pytest.raises(ValueError, match="Unknown analysis action"):
            analyze_clause_action("text", "summarize")
