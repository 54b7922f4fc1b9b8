"""Tests for clauselab.headings module."""
from clauselab.headings import ClauseNumber, parse_clause_number, parse_header_title


class TestParseClauseNumber:
    def test_numbered_title_with_period(self) -> None:
        result = parse_clause_number("1. INDEMNITY. Each party shall indemnify the other.")
        assert result == ClauseNumber("1. INDEMNITY", "Each party shall indemnify the other.")

    def test_numbered_title_on_own_line(self) -> None:
        result = parse_clause_number("8. Services for Others\nSupplier may serve other clients.")
        assert result.clause_no == "8. Services for Others"
        assert result.body_text == "Supplier may serve other clients."

    def test_roman_title(self) -> None:
        result = parse_clause_number("IV. TERM\nThe term is one year.")
        assert result.clause_no == "IV. TERM"

    def test_section_title(self) -> None:
        result = parse_clause_number("Section 4 Payment\nFees are due monthly.")
        assert result.clause_no == "Section 4 Payment"
        assert result.body_text == "Fees are due monthly."

    def test_article_title(self) -> None:
        result = parse_clause_number("ARTICLE II Confidentiality. Each party keeps secrets.")
        assert result.clause_no == "ARTICLE II Confidentiality"
        assert result.body_text == "Each party keeps secrets."

    def test_bare_number_without_title(self) -> None:
        result = parse_clause_number("3.")
        assert result.clause_no == ""
        assert result.body_text == "3."

    def test_caps_title(self) -> None:
        result = parse_clause_number("CONFIDENTIALITY\nEach party keeps the other's secrets.")
        assert result.clause_no == "CONFIDENTIALITY"
        assert result.body_text == "Each party keeps the other's secrets."

    def test_no_label(self) -> None:
        text = "  the parties agree to cooperate in good faith  "
        result = parse_clause_number(text)
        assert result.clause_no == ""
        assert result.body_text == "the parties agree to cooperate in good faith"


class TestParseHeaderTitle:
    def test_caps_title_before_period(self) -> None:
        assert parse_header_title("1. INDEMNITY. Each party shall indemnify.") == "INDEMNITY"

    def test_mixed_case_title(self) -> None:
        text = "A. Independent Contractor\nSupplier acts as an independent contractor."
        assert parse_header_title(text) == "Independent Contractor"

    def test_section_title(self) -> None:
        assert parse_header_title("Section 3. Payment\nFees are due.") == "Payment"

    def test_caps_line(self) -> None:
        assert parse_header_title("GOVERNING LAW\nThis agreement is governed by Delaware law.") == (
            "GOVERNING LAW"
        )

    def test_long_title_rejected(self) -> None:
        text = (
            "1. the supplier shall provide all services with due care and skill "
            "and in accordance with good industry practice at all times\nmore"
        )
        assert parse_header_title(text) is None

    def test_no_header(self) -> None:
        assert parse_header_title("The parties agree as follows.") is None
