"""Tests for clauselab.normalization module."""
from clauselab.normalization import (
    normalize_text,
    prepare_document,
    remove_page_numbers,
    strip_running_headers,
    strip_template_footer,
)


class TestNormalizeText:
    def test_none_and_empty(self) -> None:
        assert normalize_text(None) == ""
        assert normalize_text("") == ""

    def test_collapses_spaces_and_tabs(self) -> None:
        assert normalize_text("a \t  b") == "a b"

    def test_nbsp_and_typographic_spaces(self) -> None:
        text = "Each" + chr(0xA0) + "party" + chr(0x2003) + "shall" + chr(0x3000) + "pay"
        assert normalize_text(text) == "Each party shall pay"

    def test_bom_becomes_space(self) -> None:
        assert normalize_text(chr(0xFEFF) + "Term") == "Term"

    def test_keeps_line_breaks_and_trims_lines(self) -> None:
        assert normalize_text("  first line  \n   second line ") == "first line\nsecond line"

    def test_idempotent(self) -> None:
        text = "  1.\tINDEMNITY " + chr(0xA0) + "\n\n  Each   party  "
        once = normalize_text(text)
        assert normalize_text(once) == once


class TestRemovePageNumbers:
    def test_standalone_number_removed(self) -> None:
        text = "The term is one year.\n12\nThe fee is due monthly."
        cleaned = remove_page_numbers(text)
        assert "\n12\n" not in cleaned
        assert "The term is one year." in cleaned
        assert "The fee is due monthly." in cleaned

    def test_page_label_removed(self) -> None:
        text = "Body text here.\nPage 3 of 10\nMore body text."
        cleaned = remove_page_numbers(text)
        assert "Page 3" not in cleaned

    def test_dashed_marker_removed(self) -> None:
        text = "Body text here.\n- 4 -\nMore body text."
        assert "- 4 -" not in remove_page_numbers(text)

    def test_bracketed_number_removed(self) -> None:
        text = "Body text here\n[7]\nmore body text."
        assert "[7]" not in remove_page_numbers(text)

    def test_number_before_numbered_clause_kept(self) -> None:
        text = "Body text here\n3\n4. Next clause"
        assert "\n3\n" in remove_page_numbers(text)

    def test_collapses_newline_runs(self) -> None:
        assert "\n\n\n" not in remove_page_numbers("a\n\n\n\nb")

    def test_empty(self) -> None:
        assert remove_page_numbers("") == ""


class TestStripTemplateFooter:
    def test_removes_footer(self) -> None:
        text = (
            "Payment is due in 30 days. Agreement between Acme and Beta "
            "Page 2 of 9 (01/2021 v3)"
        )
        assert strip_template_footer(text) == "Payment is due in 30 days."

    def test_no_footer_untouched(self) -> None:
        assert strip_template_footer("  plain clause  ") == "plain clause"


class TestStripRunningHeaders:
    def test_repeated_header_removed(self) -> None:
        header = "Master Services Agreement"
        text = "\n".join([
            header, "1. Services are provided.",
            header, "2. Fees are payable.",
            header, "3. Term is one year.",
        ])
        cleaned = strip_running_headers(text)
        assert header not in cleaned
        assert "2. Fees are payable." in cleaned

    def test_repeated_sentence_kept(self) -> None:
        line = "This line is a sentence."
        text = "\n".join([line] * 3)
        assert strip_running_headers(text) == text

    def test_below_threshold_kept(self) -> None:
        text = "Confidential Draft\nbody\nConfidential Draft"
        assert strip_running_headers(text) == text


class TestPrepareDocument:
    def test_full_chain(self) -> None:
        text = "  1. TERM.  One year.\n12\n2. FEES. Paid monthly.  "
        prepared = prepare_document(text)
        assert prepared.startswith("1. TERM. One year.")
        assert "\n12\n" not in prepared

    def test_none(self) -> None:
        assert prepare_document(None) == ""

