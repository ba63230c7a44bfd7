"""Tests for warning policy controls."""

from __future__ import annotations

import warnings

import pytest

from csg2xcsg.errors import UnsupportedVariantError
from csg2xcsg.warning_policy import (
    KNOWN_CODES,
    Csg2XcsgWarning,
    WarningPolicy,
    emit_warning,
    parse_code_list,
)


class TestParseCodeList:
    def test_single_code(self):
        assert parse_code_list("W01") == frozenset({"W01"})

    def test_multiple_codes(self):
        assert parse_code_list("W01,W02") == frozenset({"W01", "W02"})

    def test_whitespace_stripped(self):
        assert parse_code_list("W01 , W03") == frozenset({"W01", "W03"})

    def test_empty_string(self):
        assert parse_code_list("") == frozenset()

    def test_unknown_code_rejected(self):
        with pytest.raises(ValueError, match="Unknown warning code.*W99"):
            parse_code_list("W99")


class TestEmitWarning:
    def test_default_emits_coded_warning(self):
        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            emit_warning("W01", "test message")
        assert len(w) == 1
        assert issubclass(w[0].category, Csg2XcsgWarning)
        assert w[0].message.code == "W01"
        assert "[W01]" in str(w[0].message)

    def test_line_number_in_message(self):
        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            emit_warning("W03", "skipped", line=12)
        assert ".csg file line 12" in str(w[0].message)

    def test_suppressed(self):
        policy = WarningPolicy(suppress=frozenset({"W01"}))
        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            emit_warning("W01", "test message", policy=policy)
        assert len(w) == 0

    def test_warn_as_error(self):
        policy = WarningPolicy(warn_as_error=frozenset({"W02"}))
        with pytest.raises(UnsupportedVariantError, match=r"line 4: \[W02\]") as exc_info:
            emit_warning("W02", "test message", policy=policy, line=4, tag="projection")
        assert exc_info.value.line == 4
        assert exc_info.value.tag == "projection"

    def test_unaffected_code_still_warns(self):
        policy = WarningPolicy(suppress=frozenset({"W02"}))
        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            emit_warning("W01", "test message", policy=policy)
        assert len(w) == 1


class TestKnownCodes:
    def test_contains_expected_codes(self):
        assert KNOWN_CODES == {"W01", "W02", "W03"}
