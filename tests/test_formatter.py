"""Tests for message transliteration, truncation and perfdata."""

from __future__ import annotations

from winupdate_probe.formatter import (
    CHAR_MAP,
    MAX_MESSAGE_LENGTH,
    PERFDATA_RESERVE,
    TRANSPORT_LIMIT,
    format_result,
    transliterate,
    truncate,
)
from winupdate_probe.models import Classification, ProbeStatus


class TestTransliterate:
    def test_umlaut(self):
        assert transliterate("Sicherheitsupdate für Windows") == "Sicherheitsupdate fuer Windows"

    def test_sharp_s_and_capitals(self):
        assert transliterate("Größe Übersicht") == "Groesse Uebersicht"

    def test_unmapped_passes_through(self):
        assert transliterate("KB5034441 (x64) 日本") == "KB5034441 (x64) 日本"

    def test_table_targets_are_ascii(self):
        for source, target in CHAR_MAP.items():
            assert len(source) == 1
            assert target.isascii(), source


class TestTruncate:
    def test_limit_fits_transport(self):
        assert MAX_MESSAGE_LENGTH <= TRANSPORT_LIMIT - PERFDATA_RESERVE

    def test_long_message_cut_to_limit(self):
        text = "abcdefghij" * 200
        out = truncate(text)
        assert len(out) == 975
        assert out == text[:975]

    def test_short_message_unchanged(self):
        assert truncate("short") == "short"


class TestFormatResult:
    def test_updates_message_is_bounded(self):
        c = Classification(critical_count=1, optional_count=0)
        raw = "x" * 2000
        result = format_result(ProbeStatus.CRITICAL, raw, c)
        assert result.message == raw[:975]
        assert result.perf_data.render() == "critical=1;optional=0;hidden=0"

    def test_transliteration_before_truncation(self):
        c = Classification(critical_count=1)
        raw = "ü" * 600
        result = format_result(ProbeStatus.CRITICAL, raw, c)
        assert result.message == "ue" * 487 + "u"

    def test_ok_message_is_verbatim(self):
        c = Classification(hidden_count=3)
        result = format_result(ProbeStatus.OK, "OK - 3 hidden updates.", c)
        assert result.message == "OK - 3 hidden updates."
        assert result.perf_data.render() == "critical=0;optional=0;hidden=3"

    def test_no_formatting_without_critical_or_optional(self):
        c = Classification()
        result = format_result(ProbeStatus.OK, "für" * 500, c)
        assert result.message == "für" * 500

    def test_reboot_branch_has_no_perfdata(self):
        result = format_result(ProbeStatus.WARNING, "updates installed, reboot required", None)
        assert result.perf_data is None
        assert result.output_line() == "updates installed, reboot required"
