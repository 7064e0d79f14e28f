"""Unit tests for the severity model."""
from __future__ import annotations

import pytest

from observance.config import InvalidLevelError
from observance.logging import REMOTE_LEVELS, Severity, compare, to_remote_level


class TestParse:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("trace", Severity.TRACE),
            ("debug", Severity.DEBUG),
            ("info", Severity.INFO),
            ("warn", Severity.WARN),
            ("warning", Severity.WARN),
            ("error", Severity.ERROR),
            ("fatal", Severity.FATAL),
            ("panic", Severity.PANIC),
        ],
    )
    def test_known_names(self, name: str, expected: Severity) -> None:
        assert Severity.parse(name) is expected

    def test_case_and_whitespace_insensitive(self) -> None:
        assert Severity.parse("  ERROR ") is Severity.ERROR

    def test_unknown_name_raises(self) -> None:
        with pytest.raises(InvalidLevelError) as exc_info:
            Severity.parse("verbose")
        assert exc_info.value.level == "verbose"
        assert exc_info.value.code == "invalid_level"

    def test_invalid_level_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            Severity.parse("")

    def test_non_string_raises(self) -> None:
        with pytest.raises(InvalidLevelError):
            Severity.parse(3)  # type: ignore[arg-type]

    def test_coerce_passes_severity_through(self) -> None:
        assert Severity.coerce(Severity.INFO) is Severity.INFO
        assert Severity.coerce("info") is Severity.INFO


class TestOrdering:
    def test_total_order(self) -> None:
        ordered = [
            Severity.TRACE,
            Severity.DEBUG,
            Severity.INFO,
            Severity.WARN,
            Severity.ERROR,
            Severity.FATAL,
            Severity.PANIC,
        ]
        assert sorted(Severity) == ordered

    def test_compare(self) -> None:
        assert compare("info", "error") == -1
        assert compare(Severity.ERROR, "error") == 0
        assert compare("panic", Severity.TRACE) == 1

    def test_labels(self) -> None:
        assert Severity.WARN.label == "warning"
        assert Severity.PANIC.label == "panic"


class TestRemoteMapping:
    def test_table_is_total(self) -> None:
        assert set(REMOTE_LEVELS) == set(Severity)

    @pytest.mark.parametrize(
        ("severity", "remote"),
        [
            (Severity.PANIC, "fatal"),
            (Severity.FATAL, "fatal"),
            (Severity.ERROR, "error"),
            (Severity.WARN, "warning"),
            (Severity.INFO, "info"),
            (Severity.DEBUG, "debug"),
            (Severity.TRACE, "debug"),
        ],
    )
    def test_default_mapping(self, severity: Severity, remote: str) -> None:
        assert to_remote_level(severity) == remote

    def test_unmapped_falls_back_to_nearest_lower(self) -> None:
        table = {Severity.ERROR: "error", Severity.INFO: "info"}
        assert to_remote_level(Severity.WARN, table) == "info"
        assert to_remote_level(Severity.PANIC, table) == "error"

    def test_below_every_entry_is_debug(self) -> None:
        assert to_remote_level(Severity.TRACE, {Severity.ERROR: "error"}) == "debug"
