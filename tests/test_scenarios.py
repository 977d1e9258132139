"""Tests for ``sqlprobe.scenarios`` — step parsing and scenario resolution."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from sqlprobe.errors import ConfigError
from sqlprobe.scenarios import SCENARIOS, Step, parse_step, resolve_steps, run_steps


class TestParseStep:
    def test_bare_operation(self):
        assert parse_step("seq_scan") == Step("seq_scan")

    def test_int_arguments(self):
        assert parse_step("bitmap_scan:1,3") == Step("bitmap_scan", (1, 3))

    def test_mixed_arguments(self):
        assert parse_step("insert_single_table:5,B,10") == Step("insert_single_table", (5, "B", 10))

    def test_whitespace(self):
        assert parse_step("  index_scan : 2 ") == Step("index_scan", (2,))

    def test_string_argument(self):
        assert parse_step("delete_by_index_scan:Updated") == Step("delete_by_index_scan", ("Updated",))

    def test_numeric_text_argument_stays_text(self):
        assert parse_step("delete_by_index_scan:42") == Step("delete_by_index_scan", ("42",))

    def test_table_argument_stays_text(self):
        assert parse_step("insert_single_table:1,7,0") == Step("insert_single_table", (1, "7", 0))

    def test_non_integer_for_integer_parameter(self):
        with pytest.raises(ConfigError, match="row_id must be an integer") as exc_info:
            parse_step("index_scan:abc")
        assert exc_info.value.context["step"] == "index_scan:abc"

    def test_optional_argument(self):
        assert parse_step("count_rows") == Step("count_rows")
        assert parse_step("count_rows:1") == Step("count_rows", (1,))

    def test_unknown_operation(self):
        with pytest.raises(ConfigError, match="Unknown operation 'truncate'") as exc_info:
            parse_step("truncate")
        assert exc_info.value.context["step"] == "truncate"

    def test_missing_argument(self):
        with pytest.raises(ConfigError, match="Invalid arguments for 'index_scan'"):
            parse_step("index_scan")

    def test_too_many_arguments(self):
        with pytest.raises(ConfigError):
            parse_step("seq_scan:1")

    def test_ping_is_not_a_step(self):
        with pytest.raises(ConfigError):
            parse_step("ping")

    def test_str_round_trip(self):
        assert str(parse_step("bitmap_scan:1,3")) == "bitmap_scan:1,3"


class TestScenarios:
    def test_named_scenarios(self):
        assert {"default", "scans", "writes", "prepared", "dual", "locking", "union", "all"} <= set(SCENARIOS)

    @pytest.mark.parametrize("name", sorted(SCENARIOS))
    def test_every_scenario_parses(self, name):
        steps = resolve_steps(name)
        assert steps[0] == Step("initialize")

    def test_default(self):
        assert resolve_steps() == [Step("initialize")]

    def test_unknown_scenario(self):
        with pytest.raises(ConfigError, match="Unknown scenario 'nope'"):
            resolve_steps("nope")

    def test_explicit_steps_win(self):
        assert resolve_steps("all", ["index_scan:1"]) == [Step("index_scan", (1,))]

    def test_empty_steps_fall_back_to_scenario(self):
        assert resolve_steps("union", []) == [Step("initialize"), Step("union", (1,))]


class TestRunSteps:
    def test_calls_in_order(self):
        harness = MagicMock()
        harness.index_scan.return_value = [(1, "hello_1")]

        results = run_steps(harness, [Step("initialize"), Step("index_scan", (1,))])

        harness.initialize.assert_called_once_with()
        harness.index_scan.assert_called_once_with(1)
        assert results[1] == [(1, "hello_1")]

    def test_stops_at_first_failure(self):
        harness = MagicMock()
        harness.seq_scan.side_effect = ConfigError("boom")

        with pytest.raises(ConfigError):
            run_steps(harness, [Step("seq_scan"), Step("union", (1,))])
        harness.union.assert_not_called()
