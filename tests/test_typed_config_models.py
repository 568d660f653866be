# tests/test_typed_config_models.py
#
# Unit tests for tsumesight.common.typed_config.models

from dataclasses import FrozenInstanceError

import pytest

from tsumesight.common.typed_config.models import (
    QuizConfig,
    QuizMode,
    clamp,
    safe_bool,
    safe_int,
    safe_str,
)


# =============================================================================
# safe_int tests
# =============================================================================


class TestSafeInt:
    def test_none_returns_default(self):
        assert safe_int(None, 3) == 3

    def test_int_returns_as_is(self):
        assert safe_int(7, 3) == 7

    def test_zero_returns_zero(self):
        assert safe_int(0, 3) == 0

    def test_string_int_converted(self):
        assert safe_int("5", 3) == 5

    def test_invalid_string_returns_default(self):
        assert safe_int("abc", 3) == 3

    def test_list_returns_default(self):
        assert safe_int([], 3) == 3

    def test_bool_returns_default(self):
        """bool is never read as 1/0"""
        assert safe_int(True, 3) == 3
        assert safe_int(False, 3) == 3

    def test_float_returns_default(self):
        assert safe_int(2.5, 3) == 3
        assert safe_int("2.5", 3) == 3


# =============================================================================
# safe_bool tests
# =============================================================================


class TestSafeBool:
    def test_none_returns_default(self):
        assert safe_bool(None, True) is True
        assert safe_bool(None) is False

    def test_bool_returns_as_is(self):
        assert safe_bool(False, True) is False

    def test_int(self):
        assert safe_bool(1) is True
        assert safe_bool(0, True) is False

    @pytest.mark.parametrize("value", ["true", "True", "1", "yes", "YES"])
    def test_true_strings(self, value):
        assert safe_bool(value) is True

    @pytest.mark.parametrize("value", ["false", "FALSE", "0", "no"])
    def test_false_strings(self, value):
        assert safe_bool(value, True) is False

    def test_typo_returns_default(self):
        assert safe_bool("fasle", True) is True
        assert safe_bool("", True) is True

    def test_other_types_return_default(self):
        assert safe_bool([1], False) is False


# =============================================================================
# safe_str / clamp tests
# =============================================================================


class TestSafeStr:
    def test_none_returns_default(self):
        assert safe_str(None, "liberty") == "liberty"

    def test_empty_returns_default(self):
        assert safe_str("", "liberty") == "liberty"

    def test_non_str_returns_default(self):
        assert safe_str(5, "liberty") == "liberty"

    def test_str_returns_as_is(self):
        assert safe_str("mark", "liberty") == "mark"


def test_clamp():
    assert clamp(0, 1, 2) == 1
    assert clamp(5, 1, 2) == 2
    assert clamp(2, 1, 2) == 2


# =============================================================================
# QuizMode tests
# =============================================================================


class TestQuizMode:
    def test_parse_values(self):
        assert QuizMode.parse("mark", QuizMode.LIBERTY) is QuizMode.MARK
        assert QuizMode.parse(" Comparison ", QuizMode.LIBERTY) is QuizMode.COMPARISON

    def test_parse_enum(self):
        assert QuizMode.parse(QuizMode.MARK, QuizMode.LIBERTY) is QuizMode.MARK

    def test_unknown_returns_default(self, caplog):
        assert QuizMode.parse("count", QuizMode.LIBERTY) is QuizMode.LIBERTY
        assert "Unknown quiz mode" in caplog.text

    def test_non_str_returns_default(self):
        assert QuizMode.parse(None, QuizMode.MARK) is QuizMode.MARK
        assert QuizMode.parse(3, QuizMode.MARK) is QuizMode.MARK


# =============================================================================
# QuizConfig tests
# =============================================================================


class TestQuizConfig:
    def test_defaults(self):
        cfg = QuizConfig()
        assert cfg.mode is QuizMode.LIBERTY
        assert cfg.max_questions == 3
        assert cfg.questions_on_every_move is True
        assert cfg.ask_comparisons is True
        assert cfg.liberty_ceiling == 5
        assert cfg.comparison_max_diff == 1
        assert cfg.skip_saturated is True
        assert cfg.staleness_cap == 4
        assert cfg.quizzing_enabled

    def test_frozen(self):
        cfg = QuizConfig()
        with pytest.raises(FrozenInstanceError):
            cfg.max_questions = 5

    def test_zero_questions_disables_quizzing(self):
        assert not QuizConfig(max_questions=0).quizzing_enabled

    def test_invalid_values_rejected(self):
        with pytest.raises(ValueError):
            QuizConfig(max_questions=-1)
        with pytest.raises(ValueError):
            QuizConfig(liberty_ceiling=0)
        with pytest.raises(ValueError):
            QuizConfig(comparison_max_diff=3)

    def test_from_dict_empty(self):
        assert QuizConfig.from_dict({}) == QuizConfig()

    def test_from_dict_values(self):
        cfg = QuizConfig.from_dict(
            {
                "mode": "comparison",
                "max_questions": "2",
                "questions_on_every_move": "false",
                "ask_comparisons": 0,
                "comparison_max_diff": 2,
            }
        )
        assert cfg.mode is QuizMode.COMPARISON
        assert cfg.max_questions == 2
        assert cfg.questions_on_every_move is False
        assert cfg.ask_comparisons is False
        assert cfg.comparison_max_diff == 2

    def test_from_dict_out_of_range_is_clamped(self):
        """from_dict never raises; out-of-range values are pulled back into range"""
        cfg = QuizConfig.from_dict({"max_questions": -4, "liberty_ceiling": 0, "comparison_max_diff": 9})
        assert cfg.max_questions == 0
        assert cfg.liberty_ceiling == 1
        assert cfg.comparison_max_diff == 2

    def test_from_dict_bad_types_use_defaults(self):
        cfg = QuizConfig.from_dict({"max_questions": True, "skip_saturated": "maybe", "mode": 1})
        assert cfg == QuizConfig()

    def test_to_dict_round_trip(self):
        cfg = QuizConfig(mode=QuizMode.MARK, max_questions=1, questions_on_every_move=False)
        d = cfg.to_dict()
        assert d["mode"] == "mark"
        assert QuizConfig.from_dict(d) == cfg
