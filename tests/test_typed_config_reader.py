# tests/test_typed_config_reader.py
#
# Unit tests for tsumesight.common.typed_config.reader


from tsumesight.common.typed_config import QuizConfig, QuizMode, TypedConfigReader


class TestTypedConfigReader:
    def test_get_quiz_returns_quiz_config(self):
        reader = TypedConfigReader({"quiz": {"mode": "mark", "max_questions": 1}})
        cfg = reader.get_quiz()
        assert isinstance(cfg, QuizConfig)
        assert cfg.mode is QuizMode.MARK
        assert cfg.max_questions == 1

    def test_non_dict_section_returns_defaults(self):
        reader = TypedConfigReader({"quiz": "invalid"})
        assert reader.get_quiz() == QuizConfig()

    def test_none_section_returns_defaults(self):
        reader = TypedConfigReader({"quiz": None})
        assert reader.get_quiz() == QuizConfig()

    def test_missing_section_returns_defaults(self):
        reader = TypedConfigReader({})
        assert reader.get_quiz() == QuizConfig()

    def test_changes_reflected_immediately(self):
        """No caching: a changed dict gives the new value"""
        config = {"quiz": {"max_questions": 3}}
        reader = TypedConfigReader(config)
        assert reader.get_quiz().max_questions == 3

        config["quiz"]["max_questions"] = 2
        assert reader.get_quiz().max_questions == 2

    def test_in_place_section_replacement(self):
        config = {"quiz": {"mode": "liberty"}}
        reader = TypedConfigReader(config)
        config["quiz"] = {"mode": "comparison"}
        assert reader.get_quiz().mode is QuizMode.COMPARISON

    def test_section_not_mutated(self):
        section = {"mode": "MARK", "max_questions": "2"}
        TypedConfigReader({"quiz": section}).get_quiz()
        assert section == {"mode": "MARK", "max_questions": "2"}
