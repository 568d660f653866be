# tsumesight/common/typed_config/reader.py
#
# TypedConfigReader - typed view over a raw settings dict.

from typing import Any

from tsumesight.common.typed_config.models import QuizConfig


class TypedConfigReader:
    """Typed settings reader.

    Calls from_dict() on every access so the latest values are always
    returned. Section dicts are copied before parsing.

    Usage:
        reader = TypedConfigReader(settings)
        quiz = reader.get_quiz()  # QuizConfig
    """

    def __init__(self, config_dict: dict[str, Any]) -> None:
        """Keep a reference to the settings dict (not a copy).

        Args:
            config_dict: Raw settings, e.g. loaded from JSON
        """
        self._config = config_dict

    def get_quiz(self) -> QuizConfig:
        """Quiz settings.

        Returns:
            QuizConfig instance (frozen)
        """
        raw = self._config.get("quiz")
        snapshot = dict(raw) if isinstance(raw, dict) else {}
        return QuizConfig.from_dict(snapshot)
