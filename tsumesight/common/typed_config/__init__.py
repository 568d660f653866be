# tsumesight/common/typed_config - typed configuration accessors
#
# Frozen dataclasses give each settings section a typed view; get_<section>()
# on TypedConfigReader builds them from the raw settings dict.

from tsumesight.common.typed_config.models import (
    QuizConfig,
    QuizMode,
    safe_bool,
    safe_int,
    safe_str,
)
from tsumesight.common.typed_config.reader import TypedConfigReader

__all__ = [
    # Dataclasses
    "QuizConfig",
    "QuizMode",
    # Reader
    "TypedConfigReader",
    # Helper functions
    "safe_int",
    "safe_bool",
    "safe_str",
]
