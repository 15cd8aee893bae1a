"""Per-object interpolation engine."""

from inbetween.core.interpolation.engine import InterpolationEngine, rebuild
from inbetween.core.interpolation.models import (
    EditPlan,
    InsertEdit,
    RemoveEdit,
    ReplaceEdit,
    ScrubDirection,
)

__all__ = [
    "EditPlan",
    "InsertEdit",
    "InterpolationEngine",
    "RemoveEdit",
    "ReplaceEdit",
    "ScrubDirection",
    "rebuild",
]
