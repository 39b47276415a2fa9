"""Strategy models selecting and configuring a classifier."""

from __future__ import annotations

import logging
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, model_validator

LOGGER = logging.getLogger(__name__)

Granularity = Literal["days", "weeks", "months", "years"]


class StrategyModel(BaseModel):
    """Shared configuration for strategy variants."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class ExtensionStrategy(StrategyModel):
    """Group files by their lowercase extension."""

    kind: Literal["type"] = "type"


class DateStrategy(StrategyModel):
    """Group files by modification date.

    Attributes:
        granularity: Bucket resolution (days, weeks, months, or years).
    """

    kind: Literal["date"] = "date"
    granularity: Granularity = "months"


class SizeStrategy(StrategyModel):
    """Group files into Small/Medium/Large buckets.

    Attributes:
        small_max_mb: Exclusive upper bound of ``Small`` in megabytes.
        medium_max_mb: Exclusive upper bound of ``Medium`` in megabytes.
    """

    kind: Literal["size"] = "size"
    small_max_mb: PositiveFloat = 1.0
    medium_max_mb: PositiveFloat = 10.0

    @model_validator(mode="after")
    def _warn_on_inverted_bounds(self) -> "SizeStrategy":
        if self.small_max_mb > self.medium_max_mb:
            LOGGER.warning(
                "small_max_mb (%s) exceeds medium_max_mb (%s); no file will be Medium.",
                self.small_max_mb,
                self.medium_max_mb,
            )
        return self


class ContentStrategy(StrategyModel):
    """Group files by content family (Images, Documents, ...)."""

    kind: Literal["content"] = "content"


class RecencyStrategy(StrategyModel):
    """Group files by days since last access.

    Attributes:
        recent_max_days: Inclusive upper bound of ``Recently Used``.
        moderate_max_days: Inclusive upper bound of ``Moderately Used``.
    """

    kind: Literal["last used"] = "last used"
    recent_max_days: PositiveFloat = 30.0
    moderate_max_days: PositiveFloat = 90.0

    @model_validator(mode="after")
    def _warn_on_inverted_bounds(self) -> "RecencyStrategy":
        if self.recent_max_days > self.moderate_max_days:
            LOGGER.warning(
                "recent_max_days (%s) exceeds moderate_max_days (%s); "
                "no file will be Moderately Used.",
                self.recent_max_days,
                self.moderate_max_days,
            )
        return self


Strategy = Annotated[
    Union[ExtensionStrategy, DateStrategy, SizeStrategy, ContentStrategy, RecencyStrategy],
    Field(discriminator="kind"),
]

STRATEGY_NAMES = ("type", "date", "size", "content", "last used")


__all__ = [
    "ContentStrategy",
    "DateStrategy",
    "ExtensionStrategy",
    "Granularity",
    "RecencyStrategy",
    "SizeStrategy",
    "STRATEGY_NAMES",
    "Strategy",
    "StrategyModel",
]
