"""Outcomes of learning, prediction and resonance search."""

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple


class ActivationResult:
    """Base type for the outcome of ``learn`` and ``predict``."""

    @property
    def is_success(self) -> bool:
        return False


@dataclass(frozen=True)
class Success(ActivationResult):
    """A category accepted the pattern (or was created for it)."""

    category_index: int
    activation: float
    weight: Any = field(default=None, compare=False, repr=False)
    match_score: float = 1.0
    created: bool = False

    @property
    def is_success(self) -> bool:
        return True


@dataclass(frozen=True)
class NoMatch(ActivationResult):
    """No category resonated with the pattern."""

    reason: str = "no category passed vigilance"

    @classmethod
    def instance(cls) -> "NoMatch":
        return _NO_MATCH


_NO_MATCH = NoMatch()


@dataclass(frozen=True)
class DeepResult(Success):
    """Success of a hierarchical step, with the category chosen at each layer."""

    layer_categories: Tuple[int, ...] = ()


@dataclass(frozen=True)
class MatchOutcome:
    """
    Result of a resonance search.

    ``index`` is ``None`` when no category passed vigilance. ``attempts`` is
    the number of candidates whose match score was evaluated.
    """

    index: Optional[int]
    activation: float = 0.0
    match_score: float = 0.0
    attempts: int = 0

    @property
    def matched(self) -> bool:
        return self.index is not None

    @classmethod
    def no_match(cls, attempts: int = 0) -> "MatchOutcome":
        return cls(index=None, attempts=attempts)
