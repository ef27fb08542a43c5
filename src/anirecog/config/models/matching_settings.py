"""Matching configuration model.

This module defines the thresholds, weights and bonuses of the title
scorer, and the acceptance threshold the engine applies to fuzzy matches.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from anirecog.shared.constants import ScoringThresholds, ScoringWeights


class MatchingSettings(BaseModel):
    """Title matching thresholds, weights and bonuses.

    Attributes:
        acceptance_threshold: Minimum score for accepting a fuzzy match.
                              Default: 0.8
        min_candidate_score: Candidates scoring lower are dropped.
                             Default: 0.3
        trigram_prefilter: Trigram similarity a title variant must exceed
                           to be scored at all. Default: 0.1
        max_scored_candidates: Length of the ranked candidate list.
                               Default: 20
        jaro_winkler_weight, custom_weight, levenshtein_weight,
        trigram_weight: Weights of the composite title score; the weighted
                        sum is divided by their total.
        custom_exponent, levenshtein_exponent, trigram_exponent: Exponents
                        applied to the corresponding metrics.
        year_bonus: Added when the release year is the start year.
        type_bonus: Added when the release type is the series type.

    Example:
        >>> settings = MatchingSettings()
        >>> settings.acceptance_threshold
        0.8
        >>> settings.weight_sum()
        2.0
    """

    acceptance_threshold: float = Field(
        default=ScoringThresholds.ACCEPTANCE,
        ge=0.0,
        le=2.0,
        description="Minimum score for accepting a fuzzy match",
    )
    min_candidate_score: float = Field(
        default=ScoringThresholds.MIN_CANDIDATE,
        ge=0.0,
        le=2.0,
        description="Minimum score for keeping a candidate",
    )
    trigram_prefilter: float = Field(
        default=ScoringThresholds.TRIGRAM_PREFILTER,
        ge=0.0,
        lt=1.0,
        description="Trigram similarity a title variant must exceed",
    )
    max_scored_candidates: int = Field(
        default=ScoringThresholds.MAX_CANDIDATES,
        ge=1,
        description="Maximum number of ranked candidates",
    )

    jaro_winkler_weight: float = Field(default=ScoringWeights.JARO_WINKLER, ge=0.0)
    custom_weight: float = Field(default=ScoringWeights.CUSTOM, ge=0.0)
    levenshtein_weight: float = Field(default=ScoringWeights.LEVENSHTEIN, ge=0.0)
    trigram_weight: float = Field(default=ScoringWeights.TRIGRAM, ge=0.0)

    custom_exponent: float = Field(default=ScoringWeights.CUSTOM_EXPONENT, gt=0.0)
    levenshtein_exponent: float = Field(default=ScoringWeights.LEVENSHTEIN_EXPONENT, gt=0.0)
    trigram_exponent: float = Field(default=ScoringWeights.TRIGRAM_EXPONENT, gt=0.0)

    year_bonus: float = Field(default=ScoringWeights.YEAR_BONUS, ge=0.0, le=1.0)
    type_bonus: float = Field(default=ScoringWeights.TYPE_BONUS, ge=0.0, le=1.0)

    def weight_sum(self) -> float:
        """Total of the composite score weights."""
        return self.jaro_winkler_weight + self.custom_weight + self.levenshtein_weight + self.trigram_weight

    @model_validator(mode="after")
    def validate_weights(self) -> MatchingSettings:
        """Validate that at least one title metric carries weight."""
        if self.weight_sum() <= 0.0:
            msg = (
                "Title scoring weights must not all be zero. "
                f"jaro_winkler={self.jaro_winkler_weight:.3f}, "
                f"custom={self.custom_weight:.3f}, "
                f"levenshtein={self.levenshtein_weight:.3f}, "
                f"trigram={self.trigram_weight:.3f}"
            )
            raise ValueError(msg)
        return self
