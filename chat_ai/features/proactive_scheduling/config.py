"""
Immutable configuration for the scheduling pipeline.

Built by ``Settings.scheduling_config()`` and passed explicitly into the
coordinator, so the pipeline never reads process-wide state.
"""

from dataclasses import dataclass

from .pipeline.patterns import AVAILABILITY_VOCABULARY, SCHEDULING_KEYWORDS


@dataclass(frozen=True, slots=True)
class SchedulingConfig:
    timezone: str = "America/Los_Angeles"
    trigger_radius: int = 2
    availability_radius: int = 3
    default_duration_minutes: int = 30
    confidence_floor: float = 0.5
    confidence_cap: float = 0.95
    confidence_step: float = 0.15
    topic_max_length: int = 50
    context_radius: int = 2
    meeting_location: str = "Virtual"
    keywords: tuple[str, ...] = SCHEDULING_KEYWORDS
    availability_vocabulary: tuple[str, ...] = AVAILABILITY_VOCABULARY

    def __post_init__(self):
        if self.trigger_radius < 0 or self.availability_radius < 0:
            raise ValueError("Radii must be non-negative")
        if not 0.0 <= self.confidence_floor <= self.confidence_cap <= 1.0:
            raise ValueError("Confidence bounds must satisfy 0 <= floor <= cap <= 1")
        if self.default_duration_minutes <= 0:
            raise ValueError("Default duration must be positive")
        if not self.keywords:
            raise ValueError("At least one scheduling keyword is required")
