"""
Domain records and errors for proactive scheduling.
"""

from .errors import InputError, PatternResolutionFailure, SchedulingError
from .models import (
    AvailabilityHint,
    LocalSlotTime,
    MeetingProposal,
    Message,
    Participant,
    ProactiveResult,
    ProposalSlot,
    SchedulingThread,
    SuggestionQuality,
    TemporalHint,
    ThreadStatus,
    TimeSlotSuggestion,
)
from .time_of_day import TimeOfDay

__all__ = [
    "AvailabilityHint",
    "InputError",
    "LocalSlotTime",
    "MeetingProposal",
    "Message",
    "Participant",
    "PatternResolutionFailure",
    "ProactiveResult",
    "ProposalSlot",
    "SchedulingError",
    "SchedulingThread",
    "SuggestionQuality",
    "TemporalHint",
    "ThreadStatus",
    "TimeOfDay",
    "TimeSlotSuggestion",
]
