# chat_ai/models/api/proactive_response.py
"""
Proactive assistant API response models.
Mirror the dictionaries produced by the scheduling domain models.
"""

from pydantic import BaseModel, Field


class TemporalInfoResponse(BaseModel):
    """Date or time information found in a message."""

    specified: bool = Field(..., description="Whether an exact value was found")
    value: str | None = Field(None, description="ISO date or display time (e.g. 2:00 PM)")
    original: str | None = Field(None, description="Text the value was read from")
    vague: bool = Field(..., description="True unless an exact value was found")
    description: str | None = Field(None, description="Vague label such as 'next week'")
    suggested_value: str | None = Field(None, description="Default time for a vague period")


class AvailabilityHintResponse(BaseModel):
    source_message_index: int = Field(..., description="Index of the hinting message")
    text: str = Field(..., description="Hinting message text")
    date_info: TemporalInfoResponse
    time_info: TemporalInfoResponse


class TimeSlotResponse(BaseModel):
    """Suggested meeting slot."""

    date: str = Field(..., description="Slot date (YYYY-MM-DD)")
    start_time: str = Field(..., description="Start time (h:mm AM/PM)")
    end_time: str = Field(..., description="End time (h:mm AM/PM)")
    quality: str = Field(..., description="best, good or acceptable")
    reason: str = Field(..., description="Why this slot was suggested")


class ParticipantResponse(BaseModel):
    user_id: str
    name: str
    timezone: str


class LocalTimeResponse(BaseModel):
    date: str = Field(..., description="Local date (e.g. Thursday, Jan 16)")
    time: str = Field(..., description="Local start time (h:mm AM/PM)")


class ProposalSlotResponse(BaseModel):
    """Proposed slot with per-timezone rendering and a calendar link."""

    id: str = Field(..., description="Slot ID (slot_<epoch seconds>)")
    start: str = Field(..., description="Slot start (ISO 8601 with offset)")
    end: str = Field(..., description="Slot end (ISO 8601 with offset)")
    day_of_week: str
    date: str = Field(..., description="Display date (e.g. Jan 16, 2025)")
    time: str = Field(..., description="Start time in the scheduling timezone")
    duration_minutes: int
    timezones: dict[str, LocalTimeResponse] = Field(
        default_factory=dict, description="Start time per participant timezone"
    )
    quality: str = Field(..., description="best, good or acceptable")
    quality_label: str = Field(..., description="Display label for the quality tier")
    reason: str
    calendar_url: str = Field(..., description="Google Calendar event template link")


class MeetingProposalResponse(BaseModel):
    """Meeting proposal assembled from a thread's suggested slots."""

    title: str
    purpose: str
    duration: str = Field(..., description="Display duration (e.g. 30 minutes)")
    duration_minutes: int
    participant_count: int
    participant_names: str = Field(..., description="Comma-separated participant names")
    location: str
    timezone: str = Field(..., description="Timezone the slot times are expressed in")
    suggested_times: list[ProposalSlotResponse] = Field(default_factory=list)
    created_at: str


class SchedulingThreadResponse(BaseModel):
    """One scheduling intent detected in the conversation."""

    id: str = Field(..., description="Thread ID (thread_<index>_<epoch seconds>)")
    topic: str = Field(..., description="Short meeting topic")
    purpose: str | None = Field(None, description="Meeting purpose, when enrichment is enabled")
    trigger_message_index: int = Field(..., description="Index of the triggering message")
    trigger_text: str = Field(..., description="Triggering message text")
    date_info: TemporalInfoResponse
    time_info: TemporalInfoResponse
    availability_hints: list[AvailabilityHintResponse] = Field(default_factory=list)
    status: str = Field(..., description="ready, needs_date, needs_time or needs_both")
    suggested_times: list[TimeSlotResponse] = Field(..., description="Up to 3 ranked slots")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Detection confidence")
    created_at: str = Field(..., description="Trigger message timestamp (ISO 8601)")
    matched_keywords: list[str] = Field(default_factory=list)
    message_context: list[str] = Field(default_factory=list)
    participants: list[ParticipantResponse] = Field(default_factory=list)
    proposal: MeetingProposalResponse | None = Field(None, description="Meeting proposal")


class ProactiveAnalysisData(BaseModel):
    threads: list[SchedulingThreadResponse] = Field(..., description="Detected threads")
    total_threads: int = Field(..., description="Number of detected threads")
    needs_action: int = Field(..., description="Threads whose status is not ready")
    conversation_id: str = Field(..., description="Analyzed conversation")
    message_count: int = Field(..., description="Messages scanned")
    duration_ms: float = Field(..., description="Analysis time in milliseconds")
    cached: bool = Field(default=False, description="Served from cache")


class ProactiveAssistantResponse(BaseModel):
    """Response for the proactive assistant endpoint."""

    success: bool = Field(..., description="Whether the analysis succeeded")
    data: ProactiveAnalysisData
