# src/debate_kit/observability/names.py

"""Standard metric names for debate-kit observability.

Use these constants instead of hardcoded strings for consistency
across the codebase.

Note: All duration metrics are in milliseconds by convention.
Units are handled by the metrics backend (e.g., converted to seconds in Prometheus).
"""

# ============================================================================
# LLM Metrics
# ============================================================================

# Duration
LLM_COMPLETION_DURATION = "llm_completion_duration"

# Counters
LLM_REQUESTS_TOTAL = "llm_requests_total"

# Counters (token usage - monotonic over time for cost/rate tracking)
LLM_TOKENS_PROMPT = "llm_tokens_prompt"
LLM_TOKENS_COMPLETION = "llm_tokens_completion"
LLM_TOKENS_TOTAL = "llm_tokens_total"


# ============================================================================
# Transcription Metrics
# ============================================================================

# Duration
TRANSCRIPTION_DURATION = "transcription_duration"

# Counters
TRANSCRIPTION_REQUESTS_TOTAL = "transcription_requests_total"

# Gauges
TRANSCRIPTION_AUDIO_BYTES = "transcription_audio_bytes"


# ============================================================================
# Document Parsing Metrics
# ============================================================================

# Duration
DOCUMENT_PARSE_DURATION = "document_parse_duration"

# Counters
DOCUMENT_PARSE_ERRORS_TOTAL = "document_parse_errors_total"


# ============================================================================
# Media Acquisition Metrics
# ============================================================================

# Duration
MEDIA_ACQUIRE_DURATION = "media_acquire_duration"

# Counters
MEDIA_ACQUIRE_ERRORS_TOTAL = "media_acquire_errors_total"


# ============================================================================
# Topic Extraction Metrics
# ============================================================================

# Duration
TOPIC_EXTRACTION_DURATION = "topic_extraction_duration"

# Counters
TOPICS_EXTRACTED_TOTAL = "topics_extracted_total"
ARGUMENTS_EXTRACTED_TOTAL = "arguments_extracted_total"


# ============================================================================
# Fallback Strategy Metrics
# ============================================================================

# Duration
STRATEGY_DURATION = "strategy_duration"

# Counters
STRATEGY_FAILURES_TOTAL = "strategy_failures_total"


# ============================================================================
# Reading Recommendation Metrics
# ============================================================================

# Counters
READINGS_REQUESTS_TOTAL = "readings_requests_total"
READINGS_FALLBACK_TOTAL = "readings_fallback_total"


# ============================================================================
# Request Tracking Metrics
# ============================================================================

# Counters
REQUESTS_THROTTLED_TOTAL = "requests_throttled_total"

# Gauges
TRACKER_ENTRIES = "tracker_entries"
