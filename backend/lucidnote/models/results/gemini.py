"""
Result models for Gemini transport operations.
"""

from typing import Optional

from lucidnote.models.results.base import ServiceResult


class GenerationResult(ServiceResult):
    """Result of a single generateContent call."""
    text: Optional[str] = None
    error: Optional[str] = None
    status_code: Optional[int] = None
    model_name: Optional[str] = None
    prompt_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    total_tokens: Optional[int] = None
    finish_reason: Optional[str] = None
