"""Insight prompt construction and the remote text-generation call.

The call is made once; failures surface as ``InsightsError`` without retry.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

import requests

from behavior_engine.schema import Event

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-1.5-flash"

_PROMPT_HEADER = (
    "You are an expert teaching assistant specializing in neurodiversity. Analyze the following "
    "student log data and provide three brief, actionable insights for the teacher. Look for "
    "patterns, potential triggers, and correlations between sensory inputs and feelings."
)

_PROMPT_FOOTER = """Please provide:
1. Three brief, actionable insights based on the patterns you observe
2. Potential environmental or sensory triggers to be aware of
3. Specific strategies or accommodations that might help this student

Keep your response concise and practical for a busy teacher."""


class InsightsError(RuntimeError):
    """Raised when insights cannot be generated."""


def _format_log(event: Event) -> str:
    when = event.timestamp if event.timestamp is not None else event.record_id
    notes = f", Notes: {event.note}" if event.note else ""
    if event.kind == "mood":
        return f"- {when}: Feeling - {event.label}{notes}"
    return f"- {when}: Sensory - {event.category} (Intensity: {event.intensity}){notes}"


def build_prompt(student_name: str, events: list[Event]) -> str:
    """Format the teaching-assistant prompt, one line per log."""

    lines = "\n".join(_format_log(event) for event in events)
    return f"{_PROMPT_HEADER}\n\nStudent: {student_name}\n\nLog Data:\n{lines}\n\n{_PROMPT_FOOTER}"


class InsightsClient:
    """Single-attempt client for a Gemini-style ``generateContent`` endpoint."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        timeout: int = 60,
    ):
        if not api_key:
            raise InsightsError("An API key is required to request insights")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout

    @classmethod
    def from_env(cls, prefix: str = "BEHAVIOR_ENGINE_") -> "InsightsClient":
        return cls(
            api_key=os.getenv(f"{prefix}INSIGHTS_API_KEY", ""),
            base_url=os.getenv(f"{prefix}INSIGHTS_URL", DEFAULT_BASE_URL),
            model=os.getenv(f"{prefix}INSIGHTS_MODEL", DEFAULT_MODEL),
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def generate(self, prompt: str) -> str:
        body = {"contents": [{"parts": [{"text": prompt}]}]}
        try:
            response = requests.post(
                self.endpoint,
                params={"key": self.api_key},
                json=body,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as exc:
            logger.error(f"Insights request failed: {exc}")
            raise InsightsError(f"Insights request failed: {exc}") from exc

        if not response.ok:
            logger.error(f"Insights request returned {response.status_code}")
            if response.status_code == 400:
                raise InsightsError("Invalid API key or request. Please check your API key.")
            if response.status_code == 429:
                raise InsightsError("API rate limit exceeded. Please try again later.")
            raise InsightsError(f"API request failed: {response.status_code} {response.reason}")

        try:
            data = response.json()
        except ValueError as exc:
            raise InsightsError("Unexpected response format from API") from exc

        candidates: Optional[list] = data.get("candidates") if isinstance(data, dict) else None
        if candidates:
            try:
                return candidates[0]["content"]["parts"][0]["text"]
            except (KeyError, IndexError, TypeError) as exc:
                raise InsightsError("Unexpected response format from API") from exc
        error = data.get("error") if isinstance(data, dict) else None
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise InsightsError(message or "API error occurred")
        raise InsightsError("Unexpected response format from API")


def request_insights(student_name: str, events: list[Event], client: InsightsClient) -> str:
    """Generate insights for a student's logs."""

    if not events:
        raise InsightsError("No logs available for this student. Please add some logs first.")
    return client.generate(build_prompt(student_name, events))
