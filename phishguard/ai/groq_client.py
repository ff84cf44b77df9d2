# phishguard/ai/groq_client.py

from __future__ import annotations

from groq import Groq

from phishguard.config import EngineConfig
from phishguard.errors import AnalysisUnavailable


def make_client(config: EngineConfig) -> Groq:
    """
    Build a Groq client for the intelligence service.

    Retries are disabled so the whole call stays inside analyzer_timeout;
    a failed attempt goes straight to the heuristic fallback instead.
    """
    if not config.analyzer_api_key:
        raise AnalysisUnavailable("GROQ_API_KEY is not set.")
    return Groq(
        api_key=config.analyzer_api_key,
        timeout=config.analyzer_timeout,
        max_retries=0,
    )


def groq_chat(client: Groq, messages, model: str, temperature: float = 0.0):
    """Single chat completion; returns the first choice's message."""
    resp = client.chat.completions.create(
        model=model,
        messages=messages,
        temperature=temperature,
    )
    if not resp.choices:
        raise AnalysisUnavailable("Intelligence service returned no choices.")
    return resp.choices[0].message
