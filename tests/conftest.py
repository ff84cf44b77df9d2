"""
Pytest fixtures for PhishGuard tests: injected config, fake scoring
strategies and a recording HTTP session for the automation webhook.
"""

from __future__ import annotations

import pytest

from phishguard.config import EngineConfig
from phishguard.engine import HeuristicStrategy, ThreatAssessor
from phishguard.models import Assessment, ThreatLevel

from fakes import FailingStrategy, FixedStrategy, RecordingSession


@pytest.fixture
def config():
    return EngineConfig(
        analyzer_api_key="test-key",
        automation_url="https://automation.example.test/webhook/phishguard",
    )


@pytest.fixture
def failing_primary():
    return FailingStrategy()


@pytest.fixture
def heuristic_assessor(config, failing_primary):
    """Assessor whose primary analyzer always fails, forcing the fallback."""
    return ThreatAssessor(config, strategies=[failing_primary, HeuristicStrategy()])


@pytest.fixture
def grounded_assessment():
    return Assessment(
        score=92,
        label=ThreatLevel.FRAUD,
        explanation="Domain reported in multiple phishing feeds.",
        indicators=[{"type": "URL", "description": "Reported phishing domain", "severity": "HIGH"}],
        grounding_links=[{"title": "PhishTank entry", "uri": "https://phishtank.example/123"}],
    )


@pytest.fixture
def fixed_primary(grounded_assessment):
    return FixedStrategy(grounded_assessment)


@pytest.fixture
def session():
    return RecordingSession()
