# phishguard/__init__.py

"""
PhishGuard threat assessment engine.

Exposes:
    ThreatAssessor(config).assess(raw_text: str) -> AnalysisResult
    AutomationDispatcher(config).dispatch(result, threshold=None) -> None
"""

from .automation import AutomationDispatcher
from .config import EngineConfig
from .engine import ThreatAssessor
from .errors import AnalysisUnavailable, DispatchFailed, InputEmpty, InputRejected
from .models import AnalysisResult, Indicator, ThreatLevel
