# phishguard/ai/__init__.py

"""
Grounded intelligence analysis (the only outbound network I/O of the engine).

Exposes:
    analyze_with_intelligence_service(text: str, config, client=None) -> AnalysisResult
"""

from .analyzer import IntelligenceAnalyzer, analyze_with_intelligence_service
