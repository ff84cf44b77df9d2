# phishguard/engine.py

"""
Threat assessment orchestrator.

Per request:

    VALIDATING -> SANITIZING -> PRIMARY_ANALYSIS -> SUCCESS
                                      |
                                      +-> FALLBACK_ANALYSIS -> SUCCESS

Scoring strategies are tried in order and the first one that produces an
Assessment wins. A strategy signals failure only with AnalysisUnavailable;
the heuristic strategy never fails, so assess() always returns a result
once the input has passed validation.
"""

from __future__ import annotations

import json
import logging
from typing import Optional, Protocol, Sequence

from .ai.analyzer import IntelligenceAnalyzer
from .config import EngineConfig
from .errors import AnalysisUnavailable, InputEmpty, InputRejected
from .heuristics import assess_heuristically
from .models import AnalysisResult, Assessment
from .security import is_safe, sanitize

logger = logging.getLogger("phishguard.engine")


class ScoringStrategy(Protocol):
    name: str

    def produce(self, text: str) -> Assessment:
        ...


class PrimaryStrategy:
    name = "primary"

    def __init__(self, analyzer: IntelligenceAnalyzer):
        self.analyzer = analyzer

    def produce(self, text: str) -> Assessment:
        return self.analyzer.assess(text)


class HeuristicStrategy:
    name = "heuristic"

    def produce(self, text: str) -> Assessment:
        return assess_heuristically(text)


class ThreatAssessor:
    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        strategies: Optional[Sequence[ScoringStrategy]] = None,
    ):
        self.config = config or EngineConfig()
        if strategies is None:
            strategies = (
                PrimaryStrategy(IntelligenceAnalyzer(self.config)),
                HeuristicStrategy(),
            )
        self.strategies = tuple(strategies)

    def assess(self, raw_input: str) -> AnalysisResult:
        """
        Assess untrusted text.

        Raises InputRejected when the raw text carries an injection
        signature and InputEmpty when nothing is left after sanitizing.
        Primary-analysis failures are never raised; they route to the
        next strategy.
        """
        check = is_safe(raw_input)
        if not check.safe:
            logger.warning(json.dumps({"event": "input_rejected", "reason": check.reason}))
            raise InputRejected(check.reason or "Unsafe input blocked.")

        text = sanitize(raw_input, self.config.max_input_length)
        if not text:
            logger.info(json.dumps({"event": "input_empty"}))
            raise InputEmpty()

        for strategy in self.strategies:
            try:
                assessment = strategy.produce(text)
            except AnalysisUnavailable as exc:
                logger.warning(
                    json.dumps(
                        {
                            "event": "primary_analysis_failed",
                            "strategy": strategy.name,
                            "error": str(exc),
                        }
                    )
                )
                continue
            return self._commit(text, assessment, strategy.name)

        # only reachable with a custom strategy list lacking the heuristic
        raise AnalysisUnavailable("No scoring strategy produced a result.")

    def _commit(self, text: str, assessment: Assessment, strategy: str) -> AnalysisResult:
        result = AnalysisResult.commit(text, assessment)
        logger.info(
            json.dumps(
                {
                    "event": "analysis_committed",
                    "id": result.id,
                    "score": result.score,
                    "label": result.label.value,
                    "strategy": strategy,
                }
            )
        )
        return result
