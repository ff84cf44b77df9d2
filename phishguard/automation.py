# phishguard/automation.py

"""
Automation dispatcher: hands high-risk results to a downstream workflow
webhook (n8n style).

    score <  automation_threshold  -> nothing sent
    score >= automation_threshold  -> one POST of the AutomationPayload
    score >  critical_threshold    -> log record flagged for escalation

dispatch() never raises. It is meant to run after assess() has returned
(e.g. as a FastAPI background task) and has its own timeout, separate
from the analyzer's.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

import requests

from .config import EngineConfig
from .errors import DispatchFailed
from .models import AnalysisResult, AutomationPayload

logger = logging.getLogger("phishguard.automation")

SOURCE_HEADER = "X-PhishGuard-Source"


class AutomationDispatcher:
    def __init__(self, config: EngineConfig, session: Optional[requests.Session] = None):
        self.config = config
        # without a session each delivery is a plain requests.post, so the
        # background threads running dispatch() share no connection state
        self.session = session

    def dispatch(self, result: AnalysisResult, threshold: Optional[int] = None) -> None:
        threshold = self.config.automation_threshold if threshold is None else threshold

        if result.score < threshold:
            logger.debug(
                json.dumps(
                    {
                        "event": "automation_skipped",
                        "id": result.id,
                        "score": result.score,
                        "threshold": threshold,
                    }
                )
            )
            return

        payload = AutomationPayload.from_result(result)
        critical = result.score > self.config.critical_threshold
        logger.info(
            json.dumps(
                {
                    "event": "automation_triggered",
                    "id": result.id,
                    "score": result.score,
                    "label": result.label.value,
                    "severity": "CRITICAL" if critical else "WARNING",
                    "escalate": critical,
                }
            )
        )

        if not self.config.automation_url:
            logger.info(json.dumps({"event": "automation_payload", "payload": payload.to_dict()}))
            return

        try:
            self._deliver(payload)
        except DispatchFailed as exc:
            logger.error(
                json.dumps({"event": "automation_failed", "id": result.id, "error": str(exc)})
            )

    def _deliver(self, payload: AutomationPayload) -> None:
        try:
            resp = (self.session or requests).post(
                self.config.automation_url,
                json=payload.to_dict(),
                headers={SOURCE_HEADER: self.config.automation_source},
                timeout=self.config.automation_timeout,
            )
        except requests.exceptions.Timeout as exc:
            raise DispatchFailed("Automation webhook timed out.") from exc
        except requests.exceptions.RequestException as exc:
            raise DispatchFailed(f"Automation webhook unreachable: {exc}") from exc

        if not resp.ok:
            raise DispatchFailed(f"Automation webhook returned HTTP {resp.status_code}.")
