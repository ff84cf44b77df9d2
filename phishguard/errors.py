# phishguard/errors.py

"""
Failure conditions of the assessment engine.

Only InputRejected and InputEmpty ever reach a caller of assess().
AnalysisUnavailable is recovered by the heuristic fallback and
DispatchFailed is logged by the dispatcher and dropped.
"""


class PhishGuardError(Exception):
    """Base class for engine errors."""


class InputRejected(PhishGuardError):
    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class InputEmpty(PhishGuardError):
    def __init__(self, message: str = "content is empty"):
        super().__init__(message)


class AnalysisUnavailable(PhishGuardError):
    pass


class DispatchFailed(PhishGuardError):
    pass
