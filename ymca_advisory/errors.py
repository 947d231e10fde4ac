"""Exceptions raised by the scoring engine and advisory layer.

Transport and parse problems are not raised: the completion client reports
them as failure results and the parser degrades to an empty shell. Only
wiring mistakes and user cancellation surface as exceptions.
"""


class AdvisoryError(Exception):
    """Base class for all advisory engine errors."""


class ConfigurationError(AdvisoryError):
    """Invalid wiring: unknown advisor id, missing credentials, bad rubric."""


class AnalysisCancelled(AdvisoryError):
    """The caller cancelled an in-flight analysis; nothing should be rendered or cached."""

    def __init__(self, message: str = "Analysis cancelled"):
        super().__init__(message)
