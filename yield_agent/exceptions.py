"""Custom exceptions for the yield agent scheduler."""


class YieldAgentError(Exception):
    """Base exception for yield agent scheduler errors."""
    pass


class AgentLoadError(YieldAgentError):
    """Raised when the agent entry point cannot be resolved."""
    pass


class StrategyRunError(YieldAgentError):
    """
    Raised (and handed to on_error) when a run cycle fails.

    Carries which run failed and in which risk mode, so a failure in the
    "low" call can be told apart from one in the "high" call.
    """

    def __init__(self, run_number: int, mode: str, cause: BaseException):
        self.run_number = run_number
        self.mode = mode
        self.cause = cause
        super().__init__(
            f"Run #{run_number} failed in {mode} risk mode: {type(cause).__name__}: {cause}"
        )
