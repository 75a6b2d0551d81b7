"""Exceptions raised by the simulation engine."""


class FinanceSimError(Exception):
    """Base class for all engine errors."""


class InvalidParameter(FinanceSimError, ValueError):
    """An input violates the domain precondition of a calculation.

    Raised before any result is built, so callers never receive a partially
    populated simulation.
    """


class NumericalNonConvergence(FinanceSimError):
    """The effective-rate solver ran out of iterations.

    Only raised when the solver is called with ``strict=True``; otherwise the
    last estimate is returned with ``converged=False``.
    """

    def __init__(self, message: str, estimate=None, iterations: int = 0) -> None:
        super().__init__(message)
        self.estimate = estimate
        self.iterations = iterations
