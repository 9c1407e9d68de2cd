"""Exceptions raised by the model-fitting routines."""


class ConvergenceError(RuntimeError):
    """A numerical fit failed to converge or produced unusable estimates."""
