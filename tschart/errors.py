from __future__ import annotations


class ChartError(Exception):
    """Base class for every error raised while laying out a chart."""


class ConfigurationError(ChartError, ValueError):
    """A configured value could not be used; callers fall back to the auto value."""


class InconsistentSeriesError(ChartError, ValueError):
    pass


class DegenerateInputError(ChartError):
    """The merged time range is empty; rendered as a "No Data" placeholder."""


class LayoutGeometryError(ChartError):
    def __init__(self, stage: str, message: str) -> None:
        super().__init__(f"{stage}: {message}")
        self.stage = stage


class LayoutNonConvergenceError(ChartError):
    def __init__(self, iterations: int) -> None:
        super().__init__(f"axis layout did not converge after {iterations} iterations")
        self.iterations = iterations


class UnimplementedModeError(ChartError, NotImplementedError):
    pass
