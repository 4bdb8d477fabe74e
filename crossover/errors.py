# crossover/errors.py


class CrossoverError(Exception):
    """Base class for backtest pipeline errors."""


class InvalidConfiguration(CrossoverError):
    """Bad window length, sub-period bounds or input series.

    Fatal to the configuration that raised it; other cells of a sweep keep running.
    """


class InvalidSignalSequence(CrossoverError):
    """Buy/Sell sequences that cannot be paired. Indicates a bug, never caught."""


class InsufficientDataError(CrossoverError):
    """Not enough realized returns (or zero variance) for a statistic."""
