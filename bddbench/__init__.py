"""Binary decision diagram benchmarks (apply, CNF, Game of Life) with JSON reports."""

__version__ = "0.1.0"

__all__ = ["__version__"]