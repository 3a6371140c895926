"""svbisect - Bisection for Subversion working copies."""

__version__ = "1.0.0"
