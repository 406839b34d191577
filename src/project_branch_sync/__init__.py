"""Keep platform projects aligned with their repository's default branch."""

__version__ = "0.1.0"
