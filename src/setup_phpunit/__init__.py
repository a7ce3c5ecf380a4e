"""Provision a Local site shell for running the WordPress PHPUnit test suite."""

__version__ = "1.0.0"

__all__: list[str] = ["__version__"]
