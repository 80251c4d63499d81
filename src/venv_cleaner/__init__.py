"""venv-cleaner - find, report and clean up Python .venv directories."""

__version__ = "0.1.0"
