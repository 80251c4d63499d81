"""Allow running venv-cleaner as ``python -m venv_cleaner``."""

from venv_cleaner.cli import main

if __name__ == "__main__":
    main()
