"""Tests for venv_cleaner package."""


def test_package_imports():
    """Test that the package can be imported successfully."""
    import venv_cleaner

    assert venv_cleaner is not None


def test_package_version():
    """Test that the package has a version string."""
    from venv_cleaner import __version__

    assert __version__ == "0.1.0"


def test_main_module_exposes_cli():
    """Test that python -m venv_cleaner runs the click group."""
    from venv_cleaner.__main__ import main
    from venv_cleaner.cli import main as cli_main

    assert main is cli_main
