"""General utilities used across the package."""

from depinfo import print_dependencies


def show_versions() -> None:
    """Print dependency information."""
    print_dependencies("autopad")
