"""
urlkit command-line interface.

Usage:
    urlkit tree routes.yaml
    urlkit build routes.yaml api user -p id=42 -q fields=name
    urlkit validate routes.yaml -e api:user,users -e frontend.en:home
"""

__cli_name__ = "urlkit"


def main():
    """Wrapper to avoid eager import of __main__ which causes warnings with -m."""
    from .__main__ import main as _main
    return _main()
