"""Command-line entrypoints and dispatch for llmclient."""

def main() -> int:
    """Lazy CLI dispatcher to avoid import side effects.

    Returns:
        int: Process return code.
    """
    from .entrypoints import main as _main

    return _main()

__all__ = ["main"]
