"""PowerPrompt: a git-aware powerline prompt segment."""

__version__ = "0.1.0"

__all__ = ["__version__"]
