"""Repository discovery, GitHub integration, templating and man pages for issue-driven git workflows."""

__version__ = "0.1.0"