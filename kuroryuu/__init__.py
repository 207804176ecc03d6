"""Kuroryuu — terminal coding agent.

This package currently ships the recent-projects registry and the CLI
that exposes it.
"""

__version__ = "0.1.0"
