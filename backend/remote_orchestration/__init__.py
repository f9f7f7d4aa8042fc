"""Remote orchestration API — hosts, remotes, tags and their associations."""

__version__ = "1.0.0"
