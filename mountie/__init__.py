"""Repo Mountie: opens pull requests that add missing license and compliance files."""

__version__ = "0.1.0"
