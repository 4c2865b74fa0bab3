"""Credential-aware launcher for the Antora site generator."""
from __future__ import annotations

from .cli import main
from .config import BuildConfig, resolve_config
from .credentials import CredentialStore
from .launcher import BuildLauncher

__all__ = ["BuildConfig", "BuildLauncher", "CredentialStore", "main", "resolve_config"]
