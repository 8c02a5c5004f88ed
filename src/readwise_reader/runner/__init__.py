"""
CLI runner module.

Provides commands:
- init: Write a default config file
- auth: Validate the access token
- save / update / delete: Single-document operations
- list: Guarded, filtered, optionally hydrated listing
- bulk-delete: Batched deletion with per-id results
- tags / search: Tag listing and topic search
"""

from .main import create_cli, main

__all__ = [
    "create_cli",
    "main",
]
