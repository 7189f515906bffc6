"""
CLI command modules.
"""

from shielded_cli.commands import crypto, tree, keys, notes

__all__ = ["crypto", "tree", "keys", "notes"]
