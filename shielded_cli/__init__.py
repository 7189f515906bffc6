"""
Shielded Pool CLI

Command-line interface for the shielded pool.

Usage:
    python -m shielded_cli zero-hashes --check
    python -m shielded_cli commit --value 100
    python -m shielded_cli tree-proof --leaves leaves.txt --index 0
    python -m shielded_cli serve
"""

__version__ = "0.1.0"
