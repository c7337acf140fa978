"""
marlint-server - Language server bridging editors to the marlint linter.
"""

__version__ = "0.3.0"
