"""
strands-hue: Philips Hue light control tool for Strands Agents.

The ``hue`` tool uses an action parameter to select the operation to perform.
Color tokens (hex, names, temperatures) are resolved by ``strands_hue.colors``.
"""

# Hue tool (require phue)
from strands_hue.hue import hue

__version__ = "0.1.0"

__all__ = [
    "hue",
]
