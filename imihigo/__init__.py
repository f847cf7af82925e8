"""
Imihigo - performance contract tracking with hierarchical roll-up.
"""

__version__ = "0.1.0"
