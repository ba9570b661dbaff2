"""
Hanlon server configuration core.
"""

__version__ = "1.0.0"
