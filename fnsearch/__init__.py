"""
Type signature search over the exports of published Elm packages.
"""

__version__ = "0.1.0"
