"""
multifile-loader — turn directory-based components into bundler modules.
"""

__version__ = "0.1.0"
