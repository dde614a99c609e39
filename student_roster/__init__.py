"""
Student roster kept in sync with a local store or a remote sheet.
"""

__version__ = "1.0.0"
