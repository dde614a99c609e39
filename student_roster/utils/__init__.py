"""
Utility modules for the student roster.
"""

from .media_urls import direct_image_url, drive_file_id

__all__ = [
    "direct_image_url",
    "drive_file_id"
]
