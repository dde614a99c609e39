"""
Helpers for photo and signature links stored on student records.
"""

import re
from typing import Optional


DRIVE_HOST = 'drive.google.com'
DRIVE_ID_PATTERNS = (
    re.compile(r'id=([a-zA-Z0-9_-]+)'),
    re.compile(r'/d/([a-zA-Z0-9_-]+)/'),
)


def drive_file_id(url: Optional[str]) -> Optional[str]:
    """File id of a Google Drive share link, if ``url`` is one."""
    if not url or DRIVE_HOST not in url:
        return None
    for pattern in DRIVE_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def direct_image_url(url: Optional[str]) -> Optional[str]:
    """
    Turn a Google Drive share link into a direct view link.

    Any other URL is returned unchanged; empty values come back as ``None``.
    """
    if not url:
        return None
    file_id = drive_file_id(url)
    if file_id is None:
        return url
    return f"https://{DRIVE_HOST}/uc?export=view&id={file_id}"
