"""버그 API 클라이언트 패키지.

Bug API client package — outbound HTTP wrapper used by the HTML pages.
"""

from bugtracker.client.bug_client import (
    BugApiError,
    BugClient,
    BugClientError,
    BugConnectionError,
)

__all__ = ["BugApiError", "BugClient", "BugClientError", "BugConnectionError"]
