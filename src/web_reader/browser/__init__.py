"""
Browser module for web-reader.

Provides Playwright-based browser automation with:
- Browser build acquisition
- Named persistent profiles
- Browser lifecycle management
- Page context wrapper with the operations a run needs
"""

from web_reader.browser.profiles import ProfileStore, validate_profile_name
from web_reader.browser.installer import BrowserInstaller
from web_reader.browser.page_context import PageContext
from web_reader.browser.manager import BrowserManager, open_session

__all__ = [
    "ProfileStore",
    "validate_profile_name",
    "BrowserInstaller",
    "PageContext",
    "BrowserManager",
    "open_session",
]
