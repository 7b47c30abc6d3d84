# ============================================================================
# SCRIPT SOURCES
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Core - Script location reader
# PURPOSE: Read script text from a file path or URL
# CREATED: 18 OCT 2026
# ============================================================================
"""
Script Sources

A script location is one of:

- a filesystem path (relative paths resolve against the working directory)
- a file:// URL
- an http:// or https:// URL, fetched with httpx

Missing files (or HTTP 404) raise ScriptFileNotFound; every other read
failure raises ScriptIoError. The content is read on every call.
"""

import logging
from typing import Optional
from urllib.parse import urlparse
from urllib.request import url2pathname

import httpx

from core.config import ScriptDefaults, get_defaults
from core.errors import ScriptFileNotFound, ScriptIoError

logger = logging.getLogger(__name__)


class ScriptLoader:
    """Reads script text from a location."""

    def __init__(self, defaults: Optional[ScriptDefaults] = None):
        self.defaults = defaults or get_defaults().script

    def load(self, location: str) -> str:
        """
        Read the full text at a script location.

        Raises:
            ScriptFileNotFound: The file (or URL) does not exist
            ScriptIoError: Any other failure reading it
        """
        parsed = urlparse(location)
        scheme = parsed.scheme.lower()

        if scheme in ("http", "https"):
            return self._fetch(location)
        if scheme == "file":
            return self._read_file(location, url2pathname(parsed.netloc + parsed.path))
        # Single-letter schemes are Windows drive letters
        if scheme == "" or len(scheme) == 1:
            return self._read_file(location, location)

        raise ScriptIoError(location, f"unsupported location scheme '{scheme}'")

    def _read_file(self, location: str, path: str) -> str:
        logger.debug(f"Reading script file {path}")
        try:
            with open(path, "r", encoding=self.defaults.file_encoding) as f:
                return f.read()
        except FileNotFoundError as e:
            raise ScriptFileNotFound(location) from e
        except (OSError, UnicodeDecodeError) as e:
            raise ScriptIoError(location, str(e)) from e

    def _fetch(self, location: str) -> str:
        logger.debug(f"Fetching script from {location}")
        try:
            with httpx.Client(
                timeout=self.defaults.fetch_timeout_seconds,
                follow_redirects=True,
            ) as client:
                response = client.get(location)
        except httpx.HTTPError as e:
            raise ScriptIoError(location, str(e)) from e

        if response.status_code == 404:
            raise ScriptFileNotFound(location)
        if response.status_code >= 400:
            raise ScriptIoError(location, f"HTTP {response.status_code}")
        return response.text


__all__ = ["ScriptLoader"]
