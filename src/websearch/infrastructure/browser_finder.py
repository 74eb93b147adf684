"""
Browser executable discovery.

Resolves a browser selector (a name such as ``chrome`` or a path) to a
binary for Playwright to launch. Without a selector an installed Chrome is
preferred and Playwright's bundled Chromium is the fallback.
"""

import logging
import os
import shutil
import sys
from pathlib import Path
from typing import Dict, List, Optional

from ..exceptions import BrowserNotFoundError

logger = logging.getLogger(__name__)


# Executable names looked up on PATH
BROWSER_COMMANDS: Dict[str, List[str]] = {
    "chrome": ["google-chrome", "google-chrome-stable", "chrome"],
    "chromium": ["chromium", "chromium-browser"],
    "edge": ["microsoft-edge", "microsoft-edge-stable", "msedge"],
    "brave": ["brave-browser", "brave"],
}

# Standard install locations per platform
BROWSER_PATHS: Dict[str, Dict[str, List[str]]] = {
    "darwin": {
        "chrome": ["/Applications/Google Chrome.app/Contents/MacOS/Google Chrome"],
        "chromium": ["/Applications/Chromium.app/Contents/MacOS/Chromium"],
        "edge": ["/Applications/Microsoft Edge.app/Contents/MacOS/Microsoft Edge"],
        "brave": ["/Applications/Brave Browser.app/Contents/MacOS/Brave Browser"],
    },
    "win32": {
        "chrome": [r"Google\Chrome\Application\chrome.exe"],
        "chromium": [r"Chromium\Application\chrome.exe"],
        "edge": [r"Microsoft\Edge\Application\msedge.exe"],
        "brave": [r"BraveSoftware\Brave-Browser\Application\brave.exe"],
    },
    "linux": {
        "chrome": ["/opt/google/chrome/chrome", "/usr/bin/google-chrome"],
        "chromium": ["/usr/bin/chromium", "/usr/bin/chromium-browser", "/snap/bin/chromium"],
        "edge": ["/opt/microsoft/msedge/msedge"],
        "brave": ["/opt/brave.com/brave/brave"],
    },
}


def _platform_candidates(name: str, platform: str) -> List[str]:
    key = "linux" if platform.startswith("linux") else platform
    paths = BROWSER_PATHS.get(key, {}).get(name, [])
    if key != "win32":
        return paths

    # Windows installs live under one of several program roots
    roots = [
        os.environ.get(var)
        for var in ("LOCALAPPDATA", "PROGRAMFILES", "PROGRAMFILES(X86)")
    ]
    return [str(Path(root) / path) for root in roots if root for path in paths]


def locate_browser(name: str, platform: Optional[str] = None) -> Optional[str]:
    """
    Look up a known browser by name.

    Args:
        name: One of BROWSER_COMMANDS' keys
        platform: Override for sys.platform

    Returns:
        Path to the executable or None if it is not installed
    """
    platform = platform or sys.platform

    for command in BROWSER_COMMANDS.get(name, []):
        found = shutil.which(command)
        if found:
            return found

    for candidate in _platform_candidates(name, platform):
        if Path(candidate).is_file():
            return candidate

    return None


def find_browser(selector: Optional[str] = None) -> Optional[str]:
    """
    Resolve a browser selector to an executable path.

    Args:
        selector: Browser name, executable path, or None for auto-detection

    Returns:
        Executable path, or None to use Playwright's bundled Chromium

    Raises:
        BrowserNotFoundError: If an explicit selector cannot be resolved
    """
    if selector is None:
        path = locate_browser("chrome")
        if path:
            logger.debug(f"Auto-detected Chrome at {path}")
        else:
            logger.debug("No installed Chrome found, using bundled Chromium")
        return path

    if Path(selector).expanduser().is_file():
        return str(Path(selector).expanduser())

    name = selector.lower()
    if name not in BROWSER_COMMANDS:
        raise BrowserNotFoundError(selector)

    path = locate_browser(name)
    if path is None:
        raise BrowserNotFoundError(selector)

    logger.debug(f"Resolved browser '{selector}' to {path}")
    return path
