"""
Page-level evasion: request filtering and navigator overrides.

Two layers are applied to every page before it navigates:

- Network: a route handler that lets only top-level navigation requests
  through and aborts every subordinate asset (images, scripts, stylesheets,
  media, XHR). Pages load faster and expose less fingerprint surface.
- Script: init scripts that run before any page script and hide the usual
  automation signals.
"""

import json
import logging
from typing import Any

from ..browser_config import StealthConfig

logger = logging.getLogger(__name__)


# Stealth JavaScript injected into every page.
# Keys are stable so individual overrides can be inspected in tests.
STEALTH_SCRIPTS = {
    "webdriver": """
        Object.defineProperty(navigator, 'webdriver', {
            get: () => undefined,
            configurable: true
        });
    """,
    "languages": """
        Object.defineProperty(navigator, 'languages', {
            get: () => %(languages)s,
            configurable: true
        });
    """,
    "plugins": """
        Object.defineProperty(navigator, 'plugins', {
            get: () => {
                const plugins = %(plugins)s.map((name) => ({ name, filename: 'internal-pdf-viewer' }));
                plugins.item = (index) => plugins[index];
                plugins.namedItem = (name) => plugins.find(p => p.name === name);
                plugins.refresh = () => {};
                return plugins;
            },
            configurable: true
        });
    """,
    "headless": """
        Object.defineProperty(navigator, 'headless', {
            get: () => false,
            configurable: true
        });
    """,
    "permissions": """
        if (window.navigator.permissions) {
            const originalQuery = window.navigator.permissions.query;
            window.navigator.permissions.query = (parameters) => (
                parameters.name === 'notifications' ?
                    Promise.resolve({ state: Notification.permission }) :
                    originalQuery.call(window.navigator.permissions, parameters)
            );
        }
    """,
}


def build_stealth_script(config: StealthConfig) -> str:
    """
    Render the combined init script for a stealth profile.

    Args:
        config: Stealth profile providing languages and plugin names

    Returns:
        JavaScript source ready for ``add_init_script``
    """
    values = {
        "languages": json.dumps(config.languages),
        "plugins": json.dumps(config.plugins),
    }
    return "\n".join(script % values if "%(" in script else script
                     for script in STEALTH_SCRIPTS.values())


def allow_request(request: Any) -> bool:
    """Only top-level navigations may hit the network."""
    return request.is_navigation_request()


async def handle_route(route: Any) -> None:
    """Route handler enforcing ``allow_request`` for one request."""
    if allow_request(route.request):
        await route.continue_()
    else:
        await route.abort()


async def apply_evasions(page: Any, config: StealthConfig) -> None:
    """
    Install request interception and navigator overrides on a fresh page.

    Must run before the page's first navigation.

    Args:
        page: Playwright page
        config: Stealth profile to apply
    """
    await page.add_init_script(build_stealth_script(config))
    await page.route("**/*", handle_route)
    logger.debug(f"Applied stealth profile v{config.version}")
