"""
Infrastructure Package.

Browser session lifecycle, page-level evasion, network quiescence and the
bounded work queue shared by every visit of a run.
"""

from .browser_finder import (
    find_browser,
    locate_browser,
    BROWSER_COMMANDS,
)
from .network_idle import NetworkIdleWatcher
from .session import (
    BrowserSession,
    ManagedPage,
    launch_session,
)
from .stealth import (
    allow_request,
    apply_evasions,
    build_stealth_script,
    STEALTH_SCRIPTS,
)
from .work_queue import (
    Outcome,
    WorkQueue,
)

__all__ = [
    # Browser discovery
    "find_browser",
    "locate_browser",
    "BROWSER_COMMANDS",
    # Session
    "BrowserSession",
    "ManagedPage",
    "launch_session",
    "NetworkIdleWatcher",
    # Stealth
    "allow_request",
    "apply_evasions",
    "build_stealth_script",
    "STEALTH_SCRIPTS",
    # Work queue
    "Outcome",
    "WorkQueue",
]
