"""Browser host integration and the one-time observer registration."""

import logging
import threading
from enum import Enum
from importlib.resources import files
from typing import Callable, Protocol

logger = logging.getLogger(__name__)

OBSERVER_SCRIPT_NAME = "markdeck-fitting-observer"


class HostContextError(RuntimeError):
    """Raised when browser-only setup runs without a browser host."""

    pass


class BrowserHost(Protocol):
    """A page environment that can load scripts."""

    def add_script(self, name: str, source: str) -> None: ...


class PageHost:
    """Collects scripts to be embedded in served pages."""

    def __init__(self) -> None:
        self.scripts: dict[str, str] = {}

    def add_script(self, name: str, source: str) -> None:
        self.scripts[name] = source


_host: BrowserHost | None = None


def install_host(host: BrowserHost) -> None:
    """Make ``host`` the browser context of this process."""
    global _host
    _host = host


def uninstall_host() -> None:
    global _host
    _host = None


def current_host() -> BrowserHost:
    """
    Return the installed browser host.

    Raises:
        HostContextError: If none is installed
    """
    if _host is None:
        raise HostContextError("ready() is only valid with a browser host installed")
    return _host


class InitState(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"


class EnvironmentHook:
    """
    Run a host initializer at most once.

    The host check happens on every call, so calling without a host fails
    even after a successful initialization. A failing initializer leaves the
    hook uninitialized.
    """

    def __init__(self, initializer: Callable[[BrowserHost], None]) -> None:
        self._initializer = initializer
        self._state = InitState.UNINITIALIZED
        self._lock = threading.Lock()

    @property
    def state(self) -> InitState:
        return self._state

    def ensure_initialized(self) -> None:
        host = current_host()
        with self._lock:
            if self._state is InitState.INITIALIZED:
                return
            self._initializer(host)
            self._state = InitState.INITIALIZED
        logger.info("Browser observers registered")


def observer_script() -> str:
    """Source of the script that resizes fitted headings."""
    return (files("markdeck") / "static" / "observer.js").read_text(encoding="utf-8")


def register_observers(host: BrowserHost) -> None:
    host.add_script(OBSERVER_SCRIPT_NAME, observer_script())


_observer_hook = EnvironmentHook(register_observers)


def ready() -> None:
    """Register browser observers with the installed host, once per process."""
    _observer_hook.ensure_initialized()
