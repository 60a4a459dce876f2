"""Lazy singleton container for the process-wide shared resources.

The container owns four slots: the default database handle, the repository
store, the mention store and a temporary filesystem dedicated to the running
process. Each slot is built by its provider the first time it is accessed and
the same instance is returned on every later access.

A provider runs at most once per slot, even when several threads race on the
first access. If it fails, the slot is marked failed and every access raises
the same ContainerInitializationError; the provider is never retried.

Example:
    >>> from sourced.core.container import get_repository_store
    >>> store = get_repository_store()
    >>> store is get_repository_store()
    True
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from types import TracebackType
from typing import Any, Generic, TypeVar

from psycopg2.extensions import connection

from sourced.clients.mention_store import MentionStore
from sourced.clients.repository_store import RepositoryStore
from sourced.common.config import SourcedConfig, get_config
from sourced.common.database import open_default_database
from sourced.common.logging import get_logger
from sourced.common.tempfs import (
    OSFilesystem,
    create_temporary_filesystem,
    remove_filesystem_root,
)
from sourced.common.tracing import TracingContext

logger = get_logger(__name__)

T = TypeVar("T")

DATABASE = "database"
REPOSITORY_STORE = "repository_store"
MENTION_STORE = "mention_store"
TEMPORARY_FILESYSTEM = "temporary_filesystem"

SLOTS = (DATABASE, REPOSITORY_STORE, MENTION_STORE, TEMPORARY_FILESYSTEM)


class ContainerError(Exception):
    """Base exception for container operations."""

    pass


class ContainerInitializationError(ContainerError):
    """Raised when a slot's provider fails.

    Attributes:
        slot: Name of the slot whose provider failed.
    """

    def __init__(self, slot: str, cause: BaseException) -> None:
        self.slot = slot
        super().__init__(f"Failed to initialize {slot}: {cause}")


class ContainerClosedError(ContainerError):
    """Raised when a slot is accessed after the container was closed."""

    pass


class SlotState(str, Enum):
    """Lifecycle of a container slot."""

    UNSET = "unset"
    INITIALIZING = "initializing"
    SET = "set"
    FAILED = "failed"


class _Slot(Generic[T]):
    """One lazily initialized value guarded by its own lock."""

    def __init__(
        self, name: str, provider: Callable[[], T], is_closed: Callable[[], bool]
    ) -> None:
        self.name = name
        self._provider = provider
        self._is_closed = is_closed
        self._lock = threading.RLock()
        self.state = SlotState.UNSET
        self.value: T | None = None
        self.error: ContainerInitializationError | None = None

    def get(self) -> T:
        if self.state is SlotState.SET:
            return self.value  # type: ignore[return-value]

        with self._lock:
            if self.state is SlotState.SET:
                return self.value  # type: ignore[return-value]
            if self.state is SlotState.FAILED:
                raise self.error  # type: ignore[misc]
            if self.state is SlotState.INITIALIZING:
                # Only the initializing thread can get here, the lock is reentrant.
                raise ContainerError(f"Circular dependency while initializing {self.name}")
            if self._is_closed():
                raise ContainerClosedError(f"Container is closed, cannot access {self.name}")

            self.state = SlotState.INITIALIZING
            with TracingContext(self.name):
                logger.debug("Initializing container slot", extra={"slot": self.name})
                try:
                    value = self._provider()
                except BaseException as e:
                    # KeyboardInterrupt and SystemExit also leave the slot failed,
                    # but propagate unchanged.
                    self.state = SlotState.FAILED
                    self.error = ContainerInitializationError(self.name, e)
                    self.error.__cause__ = e
                    logger.critical(
                        "Container slot initialization failed",
                        extra={"slot": self.name, "error": repr(e)},
                    )
                    if not isinstance(e, Exception):
                        raise
                    raise self.error from e

                self.value = value
                self.state = SlotState.SET
                logger.info("Container slot initialized", extra={"slot": self.name})
            return value

    def settled_value(self) -> T | None:
        """Return the value once no initialization is in flight, or None if unset."""
        with self._lock:
            return self.value if self.state is SlotState.SET else None


@dataclass(frozen=True)
class ContainerProviders:
    """Construction logic for each slot.

    Defaults build the production resources; tests and embedding applications
    pass substitutes.
    """

    database: Callable[[SourcedConfig], connection] = open_default_database
    repository_store: Callable[[connection], RepositoryStore] = RepositoryStore
    mention_store: Callable[[connection], MentionStore] = MentionStore
    temporary_filesystem: Callable[[str], OSFilesystem] = create_temporary_filesystem


class Container:
    """Holds the lazily built, process-lifetime resources.

    Configuration is resolved on first need, so overrides applied before the
    first access (environment or an explicit config) take effect.

    Example:
        >>> container = Container(SourcedConfig(temp_dir="/tmp/sourced_test"))
        >>> fs = container.temporary_filesystem()
        >>> fs is container.temporary_filesystem()
        True
    """

    def __init__(
        self,
        config: SourcedConfig | None = None,
        providers: ContainerProviders | None = None,
    ) -> None:
        self._config = config
        self._providers = providers or ContainerProviders()
        self._closed = False
        self._close_lock = threading.Lock()

        self._slots: dict[str, _Slot[Any]] = {
            DATABASE: _Slot(
                DATABASE, lambda: self._providers.database(self.config), self._is_closed
            ),
            REPOSITORY_STORE: _Slot(
                REPOSITORY_STORE, lambda: self._providers.repository_store(self.database()),
                self._is_closed,
            ),
            MENTION_STORE: _Slot(
                MENTION_STORE, lambda: self._providers.mention_store(self.database()),
                self._is_closed,
            ),
            TEMPORARY_FILESYSTEM: _Slot(
                TEMPORARY_FILESYSTEM,
                lambda: self._providers.temporary_filesystem(self.config.temp_dir),
                self._is_closed,
            ),
        }

    @property
    def config(self) -> SourcedConfig:
        """Configuration in effect, pinned on first use."""
        if self._config is None:
            self._config = get_config()
        return self._config

    @property
    def closed(self) -> bool:
        return self._closed

    def _is_closed(self) -> bool:
        return self._closed

    def state(self, slot: str) -> SlotState:
        """Return the lifecycle state of a slot by name."""
        try:
            return self._slots[slot].state
        except KeyError:
            raise ContainerError(f"Unknown container slot: {slot}") from None

    def states(self) -> dict[str, SlotState]:
        return {name: slot.state for name, slot in self._slots.items()}

    def _get(self, slot: str) -> Any:
        if self._closed:
            raise ContainerClosedError(f"Container is closed, cannot access {slot}")
        return self._slots[slot].get()

    def database(self) -> connection:
        """Return the default database handle, opening it on first call.

        Raises:
            ContainerInitializationError: If the database cannot be opened.
        """
        return self._get(DATABASE)

    def repository_store(self) -> RepositoryStore:
        """Return the RepositoryStore bound to the default database.

        Raises:
            ContainerInitializationError: If the store or the database fails to build.
        """
        return self._get(REPOSITORY_STORE)

    def mention_store(self) -> MentionStore:
        """Return the MentionStore bound to the default database.

        Raises:
            ContainerInitializationError: If the store or the database fails to build.
        """
        return self._get(MENTION_STORE)

    def temporary_filesystem(self) -> OSFilesystem:
        """Return a filesystem dedicated to this process for temporary files.

        The first call creates ``<temp_dir>/<unique name>`` on disk.

        Raises:
            ContainerInitializationError: If the directory cannot be created.
        """
        return self._get(TEMPORARY_FILESYSTEM)

    def close(self) -> None:
        """Release resources that were initialized.

        Waits for slots that are still initializing, then closes the database
        handle and, when ``remove_temp_dir_on_close`` is set, deletes the
        temporary directory. Slots are not reset; further access raises
        ContainerClosedError. Safe to call more than once.
        """
        with self._close_lock:
            if self._closed:
                return
            self._closed = True

        # Waits for any initialization in flight; slots not yet started now
        # refuse to initialize.
        db = self._slots[DATABASE].settled_value()
        if db is not None:
            try:
                db.close()
                logger.info("Database handle closed")
            except Exception as e:
                logger.exception("Error closing database handle", extra={"error": str(e)})

        fs = self._slots[TEMPORARY_FILESYSTEM].settled_value()
        if fs is not None and self.config.remove_temp_dir_on_close:
            try:
                remove_filesystem_root(fs)
            except OSError as e:
                logger.exception("Error removing temporary directory", extra={"error": str(e)})

    def __enter__(self) -> "Container":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


# ========== Process default container ==========

_default_container: Container | None = None
_default_lock = threading.Lock()


def get_container() -> Container:
    """Return the process default container, creating it on first call."""
    global _default_container
    if _default_container is None:
        with _default_lock:
            if _default_container is None:
                _default_container = Container()
    return _default_container


def reset_container() -> None:
    """Forget the process default container (for test isolation).

    The discarded container is not closed and its slots are left as they are.
    """
    global _default_container
    with _default_lock:
        _default_container = None


def get_database() -> connection:
    """Return the default database handle of the process."""
    return get_container().database()


def get_repository_store() -> RepositoryStore:
    """Return the default RepositoryStore of the process."""
    return get_container().repository_store()


def get_mention_store() -> MentionStore:
    """Return the default MentionStore of the process."""
    return get_container().mention_store()


def get_temporary_filesystem() -> OSFilesystem:
    """Return the temporary filesystem dedicated to this process."""
    return get_container().temporary_filesystem()


def must(accessor: Callable[[], T]) -> T:
    """Call an accessor and stop the process if its resource cannot be built.

    Args:
        accessor: Zero-argument accessor such as ``get_database``.

    Returns:
        The resource returned by the accessor.

    Raises:
        SystemExit: With status 1 on ContainerInitializationError.
    """
    try:
        return accessor()
    except ContainerInitializationError as e:
        logger.critical(
            "Cannot continue without required resource",
            extra={"slot": e.slot, "error": str(e)},
        )
        raise SystemExit(1) from e


__all__ = [
    "DATABASE",
    "MENTION_STORE",
    "REPOSITORY_STORE",
    "SLOTS",
    "TEMPORARY_FILESYSTEM",
    "Container",
    "ContainerClosedError",
    "ContainerError",
    "ContainerInitializationError",
    "ContainerProviders",
    "SlotState",
    "get_container",
    "get_database",
    "get_mention_store",
    "get_repository_store",
    "get_temporary_filesystem",
    "must",
    "reset_container",
]
