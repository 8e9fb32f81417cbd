"""
Per-repository deployment lock.
"""
import fcntl
import logging
import os
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from ..core.exceptions import RepositoryLockTimeout
from ..monitoring.logs_storage import sanitize_scope


class RepositoryLockManager:
    """
    Serializes deployments of the same repository.
    Uses one advisory file lock per repository, held from anchor capture to the terminal state.
    """

    def __init__(self, lock_dir: str, timeout: float = 30, poll_interval: float = 0.5):
        """
        Initialize lock manager.

        Args:
            lock_dir: Directory where lock files are kept
            timeout: Lock acquisition timeout in seconds
            poll_interval: Delay between acquisition attempts
        """
        self.lock_dir = Path(lock_dir)
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.logger = logging.getLogger(__name__)

        # Ensure directory exists
        self.lock_dir.mkdir(parents=True, exist_ok=True)

    def lock_path(self, repository: str) -> Path:
        return self.lock_dir / f"{sanitize_scope(repository)}.lock"

    @contextmanager
    def hold(self, repository: str) -> Iterator[None]:
        """
        Hold the repository lock for the duration of the block.

        Raises:
            RepositoryLockTimeout: If lock cannot be acquired within timeout
        """
        lock_file = self._acquire(repository)
        try:
            yield
        finally:
            self._release(repository, lock_file)

    def _acquire(self, repository: str):
        lock_path = self.lock_path(repository)
        start_time = time.time()

        self.logger.debug(f"Attempting to acquire deployment lock: {lock_path}")

        while True:
            lock_file = open(lock_path, 'a+')
            try:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
            except BlockingIOError:
                lock_file.close()
                elapsed = time.time() - start_time
                if elapsed >= self.timeout:
                    self.logger.error(
                        f"Failed to acquire deployment lock for {repository} after {self.timeout}s timeout"
                    )
                    raise RepositoryLockTimeout(repository, self.timeout)

                self.logger.debug(
                    f"Deployment lock for {repository} held elsewhere, retrying... "
                    f"({elapsed:.1f}s / {self.timeout}s)"
                )
                time.sleep(self.poll_interval)
                continue
            except OSError:
                lock_file.close()
                raise

            lock_file.seek(0)
            lock_file.truncate()
            lock_file.write(f"{os.getpid()}\n")
            lock_file.flush()
            self.logger.info(f"Deployment lock acquired for {repository}")
            return lock_file

    def _release(self, repository: str, lock_file) -> None:
        try:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
        finally:
            lock_file.close()
        self.logger.info(f"Deployment lock released for {repository}")

    def is_locked(self, repository: str) -> bool:
        """
        Check if a deployment currently holds the repository lock (non-blocking check).
        """
        lock_path = self.lock_path(repository)
        if not lock_path.exists():
            return False

        with open(lock_path, 'a+') as test_file:
            try:
                fcntl.flock(test_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
            except BlockingIOError:
                return True
            fcntl.flock(test_file.fileno(), fcntl.LOCK_UN)
            return False
