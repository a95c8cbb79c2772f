"""Hit accounting for served links

Each served view bumps `hit_count` and stamps `first_hit_at` (once per
viewing lifetime). The updated record is returned right away and used for
rendering, while the write to the store runs on a background thread.

NOTE: the write is a plain read-modify-write without compare-and-swap.
      Concurrent views of one link may overwrite each other's increment,
      so hit counts are approximate:

      (lambda 1): get link:abc   -> hitCount 4
      (lambda 2): get link:abc   -> hitCount 4
      (lambda 1): put link:abc   <- hitCount 5
      (lambda 2): put link:abc   <- hitCount 5   (one view lost)

NOTE: Lambda freezes the process as soon as the handler returns, so handlers
      call `drain()` right before responding. A failed or slow write only
      gets logged; the response is never changed by it.
"""

import logging
import functools
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import replace

from cloudlinks.models import AccessLogEntry, LinkRecord
from cloudlinks.dao.base import AccessLogBaseDAO, LinkBaseDAO
from cloudlinks.core.resolver import ResolvedLink


logger = logging.getLogger(__name__)

# Shared by every HitAccountant in this process
HIT_PERSIST_EXECUTOR = ThreadPoolExecutor(max_workers=4, thread_name_prefix='hit-persist')


def count_hit(link: LinkRecord, now: int) -> LinkRecord:
    """Return the record as it looks after one more view at `now`"""
    return replace(link, hit_count=link.hit_count + 1, first_hit_at=link.first_hit_at or now)


def _log_persist_outcome(slug: str, future: Future) -> None:
    error = future.exception()
    if error is not None:
        logger.error(
            'Failed to update hit count.',
            exc_info=error,
            extra={'slug': slug, 'event': 'HIT_PERSIST_FAILED'},
        )


class HitAccountant:
    """Count views of resolved links and record them in the access log

    Example:
        >>> accountant = HitAccountant(link_dao, access_log_dao)
        >>> updated = accountant.record_hit(resolved, now=1760000000)
        >>> updated.hit_count
        1
        >>> accountant.drain(timeout=2.0)
        True
    """

    def __init__(
        self,
        dao: LinkBaseDAO,
        access_log_dao: AccessLogBaseDAO | None = None,
        executor: ThreadPoolExecutor | None = None,
    ):
        self.dao = dao
        self.access_log_dao = access_log_dao
        self.executor = HIT_PERSIST_EXECUTOR if executor is None else executor
        self._pending: list[Future] = []

    def record_hit(self, resolved: ResolvedLink, now: int, access_entry: AccessLogEntry | None = None) -> LinkRecord:
        """Count one view of a resolved link

        Args:
            resolved (ResolvedLink):
                Link to count and the key it was found under.
            now (int):
                Epoch seconds of the view.
            access_entry (AccessLogEntry | None):
                Access log entry to write for this view (skipped if None).

        Returns:
            LinkRecord: the updated record (also being written to the store).
        """
        link = resolved.link
        updated = count_hit(link, now)

        # The store-level expiration is carried over as-is
        future = self.executor.submit(self.dao.put, resolved.key, updated, expiration=link.expiration)
        future.add_done_callback(functools.partial(_log_persist_outcome, link.slug))
        self._pending.append(future)

        if access_entry is not None:
            self.log_access(access_entry)
        return updated

    def log_access(self, entry: AccessLogEntry) -> None:
        if self.access_log_dao is None:
            return
        try:
            self.access_log_dao.write(entry)
        except Exception:
            logger.exception('Failed to write access log.', extra={'slug': entry.slug, 'event': 'ACCESS_LOG_FAILED'})

    def drain(self, timeout: float | None = None) -> bool:
        """Wait for pending store writes

        Returns:
            bool: True if every write finished (successfully or not) in time.
        """
        if not self._pending:
            return True

        _, not_done = wait(self._pending, timeout=timeout)
        self._pending = list(not_done)
        if not_done:
            logger.warning(
                'Hit count writes still pending after %s seconds.',
                timeout,
                extra={'pending': len(not_done), 'event': 'HIT_PERSIST_PENDING'},
            )
        return not not_done
