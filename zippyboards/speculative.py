"""
Speculative apply with compensating reload.

An optimistic mutation is expressed as three callables: ``apply_locally``
updates in-memory state right away, ``commit_remotely`` persists the change,
and ``reload_authoritative`` replaces local state with the remote truth. When
the commit fails the local speculation is discarded wholesale by reloading;
there is no per-change rollback.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

ApplyLocally = Callable[[], None]
CommitRemotely = Callable[[], Awaitable[object]]
ReloadAuthoritative = Callable[[], Awaitable[object]]


class SpeculativeUpdate:
    def __init__(
        self,
        apply_locally: ApplyLocally,
        commit_remotely: CommitRemotely,
        reload_authoritative: ReloadAuthoritative,
        *,
        label: str = "update",
    ):
        self._apply_locally = apply_locally
        self._commit_remotely = commit_remotely
        self._reload_authoritative = reload_authoritative
        self.label = label
        self.error: Optional[BaseException] = None

    def start(self) -> "asyncio.Task[bool]":
        """Apply locally, then schedule the commit on the running loop.

        Must be called from a coroutine or callback on an event loop. The
        returned task resolves to ``True`` if the commit succeeded.
        """
        loop = asyncio.get_running_loop()
        self._apply_locally()
        return loop.create_task(self.commit())

    async def commit(self) -> bool:
        try:
            await self._commit_remotely()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self.error = exc
            logger.warning("Speculative %s failed, reloading: %s", self.label, exc)
            await self._reload_authoritative()
            return False
        return True


def speculate(
    apply_locally: ApplyLocally,
    commit_remotely: CommitRemotely,
    reload_authoritative: ReloadAuthoritative,
    *,
    label: str = "update",
) -> "asyncio.Task[bool]":
    return SpeculativeUpdate(apply_locally, commit_remotely, reload_authoritative, label=label).start()
