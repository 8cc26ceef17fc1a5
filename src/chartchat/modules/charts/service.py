"""
ChartChat Charts - Service.

A chart session pairs one embedded report with the configuration mirror the
conversation builds up. All host work for a session goes through its
request serializer.
"""

import logging

from chartchat.config import Settings, get_settings
from chartchat.core.session_store import InMemorySessionStore
from chartchat.exceptions import SessionClosedException
from chartchat.host import Report, create_report
from chartchat.modules.charts.applier import ApplyOutcome, IntentApplier
from chartchat.modules.charts.locator import locate_chart_visual
from chartchat.modules.charts.mirror import ConfigurationMirror, resync_configuration
from chartchat.modules.charts.roles import RoleMutator
from chartchat.modules.charts.schemas import ChartConfiguration, ChartIntent
from chartchat.modules.charts.serializer import RequestSerializer

logger = logging.getLogger(__name__)


class ChartSession:
    """Chart state for one conversation."""

    def __init__(self, session_id: str, report: Report, timeout_seconds: float | None = None):
        self.session_id = session_id
        self.report = report
        self.timeout_seconds = timeout_seconds
        self.mirror = ConfigurationMirror()
        self.serializer = RequestSerializer(name=session_id)
        self.resynced = False
        self.closed = False

    async def apply_intent(self, intent: ChartIntent) -> ApplyOutcome:
        """
        Apply an intent to the session's chart.

        Runs are serialized; the mirror is replaced only when the run
        finished and the merged configuration was complete.
        """

        async def _apply() -> ApplyOutcome:
            self._ensure_open()
            applier = IntentApplier(timeout_seconds=self.timeout_seconds)
            outcome = await applier.apply(self.report, intent, self.mirror.snapshot())
            if outcome.committed:
                self.mirror.replace(outcome.configuration)
                self.resynced = True
            return outcome

        return await self.serializer.run(_apply)

    def get_applied_configuration(self) -> ChartConfiguration:
        return self.mirror.snapshot()

    async def on_rendered(self) -> ChartConfiguration:
        """Read the live visual into the mirror, once per session."""

        async def _resync() -> ChartConfiguration:
            self._ensure_open()
            if self.resynced:
                return self.mirror.snapshot()
            visual = await locate_chart_visual(self.report, self.timeout_seconds)
            configuration = await resync_configuration(visual, RoleMutator(timeout_seconds=self.timeout_seconds))
            self.mirror.replace(configuration)
            self.resynced = True
            return self.mirror.snapshot()

        return await self.serializer.run(_resync)

    def _ensure_open(self) -> None:
        if self.closed:
            raise SessionClosedException(self.session_id)

    async def close(self) -> None:
        """Release the report. Callers hold the serializer."""
        self.closed = True
        await self.report.aclose()


class ChartsService:
    """Creates, looks up and ends chart sessions."""

    def __init__(
        self,
        store: InMemorySessionStore[ChartSession] | None = None,
        settings: Settings | None = None,
    ):
        self.store = store if store is not None else SESSION_STORE
        self.settings = settings or get_settings()

    def _create_session(self, session_id: str) -> ChartSession:
        logger.info(f"Creating chart session {session_id} [host={self.settings.host.mode}]")
        return ChartSession(
            session_id,
            create_report(self.settings, session_id),
            timeout_seconds=self.settings.host.timeout_seconds,
        )

    def get_session(self, session_id: str) -> ChartSession:
        return self.store.get_or_create(session_id, self._create_session)

    async def apply_intent(self, session_id: str, intent: ChartIntent) -> ApplyOutcome:
        return await self.get_session(session_id).apply_intent(intent)

    def get_applied_configuration(self, session_id: str) -> ChartConfiguration:
        return self.get_session(session_id).get_applied_configuration()

    async def on_rendered(self, session_id: str) -> ChartConfiguration:
        return await self.get_session(session_id).on_rendered()

    async def end_session(self, session_id: str) -> bool:
        """
        Drop a session once its in-flight run has finished.

        Returns False when there was no open session to end.
        """
        session = self.store.get(session_id)
        if session is None:
            return False

        async def _end() -> bool:
            if session.closed:
                return False
            if self.store.get(session_id) is session:
                self.store.pop(session_id)
            await session.close()
            return True

        ended = await session.serializer.run(_end)
        if ended:
            logger.info(f"Ended chart session {session_id}")
        return ended


# Process-local sessions; a session's mirror lives exactly as long as its entry.
SESSION_STORE: InMemorySessionStore[ChartSession] = InMemorySessionStore()
