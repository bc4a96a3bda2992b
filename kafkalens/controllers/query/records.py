"""Records query component.

Owns the record rows shown under a topic view. It is driven only through
``execute`` (reached via an ``ImperativeQueryTrigger``) and pages through the
result by binding ``{:limit}`` and ``{:offset}``.
"""

from __future__ import annotations

import logging

from kafkalens.constants.defaults import PAGE_SIZE_DEFAULT
from kafkalens.controllers.backend.client import BackendClient
from kafkalens.controllers.base import ObservableMixin
from kafkalens.errors import BackendUnavailable
from kafkalens.models.records.record_row import RecordRow
from kafkalens.models.topics.topic_info import TopicIdentity
from kafkalens.utils.query_template import LIMIT, OFFSET, TOPIC, QueryTemplateEngine

logger = logging.getLogger(__name__)


class RecordsQuery(ObservableMixin):
    """Executes record queries for one topic identity, last caller wins."""

    def __init__(
        self,
        backend: BackendClient,
        identity: TopicIdentity,
        *,
        page_size: int = PAGE_SIZE_DEFAULT,
        engine: QueryTemplateEngine | None = None,
    ) -> None:
        super().__init__()
        if page_size <= 0:
            raise ValueError(f"page size must be positive, got {page_size}")
        self._backend = backend
        self._identity = identity
        self._page_size = page_size
        self._engine = engine or QueryTemplateEngine()
        self._rows: list[RecordRow] = []
        self._query: str | None = None
        self._page = 0
        self._has_more = False
        self._request_seq = 0
        self._first_page_pending = False
        self._is_loading = False
        self._error: str | None = None
        self._closed = False

    @property
    def identity(self) -> TopicIdentity:
        return self._identity

    @property
    def rows(self) -> list[RecordRow]:
        return list(self._rows)

    @property
    def query(self) -> str | None:
        """Query behind the current rows, before paging placeholders are bound."""
        return self._query

    @property
    def page(self) -> int:
        return self._page

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def has_more(self) -> bool:
        return self._has_more

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def closed(self) -> bool:
        return self._closed

    def page_bindings(self, page: int) -> dict[str, str]:
        return {
            TOPIC: self._identity.topic_name,
            LIMIT: str(self._page_size),
            OFFSET: str(page * self._page_size),
        }

    async def execute(self, resolved_query: str) -> list[RecordRow] | None:
        """Run ``resolved_query`` from its first page, replacing current rows.

        Returns the rows, or None when a newer execution superseded this one.

        Raises:
            TemplateError: The query still has unresolved placeholders.
            BackendUnavailable: The backend failed this (current) request.
        """
        return await self._load(resolved_query, page=0, append=False)

    async def fetch_next_page(self) -> list[RecordRow] | None:
        """Append the next page of the query behind the current rows.

        Returns None while a new query is still loading its first page.
        """
        if self._query is None or not self._has_more or self._first_page_pending:
            return None
        return await self._load(self._query, page=self._page + 1, append=True)

    def close(self) -> None:
        """Detach from the view; pending responses will be discarded."""
        self._closed = True
        self._request_seq += 1
        self._first_page_pending = False
        self._is_loading = False

    async def _load(self, query: str, *, page: int, append: bool) -> list[RecordRow] | None:
        if self._closed:
            return None
        text = self._engine.resolve_for_execution(query, self.page_bindings(page))

        self._request_seq += 1
        seq = self._request_seq
        if not append:
            self._first_page_pending = True
        self._is_loading = True
        self._error = None
        self._notify_listeners()

        try:
            rows = await self._backend.execute_query(self._identity.cluster_id, text)
        except Exception as exc:
            if seq != self._request_seq:
                if isinstance(exc, BackendUnavailable):
                    logger.debug("Ignored failure of superseded query for %s", self._identity)
                    return None
                raise
            self._first_page_pending = False
            self._is_loading = False
            self._error = exc.message if isinstance(exc, BackendUnavailable) else str(exc)
            self._notify_listeners()
            raise

        if seq != self._request_seq:
            logger.debug("Discarded superseded query result for %s", self._identity)
            return None

        if not append:
            self._query = query
            self._first_page_pending = False
        self._rows = [*self._rows, *rows] if append else list(rows)
        self._page = page
        self._has_more = len(rows) >= self._page_size
        self._is_loading = False
        logger.debug(
            "Query for %s returned %d rows (page %d)", self._identity, len(rows), page
        )
        self._notify_listeners()
        return self.rows


__all__ = [
    "RecordsQuery",
]
