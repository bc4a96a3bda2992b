"""Query template resolution.

Record queries are free-form text edited by the user, with ``{:name}``
placeholders substituted right before execution::

    SELECT * FROM {:topic} LIMIT {:limit} OFFSET {:offset}

Scanning is permissive: a ``{:`` that does not start a well-formed
placeholder is kept as literal text. Only a missing ``topic`` binding is an
error; other unbound placeholders are left in place so that a later stage
(the records pager binds ``limit`` and ``offset``) can fill them in.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass

from kafkalens.errors import TemplateError

logger = logging.getLogger(__name__)

PLACEHOLDER_OPEN = "{:"
PLACEHOLDER_CLOSE = "}"

TOPIC = "topic"
LIMIT = "limit"
OFFSET = "offset"


@dataclass(frozen=True)
class TemplateResolution:
    """Outcome of one resolution pass."""

    text: str
    unresolved: tuple[str, ...] = ()

    @property
    def is_complete(self) -> bool:
        return not self.unresolved


class QueryTemplateEngine:
    """Resolves ``{:name}`` placeholders in record queries."""

    REQUIRED: tuple[str, ...] = (TOPIC,)
    OPTIONAL: tuple[str, ...] = (LIMIT, OFFSET)
    _NAME_RE = re.compile(r"[A-Za-z0-9_]+")

    @classmethod
    def recognized(cls) -> tuple[str, ...]:
        return cls.REQUIRED + cls.OPTIONAL

    def _scan(self, template: str, bindings: Mapping[str, str]) -> TemplateResolution:
        parts: list[str] = []
        unresolved: list[str] = []
        position = 0
        length = len(template)

        while position < length:
            start = template.find(PLACEHOLDER_OPEN, position)
            if start == -1:
                parts.append(template[position:])
                break
            parts.append(template[position:start])

            match = self._NAME_RE.match(template, start + len(PLACEHOLDER_OPEN))
            if match is None or not template.startswith(PLACEHOLDER_CLOSE, match.end()):
                # Unterminated or empty marker, keep it as typed
                parts.append(PLACEHOLDER_OPEN)
                position = start + len(PLACEHOLDER_OPEN)
                continue

            name = match.group()
            end = match.end() + len(PLACEHOLDER_CLOSE)
            if name in bindings:
                parts.append(str(bindings[name]))
            else:
                parts.append(template[start:end])
                unresolved.append(name)
            position = end

        return TemplateResolution(text="".join(parts), unresolved=tuple(unresolved))

    def placeholders(self, template: str) -> list[str]:
        """Placeholder names in order of appearance, duplicates included."""
        return list(self._scan(template, {}).unresolved)

    def resolve_detailed(
        self, template: str, bindings: Mapping[str, str]
    ) -> TemplateResolution:
        """Resolve and report which placeholders were left in place.

        Raises:
            TemplateError: A required placeholder is present but unbound.
        """
        resolution = self._scan(template, bindings)
        missing_required = tuple(
            name for name in self.REQUIRED if name in resolution.unresolved
        )
        if missing_required:
            raise TemplateError(
                f"Missing value for required placeholder(s): {', '.join(missing_required)}",
                missing=missing_required,
            )

        for name in dict.fromkeys(resolution.unresolved):
            if name in self.OPTIONAL:
                logger.warning("Placeholder {:%s} has no value and was left as text", name)
            else:
                logger.warning("Unknown placeholder {:%s} left as text", name)
        return resolution

    def resolve(self, template: str, bindings: Mapping[str, str]) -> str:
        """Substitute bound placeholders, leaving unbound optional ones as text."""
        return self.resolve_detailed(template, bindings).text

    def resolve_for_execution(self, template: str, bindings: Mapping[str, str]) -> str:
        """Resolve a query that is about to be sent to the backend.

        Raises:
            TemplateError: Any placeholder remains unresolved.
        """
        resolution = self.resolve_detailed(template, bindings)
        if not resolution.is_complete:
            missing = tuple(dict.fromkeys(resolution.unresolved))
            raise TemplateError(
                f"Query still contains unresolved placeholder(s): {', '.join(missing)}",
                missing=missing,
            )
        return resolution.text


_default_engine = QueryTemplateEngine()


def resolve(template: str, bindings: Mapping[str, str]) -> str:
    """Module-level shortcut for ``QueryTemplateEngine().resolve``."""
    return _default_engine.resolve(template, bindings)


def placeholders(template: str) -> list[str]:
    """Module-level shortcut for ``QueryTemplateEngine().placeholders``."""
    return _default_engine.placeholders(template)


__all__ = [
    "LIMIT",
    "OFFSET",
    "TOPIC",
    "QueryTemplateEngine",
    "TemplateResolution",
    "placeholders",
    "resolve",
]
