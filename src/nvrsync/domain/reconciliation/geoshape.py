"""Shape documents on the document wiki and the item claim pointing at them."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

from nvrsync.domain.model import StringValue

if TYPE_CHECKING:
    from nvrsync.config.object_kinds import ObjectKind
    from nvrsync.domain.geometry import GeometryFacts
    from nvrsync.domain.model import LocalObject
    from nvrsync.domain.ports import DocumentStore

    from .context import ReconciliationContext

log = getLogger(__name__)

LABEL: Final[str] = "geoshape"
LICENSE: Final[str] = "CC0-1.0"
SOURCE_PREFIX: Final[str] = "Naturvårdsverket (Swedish Environmental Protection Agency), "
CREATE_SUMMARY: Final[str] = "Initial creation using data from Naturvårdsverket."
UPDATE_SUMMARY: Final[str] = (
    "Updated using data from Naturvårdsverket due to detected difference with local data."
)


def talk_title(title: str) -> str:
    return title.replace("Data:", "Data talk:", 1)


def parse_document(text: str) -> Any:
    """Parse page text, ``None`` when it is not valid JSON."""

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


class GeoshapeDocumentSync:
    """Keep the canonical shape document, its talk page and the item claim in step."""

    def __init__(self, documents: DocumentStore, *, kind: ObjectKind, sandbox: bool = False) -> None:
        self._documents = documents
        self._kind = kind
        self._sandbox = sandbox

    def title(self, local: LocalObject) -> str:
        return self._kind.document_title(local, sandbox=self._sandbox)

    def build_document(self, local: LocalObject, facts: GeometryFacts) -> dict[str, Any]:
        document = {
            "license": LICENSE,
            "sources": SOURCE_PREFIX + self._kind.source_url,
            "description": {"sv": local.name},
            "longitude": facts.longitude,
            "latitude": facts.latitude,
            "zoom": facts.zoom,
            "data": local.feature,
        }
        # Round-trip so the comparison with a fetched page sees plain JSON types.
        return json.loads(serialize(document))

    def talk_content(self, local: LocalObject) -> str:
        return "\n".join(
            f"[[Category:{category}]]" for category in self._kind.category_tags(local)
        ).strip()

    def sync(self, ctx: ReconciliationContext, facts: GeometryFacts) -> None:
        title = self.title(ctx.local)
        document = self.build_document(ctx.local, facts)
        canonical = StringValue(title)

        existing = ctx.most_recent("geoshape")
        if existing is not None and not ctx.may_supersede(existing, LABEL):
            return

        if existing is None:
            log.debug("%s: no shape claim yet", ctx.local.key)
            self._write(ctx, title, document)
            ctx.add(ctx.build_claim("geoshape", canonical), LABEL)
            return

        if existing.value == canonical:
            self._write(ctx, title, document)
            return

        old_title = existing.value.value if isinstance(existing.value, StringValue) else None
        old_text = self._documents.get_document(old_title) if old_title else None
        if old_text is None:
            log.warning("%s: item points at missing shape document %s", ctx.local.key, old_title)
            self._write(ctx, title, document)
        elif parse_document(old_text) != document:
            log.debug("%s: shape document %s is outdated", ctx.local.key, old_title)
            self._write(ctx, title, document)
            ctx.add(ctx.build_claim("geoshape", canonical), LABEL)
        else:
            log.debug("%s: shape document %s is up to date", ctx.local.key, old_title)

    def _write(self, ctx: ReconciliationContext, title: str, document: dict[str, Any]) -> None:
        current = self._documents.get_document(title)
        if current is None:
            self._documents.put_document(title, serialize(document), summary=CREATE_SUMMARY)
            ctx.entry.created_document = True
            log.info("%s: created shape document %s", ctx.local.key, title)
        else:
            parsed = parse_document(current)
            if parsed is None:
                ctx.entry.warn(f"Invalid JSON in shape document {title}, replacing it.")
            if parsed != document:
                self._documents.put_document(title, serialize(document), summary=UPDATE_SUMMARY)
                ctx.entry.updated_document = True
                log.info("%s: updated shape document %s", ctx.local.key, title)
            else:
                log.debug("%s: no changes to %s", ctx.local.key, title)
        self._write_talk(ctx, talk_title(title))

    def _write_talk(self, ctx: ReconciliationContext, title: str) -> None:
        content = self.talk_content(ctx.local)
        current = self._documents.get_document(title)
        if current is None:
            self._documents.put_document(title, content, summary=CREATE_SUMMARY)
        elif current != content:
            # Categories added by others are overwritten.
            self._documents.put_document(title, content, summary=UPDATE_SUMMARY)
        else:
            log.debug("%s: no changes to %s", ctx.local.key, title)


def serialize(document: dict[str, Any]) -> str:
    return json.dumps(document, ensure_ascii=False)
