"""Conversion of algorithm metadata records into IndexedDocuments."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from loguru import logger

from .models import DocumentValidationError, IndexedDocument


@dataclass(frozen=True)
class AlgorithmRecord:
    """Domain record describing one algorithm."""
    slug: str
    title: str
    topic: Optional[str] = None
    summary: Optional[str] = None
    about: Optional[str] = None
    pros: Tuple[str, ...] = ()
    cons: Tuple[str, ...] = ()
    time_complexity: Dict[str, str] = field(default_factory=dict)
    space_complexity: Optional[str] = None
    stable: bool = False
    in_place: bool = False
    pseudocode: Tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AlgorithmRecord":
        """Build a record from a loosely-shaped mapping.

        Raises:
            DocumentValidationError: If the slug or title is missing.
        """
        slug = str(data.get("slug") or "").strip()
        title = str(data.get("title") or "").strip()
        if not slug or not title:
            raise DocumentValidationError(
                f"Algorithm record requires 'slug' and 'title', got slug={slug!r} title={title!r}"
            )

        complexity = data.get("complexity") or {}
        in_place = complexity.get("in_place", complexity.get("inPlace", False))
        return cls(
            slug=slug,
            title=title,
            topic=data.get("topic"),
            summary=data.get("summary"),
            about=data.get("about"),
            pros=tuple(data.get("pros") or ()),
            cons=tuple(data.get("cons") or ()),
            time_complexity={str(k): str(v) for k, v in (complexity.get("time") or {}).items()},
            space_complexity=complexity.get("space"),
            stable=bool(complexity.get("stable", False)),
            in_place=bool(in_place),
            pseudocode=tuple(data.get("pseudocode") or ()),
        )

    @property
    def document_id(self) -> str:
        return f"{self.topic}-{self.slug}" if self.topic else self.slug

    def to_document(self) -> IndexedDocument:
        tags = [
            *self.pros,
            *self.cons,
            "stable" if self.stable else "unstable",
            "in-place" if self.in_place else "not-in-place",
            *self.pseudocode,
        ]
        text_parts = [
            self.about or "",
            *self.pros,
            *self.cons,
            *self.time_complexity.values(),
            self.space_complexity or "",
        ]
        return IndexedDocument(
            id=self.document_id,
            title=self.title,
            category=self.topic,
            tags=tuple(tag for tag in tags if tag and tag.strip()),
            summary=self.summary,
            searchable_text=" ".join(part for part in text_parts if part and part.strip()),
        )


def ingest(records: Iterable[Union[AlgorithmRecord, Mapping[str, Any]]]) -> List[IndexedDocument]:
    """
    Convert domain records into indexed documents.

    Args:
        records: AlgorithmRecords or mappings with the same fields

    Returns:
        Documents in input order

    Raises:
        DocumentValidationError: On a malformed record or a duplicate document id
    """
    documents: List[IndexedDocument] = []
    seen_ids = set()
    for record in records:
        if not isinstance(record, AlgorithmRecord):
            record = AlgorithmRecord.from_mapping(record)
        document = record.to_document()
        if document.id in seen_ids:
            raise DocumentValidationError(f"Duplicate document id '{document.id}'")
        seen_ids.add(document.id)
        documents.append(document)

    logger.debug(f"Ingested {len(documents)} documents")
    return documents
