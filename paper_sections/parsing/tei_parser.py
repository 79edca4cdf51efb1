# paper_sections/parsing/tei_parser.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, List, Tuple, Union

from paper_sections.parsing.normalizer import collect_text
from paper_sections.parsing.tree import (
    Element,
    TreeNode,
    as_list,
    first,
    from_xml,
    own_text,
)

logger = logging.getLogger(__name__)

SECTION_NAMES = ("title", "authors", "abstract", "body", "references")

# Section name -> cleaned text. Only found, non-empty sections are present.
ExtractedSections = Dict[str, str]


class SectionExtractionError(RuntimeError):
    """
    Raised when walking the TEI tree fails unexpectedly.

    The whole extraction is aborted; no partial mapping is returned.
    """


class _NotFound:
    """Per-field 'nothing here' marker. Never leaves this module."""

    def __repr__(self) -> str:
        return "<NOT_FOUND>"


_NOT_FOUND = _NotFound()


# ---------------------------------------------------------------------------
# Tree navigation
# ---------------------------------------------------------------------------


def _resolve(node: TreeNode, *path: str):
    """
    Follow child names from ``node``. A repeated element on the way is
    entered through its first occurrence. Returns _NOT_FOUND if any step
    is missing.
    """
    current = node
    for name in path:
        current = first(current)
        if not isinstance(current, Element):
            return _NOT_FOUND
        current = current.children.get(name)
        if current is None:
            return _NOT_FOUND
    return current


def _non_empty(text: str):
    return text if text else _NOT_FOUND


# ---------------------------------------------------------------------------
# Field extractors
# ---------------------------------------------------------------------------


def _extract_title(tei: TreeNode):
    title = _resolve(tei, "teiHeader", "fileDesc", "titleStmt", "title")
    if title is _NOT_FOUND:
        return _NOT_FOUND

    text = own_text(first(title))
    if isinstance(text, str) and text:
        return text
    return _NOT_FOUND


def _own_text_at(node: TreeNode, name: str):
    value = _resolve(node, name)
    if value is _NOT_FOUND:
        return None
    return own_text(first(value))


def _author_name(author: TreeNode):
    """
    "Forename Surname" for one <author>, or None if it carries no name.
    """
    pers_name = _resolve(author, "persName")
    if pers_name is _NOT_FOUND:
        return None

    forename = (_own_text_at(pers_name, "forename") or "").strip()
    surname = (_own_text_at(pers_name, "surname") or "").strip()
    full_name = f"{forename} {surname}".strip()
    return full_name or None


def _extract_authors(tei: TreeNode):
    authors = _resolve(tei, "teiHeader", "fileDesc", "titleStmt", "author")
    if authors is _NOT_FOUND:
        return _NOT_FOUND

    names: List[str] = []
    for author in as_list(authors):
        name = _author_name(author)
        if name:
            names.append(name)

    return _non_empty("; ".join(names))


def _extract_abstract(tei: TreeNode):
    abstract = _resolve(tei, "teiHeader", "fileDesc", "profileDesc", "abstract")
    if abstract is _NOT_FOUND:
        abstract = _resolve(tei, "teiHeader", "profileDesc", "abstract")
    if abstract is _NOT_FOUND:
        return _NOT_FOUND
    return _non_empty(collect_text(abstract))


def _extract_body(tei: TreeNode):
    body = _resolve(tei, "text", "body")
    if body is _NOT_FOUND:
        return _NOT_FOUND
    return _non_empty(collect_text(body))


def _extract_references(tei: TreeNode):
    # _resolve enters <back><div> through its first occurrence
    bibl_structs = _resolve(tei, "text", "back", "div", "listBibl", "biblStruct")
    if bibl_structs is _NOT_FOUND:
        return _NOT_FOUND

    entries = [collect_text(entry) for entry in as_list(bibl_structs)]
    return _non_empty("\n\n".join(e for e in entries if e))


_FIELD_EXTRACTORS: Tuple[Tuple[str, Callable[[TreeNode], object]], ...] = (
    ("title", _extract_title),
    ("authors", _extract_authors),
    ("abstract", _extract_abstract),
    ("body", _extract_body),
    ("references", _extract_references),
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def extract_sections(root: TreeNode) -> ExtractedSections:
    """
    Extract title, authors, abstract, body and references from a parsed TEI
    document.

    Parameters
    ----------
    root:
        The document wrapper returned by ``from_xml`` (an Element whose
        child ``TEI`` is the TEI root element).

    Returns
    -------
    ExtractedSections
        Section name -> cleaned text. Sections that are missing or empty
        are left out. A missing TEI root gives an empty mapping.

    Raises
    ------
    SectionExtractionError
        If the tree has a shape that breaks traversal. Nothing is returned
        for the other sections in that case.
    """
    sections: ExtractedSections = {}

    try:
        tei = _resolve(root, "TEI")
        if tei is _NOT_FOUND:
            logger.warning("TEI root element not found in parsed XML data.")
            return sections

        logger.info("Starting TEI section extraction.")
        for name, extractor in _FIELD_EXTRACTORS:
            value = extractor(tei)
            if value is not _NOT_FOUND:
                sections[name] = value  # type: ignore[assignment]

        logger.info("Extracted sections: %s", ", ".join(sections))
    except Exception as exc:
        logger.exception("Error during TEI section extraction")
        raise SectionExtractionError(
            f"Failed during TEI section extraction: {exc}"
        ) from exc

    return sections


def _load_tei_content(tei: Union[str, bytes, Path]) -> Union[str, bytes]:
    """
    Accept either TEI XML (str or bytes) or a filesystem path and return the
    XML content.

    A string containing markup is treated as XML; otherwise, if it names an
    existing file, the file is read. As a last resort the string is parsed
    as XML. Files are read as bytes so the parser honors the encoding
    declared in the XML prolog.
    """
    if isinstance(tei, Path):
        return tei.read_bytes()
    if isinstance(tei, bytes):
        return tei

    if "<" in tei:
        return tei

    p = Path(tei)
    if p.exists():
        return p.read_bytes()

    return tei


def extract_sections_from_tei(tei_xml_or_path: Union[str, bytes, Path]) -> ExtractedSections:
    """
    Parse TEI XML (text or file path) and extract its sections.
    """
    return extract_sections(from_xml(_load_tei_content(tei_xml_or_path)))
