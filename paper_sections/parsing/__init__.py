# paper_sections/parsing/__init__.py

"""
TEI -> flat sections: XML-to-tree conversion, text collection and the
section extractor.
"""

from .normalizer import collect_text
from .tei_parser import (
    SECTION_NAMES,
    ExtractedSections,
    SectionExtractionError,
    extract_sections,
    extract_sections_from_tei,
)
from .tree import Element, TeiParseError, TreeNode, as_list, from_xml

__all__ = [
    "SECTION_NAMES",
    "Element",
    "ExtractedSections",
    "SectionExtractionError",
    "TeiParseError",
    "TreeNode",
    "as_list",
    "collect_text",
    "extract_sections",
    "extract_sections_from_tei",
    "from_xml",
]
