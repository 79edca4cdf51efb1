# paper_sections/__init__.py

"""
Scholarly PDF -> GROBID TEI -> flat sections (title, authors, abstract,
body, references), with an optional LLM step over selected sections.
"""

__version__ = "0.1.0"
