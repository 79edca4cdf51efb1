# paper_sections/processing.py

"""
PDF -> GROBID TEI -> flat sections, and prompt + sections -> LLM answer.
"""

from __future__ import annotations

import logging
from typing import Optional

from paper_sections.api.models import LlmRequest, LlmResponse, ProcessResponse
from paper_sections.grobid_client import GrobidClient
from paper_sections.llm import GeminiClient
from paper_sections.parsing.tei_parser import extract_sections
from paper_sections.parsing.tree import from_xml

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "File processed successfully by GROBID."


class ProcessingError(RuntimeError):
    """
    Raised when any step of turning a PDF into sections fails.
    """


class ProcessingService:
    """
    Chains the GROBID client, the TEI section extractor and the LLM step.

    The LLM client is built on first use, so documents can be processed
    without a Google API key configured.
    """

    def __init__(
        self,
        grobid_client: Optional[GrobidClient] = None,
        llm_client: Optional[GeminiClient] = None,
    ) -> None:
        self.grobid_client = grobid_client if grobid_client is not None else GrobidClient()
        self._llm_client = llm_client

    @property
    def llm_client(self) -> GeminiClient:
        if self._llm_client is None:
            self._llm_client = GeminiClient()
        return self._llm_client

    def process_document(self, content: bytes, filename: str) -> ProcessResponse:
        logger.info("Processing document via GROBID: %s", filename)

        try:
            tei_xml = self.grobid_client.process_pdf_bytes(content, filename)

            logger.info("Parsing GROBID TEI XML response.")
            tree = from_xml(tei_xml)
            logger.info("Successfully parsed TEI XML.")

            sections = extract_sections(tree)
        except Exception as exc:
            logger.error(
                "Caught error in process_document: %s - %s",
                type(exc).__name__,
                exc,
            )
            raise ProcessingError(
                f"Failed to process document with GROBID: {exc}"
            ) from exc

        return ProcessResponse(message=SUCCESS_MESSAGE, sections=sections)

    def process_with_llm(self, request: LlmRequest) -> LlmResponse:
        logger.info(
            'Processing request with LLM. Prompt: "%s...", Sections: %s',
            request.prompt[:50],
            ", ".join(request.sections),
        )
        result = self.llm_client.generate(request.prompt, request.sections)
        return LlmResponse(result=result)
