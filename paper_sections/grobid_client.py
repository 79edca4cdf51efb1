# paper_sections/grobid_client.py

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union
import logging
import os

import requests

from paper_sections.config.settings import settings

logger = logging.getLogger(__name__)


@dataclass
class GrobidClientConfig:
    """
    Configuration for talking to a GROBID server.
    """

    base_url: str
    timeout: int = 120

    @classmethod
    def from_env(cls) -> "GrobidClientConfig":
        """
        Build configuration from environment variables and global settings.

        Priority for base_url:
        - PAPER_SECTIONS_GROBID_URL
        - GROBID_URL
        - settings.GROBID_URL
        """
        base_url = (
            os.getenv("PAPER_SECTIONS_GROBID_URL")
            or os.getenv("GROBID_URL")
            or settings.GROBID_URL
        )
        base_url = base_url.rstrip("/")

        timeout_str = os.getenv("PAPER_SECTIONS_GROBID_TIMEOUT") or os.getenv("GROBID_TIMEOUT")
        timeout = int(timeout_str) if timeout_str is not None else settings.GROBID_TIMEOUT

        return cls(base_url=base_url, timeout=timeout)


class GrobidClientError(RuntimeError):
    """
    Error raised when a GROBID request fails.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class GrobidClient:
    """
    Minimal HTTP client for GROBID's full-text endpoint.

    Methods:
        - healthcheck() -> bool
        - is_alive() -> bool (alias)
        - process_pdf_bytes(content, filename) -> str (TEI XML)
        - process_pdf(pdf_path) -> str (TEI XML)
    """

    def __init__(
        self,
        config: Optional[GrobidClientConfig] = None,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> None:
        if config is None:
            config = GrobidClientConfig.from_env()

        if base_url is not None:
            config.base_url = base_url.rstrip("/")
        if timeout is not None:
            config.timeout = timeout

        self.config = config
        self.base_url: str = config.base_url
        self.timeout: int = config.timeout
        logger.info("GrobidClient initialized, GROBID URL: %s", self.base_url)

    # ------------------------------------------------------------------
    # Healthcheck
    # ------------------------------------------------------------------
    def is_alive(self) -> bool:
        """
        Call /api/isalive and return True if HTTP 200 and body contains 'true'.
        """
        url = f"{self.base_url}/api/isalive"
        try:
            resp = requests.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            logger.warning("GROBID healthcheck failed at %s: %s", url, exc)
            return False

        if not resp.ok:
            return False

        text = (resp.text or "").strip().lower()
        return "true" in text

    def healthcheck(self) -> bool:
        return self.is_alive()

    # ------------------------------------------------------------------
    # Core PDF -> TEI call
    # ------------------------------------------------------------------
    def process_pdf_bytes(self, content: bytes, filename: str) -> str:
        """
        Send PDF bytes to GROBID /api/processFulltextDocument and return the
        TEI XML response as a string.
        """
        url = f"{self.base_url}/api/processFulltextDocument"

        files = {"input": (filename, content, "application/pdf")}
        data: Dict[str, Any] = {
            "consolidateHeader": 1,
            "consolidateCitations": 0,
            "teiCoordinates": "none",
        }

        logger.info("Sending %s to GROBID at %s", filename, url)
        try:
            resp = requests.post(
                url,
                files=files,
                data=data,
                headers={"Accept": "application/xml"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as exc:
            # Connection errors, timeouts, DNS, etc.
            raise GrobidClientError(
                f"Error connecting to GROBID at {url}: {exc}",
                url=url,
            ) from exc

        logger.info("Received response from GROBID (status: %s)", resp.status_code)

        if resp.status_code != 200:
            logger.error(
                "GROBID returned error status %s: %s",
                resp.status_code,
                (resp.text or "")[:200],
            )
            raise GrobidClientError(
                f"GROBID processing failed with status {resp.status_code}",
                status_code=resp.status_code,
                url=url,
            )

        return resp.text

    def process_pdf(self, pdf_path: Union[str, Path]) -> str:
        """
        Read a PDF from disk and return GROBID's TEI XML for it.
        """
        pdf_path = Path(pdf_path)
        if not pdf_path.exists():
            raise FileNotFoundError(f"PDF not found: {pdf_path}")

        return self.process_pdf_bytes(pdf_path.read_bytes(), pdf_path.name)
