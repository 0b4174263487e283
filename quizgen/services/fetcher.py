"""
Remote PDF retrieval and text extraction.

The file is downloaded with a shared ``httpx.AsyncClient`` and decoded with
PyMuPDF in a worker thread.
"""

from __future__ import annotations
import asyncio
import logging
from typing import Optional

import fitz  # PyMuPDF
import httpx

from quizgen.errors import DeadlineExceeded, ExtractError, FetchError
from quizgen.services.deadline import Deadline

logger = logging.getLogger(__name__)


def extract_pdf_text(data: bytes) -> str:
    """Extract the plain text of every page, pages separated by a blank line."""
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        raise ExtractError(f"not a readable PDF: {e}") from e

    try:
        return "\n\n".join(page.get_text("text").strip() for page in doc)
    except Exception as e:
        raise ExtractError(f"failed to extract PDF text: {e}") from e
    finally:
        doc.close()


class PdfFetcher:
    def __init__(self, client: httpx.AsyncClient, timeout: Optional[float] = 30.0) -> None:
        self._client = client
        self._timeout = timeout

    async def fetch_bytes(self, url: str, deadline: Optional[Deadline] = None) -> bytes:
        timeout = deadline.cap(self._timeout) if deadline else self._timeout
        if deadline:
            deadline.check()
        try:
            response = await self._client.get(url, timeout=timeout, follow_redirects=True)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            if deadline and deadline.expired:
                raise DeadlineExceeded("deadline exceeded while fetching file") from e
            raise FetchError(f"timed out fetching {url}") from e
        except httpx.HTTPStatusError as e:
            raise FetchError(f"unexpected status {e.response.status_code} for {url}") from e
        except httpx.HTTPError as e:
            raise FetchError(f"failed to fetch {url}: {e}") from e
        return response.content

    async def fetch_text(self, url: str, deadline: Optional[Deadline] = None) -> str:
        data = await self.fetch_bytes(url, deadline)
        text = await asyncio.to_thread(extract_pdf_text, data)
        logger.info(f"Extracted {len(text)} characters from {url}")
        return text
