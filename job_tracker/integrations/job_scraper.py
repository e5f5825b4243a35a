"""
Job description scraping.

Fetches a job posting page and pulls out the description body. Job boards
lay their pages out differently, so extraction walks an ordered chain of
selector groups (site-specific first, generic last) and keeps the text of
the first group that matches anything.
"""

from typing import Optional
from urllib.parse import urlparse
import logging
import re
import socket
import threading
import time

import requests
from bs4 import BeautifulSoup, UnicodeDammit

from job_tracker.core.errors import (
    FetchFailedError,
    FetchTimeoutError,
    InsufficientContentError,
    InvalidUrlError,
)
from job_tracker.utils.config import FetcherSettings


# (CSS selector group, description), evaluated in order
SELECTOR_CHAIN: list[tuple[str, str]] = [
    (
        ".description__text, .show-more-less-html__markup, .jobs-box__html-content",
        "LinkedIn job posting",
    ),
    (
        "#jobDescriptionText, .jobsearch-JobComponent-description",
        "Indeed job posting",
    ),
    (
        ".jobDescriptionContent, .jobDescription",
        "Glassdoor job posting",
    ),
    (
        "main article, .job-description, .job-description-content, "
        "[data-job-description], .description",
        "Generic job description container",
    ),
    ("article", "Article element"),
    ("main", "Main element"),
    ("body", "Whole page body"),
]

NON_CONTENT_ELEMENTS = "script, style, nav, header, footer"
BROAD_NON_CONTENT_ELEMENTS = "script, style, nav, header, footer, aside"

_HORIZONTAL_WS_RE = re.compile(r"[^\S\n]+")
_LINE_BREAKS_RE = re.compile(r" ?\n\s*")


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to one space and blank-line runs to one newline."""
    text = _HORIZONTAL_WS_RE.sub(" ", text)
    text = _LINE_BREAKS_RE.sub("\n", text)
    return text.strip()


def is_valid_url(url: str) -> bool:
    """Check that url is an absolute http(s) URL with a host."""
    if not url or url != url.strip() or any(ch.isspace() for ch in url):
        return False

    try:
        parsed = urlparse(url)
    except ValueError:
        return False

    return parsed.scheme in ("http", "https") and bool(parsed.netloc) and bool(parsed.hostname)


class JobDescriptionFetcher:
    """Fetches a job posting page and extracts its description text."""

    def __init__(
        self,
        settings: Optional[FetcherSettings] = None,
        selector_chain: Optional[list[tuple[str, str]]] = None,
    ):
        """
        Initialize the fetcher.

        Args:
            settings: Timeout, User-Agent and content-length thresholds
            selector_chain: Ordered (selectors, description) pairs to try
        """
        self.settings = settings or FetcherSettings()
        self.selector_chain = selector_chain or SELECTOR_CHAIN
        self.logger = logging.getLogger(self.__class__.__name__)

    def fetch_description(self, url: str) -> str:
        """
        Fetch a job posting and return its description text.

        Args:
            url: Absolute URL of the job posting

        Returns:
            Normalized description text (at least min_content_length characters)

        Raises:
            InvalidUrlError: url is not an absolute http(s) URL
            FetchTimeoutError: The page did not respond in time
            FetchFailedError: Non-2xx response or transport failure
            InsufficientContentError: Too little text could be extracted
        """
        if not is_valid_url(url):
            raise InvalidUrlError(url)

        html = self._fetch_html(url)
        description = self.extract_description(html)

        self.logger.info(f"Extracted {len(description)} characters of job description from {url}")
        return description

    def _fetch_html(self, url: str) -> str:
        """
        Issue a single GET for the page.

        timeout_seconds bounds the whole request, body included. When the
        deadline passes mid-download the connection is shut down.
        """
        timeout = self.settings.timeout_seconds
        deadline = time.monotonic() + timeout
        headers = {
            "User-Agent": self.settings.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
        }

        try:
            response = requests.get(url, headers=headers, timeout=timeout, stream=True)
        except requests.exceptions.Timeout as e:
            self.logger.warning(f"Timed out fetching {url}")
            raise FetchTimeoutError(url, timeout) from e
        except requests.RequestException as e:
            self.logger.error(f"Error fetching {url}: {e}")
            raise FetchFailedError(url, reason=str(e)) from e

        aborted = threading.Event()
        watchdog = threading.Timer(
            max(deadline - time.monotonic(), 0),
            self._abort_response,
            args=(response, aborted),
        )
        watchdog.daemon = True
        watchdog.start()

        try:
            if not 200 <= response.status_code < 300:
                self.logger.warning(f"{url} returned status {response.status_code}")
                raise FetchFailedError(url, response.status_code, response.reason or "")

            chunks = []
            try:
                for chunk in response.iter_content(chunk_size=READ_CHUNK_SIZE):
                    if aborted.is_set() or time.monotonic() >= deadline:
                        break
                    chunks.append(chunk)
            except requests.RequestException as e:
                if not (aborted.is_set() or time.monotonic() >= deadline):
                    self.logger.error(f"Error reading {url}: {e}")
                    raise FetchFailedError(url, reason=str(e)) from e

            if aborted.is_set() or time.monotonic() >= deadline:
                self.logger.warning(f"Timed out reading {url} after {timeout:g}s")
                raise FetchTimeoutError(url, timeout)

            return self._decode(response, b"".join(chunks))
        finally:
            watchdog.cancel()
            response.close()

    def _abort_response(self, response, aborted: threading.Event) -> None:
        """Unblock a read that is still waiting on a slow server."""
        aborted.set()
        connection = getattr(response.raw, "connection", None)
        sock = getattr(connection, "sock", None)
        if sock is None:
            return
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            self.logger.debug(f"Socket already closed while aborting fetch: {e}")

    def _decode(self, response, content: bytes) -> str:
        """Decode with the declared charset, or detect it from the markup."""
        content_type = response.headers.get("Content-Type", "")
        encoding = response.encoding if "charset=" in content_type.lower() else None

        if encoding:
            try:
                return content.decode(encoding, errors="replace")
            except LookupError:
                self.logger.debug(f"Unknown charset {encoding}, detecting instead")

        return UnicodeDammit(content, is_html=True).unicode_markup or ""

    def extract_description(self, html: str) -> str:
        """
        Extract description text from a job posting page.

        Raises:
            InsufficientContentError: Fewer than min_content_length characters remain
        """
        soup = BeautifulSoup(html, "html.parser")
        self._remove_elements(soup, NON_CONTENT_ELEMENTS)

        description = ""
        for selectors, source in self.selector_chain:
            text = self._select_text(soup, selectors)
            if text:
                self.logger.debug(f"Using {source} ({selectors})")
                description = normalize_whitespace(text)
                break

        if len(description) < self.settings.broaden_below_length:
            self.logger.debug(
                f"Description too short ({len(description)} chars), falling back to page body"
            )
            self._remove_elements(soup, BROAD_NON_CONTENT_ELEMENTS)
            description = normalize_whitespace(self._body_text(soup))

        if len(description) < self.settings.min_content_length:
            raise InsufficientContentError(len(description), self.settings.min_content_length)

        return description

    @staticmethod
    def _remove_elements(soup: BeautifulSoup, selectors: str) -> None:
        for element in soup.select(selectors):
            element.decompose()

    @staticmethod
    def _select_text(soup: BeautifulSoup, selectors: str) -> str:
        """Text of every element matching the group, skipping elements nested in another match."""
        elements = soup.select(selectors)
        selected = {id(element) for element in elements}

        parts = []
        for element in elements:
            if any(id(parent) in selected for parent in element.parents):
                continue
            parts.append(element.get_text(" "))

        text = " ".join(parts)
        return text if text.strip() else ""

    @staticmethod
    def _body_text(soup: BeautifulSoup) -> str:
        body = soup.body or soup
        return body.get_text(" ")
