"""Page fetching and text extraction for the website audit."""

import asyncio
import concurrent.futures
import re
import socket
import ipaddress
import time
import logging
from typing import Optional
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup

from orchestrator.context_store import ExtractedPage
from .errors import ScrapingError

logger = logging.getLogger(__name__)

HERO_CLASS_PATTERN = re.compile(r'hero|banner|header', re.I)
WHITESPACE = re.compile(r'\s+')


def collapse_whitespace(text: str) -> str:
    return WHITESPACE.sub(' ', text or '').strip()


def strip_markup(markup: str) -> str:
    """Drop script/style blocks and tags, returning collapsed plain text."""
    soup = BeautifulSoup(markup, 'lxml')
    for element in soup(["script", "style", "noscript"]):
        element.decompose()
    return collapse_whitespace(soup.get_text(separator=' '))


class WebScraper:
    """Fetches a single page and derives the bounded fragments agents read."""

    CHUNK_SIZE = 16384
    BLOCKED_HOSTS = ('metadata.google.internal', '169.254.169.254')

    def __init__(
        self,
        timeout: float = 8.0,
        max_text_chars: int = 1500,
        max_hero_chars: int = 600,
        max_field_chars: int = 300,
        hero_markup_chars: int = 4000,
        max_page_bytes: int = 2_000_000,
        user_agent: str = "Mozilla/5.0 (compatible; WebsiteAuditBot/1.0)",
        block_private_hosts: bool = True,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout
        self.max_text_chars = max_text_chars
        self.max_hero_chars = max_hero_chars
        self.max_field_chars = max_field_chars
        self.hero_markup_chars = hero_markup_chars
        self.max_page_bytes = max_page_bytes
        self.block_private_hosts = block_private_hosts
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': user_agent})

    @classmethod
    def from_config(cls, config) -> "WebScraper":
        return cls(
            timeout=config.fetch_timeout,
            max_text_chars=config.max_text_chars,
            max_hero_chars=config.max_hero_chars,
            max_field_chars=config.max_field_chars,
            hero_markup_chars=config.hero_markup_chars,
            max_page_bytes=config.max_page_bytes,
            user_agent=config.user_agent,
            block_private_hosts=config.block_private_hosts,
        )

    def validate_url(self, url: str) -> None:
        """Validate URL to prevent SSRF attacks.

        Raises ScrapingError if the URL is unsafe.
        """
        parsed = urlparse(url)

        # Only allow http and https schemes
        if parsed.scheme not in ('http', 'https'):
            raise ScrapingError(url, f"Blocked scheme: {parsed.scheme}")

        hostname = parsed.hostname
        if not hostname:
            raise ScrapingError(url, "URL has no hostname")

        if not self.block_private_hosts:
            return

        if hostname in self.BLOCKED_HOSTS:
            raise ScrapingError(url, f"Blocked metadata endpoint: {hostname}")

        try:
            addr_info = socket.getaddrinfo(hostname, None)
        except socket.gaierror:
            raise ScrapingError(url, f"Cannot resolve hostname: {hostname}")

        for _family, _type, _proto, _canonname, sockaddr in addr_info:
            ip = ipaddress.ip_address(sockaddr[0])
            if ip.is_private or ip.is_loopback or ip.is_link_local or ip.is_reserved:
                raise ScrapingError(url, f"Blocked private/reserved IP: {ip}")

    def fetch_html(self, url: str, active: Optional[list] = None) -> str:
        """
        GET the page body, bounded by a deadline checked per chunk and a byte cap.

        Oversized bodies are cut at ``max_page_bytes``. The open response is
        appended to ``active`` so a caller that gives up can close it.
        """
        self.validate_url(url)
        deadline = time.monotonic() + self.timeout
        try:
            response = self.session.get(url, timeout=self.timeout, allow_redirects=True, stream=True)
        except requests.RequestException as e:
            raise ScrapingError(url, str(e))
        if active is not None:
            active.append(response)

        try:
            if not 200 <= response.status_code < 300:
                raise ScrapingError(url, f"HTTP {response.status_code}")

            chunks = []
            received = 0
            for chunk in response.iter_content(chunk_size=self.CHUNK_SIZE):
                if time.monotonic() > deadline:
                    raise ScrapingError(url, f"Timed out after {self.timeout}s")
                if not chunk:
                    continue
                chunks.append(chunk)
                received += len(chunk)
                if received >= self.max_page_bytes:
                    logger.info("Truncating %s at %d bytes", url, self.max_page_bytes)
                    break
        except requests.RequestException as e:
            raise ScrapingError(url, str(e))
        finally:
            response.close()

        body = b''.join(chunks)[:self.max_page_bytes]
        encoding = response.encoding or 'utf-8'
        return body.decode(encoding, errors='replace')

    def parse(self, url: str, html: str) -> ExtractedPage:
        """Derive the page fragments from raw markup. Pure and deterministic."""
        soup = BeautifulSoup(html, 'lxml')

        title_tag = soup.find('title')
        title = collapse_whitespace(title_tag.get_text()) if title_tag else ""

        meta_desc = soup.find('meta', attrs={'name': re.compile(r'^description$', re.I)})
        meta_description = collapse_whitespace(meta_desc.get('content', '')) if meta_desc else ""

        h1_tag = soup.find('h1')
        h1 = collapse_whitespace(h1_tag.get_text(separator=' ')) if h1_tag else ""

        hero = self._extract_hero(soup, html)

        for element in soup(["script", "style", "noscript"]):
            element.decompose()
        text = collapse_whitespace(soup.get_text(separator=' '))

        return ExtractedPage(
            url=url,
            title=title[:self.max_field_chars].strip(),
            meta_description=meta_description[:self.max_field_chars].strip(),
            h1=h1[:self.max_field_chars].strip(),
            hero_section=hero[:self.max_hero_chars].strip(),
            text_content=text[:self.max_text_chars].strip(),
        )

    def _extract_hero(self, soup: BeautifulSoup, html: str) -> str:
        """Text of the hero region, or of the leading slice of the body."""
        hero_el = soup.find(['section', 'div', 'header'], class_=HERO_CLASS_PATTERN)
        if hero_el is not None:
            hero_text = strip_markup(str(hero_el))
            if hero_text:
                return hero_text

        match = re.search(r'<body[^>]*>', html, re.I)
        start = match.end() if match else 0
        return strip_markup(html[start:start + self.hero_markup_chars])

    def extract(self, url: str) -> ExtractedPage:
        """
        Fetch and extract a page. Never raises; failures give a degraded page.

        Resolution, connect, body and parse all run in a worker thread that
        is abandoned once ``timeout`` seconds have passed, however slowly the
        server sends.
        """
        active = []
        worker = concurrent.futures.ThreadPoolExecutor(max_workers=1, thread_name_prefix="extract")
        future = worker.submit(self._fetch_and_parse, url, active)
        worker.shutdown(wait=False)
        try:
            return future.result(timeout=self.timeout)
        except concurrent.futures.TimeoutError:
            logger.warning("Scraping '%s': gave up after %ss", url, self.timeout)
            for response in active:
                response.close()
            return ExtractedPage.unavailable(url)

    def _fetch_and_parse(self, url: str, active: list) -> ExtractedPage:
        try:
            html = self.fetch_html(url, active)
        except ScrapingError as e:
            logger.warning("%s", e)
            return ExtractedPage.unavailable(url)
        except Exception as e:
            logger.warning("Unexpected error fetching %s: %s", url, e)
            return ExtractedPage.unavailable(url)

        try:
            return self.parse(url, html)
        except Exception as e:
            logger.warning("Could not parse %s: %s", url, e)
            return ExtractedPage.unavailable(url)

    async def extract_async(self, url: str) -> ExtractedPage:
        """Run ``extract`` in a worker thread so the event loop keeps going."""
        return await asyncio.to_thread(self.extract, url)
