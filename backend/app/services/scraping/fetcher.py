"""
Page fetching: plain HTTP GET, or headless Chromium via Playwright for script-rendered pages.
Then reduce the HTML to model input with BeautifulSoup.
"""
import logging

import httpx
from bs4 import BeautifulSoup
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from app.config import settings
from app.services.scraping.types import PageContent

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)
REQUEST_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}
NETWORK_IDLE_TIMEOUT_MS = 10_000
STRIP_TAGS = ["script", "style", "noscript", "svg", "iframe", "template"]
META_NAMES = ("description", "og:title", "og:description", "event:start_time", "event:end_time", "og:street-address")
MAX_JSON_LD_BLOCKS = 5


async def fetch_html(url: str, *, timeout: float | None = None) -> str:
    async with httpx.AsyncClient(
        timeout=timeout or settings.scrape_timeout_seconds,
        follow_redirects=True,
        headers=REQUEST_HEADERS,
    ) as c:
        r = await c.get(url)
    r.raise_for_status()
    return r.text


async def render_html(url: str, *, timeout: float | None = None) -> str:
    """Load url in headless Chromium and return the rendered DOM."""
    timeout_ms = int((timeout or settings.scrape_timeout_seconds) * 1000)
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=settings.playwright_headless)
        try:
            page = await browser.new_page(user_agent=USER_AGENT)
            page.set_default_timeout(timeout_ms)
            await page.goto(url, wait_until="domcontentloaded")
            try:
                await page.wait_for_load_state("networkidle", timeout=NETWORK_IDLE_TIMEOUT_MS)
            except PlaywrightTimeoutError:
                # Pages with long-polling never go idle; use what has rendered so far
                logger.debug("networkidle not reached for %s; using current DOM", url)
            return await page.content()
        finally:
            await browser.close()


def _collapse_whitespace(text: str) -> str:
    lines = (" ".join(line.split()) for line in text.splitlines())
    return "\n".join(line for line in lines if line)


def html_to_content(html: str, url: str, *, max_chars: int | None = None, rendered: bool = False) -> PageContent:
    """
    Extract title, event-relevant meta tags, JSON-LD and visible text.
    Title, meta values, JSON-LD blocks and text share one max_chars budget, filled in that order.
    """
    remaining = max_chars or settings.scrape_max_content_chars
    soup = BeautifulSoup(html or "", "html.parser")

    title = (soup.title.get_text(strip=True) if soup.title else "")[:remaining]
    remaining -= len(title)

    meta: dict[str, str] = {}
    for tag in soup.find_all("meta"):
        name = (tag.get("property") or tag.get("name") or "").strip().lower()
        content = (tag.get("content") or "").strip()[:remaining]
        if name in META_NAMES and content and name not in meta:
            meta[name] = content
            remaining -= len(content)

    json_ld: list[str] = []
    for script in soup.find_all("script", type="application/ld+json"):
        if remaining <= 0 or len(json_ld) >= MAX_JSON_LD_BLOCKS:
            break
        block = (script.string or script.get_text() or "").strip()[:remaining]
        if block:
            json_ld.append(block)
            remaining -= len(block)

    for tag in soup(STRIP_TAGS):
        tag.decompose()
    body = soup.body or soup
    text = _collapse_whitespace(body.get_text(separator="\n"))[:max(remaining, 0)]

    return PageContent(url=url, title=title or None, meta=meta, json_ld=json_ld, text=text, rendered=rendered)


async def fetch_page_content(url: str, *, use_playwright: bool = False) -> PageContent:
    if use_playwright:
        html = await render_html(url)
    else:
        html = await fetch_html(url)
    content = html_to_content(html, url, rendered=use_playwright)
    logger.info(
        "Fetched %s (playwright=%s): %s chars text, %s JSON-LD blocks",
        url, use_playwright, len(content.text), len(content.json_ld),
    )
    return content
