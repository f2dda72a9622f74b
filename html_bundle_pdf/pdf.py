from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from playwright.sync_api import Browser, Page, Playwright, sync_playwright
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from .errors import NavigationError, RenderError
from .model import StyleSheet

logger = logging.getLogger(__name__)

PAGE_FORMAT = "A4"
PAGE_MARGINS = {"top": "20mm", "right": "20mm", "bottom": "20mm", "left": "20mm"}


class RenderingSession:
    """One Chromium browser with a single tab, reused for every document.

    Documents are rendered one at a time; navigating to the next document
    discards the styles injected into the previous one.
    """

    def __init__(self, *, navigation_timeout_ms: int = 30_000, headless: bool = True) -> None:
        self.navigation_timeout_ms = navigation_timeout_ms
        self.headless = headless
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._page: Page | None = None

    def open(self) -> RenderingSession:
        if self._page is not None:
            return self

        try:
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(headless=self.headless)
            self._page = self._browser.new_page()
        except PlaywrightError as e:
            self.close()
            raise RenderError("Could not launch the browser", stage="browser", original_error=e) from e

        self._page.set_default_navigation_timeout(self.navigation_timeout_ms)
        logger.debug("Browser session opened")
        return self

    def render(self, url: str, pdf_path: str | Path, stylesheets: Sequence[StyleSheet] = ()) -> Path:
        """Load ``url``, inject ``stylesheets`` in order and print the page to ``pdf_path``."""

        if self._page is None:
            raise RuntimeError("rendering session is not open")
        page = self._page
        out_path = Path(pdf_path)

        logger.info("Converting %s to PDF...", url)
        try:
            response = page.goto(url, wait_until="networkidle")
        except PlaywrightTimeoutError as e:
            raise NavigationError("Navigation timed out", document=url, original_error=e) from e
        except PlaywrightError as e:
            raise NavigationError("Navigation failed", document=url, original_error=e) from e

        if response is not None and not response.ok:
            raise NavigationError(f"Server answered HTTP {response.status}", document=url)

        try:
            for sheet in stylesheets:
                # Appends a <style> to <head>; later sheets win on conflicts.
                page.add_style_tag(content=sheet.text)

            out_path.parent.mkdir(parents=True, exist_ok=True)
            page.pdf(path=str(out_path), format=PAGE_FORMAT, margin=PAGE_MARGINS)
        except PlaywrightError as e:
            raise RenderError("PDF generation failed", document=url, original_error=e) from e
        except OSError as e:
            raise RenderError("Cannot write PDF", document=str(out_path), original_error=e) from e

        logger.info("Successfully converted %s to %s", url, out_path)
        return out_path

    def close(self) -> None:
        """Close the browser and stop Playwright. Errors are logged, not raised."""

        browser, playwright = self._browser, self._playwright
        self._page = self._browser = self._playwright = None

        if browser is not None:
            try:
                browser.close()
            except Exception as e:
                logger.warning("Error while closing browser: %s", e)
        if playwright is not None:
            try:
                playwright.stop()
            except Exception as e:
                logger.warning("Error while stopping Playwright: %s", e)

    def __enter__(self) -> RenderingSession:
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
