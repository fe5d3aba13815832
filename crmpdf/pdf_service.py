import logging
from pathlib import Path
from typing import Mapping, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from .errors import BrowserLaunchFailed, NavigationTimeout, PdfExportFailed
from .messages import MESSAGES

logger = logging.getLogger(__name__)

PAGE_FORMAT = "A4"


class PdfService:
    async def html_to_pdf(self, html_path: Path) -> bytes:
        raise NotImplementedError


class PlaywrightPdfService(PdfService):
    """
    Impression PDF via Chromium headless.

    La page est chargée depuis le fichier local, puis on attend que le réseau
    soit au repos (`networkidle`) : les ressources du template peuvent se charger
    après le parsing initial.
    """

    def __init__(
        self,
        executable_path: Optional[str] = None,
        timeout_ms: int = 30_000,
        messages: Mapping[str, str] = MESSAGES,
    ) -> None:
        self.executable_path = executable_path
        self.timeout_ms = timeout_ms
        self.messages = messages

    async def html_to_pdf(self, html_path: Path) -> bytes:
        url = Path(html_path).resolve().as_uri()
        async with async_playwright() as p:
            try:
                browser = await p.chromium.launch(headless=True, executable_path=self.executable_path)
            except PlaywrightError as exc:
                raise BrowserLaunchFailed.from_messages(exc, messages=self.messages) from exc

            # Le navigateur est fermé quelle que soit l'issue de la navigation / de l'export
            try:
                page = await browser.new_page()
                try:
                    await page.goto(url, wait_until="networkidle", timeout=self.timeout_ms)
                except PlaywrightError as exc:  # TimeoutError comprise
                    raise NavigationTimeout.from_messages(url, exc, messages=self.messages) from exc

                try:
                    pdf = await page.pdf(format=PAGE_FORMAT)
                except PlaywrightError as exc:
                    raise PdfExportFailed.from_messages(exc, messages=self.messages) from exc
            finally:
                await browser.close()

        logger.debug("PDF généré depuis %s (%d octets)", url, len(pdf))
        return pdf
