from __future__ import annotations

import logging

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from app.core.config import Settings, settings as default_settings
from app.core.errors import DocumentRenderError

logger = logging.getLogger(__name__)

PDF_OPTIONS = {
    "format": "A4",
    "print_background": True,
    "margin": {"top": "15mm", "bottom": "15mm", "left": "0mm", "right": "0mm"},
}


async def render_pdf(html: str, *, settings: Settings | None = None) -> bytes:
    """Print HTML to an A4 PDF with a browser owned by this call alone."""
    cfg = settings or default_settings
    launch_kwargs: dict = {"headless": True}
    if cfg.pdf_browser_executable:
        launch_kwargs["executable_path"] = cfg.pdf_browser_executable

    try:
        async with async_playwright() as p:
            browser = await p.chromium.launch(**launch_kwargs)
            try:
                page = await browser.new_page()
                await page.set_content(html, wait_until="networkidle", timeout=cfg.pdf_render_timeout_ms)
                pdf = await page.pdf(**PDF_OPTIONS)
            finally:
                await browser.close()
    except PlaywrightError as exc:
        logger.error("pdf_render_failed: %s", exc)
        raise DocumentRenderError(f"Document rendering failed: {exc}") from exc

    logger.info("pdf_rendered bytes=%s", len(pdf))
    return pdf
