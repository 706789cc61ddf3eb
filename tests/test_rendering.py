import asyncio
import os
import sys
import tempfile
import unittest
from dataclasses import replace
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from playwright.async_api import Error as PlaywrightError  # noqa: E402

from app.core.config import settings  # noqa: E402
from app.core.errors import DocumentRenderError  # noqa: E402
from app.rendering.pdf import PDF_OPTIONS, render_pdf  # noqa: E402
from app.rendering.templates import TemplateCache  # noqa: E402
from app.schemas.resume import ModelContent, Profile  # noqa: E402
from app.services.resume_assembler import assemble_render_data  # noqa: E402
from tests.fakes import SAMPLE_CONTENT, SAMPLE_PROFILE  # noqa: E402


class TemplateCacheTests(unittest.TestCase):
    def setUp(self):
        self.data = assemble_render_data(
            Profile.model_validate(SAMPLE_PROFILE),
            ModelContent.model_validate(SAMPLE_CONTENT),
        )

    def test_compiles_lazily_and_reuses_template(self):
        cache = TemplateCache(settings.templates_dir, settings.resume_template)
        self.assertIsNone(cache.source_path)
        first = cache.get()
        self.assertIs(cache.get(), first)
        self.assertIsNotNone(cache.source_path)

    def test_recompiles_when_source_path_changes(self):
        original_cwd = os.getcwd()
        with tempfile.TemporaryDirectory() as first_dir, tempfile.TemporaryDirectory() as second_dir:
            Path(first_dir, "resume.html").write_text("first {{ name }}", encoding="utf-8")
            Path(second_dir, "resume.html").write_text("second {{ name }}", encoding="utf-8")
            cache = TemplateCache(".", "resume.html")
            try:
                os.chdir(first_dir)
                self.assertEqual(cache.render(self.data), "first Jane Doe")
                os.chdir(second_dir)
                self.assertEqual(cache.render(self.data), "second Jane Doe")
            finally:
                os.chdir(original_cwd)

    def test_resume_template_renders_sections(self):
        cache = TemplateCache(settings.templates_dir, settings.resume_template)
        html = cache.render(self.data)
        self.assertIn("Jane Doe", html)
        self.assertIn("Python, FastAPI, PostgreSQL", html)
        self.assertIn("Architected PCI-DSS compliant payment APIs.", html)
        self.assertIn("Software Engineer", html)
        self.assertIn("UT Austin", html)

    def test_join_filter_ignores_non_lists(self):
        with tempfile.TemporaryDirectory() as tmp:
            Path(tmp, "t.html").write_text("[{{ name | join(', ') }}]", encoding="utf-8")
            cache = TemplateCache(tmp, "t.html")
            self.assertEqual(cache.render(self.data), "[]")


class PdfOptionsTests(unittest.TestCase):
    def test_page_setup(self):
        self.assertEqual(PDF_OPTIONS["format"], "A4")
        self.assertTrue(PDF_OPTIONS["print_background"])
        self.assertEqual(
            PDF_OPTIONS["margin"],
            {"top": "15mm", "bottom": "15mm", "left": "0mm", "right": "0mm"},
        )


def _fake_playwright(page_pdf_effect=None):
    page = MagicMock()
    page.set_content = AsyncMock()
    page.pdf = AsyncMock(return_value=b"%PDF-1.7", side_effect=page_pdf_effect)
    browser = MagicMock()
    browser.new_page = AsyncMock(return_value=page)
    browser.close = AsyncMock()
    playwright = MagicMock()
    playwright.chromium.launch = AsyncMock(return_value=browser)
    manager = MagicMock()
    manager.__aenter__ = AsyncMock(return_value=playwright)
    manager.__aexit__ = AsyncMock(return_value=False)
    return manager, playwright, browser, page


class RenderPdfTests(unittest.TestCase):
    def setUp(self):
        self.settings = replace(settings, pdf_browser_executable="/opt/chrome/chrome", pdf_render_timeout_ms=5000)

    def test_renders_with_configured_browser_and_closes_it(self):
        manager, playwright, browser, page = _fake_playwright()
        with patch("app.rendering.pdf.async_playwright", return_value=manager):
            pdf = asyncio.run(render_pdf("<html></html>", settings=self.settings))

        self.assertEqual(pdf, b"%PDF-1.7")
        playwright.chromium.launch.assert_awaited_once_with(headless=True, executable_path="/opt/chrome/chrome")
        page.set_content.assert_awaited_once_with("<html></html>", wait_until="networkidle", timeout=5000)
        page.pdf.assert_awaited_once_with(**PDF_OPTIONS)
        browser.close.assert_awaited_once()

    def test_default_launch_omits_executable_path(self):
        manager, playwright, _browser, _page = _fake_playwright()
        with patch("app.rendering.pdf.async_playwright", return_value=manager):
            asyncio.run(render_pdf("<p>x</p>", settings=replace(self.settings, pdf_browser_executable=None)))
        playwright.chromium.launch.assert_awaited_once_with(headless=True)

    def test_print_failure_closes_browser_and_raises_render_error(self):
        manager, _playwright, browser, _page = _fake_playwright(PlaywrightError("Target closed"))
        with patch("app.rendering.pdf.async_playwright", return_value=manager):
            with self.assertRaises(DocumentRenderError) as ctx:
                asyncio.run(render_pdf("<p>x</p>", settings=self.settings))

        browser.close.assert_awaited_once()
        self.assertIn("Target closed", str(ctx.exception))
        self.assertIsInstance(ctx.exception.__cause__, PlaywrightError)

    def test_content_load_failure_closes_browser(self):
        manager, _playwright, browser, page = _fake_playwright()
        page.set_content.side_effect = PlaywrightError("Timeout 5000ms exceeded")
        with patch("app.rendering.pdf.async_playwright", return_value=manager):
            with self.assertRaises(DocumentRenderError):
                asyncio.run(render_pdf("<p>x</p>", settings=self.settings))

        browser.close.assert_awaited_once()
        page.pdf.assert_not_awaited()


if __name__ == "__main__":
    unittest.main()
