"""Scraper unit tests."""
import pytest
from unittest.mock import AsyncMock, patch

from crawler.scraper import ArticleScraper
from shared.errors import ScrapeError
from shared.utils import clean_html_text


class TestArticleScraper:
    """Tests for ArticleScraper class."""

    @pytest.fixture
    def scraper(self, settings):
        """Create scraper instance."""
        return ArticleScraper(settings, timeout=10)

    def test_scraper_initialization(self, scraper):
        """Test scraper initializes with correct settings."""
        assert scraper.timeout == 10
        assert "User-Agent" in scraper._headers("https://example.com")

    def test_turkish_sites_get_turkish_accept_language(self, scraper):
        assert scraper._headers("https://t24.com.tr/haber/x")["Accept-Language"].startswith("tr-TR")
        assert scraper._headers("https://eksisozluk.com/x")["Accept-Language"].startswith("tr-TR")
        assert scraper._headers("https://bbc.co.uk/news")["Accept-Language"].startswith("en-US")

    def test_extract_prefers_article_element(self, scraper):
        """Test extraction uses the article element when it is long enough."""
        html = """
        <html>
            <head><title>Test Article Title</title></head>
            <body>
                <nav>Home | About | Contact</nav>
                <article>
                    <h1>Test Article Title</h1>
                    <p>This is the article content with more than fifty characters to ensure extraction works properly.</p>
                    <p>Second paragraph with additional content.</p>
                </article>
            </body>
        </html>
        """
        content = scraper.extract_article_content(html)
        assert "article content" in content.lower()
        assert "Contact" not in content

    def test_extract_removes_script_tags(self, scraper):
        """Test extraction removes script content."""
        html = """
        <html>
            <body>
                <script>var secret = "password123";</script>
                <div class="post-content">
                    <p>This is the actual content that should be extracted and is long enough to pass the threshold.</p>
                    <p>More content here for the test.</p>
                </div>
            </body>
        </html>
        """
        content = scraper.extract_article_content(html)
        assert "password123" not in content
        assert "actual content" in content.lower()

    def test_extract_short_candidates_fall_back_to_page_text(self, scraper):
        html = "<html><body><article>Too short</article><p>Footer text</p></body></html>"
        content = scraper.extract_article_content(html)
        assert content == "Too short Footer text"

    def test_clean_text_removes_whitespace(self):
        """Test text cleaning strips tags, entities and excessive whitespace."""
        text = "<p>Line 1</p>\n\n\n\n\nLine &amp; 2   \n   Line 3"
        assert clean_html_text(text) == "Line 1 Line & 2 Line 3"

    @pytest.mark.asyncio
    async def test_fetch_falls_back_to_direct(self, settings):
        """Test a failing proxy fetch falls back to a direct fetch."""
        scraper = ArticleScraper(settings.model_copy(update={"scrapedo_api_key": "k"}))

        with patch.object(scraper, "_fetch_via_scrapedo", new=AsyncMock(side_effect=ScrapeError("u", "HTTP 500"))), \
                patch.object(scraper, "_fetch_direct", new=AsyncMock(return_value="<html></html>")) as direct:
            html = await scraper.fetch_html("https://example.com/a")

        assert html == "<html></html>"
        direct.assert_awaited_once_with("https://example.com/a")

    @pytest.mark.asyncio
    async def test_fetch_without_proxy_key_goes_direct(self, scraper):
        with patch.object(scraper, "_fetch_via_scrapedo", new=AsyncMock()) as proxied, \
                patch.object(scraper, "_fetch_direct", new=AsyncMock(return_value="ok")):
            assert await scraper.fetch_html("https://example.com/a") == "ok"

        proxied.assert_not_called()

    @pytest.mark.asyncio
    async def test_direct_fetch_error_propagates(self, scraper):
        with patch.object(scraper, "_fetch_direct", new=AsyncMock(side_effect=ScrapeError("u", "HTTP Error 404"))):
            with pytest.raises(ScrapeError) as exc_info:
                await scraper.fetch_html("https://example.com/missing")

        assert "404" in exc_info.value.message


class TestSearch:
    """Tests for web search snippets."""

    @pytest.mark.asyncio
    async def test_search_without_key_returns_empty(self, settings):
        assert await ArticleScraper(settings).search("anything") == []

    def test_parse_search_results(self, settings):
        data = {
            "answerBox": {"snippet": "Kısa özet", "answer": "Evet"},
            "organic": [
                {"title": "Haber 1", "snippet": "Birinci"},
                {"title": "Haber 2"},
                {"title": "Haber 3", "snippet": "Üçüncü"},
            ],
        }

        snippets = ArticleScraper(settings)._parse_search_results(data)

        assert snippets == ["Özet: Kısa özet", "Cevap: Evet", "Haber 1: Birinci", "Haber 3: Üçüncü"]

    def test_parse_empty_results(self, settings):
        assert ArticleScraper(settings)._parse_search_results({}) == []

