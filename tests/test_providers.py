"""Tests for the built-in news providers."""
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from api.models.article import Article, Language, NewsSource
from crawler.providers import BBCProvider, EksisozlukProvider, HackerNewsProvider, T24Provider

RSS_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>T24</title>
    <item>
      <title>Meclis&apos;te yeni düzenleme</title>
      <link>https://t24.com.tr/haber/meclis-duzenleme</link>
      <description><![CDATA[<p>Kısa açıklama</p>]]></description>
      <pubDate>Sun, 04 Feb 2024 10:30:00 +0300</pubDate>
    </item>
    <item>
      <title></title>
      <link>https://t24.com.tr/haber/bos</link>
    </item>
    <item>
      <title>İkinci haber</title>
      <link>https://t24.com.tr/haber/ikinci</link>
    </item>
    <item>
      <title>Üçüncü haber</title>
      <link>https://t24.com.tr/haber/ucuncu</link>
    </item>
  </channel>
</rss>
"""

GUNDEM_PAGE = """
<html><body>
  <ul class="topic-list">
    <li><h1 data-title="deprem &amp; sonrası" data-slug="deprem-sonrasi--123">deprem</h1></li>
    <li><h1 data-title="seçim sonuçları" data-slug="secim-sonuclari--456">seçim</h1></li>
    <li><h1 data-title="" data-slug="bos--1">boş</h1></li>
    <li><h1>no data attributes</h1></li>
  </ul>
</body></html>
"""


@pytest.fixture
def scraper():
    scraper = MagicMock()
    scraper.fetch_html = AsyncMock()
    scraper.extract_article_content = MagicMock()
    scraper.search = AsyncMock(return_value=[])
    return scraper


class TestRSSProvider:
    """Tests for feed parsing and enrichment."""

    def test_parse_feed(self, settings, scraper):
        articles = T24Provider(settings, scraper).parse_feed(RSS_FEED, 10)

        assert [a.original_title for a in articles] == ["Meclis'te yeni düzenleme", "İkinci haber", "Üçüncü haber"]
        first = articles[0]
        assert first.id.startswith("t24-")
        assert first.source == NewsSource.T24
        assert first.language == Language.TR
        assert first.original_content == "Kısa açıklama"
        assert first.original_url == "https://t24.com.tr/haber/meclis-duzenleme"
        assert first.published_at == datetime(2024, 2, 4, 7, 30, tzinfo=timezone.utc)
        assert articles[1].published_at is None

    def test_parse_feed_respects_limit(self, settings, scraper):
        assert len(T24Provider(settings, scraper).parse_feed(RSS_FEED, 2)) == 2

    def test_unreadable_feed_yields_nothing(self, settings, scraper):
        assert T24Provider(settings, scraper).parse_feed("<html>not a feed</html>", 10) == []

    def test_bbc_is_english(self, settings, scraper):
        articles = BBCProvider(settings, scraper).parse_feed(RSS_FEED, 1)
        assert articles[0].language == Language.EN
        assert articles[0].id.startswith("bbc-")

    @pytest.mark.asyncio
    async def test_short_description_is_enriched(self, settings, scraper, sample_turkish_article):
        scraper.fetch_html.return_value = "<html></html>"
        scraper.extract_article_content.return_value = "Sayfadan gelen tam metin"

        enriched = await T24Provider(settings, scraper).enrich(sample_turkish_article)

        scraper.fetch_html.assert_awaited_once_with(sample_turkish_article.original_url)
        assert enriched.original_content == "Sayfadan gelen tam metin"

    @pytest.mark.asyncio
    async def test_long_description_is_kept(self, settings, scraper, sample_turkish_article):
        article = sample_turkish_article.model_copy(update={"original_content": "x" * 150})

        enriched = await T24Provider(settings, scraper).enrich(article)

        scraper.fetch_html.assert_not_called()
        assert enriched is article


class TestEksisozlukProvider:
    """Tests for topic parsing and search-based enrichment."""

    @pytest.fixture
    def article(self):
        return Article(
            id="eksisozluk-abc",
            source=NewsSource.EKSISOZLUK,
            original_title="deprem sonrası",
            original_url="https://eksisozluk.com/deprem-sonrasi--123",
            language=Language.TR,
        )

    def test_requires_search_key(self, settings, scraper):
        assert not EksisozlukProvider(settings, scraper).can_run()
        keyed = settings.model_copy(update={"serper_api_key": "k"})
        assert EksisozlukProvider(keyed, scraper).can_run()

    def test_parse_topics(self, settings, scraper):
        articles = EksisozlukProvider(settings, scraper).parse_topics(GUNDEM_PAGE, 10)

        assert [a.original_title for a in articles] == ["deprem & sonrası", "seçim sonuçları"]
        assert articles[0].original_url == "https://eksisozluk.com/deprem-sonrasi--123"
        assert articles[0].original_content == ""

    @pytest.mark.asyncio
    async def test_news_query_first(self, settings, scraper, article):
        scraper.search.return_value = ["Haber: ayrıntı"]

        enriched = await EksisozlukProvider(settings, scraper).enrich(article)

        scraper.search.assert_awaited_once()
        assert scraper.search.call_args.args[0] == "deprem sonrası haber -site:eksisozluk.com"
        assert enriched.original_content == "Haber: ayrıntı"

    @pytest.mark.asyncio
    async def test_falls_back_to_bare_title(self, settings, scraper, article):
        scraper.search.side_effect = [[], ["Birinci", "İkinci"]]

        enriched = await EksisozlukProvider(settings, scraper).enrich(article)

        queries = [call.args[0] for call in scraper.search.call_args_list]
        assert queries == ["deprem sonrası haber -site:eksisozluk.com", "deprem sonrası"]
        assert enriched.original_content == "Birinci\n\nİkinci"

    @pytest.mark.asyncio
    async def test_no_results_uses_title(self, settings, scraper, article):
        scraper.search.side_effect = RuntimeError("search down")

        enriched = await EksisozlukProvider(settings, scraper).enrich(article)

        assert scraper.search.await_count == 2
        assert enriched.original_content == "deprem sonrası"


class TestHackerNewsProvider:

    def test_item_to_article(self, settings, scraper):
        provider = HackerNewsProvider(settings, scraper)

        article = provider._to_article(123, {"title": "Ask HN: Anything", "text": "<p>Body &amp; more</p>",
                                             "time": 1707043800, "type": "story"})

        assert article.id == "hn-123"
        assert article.original_content == "Body & more"
        assert article.original_url == "https://news.ycombinator.com/item?id=123"
        assert article.tags == ["story"]

    def test_item_without_title_is_skipped(self, settings, scraper):
        assert HackerNewsProvider(settings, scraper)._to_article(1, {"type": "job"}) is None

    @pytest.mark.asyncio
    async def test_crawl_skips_failed_items(self, settings, scraper):
        provider = HackerNewsProvider(settings, scraper)

        async def fake_get_json(url, headers=None):
            if url.endswith("topstories.json"):
                return [1, 2, 3]
            if url.endswith("/2.json"):
                raise RuntimeError("item fetch failed")
            return {"title": f"Story from {url}", "url": "https://example.com", "type": "story"}

        provider._get_json = fake_get_json
        articles = await provider.crawl(3)

        assert [a.id for a in articles] == ["hn-1", "hn-3"]

    @pytest.mark.asyncio
    async def test_external_links_are_not_enriched(self, settings, scraper, sample_article):
        provider = HackerNewsProvider(settings, scraper)
        provider._get_json = AsyncMock()

        assert await provider.enrich(sample_article) is sample_article
        provider._get_json.assert_not_called()
