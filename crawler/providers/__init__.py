# Providers module
from .base import BaseProvider
from .eksisozluk import EksisozlukProvider
from .hackernews import HackerNewsProvider
from .reddit import RedditProvider
from .rss import BBCProvider, RSSProvider, T24Provider, WebrazziProvider
from .wikipedia import WikipediaProvider

__all__ = [
    "BaseProvider",
    "BBCProvider",
    "EksisozlukProvider",
    "HackerNewsProvider",
    "RedditProvider",
    "RSSProvider",
    "T24Provider",
    "WebrazziProvider",
    "WikipediaProvider",
]
