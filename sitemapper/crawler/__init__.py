"""sitemapper.crawler: recursive sitemap crawling (fetcher, crawler, models)."""
