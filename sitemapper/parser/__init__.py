"""sitemapper.parser: sitemap XML deserialisation."""
