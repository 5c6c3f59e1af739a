# File: sitemapper/report/html_report.py
"""sitemapper.report.html_report: HTML report of a crawl rendered with Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from jinja2 import Environment, select_autoescape

from sitemapper.crawler.models import SitesData

_TEMPLATE = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Sitemap: {{ data.url }}</title></head>
<body>
<h1>{{ data.url }}</h1>
<p>{{ data.sites | length }} URLs</p>
<ol>
{% for site in data.sites %}  <li><a href="{{ site }}">{{ site }}</a></li>
{% endfor %}</ol>
{% if data.errors %}<h2>Failed sitemaps</h2>
<ul>
{% for err in data.errors %}  <li>{{ err.url }}: {{ err.reason }}</li>
{% endfor %}</ul>
{% endif %}</body>
</html>
"""

_env = Environment(autoescape=select_autoescape(default_for_string=True, default=True))


def render_html(data: SitesData, output_path: Union[Path, str]) -> Path:
    """Render *data* to an HTML page and save it at *output_path*.

    Args:
        data: SitesData returned by SiteMapper.fetch().
        output_path: path of the resulting HTML file.

    Returns:
        Path of the written file.
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    html = _env.from_string(_TEMPLATE).render(data=data)
    output.write_text(html, encoding="utf-8")
    return output
