# sitemapper/report/json_report.py

"""
JSON report for SiteMapper.

Serialises a SitesData result to a file.
"""
import json
from pathlib import Path

from sitemapper.crawler.models import SitesData


def render_json(data: SitesData, output_path: Path | str, include_errors: bool = False) -> Path:
    """
    Save *data* as JSON at *output_path*.

    :param data: SitesData returned by SiteMapper.fetch()
    :param output_path: path to the JSON file
    :param include_errors: also write the list of failed sitemap URLs
    :return: Path of the written file

    Example:
    ```python
    from sitemapper.report.json_report import render_json
    report_path = render_json(result, 'reports/sitemap.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(data.to_dict(include_errors=include_errors), f, ensure_ascii=False, indent=2)

    return output
