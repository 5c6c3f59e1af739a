# setup.py
from setuptools import setup, find_packages

setup(
    name="sitemapper",
    version="0.1.0",
    description="Async crawler that flattens a sitemap / sitemap index tree into a list of URLs",
    packages=find_packages(include=["sitemapper", "sitemapper.*"]),
    install_requires=[
        "aiohttp>=3.9",
        "click>=8.1",
        "Jinja2>=3.1",
        "lxml>=4.9",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "sitemapper=sitemapper.cli:main",
        ],
    },
    python_requires=">=3.11",
)
