"""
Site Mirror - render a website section and save it for offline use.

This package crawls a site section from a seed page, renders each page
with a headless browser, saves the markup, and downloads referenced assets.
"""

__version__ = "1.0.0"
__author__ = "Site Mirror Team"
