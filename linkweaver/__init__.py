"""
Site-scoped link checker: crawls a site from a start page and reports broken links.
"""

__version__ = "0.1.0"
