"""
devtoolbox: a browsable directory of developer tools.

Catalog loading, search ranking, bookmarks, tool suggestions and
LLM-assisted recommendations reconciled against the local catalog.
"""

__version__ = "0.1.0"
