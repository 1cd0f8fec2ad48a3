"""Registered schema migrations, oldest first.

New revision modules must be appended to ``MIGRATION_MODULES``.
"""

from article_api.migrations.versions import m0001_create_articles

MIGRATION_MODULES = [
    m0001_create_articles,
]
