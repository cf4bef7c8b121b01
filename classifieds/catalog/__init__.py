"""
Catalog package for the classifieds API.

Listings are filed into named boards ("groups"). The ``store`` module
holds the ``Catalog`` that owns the boards, ``schemas`` defines the
listing and its category payloads, and ``router`` exposes both over
HTTP under ``/api/catalog``.
"""

from .router import router as catalog_router  # noqa: F401
