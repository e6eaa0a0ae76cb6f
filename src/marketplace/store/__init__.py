"""Catalog Store package.

The process-wide store is created lazily over the marketplace domain's
repository. Tests swap it with ``set_store`` and restore it with
``reset_store``.
"""

from marketplace.store.port import CatalogStore, WriteOutcome

_store = None


def get_store() -> CatalogStore:
    global _store
    if _store is None:
        from marketplace.domain import marketplace
        from marketplace.store.repository_adapter import RepositoryCatalogStore

        _store = RepositoryCatalogStore(marketplace)
    return _store


def set_store(store: CatalogStore) -> None:
    global _store
    _store = store


def reset_store() -> None:
    set_store(None)


__all__ = ["CatalogStore", "WriteOutcome", "get_store", "set_store", "reset_store"]
