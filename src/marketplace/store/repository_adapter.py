"""Catalog Store backed by the Protean repository for ``Crop``.

Each primitive holds a per-crop lock for its whole read-check-write cycle,
so there is a single writer per record while unrelated crops proceed in
parallel. Guards are evaluated against a fresh load taken under the lock.
"""

import threading
from contextlib import contextmanager
from enum import Enum

from protean.exceptions import ObjectNotFoundError

from marketplace.crop.crop import Crop, CropStatus
from marketplace.store.port import CatalogStore, WriteOutcome
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


def _value(status):
    return status.value if isinstance(status, Enum) else status


class _CropLock:
    """A crop's lock and the number of callers holding or waiting on it."""

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class RepositoryCatalogStore(CatalogStore):
    PAGE_SIZE = 100

    def __init__(self, domain):
        self._domain = domain
        self._locks = {}
        self._locks_guard = threading.Lock()

    @contextmanager
    def _lock_for(self, crop_id):
        """Hold the crop's lock. The entry is dropped once no caller uses it."""
        key = str(crop_id)
        with self._locks_guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _CropLock()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._locks_guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[key]

    def _repo(self):
        return self._domain.repository_for(Crop)

    def _load(self, crop_id):
        try:
            crop = self._repo().get(str(crop_id))
        except ObjectNotFoundError:
            return None
        if not crop.is_listed:
            return None
        # Load the ledger eagerly; snapshots outlive the domain context
        list(crop.interests)
        return crop

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def find_crop_by_id(self, crop_id):
        with self._lock_for(crop_id), self._domain.domain_context():
            return self._load(crop_id)

    def find_crops(self):
        with self._domain.domain_context():
            crop_ids = []
            offset = 0
            while True:
                page = (
                    self._repo()
                    ._dao.query.filter(status=CropStatus.LISTED.value)
                    .order_by("created_at")
                    .offset(offset)
                    .limit(self.PAGE_SIZE)
                    .all()
                )
                crop_ids.extend(str(crop.id) for crop in page.items)
                if len(page.items) < self.PAGE_SIZE:
                    break
                offset += self.PAGE_SIZE

            crops = []
            for crop_id in crop_ids:
                with self._lock_for(crop_id):
                    crop = self._load(crop_id)
                if crop is not None:
                    crops.append(crop)
            return crops

    # -------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------
    def add_crop(self, crop):
        with self._lock_for(crop.id), self._domain.domain_context():
            self._repo().add(crop)

    def atomic_append_interest(self, crop_id, interest) -> WriteOutcome:
        with self._lock_for(crop_id), self._domain.domain_context():
            crop = self._load(crop_id)
            if crop is None:
                return WriteOutcome.NOT_FOUND
            if crop.interest_from(interest.user_email) is not None:
                logger.debug(
                    "Interest append hit an existing entry",
                    crop_id=str(crop_id),
                    user_email=interest.user_email,
                )
                return WriteOutcome.CONFLICT

            crop.add_interest(interest)
            self._repo().add(crop)
            return WriteOutcome.SUCCESS

    def atomic_update_interest_status_and_quantity(
        self,
        crop_id,
        interest_id,
        new_status,
        new_quantity,
        expected_current_status,
        expected_quantity,
    ) -> WriteOutcome:
        with self._lock_for(crop_id), self._domain.domain_context():
            crop = self._load(crop_id)
            if crop is None:
                return WriteOutcome.NOT_FOUND
            interest = crop.interest_for(interest_id)
            if interest is None:
                return WriteOutcome.NOT_FOUND

            if interest.status != _value(expected_current_status) or crop.quantity != expected_quantity:
                logger.debug(
                    "Decision guard no longer holds",
                    crop_id=str(crop_id),
                    interest_id=str(interest_id),
                    status=interest.status,
                    expected_status=_value(expected_current_status),
                    quantity=crop.quantity,
                    expected_quantity=expected_quantity,
                )
                return WriteOutcome.CONFLICT

            crop.record_decision(interest_id, new_status, new_quantity)
            self._repo().add(crop)
            return WriteOutcome.SUCCESS

    def atomic_update_crop(self, crop_id, changes) -> WriteOutcome:
        with self._lock_for(crop_id), self._domain.domain_context():
            crop = self._load(crop_id)
            if crop is None:
                return WriteOutcome.NOT_FOUND

            crop.update_details(**changes)
            self._repo().add(crop)
            return WriteOutcome.SUCCESS

    def atomic_delist_crop(self, crop_id) -> WriteOutcome:
        with self._lock_for(crop_id), self._domain.domain_context():
            crop = self._load(crop_id)
            if crop is None:
                return WriteOutcome.NOT_FOUND

            crop.delist()
            self._repo().add(crop)
            return WriteOutcome.SUCCESS
