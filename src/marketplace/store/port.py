"""Catalog Store port.

The interest workflow reads and writes Crop records only through this
interface. Every write primitive is atomic with respect to a single crop:
it either applies completely or reports why it did not.
"""

from abc import ABC, abstractmethod
from enum import Enum


class WriteOutcome(Enum):
    SUCCESS = "success"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"


class CatalogStore(ABC):
    """Atomic single-record access to Crop records.

    Delisted crops are invisible: lookups return ``None`` and writes report
    ``NOT_FOUND``.
    """

    @abstractmethod
    def find_crop_by_id(self, crop_id):
        """Return a snapshot of the crop, or ``None``."""

    @abstractmethod
    def find_crops(self):
        """Return snapshots of every listed crop."""

    @abstractmethod
    def add_crop(self, crop):
        """Persist a newly listed crop."""

    @abstractmethod
    def atomic_append_interest(self, crop_id, interest) -> WriteOutcome:
        """Append ``interest`` unless the ledger already has one for its email.

        CONFLICT when the email is already present.
        """

    @abstractmethod
    def atomic_update_interest_status_and_quantity(
        self,
        crop_id,
        interest_id,
        new_status,
        new_quantity,
        expected_current_status,
        expected_quantity,
    ) -> WriteOutcome:
        """Set the entry status and the crop quantity in one write.

        CONFLICT when the entry status is no longer ``expected_current_status``
        or the crop quantity is no longer ``expected_quantity``.
        """

    @abstractmethod
    def atomic_update_crop(self, crop_id, changes) -> WriteOutcome:
        """Apply an owner edit under the crop's write lock."""

    @abstractmethod
    def atomic_delist_crop(self, crop_id) -> WriteOutcome:
        """Withdraw the crop from the marketplace."""
