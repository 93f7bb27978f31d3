"""
Storage seam for jobs and their quote/bid records.

Services only ever talk to a JobRepository, so the cargo engine and the
job workflow run the same against the database or an in-memory store.
"""
from __future__ import annotations

import itertools
import logging
from typing import Any, Dict, List, Optional

from django.db import IntegrityError, transaction

from .models import AuditLog, Job, QuoteVersion, VendorBid

logger = logging.getLogger(__name__)

COLLECTIONS = {
    "jobs": Job,
    "quote_versions": QuoteVersion,
    "vendor_bids": VendorBid,
}

# Natural keys that must stay unique within a collection
UNIQUE_KEYS = {
    "jobs": [("sequence",)],
    "quote_versions": [("job_id", "version_no")],
}


class JobNotFound(Exception):
    """Raised when a record id is not present in a collection"""
    pass


class UnknownCollection(Exception):
    pass


class DuplicateRecord(Exception):
    """Raised when a save would break a unique key, e.g. two jobs claiming one sequence"""
    pass


def _check_collection(collection: str) -> None:
    if collection not in COLLECTIONS:
        raise UnknownCollection(f"Unknown collection: {collection}")


class JobRepository:
    def load(self, collection: str, **filters) -> List[Any]:
        raise NotImplementedError

    def get(self, collection: str, item_id) -> Any:
        raise NotImplementedError

    def save(self, collection: str, item, user=None) -> Any:
        raise NotImplementedError

    def delete(self, collection: str, item_id, user=None) -> None:
        raise NotImplementedError

    def next_sequence(self) -> int:
        sequences = [job.sequence for job in self.load("jobs") if job.sequence]
        return max(sequences, default=0) + 1


class DjangoJobRepository(JobRepository):
    """ORM-backed repository; every write is mirrored into the audit log."""

    def load(self, collection: str, **filters) -> List[Any]:
        _check_collection(collection)
        return list(COLLECTIONS[collection].objects.filter(**filters))

    def get(self, collection: str, item_id) -> Any:
        _check_collection(collection)
        model = COLLECTIONS[collection]
        try:
            return model.objects.get(pk=item_id)
        except model.DoesNotExist:
            raise JobNotFound(f"{collection} record {item_id} not found")

    def save(self, collection: str, item, user=None) -> Any:
        _check_collection(collection)
        try:
            with transaction.atomic():
                item.save()
        except IntegrityError as e:
            raise DuplicateRecord(f"{collection} record conflicts with an existing one: {e}") from e
        self._audit(user, "SAVE", collection, item.pk)
        return item

    def delete(self, collection: str, item_id, user=None) -> None:
        item = self.get(collection, item_id)
        item.delete()
        self._audit(user, "DELETE", collection, item_id)

    def next_sequence(self) -> int:
        last = Job.objects.order_by('-sequence').values_list('sequence', flat=True).first()
        return (last or 0) + 1

    def _audit(self, user, action: str, collection: str, item_id) -> None:
        authenticated = user is not None and getattr(user, "is_authenticated", False)
        AuditLog.objects.create(
            user=user if authenticated else None,
            user_name=user.get_username() if authenticated else "system",
            action=action,
            entity_type=collection,
            entity_id=str(item_id),
            changes="Record saved" if action == "SAVE" else "Record deleted",
        )
        logger.debug(f"Audit {action} {collection}:{item_id}")


class InMemoryJobRepository(JobRepository):
    """Dictionary-backed repository for tests and offline scripts."""

    def __init__(self):
        self._store: Dict[str, Dict[Any, Any]] = {name: {} for name in COLLECTIONS}
        self._ids = itertools.count(1)
        self.audit: List[Dict[str, Any]] = []

    def load(self, collection: str, **filters) -> List[Any]:
        _check_collection(collection)
        items = list(self._store[collection].values())
        for attr, value in filters.items():
            items = [i for i in items if getattr(i, attr, None) == value]
        return items

    def get(self, collection: str, item_id) -> Any:
        _check_collection(collection)
        try:
            return self._store[collection][item_id]
        except KeyError:
            raise JobNotFound(f"{collection} record {item_id} not found")

    def save(self, collection: str, item, user=None) -> Any:
        _check_collection(collection)
        self._check_unique(collection, item)
        if getattr(item, "id", None) is None:
            item.id = next(self._ids)
        self._store[collection][item.id] = item
        self._record(user, "SAVE", collection, item.id)
        return item

    def delete(self, collection: str, item_id, user=None) -> None:
        self.get(collection, item_id)
        del self._store[collection][item_id]
        self._record(user, "DELETE", collection, item_id)

    def _check_unique(self, collection: str, item) -> None:
        for fields in UNIQUE_KEYS.get(collection, []):
            key = tuple(getattr(item, f, None) for f in fields)
            for other in self._store[collection].values():
                if other is not item and tuple(getattr(other, f, None) for f in fields) == key:
                    raise DuplicateRecord(f"{collection} record conflicts on {fields}: {key}")

    def _record(self, user, action: str, collection: str, item_id: Optional[Any]) -> None:
        self.audit.append({
            "user": getattr(user, "username", "system") if user else "system",
            "action": action,
            "entity_type": collection,
            "entity_id": str(item_id),
        })
