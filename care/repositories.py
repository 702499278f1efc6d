"""
Record repositories.

Views and services talk to an explicit repository (``list``, ``get``,
``add``, ``update``, ``remove``) rather than to the ORM directly, so the
storage behind a page can be swapped without touching view logic.

Two implementations are provided:

* :class:`ModelRepository` stores records through a Django model,
  scoped to one owner;
* :class:`InMemoryRepository` keeps plain dicts in a Python list and is
  what the services are unit-tested against.

Both return records newest first: ``add`` puts the new record at the
front of the list.
"""
from __future__ import annotations

import itertools
from typing import Any, Iterable, Optional, Sequence

from django.db import models, transaction
from rest_framework.exceptions import NotFound

from .filters import RecordFilter, field_value


class RecordRepository:
    """Interface implemented by every record store."""

    def list(self, record_filter: Optional[RecordFilter] = None) -> list[Any]:
        raise NotImplementedError

    def get(self, pk: Any) -> Any | None:
        raise NotImplementedError

    def add(self, **fields: Any) -> Any:
        raise NotImplementedError

    def update(self, record: Any, **changes: Any) -> Any:
        raise NotImplementedError

    def remove(self, record: Any) -> None:
        raise NotImplementedError

    def count(self, **equals: Any) -> int:
        return sum(
            1 for r in self.list()
            if all(field_value(r, k) == v for k, v in equals.items())
        )


class ModelRepository(RecordRepository):
    """Repository over a Django model, optionally restricted to ``owner``."""

    def __init__(self, model: type[models.Model], *, owner: Any = None,
                 owner_field: str = 'user', ordering: Sequence[str] | None = None):
        self.model = model
        self.owner = owner
        self.owner_field = owner_field
        self.ordering = tuple(ordering) if ordering else tuple(model._meta.ordering or ('-id',))

    def queryset(self):
        qs = self.model.objects.all()
        if self.owner is not None:
            qs = qs.filter(**{self.owner_field: self.owner})
        return qs.order_by(*self.ordering)

    def list(self, record_filter: Optional[RecordFilter] = None) -> list[Any]:
        qs = self.queryset()
        if record_filter is not None:
            qs = record_filter.apply_queryset(qs)
        return list(qs)

    def get(self, pk: Any) -> Any | None:
        return self.queryset().filter(pk=pk).first()

    def add(self, **fields: Any) -> Any:
        if self.owner is not None:
            fields.setdefault(self.owner_field, self.owner)
        with transaction.atomic():
            return self.model.objects.create(**fields)

    def update(self, record: Any, **changes: Any) -> Any:
        if not changes:
            return record
        for name, value in changes.items():
            setattr(record, name, value)
        update_fields = list(changes)
        if any(f.name == 'updated_at' for f in self.model._meta.get_fields()):
            update_fields.append('updated_at')
        record.save(update_fields=update_fields)
        return record

    def remove(self, record: Any) -> None:
        record.delete()

    def count(self, **equals: Any) -> int:
        return self.queryset().filter(**equals).count()


class InMemoryRepository(RecordRepository):
    """A list of dict records, newest first.

    ``defaults`` fill fields the caller leaves out (typically the
    initial status).  Identifiers are generated from a counter that
    starts above any id present in ``records``.
    """

    def __init__(self, records: Iterable[dict] = (), *, defaults: dict | None = None):
        self._records: list[dict] = [dict(r) for r in records]
        self.defaults = dict(defaults or {})
        start = max((r.get('id') or 0 for r in self._records), default=0) + 1
        self._ids = itertools.count(start)

    def list(self, record_filter: Optional[RecordFilter] = None) -> list[dict]:
        if record_filter is None:
            return list(self._records)
        return record_filter.apply(self._records)

    def get(self, pk: Any) -> dict | None:
        return next((r for r in self._records if r.get('id') == pk), None)

    def add(self, **fields: Any) -> dict:
        record = {**self.defaults, **fields}
        record.setdefault('id', next(self._ids))
        self._records.insert(0, record)
        return record

    def update(self, record: dict, **changes: Any) -> dict:
        stored = self.get(record.get('id'))
        if stored is None:
            raise KeyError(record.get('id'))
        stored.update(changes)
        return stored

    def remove(self, record: dict) -> None:
        self._records = [r for r in self._records if r.get('id') != record.get('id')]


def get_or_404(repo: RecordRepository, pk: Any, noun: str = 'record') -> Any:
    record = repo.get(pk)
    if record is None:
        raise NotFound(f'{noun} not found')
    return record
