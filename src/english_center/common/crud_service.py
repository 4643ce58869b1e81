from __future__ import annotations

from datetime import date
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from ..core.exceptions import NotFoundError, ValidationError
from .validators import is_blank, optional_int, optional_number, parse_iso_date, require_non_empty


class CrudService:
    """Validation + dispatch for an entity whose repository is a ``MySQLTableRepository``.

    Create fills ``defaults`` for absent fields and requires ``required_fields``.
    Update is partial: only the fields present in the payload are written, and a
    required field may not be blanked.
    """

    label = "Record"
    required_fields: Sequence[str] = ()
    required_message: Optional[str] = None
    int_fields: Sequence[str] = ()
    number_fields: Sequence[str] = ()
    date_fields: Sequence[str] = ()
    defaults: Mapping[str, Any] = {}

    def __init__(self, repo, *, today: Callable[[], date] = date.today):
        self._repo = repo
        self._today = today

    def list_all(self) -> List[Dict[str, Any]]:
        return self._repo.list_all()

    def search(self, term: str) -> List[Dict[str, Any]]:
        return self._repo.search(require_non_empty(term, "Search term"))

    def get(self, record_id: int) -> Dict[str, Any]:
        row = self._repo.get_by_id(int(record_id))
        if not row:
            raise NotFoundError(f"{self.label} not found")
        return row

    def create(self, data: Any) -> Dict[str, Any]:
        values = self._prepare(data, creating=True)
        return self._repo.create(values)

    def update(self, record_id: int, data: Any) -> Dict[str, Any]:
        self.get(record_id)
        values = self._prepare(data, creating=False)
        row = self._repo.update(int(record_id), values)
        if not row:
            raise NotFoundError(f"{self.label} not found")
        return row

    def delete(self, record_id: int) -> Dict[str, Any]:
        row = self._repo.delete(int(record_id))
        if not row:
            raise NotFoundError(f"{self.label} not found")
        return row

    def _missing_message(self, field: str) -> str:
        return self.required_message or f"{field} is required"

    def _prepare(self, data: Any, *, creating: bool) -> Dict[str, Any]:
        if not isinstance(data, Mapping):
            raise ValidationError("Request body must be a JSON object")
        values = dict(data)

        if creating:
            for key, default in self.defaults.items():
                if is_blank(values.get(key)):
                    values[key] = default() if callable(default) else default
            for field in self.required_fields:
                if is_blank(values.get(field)):
                    raise ValidationError(self._missing_message(field))
        else:
            for field in self.required_fields:
                if field in values and is_blank(values[field]):
                    raise ValidationError(self._missing_message(field))

        for field in self.int_fields:
            if field in values:
                values[field] = optional_int(values[field], field)
        for field in self.number_fields:
            if field in values:
                values[field] = optional_number(values[field], field)
        for field in self.date_fields:
            if field in values:
                values[field] = None if is_blank(values[field]) else parse_iso_date(values[field], field)

        return self._clean(values, creating=creating)

    def _clean(self, values: Dict[str, Any], *, creating: bool) -> Dict[str, Any]:
        """Entity-specific checks; runs after the generic coercion."""
        return values
