"""Form data source over a plain mapping.

Accepts either single values or lists of values per field, the way HTML
forms can repeat a field; the first value wins. Non-string scalars such as
numbers parsed from JSON are read as their string form.
"""

from collections.abc import Mapping
from typing import Any

from storefront.core.ports import FormDataPort


class MappingFormData(FormDataPort):
    """FormDataPort backed by a mapping of field name to value(s)."""

    def __init__(self, fields: Mapping[str, Any] | None = None):
        self._fields = dict(fields or {})

    def get_field(self, name: str) -> str | None:
        value = self._fields.get(name)
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
        if value is None:
            return None
        return str(value)
