from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping

from app.services.search.errors import UnknownField


@dataclass(frozen=True)
class FieldSchema:
    """Searchable fields of one entity and whether each is continuous.

    Continuous fields have an ordered domain and accept range filters;
    every field accepts categorical filters. ``identifier`` names the unique
    column used as the stable sort key.
    """

    fields: Mapping[str, bool]
    identifier: str = "id"

    def __post_init__(self):
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def is_continuous(self, name: str) -> bool:
        try:
            return self.fields[name]
        except KeyError:
            raise UnknownField(name) from None
