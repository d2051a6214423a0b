"""Base entity class for stored records."""

from dataclasses import asdict, dataclass, fields
from typing import Any


@dataclass
class BaseEntity:
    """Dataclass record that round-trips through plain dicts."""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        """Build from a stored dict, ignoring keys the record doesn't know."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})
