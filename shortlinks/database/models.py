"""Data models for URL records."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional
from uuid import UUID


@dataclass
class UrlRecord:
    """Represents a stored short code -> long URL mapping."""

    id: UUID
    short_code: str
    long_url: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Convert to the JSON shape used by the API and the cache."""
        return {
            "id": str(self.id),
            "shortCode": self.short_code,
            "longUrl": self.long_url,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UrlRecord":
        """Create from the dictionary produced by :meth:`to_dict`."""
        updated_at = data.get("updatedAt")
        return cls(
            id=UUID(data["id"]),
            short_code=data["shortCode"],
            long_url=data["longUrl"],
            created_at=datetime.fromisoformat(data["createdAt"]),
            updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
        )

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "UrlRecord":
        """Create from a database row keyed by column name."""
        return cls(
            id=row["id"],
            short_code=row["short_code"],
            long_url=row["long_url"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
