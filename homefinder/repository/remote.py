"""Repository over a remote REST record API."""

import logging
from urllib.parse import quote
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

import httpx

from homefinder.config import IdType, RemoteConfig
from homefinder.exceptions import NotFoundError, PersistenceError, ValidationError
from homefinder.models import FilterSpec, Property
from homefinder.repository.base import FEATURED_LIMIT, PropertyRepository, apply_changes
from homefinder.repository.normalizers import ColumnNormalizer, RecordNormalizer
from homefinder.serialization import serialize_value

logger = logging.getLogger(__name__)


class RemotePropertyRepository(PropertyRepository):
    """Listings served by a record API with underscored column names.

    Records live under ``/tables/{table}/records``. Row filters use
    ``column=op.value`` query parameters (``gte``, ``lte``, ``eq``, ``in``).
    Only numeric bounds, property types and the featured flag are pushed
    down; free-text matching is left to the client.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        table: str = "properties",
        normalizer: RecordNormalizer | None = None,
        id_type: IdType = IdType.STRING,
    ) -> None:
        super().__init__(normalizer or ColumnNormalizer(), id_type)
        self.client = client
        self.table = table

    @classmethod
    def from_config(cls, config: RemoteConfig, id_type: IdType = IdType.STRING) -> "RemotePropertyRepository":
        client = httpx.AsyncClient(
            base_url=config.base_url,
            headers=config.headers,
            timeout=config.timeout_seconds,
        )
        return cls(client, table=config.table, id_type=id_type)

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "RemotePropertyRepository":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    @property
    def _collection(self) -> str:
        return f"/tables/{self.table}/records"

    def _record(self, property_id: str) -> str:
        return f"{self._collection}/{quote(property_id, safe='')}"

    def _column(self, field_name: str) -> str:
        columns = getattr(self.normalizer, "columns", None)
        return columns[field_name] if columns else field_name

    def filter_params(self, filters: FilterSpec) -> list[tuple[str, str]]:
        """Translate the pushable part of a filter spec into query params."""
        params: list[tuple[str, str]] = []
        bounds = (
            ("price", "gte", filters.price_min),
            ("price", "lte", filters.price_max),
            ("bedrooms", "gte", filters.bedrooms_min),
            ("bathrooms", "gte", filters.bathrooms_min),
            ("square_feet", "gte", filters.square_feet_min),
        )
        for field_name, op, value in bounds:
            if value is not None:
                params.append((self._column(field_name), f"{op}.{serialize_value(value)}"))
        if filters.property_types:
            quoted = ",".join(f'"{t.value}"' for t in sorted(filters.property_types, key=lambda t: t.value))
            params.append((self._column("property_type"), f"in.({quoted})"))
        return params

    async def get_all(self, filters: FilterSpec | None = None) -> list[Property]:
        params = self.filter_params(filters) if filters is not None else []
        rows = await self._request("GET", self._collection, params=params)
        return self._normalize_rows(rows)

    async def get_featured(self) -> list[Property]:
        params = [(self._column("featured"), "eq.true"), ("limit", str(FEATURED_LIMIT))]
        rows = await self._request("GET", self._collection, params=params)
        return [prop for prop in self._normalize_rows(rows) if prop.featured][:FEATURED_LIMIT]

    async def get_by_id(self, property_id: str) -> Property:
        property_id = self.check_id(property_id)
        row = await self._request("GET", self._record(property_id), missing=property_id)
        if not row:
            raise NotFoundError(f"Property {property_id} not found")
        return self.normalizer.normalize(row)

    async def create(self, draft: Property) -> Property:
        prop = replace(draft, created_at=datetime.now(timezone.utc), saved_at=None)
        row = self.normalizer.denormalize(prop)
        row.pop(self._column("id"), None)
        created = await self._request("POST", self._collection, json=row)
        if not created:
            raise PersistenceError("Record API returned no row for created property")
        result = self.normalizer.normalize(created)
        logger.info("Created property %s", result.id, extra={"property_id": result.id, "table": self.table})
        return result

    async def update(self, property_id: str, changes: dict[str, Any]) -> Property:
        current = await self.get_by_id(property_id)
        updated = apply_changes(current, changes)
        row = self.normalizer.denormalize(updated)
        row.pop(self._column("id"), None)
        saved = await self._request(
            "PATCH", self._record(current.id), json=row, missing=current.id
        )
        logger.info("Updated property %s", current.id, extra={"property_id": current.id, "table": self.table})
        return self.normalizer.normalize(saved) if saved else updated

    async def delete(self, property_id: str) -> Property:
        current = await self.get_by_id(property_id)
        await self._request("DELETE", self._record(current.id), missing=current.id)
        logger.info("Deleted property %s", current.id, extra={"property_id": current.id, "table": self.table})
        return current

    def _normalize_rows(self, rows: Any) -> list[Property]:
        properties = []
        for row in rows or []:
            try:
                properties.append(self.normalizer.normalize(row))
            except ValidationError as exc:
                logger.warning("Skipping record from %s: %s", self.table, exc, extra={"table": self.table})
        return properties

    async def _request(self, method: str, path: str, missing: str | None = None, **kwargs: Any) -> Any:
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise PersistenceError(f"{method} {path} failed: {exc}") from exc

        if response.status_code == 404 and missing is not None:
            raise NotFoundError(f"Property {missing} not found")
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise PersistenceError(f"{method} {path} returned {response.status_code}") from exc

        if not response.content:
            return None
        try:
            payload = response.json()
        except ValueError as exc:
            raise PersistenceError(f"{method} {path} returned invalid JSON") from exc
        if isinstance(payload, dict) and "data" in payload:
            return payload["data"]
        return payload
