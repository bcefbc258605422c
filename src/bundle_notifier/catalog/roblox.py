from __future__ import annotations

import logging
from typing import Any, Iterable

import requests

from bundle_notifier.config import CatalogSettings
from bundle_notifier.models import BundleItem, normalize_price_status
from bundle_notifier.utils.datetime_utils import parse_datetime_utc

from .base import CatalogGateway, NotFound, TransportError, UpstreamDataError

logger = logging.getLogger(__name__)

_HEADERS = {
    "User-Agent": "bundle-notifier/0.1",
    "Accept": "application/json",
}
_CREATOR_PROFILE_URLS = {
    "User": "https://www.roblox.com/users/{id}/profile",
    "Group": "https://www.roblox.com/groups/{id}",
}


class RobloxCatalogClient(CatalogGateway):
    def __init__(self, settings: CatalogSettings) -> None:
        self.settings = settings

    def list_recent(self) -> list[BundleItem]:
        params = {
            "category": self.settings.category,
            "subcategory": self.settings.subcategory,
            "sortType": self.settings.sort_type,
            "sortOrder": self.settings.sort_order,
            "limit": self.settings.limit,
        }
        payload = self._request("GET", self.settings.search_url, params=params)
        return [_entry_to_bundle(entry) for entry in _data_entries(payload)]

    def get_detail(self, bundle_id: int | str) -> BundleItem:
        numeric_id = _coerce_id(bundle_id)
        if numeric_id is None:
            raise NotFound(bundle_id)

        body = {"items": [{"itemType": "Bundle", "id": numeric_id}]}
        payload = self._request("POST", self.settings.details_url, json=body)
        entries = _data_entries(payload)
        if not entries:
            raise NotFound(bundle_id)
        return _entry_to_bundle(entries[0])

    def get_thumbnails(self, bundle_ids: Iterable[int]) -> dict[int, str]:
        ids = [str(bundle_id) for bundle_id in bundle_ids]
        if not ids:
            return {}

        params = {
            "bundleIds": ",".join(ids),
            "size": self.settings.thumbnail_size,
            "format": self.settings.thumbnail_format,
        }
        payload = self._request("GET", self.settings.thumbnails_url, params=params)

        thumbnails: dict[int, str] = {}
        for entry in _data_entries(payload, skip_malformed=True):
            target_id = _coerce_id(entry.get("targetId", entry.get("id")))
            image_url = str(entry.get("imageUrl") or "").strip()
            if target_id is None or not image_url:
                logger.debug("Thumbnail unavailable for entry %s (state=%s)", entry, entry.get("state"))
                continue
            thumbnails[target_id] = image_url
        return thumbnails

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            if method == "POST":
                response = requests.post(
                    url,
                    timeout=self.settings.timeout_seconds,
                    headers=_HEADERS,
                    **kwargs,
                )
            else:
                response = requests.get(
                    url,
                    timeout=self.settings.timeout_seconds,
                    headers=_HEADERS,
                    **kwargs,
                )
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        if response.status_code >= 400:
            raise TransportError(
                f"{method} {url} returned status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamDataError(f"{method} {url} returned invalid JSON") from exc


def _data_entries(payload: Any, *, skip_malformed: bool = False) -> list[dict[str, Any]]:
    if not isinstance(payload, dict):
        raise UpstreamDataError("Catalog response root must be an object")

    data = payload.get("data")
    if data is None:
        return []
    if not isinstance(data, list):
        raise UpstreamDataError("Catalog response 'data' must be a list")
    if skip_malformed:
        return [entry for entry in data if isinstance(entry, dict)]
    for entry in data:
        if not isinstance(entry, dict):
            raise UpstreamDataError(f"Catalog response entry must be an object, got {entry!r}")
    return data


def _coerce_id(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _coerce_price(value: Any) -> float | int | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        parsed = float(str(value).strip())
    except ValueError:
        return None
    return int(parsed) if parsed.is_integer() else parsed


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _creator_profile_link(entry: dict[str, Any]) -> str | None:
    link = _optional_text(entry.get("creatorProfileLink"))
    if link:
        return link

    creator_id = _coerce_id(entry.get("creatorTargetId"))
    template = _CREATOR_PROFILE_URLS.get(str(entry.get("creatorType") or ""))
    if creator_id is None or template is None:
        return None
    return template.format(id=creator_id)


def _entry_to_bundle(entry: dict[str, Any]) -> BundleItem:
    bundle_id = _coerce_id(entry.get("id"))
    if bundle_id is None:
        raise UpstreamDataError(f"Catalog entry has no usable id: {entry.get('id')!r}")

    return BundleItem(
        id=bundle_id,
        name=_optional_text(entry.get("name")),
        description=_optional_text(entry.get("description")),
        price_status=normalize_price_status(entry.get("priceStatus")),
        price=_coerce_price(entry.get("price")),
        updated_at=parse_datetime_utc(entry.get("updated") or entry.get("updatedAt")),
        creator_name=_optional_text(entry.get("creatorName")),
        creator_profile_link=_creator_profile_link(entry),
        raw=dict(entry),
    )
