"""Public representation of shortened URLs."""

from typing import Any, Dict, Mapping, Union

from .common.url_builder import build_remove_url, build_short_url
from .store.models import UrlRecord

PUBLIC_FIELDS = ("url", "shorten", "hash", "removeUrl", "visits")


class PublicViewFormatter:
    """Project records onto the fields clients are allowed to see.

    Component fields, timestamps, ``is_custom`` and the raw remove token are
    never exposed; the token only appears inside ``removeUrl``.
    """

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")

    def to_public_view(self, record: Union[UrlRecord, Mapping[str, Any]]) -> Dict[str, str]:
        if isinstance(record, UrlRecord):
            record = record.to_dict()

        hash = record["hash"]
        return {
            "url": record["url"],
            "shorten": build_short_url(hash, self.base_url),
            "hash": hash,
            "removeUrl": build_remove_url(hash, record["remove_token"], self.base_url),
            "visits": f"{record['visit_counter']} visits recorded",
        }
