"""Hash generation for shortened URLs."""

import base64
import hashlib
import uuid
from typing import Optional

from .common.url_builder import split_url
from .dictionary import DictionaryState, InMemoryDictionaryState

# Characters of standard base64 that cannot appear in a path segment
_PATH_SAFE = str.maketrans({"/": "-", "+": "_", "=": None})

DICTIONARY_SEPARATOR = "-"


def content_hash(url: str) -> str:
    """Deterministic hash of a URL.

    MD5 of the UTF-8 encoded URL, base64 encoded, with ``/`` and ``+``
    swapped for ``-`` and ``_`` and the padding dropped. Always 22
    characters long.
    """
    digest = hashlib.md5(url.encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii").translate(_PATH_SAFE)


def generate_remove_token() -> str:
    """Random token authorizing removal of a short URL (uuid4)."""
    return str(uuid.uuid4())


class HashGenerator:
    """Turn URLs into hashes using the deterministic or dictionary strategy."""

    def __init__(
        self,
        use_dictionary: bool = False,
        dictionary_state: Optional[DictionaryState] = None,
    ):
        """Initialize hash generator.

        Args:
            use_dictionary: Use the dictionary strategy by default
            dictionary_state: Shared dictionary mapping (in-memory if not given)
        """
        self.use_dictionary = use_dictionary
        self.dictionary_state = dictionary_state or InMemoryDictionaryState()

    async def generate_hash(self, url: str, use_dictionary: Optional[bool] = None) -> str:
        """Generate the hash for a URL.

        Args:
            url: The URL to hash
            use_dictionary: Override the default strategy for this call

        Returns:
            Hash string
        """
        if use_dictionary is None:
            use_dictionary = self.use_dictionary

        if use_dictionary:
            return await self.dictionary_hash(url)
        return content_hash(url)

    async def dictionary_hash(self, url: str) -> str:
        """Composite hash from the identifiers of the URL's protocol, domain and path."""
        protocol, domain, path = split_url(url)

        identifiers = [
            await self.dictionary_state.identifier_for("protocol", protocol),
            await self.dictionary_state.identifier_for("domain", domain),
            await self.dictionary_state.identifier_for("path", path),
        ]
        return DICTIONARY_SEPARATOR.join(identifiers)

    @staticmethod
    def generate_remove_token() -> str:
        return generate_remove_token()

    async def close(self) -> None:
        await self.dictionary_state.close()
