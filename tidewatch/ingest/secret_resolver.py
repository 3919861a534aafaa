"""Provider API key resolution: secret store, then environment, then bundled config."""

import logging
import os
import re
from collections.abc import Mapping
from typing import Protocol

from tidewatch.config.schema import ProviderConfig
from tidewatch.ingest.errors import NotAvailable

logger = logging.getLogger(__name__)

_UUID_RE = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)


class SecretStore(Protocol):
    def get(self, name: str) -> str | None: ...

    def set(self, name: str, value: str) -> None: ...


def sanitize_api_key(raw: str) -> str:
    """Extract a UUID-shaped key from a pasted value.

    Pasted keys often pick up zero-width or control characters; if an
    8-4-4-4-12 hex group is present only that substring is returned,
    otherwise the trimmed input.
    """
    match = _UUID_RE.search(raw)
    if match:
        return match.group(0)
    return raw.strip()


class SecretResolver:
    def __init__(
        self,
        store: SecretStore,
        provider: ProviderConfig,
        environ: Mapping[str, str] | None = None,
    ):
        self.store = store
        self.provider = provider
        self.environ = environ if environ is not None else os.environ

    def resolve_api_key(self) -> str:
        """Return the active API key, raising NotAvailable if no source has one.

        A key found in the environment or bundled config is written back to
        the store so later resolutions prefer it.
        """
        candidates = [
            ("store", self.store.get(self.provider.secret_name)),
            ("environment", self.environ.get(self.provider.api_key_env)),
            ("bundled", self.provider.bundled_api_key),
        ]
        for source, raw in candidates:
            trimmed = (raw or "").strip()
            if not trimmed:
                continue
            key = sanitize_api_key(trimmed)
            if source != "store":
                logger.info("API key resolved from %s source, saving to secret store", source)
                self.store.set(self.provider.secret_name, key)
            return key

        raise NotAvailable("no provider API key configured", missing_credential=True)
