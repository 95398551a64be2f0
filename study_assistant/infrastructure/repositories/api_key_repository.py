"""Repository for ApiKey persistence."""

import logging
from typing import List, Optional

from ...domain.models.api_key import ApiKey
from ...domain.ports.persistence import KeyValueStore

logger = logging.getLogger(__name__)


class ApiKeyRepository:
    """Repository keeping ApiKey records as one JSON array in the store."""

    SLOT = "openai_api_keys"

    def __init__(self, store: KeyValueStore):
        self._store = store

    def list_all(self) -> List[ApiKey]:
        """List every stored API key in insertion order."""
        raw = self._store.get(self.SLOT)
        if not isinstance(raw, list):
            if raw is not None:
                logger.error("Slot %s does not hold a list; treating it as empty.", self.SLOT)
            return []
        keys = []
        for index, item in enumerate(raw):
            try:
                keys.append(ApiKey.from_dict(item))
            except (KeyError, TypeError, ValueError, AttributeError):
                logger.error("Skipping malformed record %d in slot %s.", index, self.SLOT)
        return keys

    def list_by_project_id(self, project_id: str) -> List[ApiKey]:
        """List all API keys owned by a project."""
        return [key for key in self.list_all() if key.project_id == project_id]

    def get_by_id(self, api_key_id: str) -> Optional[ApiKey]:
        """Get API key by ID."""
        for api_key in self.list_all():
            if api_key.id == api_key_id:
                return api_key
        return None

    def add(self, api_key: ApiKey) -> None:
        """Append a new API key."""
        keys = self.list_all()
        keys.append(api_key)
        self._save(keys)

    def replace(self, api_key: ApiKey) -> bool:
        """Overwrite the stored record sharing the key's ID."""
        keys = self.list_all()
        for index, existing in enumerate(keys):
            if existing.id == api_key.id:
                keys[index] = api_key
                self._save(keys)
                return True
        return False

    def delete(self, api_key_id: str) -> bool:
        """Delete an API key."""
        keys = self.list_all()
        remaining = [key for key in keys if key.id != api_key_id]
        if len(remaining) == len(keys):
            return False
        self._save(remaining)
        return True

    def _save(self, keys: List[ApiKey]) -> None:
        self._store.set(self.SLOT, [key.to_dict() for key in keys])
