"""
Entity registry.

Entities are out-of-band annotations (links, media) attached to runs of
characters by key. The converter only ever creates LINK entities; the
registry stores whatever it is given.
"""

import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Union

from .exceptions import InvalidEntityError, UnknownEntityError

logger = logging.getLogger(__name__)

LINK = 'LINK'


class EntityMutability(str, Enum):
    """How an entity's text range behaves when edited"""
    MUTABLE = "MUTABLE"
    IMMUTABLE = "IMMUTABLE"
    SEGMENTED = "SEGMENTED"


@dataclass
class DraftEntityInstance:
    """A single registered entity"""
    type: str
    mutability: EntityMutability
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        result = asdict(self)
        result['mutability'] = self.mutability.value
        return result


class EntityRegistry:
    """
    In-memory entity store handing out sequential string keys.
    """

    def __init__(self):
        self._instances: Dict[str, DraftEntityInstance] = {}
        self._counter = 0

    def create(self, kind: str,
               mutability: Union[str, EntityMutability],
               data: Optional[Dict[str, Any]] = None) -> str:
        """
        Register a new entity.

        Args:
            kind: Entity type (e.g., "LINK")
            mutability: MUTABLE, IMMUTABLE or SEGMENTED
            data: Arbitrary entity payload

        Returns:
            The new entity key
        """
        try:
            mutability = EntityMutability(mutability)
        except ValueError:
            raise InvalidEntityError(f"Unknown entity mutability: {mutability!r}") from None

        self._counter += 1
        key = str(self._counter)
        self._instances[key] = DraftEntityInstance(
            type=kind,
            mutability=mutability,
            data=dict(data or {}),
        )
        logger.debug(f"Created {kind} entity {key}")
        return key

    def get(self, key: str) -> DraftEntityInstance:
        try:
            return self._instances[key]
        except KeyError:
            raise UnknownEntityError(key) from None

    def merge_data(self, key: str, data: Dict[str, Any]) -> DraftEntityInstance:
        instance = self.get(key)
        instance.data.update(data)
        return instance

    def __len__(self) -> int:
        return len(self._instances)

    def __iter__(self) -> Iterator[str]:
        return iter(self._instances)

    def to_dict(self) -> Dict[str, dict]:
        return {key: instance.to_dict() for key, instance in self._instances.items()}


# Default registry used when the caller does not pass one
_global_registry: Optional[EntityRegistry] = None


def get_registry() -> EntityRegistry:
    """Get or create the default entity registry"""
    global _global_registry
    if _global_registry is None:
        _global_registry = EntityRegistry()
    return _global_registry


def reset_registry() -> None:
    """Reset the default registry (useful for testing or new documents)"""
    global _global_registry
    _global_registry = EntityRegistry()
