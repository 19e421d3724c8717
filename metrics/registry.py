"""Collector registry: unique names mapped to a default state and a factory"""
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional
from logging_config import get_logger


logger = get_logger(__name__)

# factory(logger) -> collector; raising signals a construction failure
CollectorFactory = Callable[..., "BaseCollector"]


class DuplicateCollectorError(ValueError):
    """A collector name was registered twice"""


@dataclass(frozen=True)
class Registration:
    """How a collector announces itself to the scraper"""
    name: str
    default_enabled: bool
    factory: CollectorFactory


class CollectorRegistry:
    """Central table of every known collector.

    Populated once at program start and read-only afterwards. The registry
    never decides which collectors run; the scraper does that from config.
    """

    def __init__(self):
        self._registrations: Dict[str, Registration] = {}

    def register(self, name: str, default_enabled: bool, factory: CollectorFactory) -> Registration:
        """Register a collector factory under a unique name"""
        if not name:
            raise ValueError("Collector name must not be empty")
        if name in self._registrations:
            raise DuplicateCollectorError(f"Collector {name!r} is already registered")

        registration = Registration(name=name, default_enabled=default_enabled, factory=factory)
        self._registrations[name] = registration
        logger.debug("Registered collector", collector=name, default_enabled=default_enabled)
        return registration

    def get(self, name: str) -> Optional[Registration]:
        """Get registration by name"""
        return self._registrations.get(name)

    def registrations(self) -> List[Registration]:
        """All registrations in registration order"""
        return list(self._registrations.values())

    def names(self) -> List[str]:
        """List all registered collector names"""
        return list(self._registrations.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._registrations

    def __iter__(self) -> Iterator[Registration]:
        return iter(self.registrations())

    def __len__(self) -> int:
        return len(self._registrations)
