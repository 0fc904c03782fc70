from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, cast

from convention_linter.domain.checks.registry import CheckRegistry
from convention_linter.domain.config import ConfigurationLoader
from convention_linter.domain.messages import MessageCatalog
from convention_linter.infrastructure.config_file_loader import ConfigFileLoader
from convention_linter.infrastructure.gateways.astroid_gateway import AstroidGateway
from convention_linter.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from convention_linter.infrastructure.gateways.libcst_fixer_gateway import LibCSTFixerGateway

if TYPE_CHECKING:
    from convention_linter.domain.protocols import (
        FileSystemProtocol,
        FixerGatewayProtocol,
        ParserProtocol,
    )


class ConventionLinterContainer:
    """Dependency Injection Container for the convention linter."""

    _instance: Optional["ConventionLinterContainer"] = None

    def __init__(self, config: Optional[dict[str, object]] = None, start: Optional[Path] = None) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults(config, start)

    def _register_defaults(self, config: Optional[dict[str, object]], start: Optional[Path]) -> None:
        """Register default implementations for protocols."""
        if config is None:
            config = ConfigFileLoader.load_config_from_fs(start)
        config_loader = ConfigurationLoader(config)
        self.register_singleton("ConfigurationLoader", config_loader)
        registry = CheckRegistry()
        self.register_singleton("CheckRegistry", registry)
        self.register_singleton("MessageCatalog", MessageCatalog(registry.classes()))
        self.register_singleton("AstroidGateway", AstroidGateway(type_information=config_loader.type_information))
        self.register_singleton("LibCSTFixerGateway", LibCSTFixerGateway())
        self.register_singleton("FileSystemGateway", FileSystemGateway())

    # JUSTIFICATION: DI Container must handle any type of service
    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    # JUSTIFICATION: DI Container must return any type of service
    def get(self, key: str) -> Any:
        """Retrieve a dependency by key. Prefer explicit get_* methods for type safety."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def get_config_loader(self) -> ConfigurationLoader:
        """Return the configuration loader (created at composition root)."""
        return cast(ConfigurationLoader, self.get("ConfigurationLoader"))

    def get_registry(self) -> CheckRegistry:
        """Return the catalog of available checks."""
        return cast(CheckRegistry, self.get("CheckRegistry"))

    def get_message_catalog(self) -> MessageCatalog:
        """Return the message templates of every registered check."""
        return cast(MessageCatalog, self.get("MessageCatalog"))

    def get_astroid_gateway(self) -> "ParserProtocol":
        """Return the Astroid gateway."""
        return cast("ParserProtocol", self.get("AstroidGateway"))

    def get_fixer_gateway(self) -> "FixerGatewayProtocol":
        """Return the LibCST fixer gateway."""
        return cast("FixerGatewayProtocol", self.get("LibCSTFixerGateway"))

    def get_filesystem_gateway(self) -> "FileSystemProtocol":
        """Return the filesystem gateway."""
        return cast("FileSystemProtocol", self.get("FileSystemGateway"))

    @classmethod
    def get_instance(cls) -> "ConventionLinterContainer":
        """Get or create global container instance."""
        if cls._instance is None:
            cls._instance = ConventionLinterContainer()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (primarily for testing)."""
        cls._instance = None
