# bridge/core/context.py
from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from bridge.model.config import BridgeConfig, TransportSpec
from bridge.model.loader import ConfigLoader
from bridge.transport.base import Transport
from bridge.transport.errors import TransportError
from bridge.transport.registry import TransportDriverRegistry

from bridge.core.errors import ConfigError


@dataclass(frozen=True)
class Context:
    config: BridgeConfig
    drivers: TransportDriverRegistry

    @classmethod
    def load(
        cls,
        config_path: str | Path | None = None,
        *,
        drivers: Optional[TransportDriverRegistry] = None,
    ) -> "Context":
        """
        Load bridge.yml (the packaged default when `config_path` is None).

        `drivers` is injectable to support testing and custom driver registries.
        """
        loader = ConfigLoader(config_path)
        try:
            config = loader.load()
        except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(
                "Failed to load bridge configuration.",
                hint=str(e),
                details={"config_path": str(loader.path)},
            ) from None
        except Exception as e:
            raise ConfigError(
                "Unexpected error while loading bridge configuration.",
                hint=str(e),
                details={"config_path": str(loader.path)},
            ) from None

        drivers = drivers or TransportDriverRegistry.default()
        if not drivers.has(config.transport.driver):
            raise ConfigError(
                f"Unknown transport driver '{config.transport.driver}'.",
                hint=f"Available drivers: {', '.join(drivers.drivers())}",
                details={"config_path": str(loader.path)},
            )

        return cls(config=config, drivers=drivers)

    def with_transport(self, driver: str, params: Optional[Dict[str, Any]] = None) -> "Context":
        spec = TransportSpec(driver=driver.lower(), params=dict(params or {}))
        return replace(self, config=replace(self.config, transport=spec))

    def create_transport(self, overrides: Optional[Dict[str, Any]] = None) -> Transport:
        """Construct (but do not open) the configured transport."""
        spec = self.config.transport
        params = dict(spec.params)
        params.update(overrides or {})

        try:
            return self.drivers.create(spec.driver, **params)
        except (TransportError, TypeError) as e:
            # unknown driver key or constructor mismatch
            raise ConfigError(
                f"Failed to construct transport (driver='{spec.driver}').",
                hint=str(e),
                details={"driver": spec.driver, "params": params},
            ) from None
