from selfheal.subsystems.registry import (
    DEFAULT_NAMES,
    RegistryError,
    Status,
    Subsystem,
    SubsystemRegistry,
)

__all__ = [
    "DEFAULT_NAMES",
    "RegistryError",
    "Status",
    "Subsystem",
    "SubsystemRegistry",
]
