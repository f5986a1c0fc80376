"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .environment_guard import EnvironmentMismatchError, check_environment, resolve_environment
from .loader import ConfigurationError, load_configuration
from .runtime_settings import (
    CatalogLookupError,
    Configuration,
    LineageStoreSettings,
    PayloadSettings,
    PipelineCatalog,
    ReceiverTarget,
    RunDefaults,
    SenderIdentity,
    TargetEnvironment,
)

__all__ = [
    "Configuration",
    "LineageStoreSettings",
    "PayloadSettings",
    "PipelineCatalog",
    "ReceiverTarget",
    "RunDefaults",
    "SenderIdentity",
    "TargetEnvironment",
    "CatalogLookupError",
    "ConfigurationError",
    "EnvironmentMismatchError",
    "load_configuration",
    "check_environment",
    "resolve_environment",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
