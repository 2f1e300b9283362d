"""CLI configuration passed through the Typer context."""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from oauth1_gate.config import GateConfig, ProviderConfig


class OutputFormat(StrEnum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


@dataclass
class CLIConfig:
    """Configuration passed through Typer context.

    Attributes:
        verbose: Enable debug logging.
        provider_file: Explicit provider config file. When unset, provider
            settings come from OAUTH1_* environment variables, falling back to
            ~/.config/oauth1-gate/provider.json.
    """

    verbose: bool = False
    provider_file: Path | None = None

    def load_provider(self) -> ProviderConfig:
        """Load provider configuration.

        Raises:
            ValueError: If required settings are missing
            FileNotFoundError: If no config file exists and env vars are unset
        """
        if self.provider_file is not None:
            return ProviderConfig.from_file(self.provider_file)
        return ProviderConfig.load()

    def load_gate(self) -> GateConfig:
        """Load gate configuration from OAUTH1_GATE_* environment variables."""
        return GateConfig.from_env()
