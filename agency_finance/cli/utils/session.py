"""Per-invocation state shared by CLI commands."""

from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from agency_finance.cli.error_handlers import ConfigurationError
from agency_finance.config.settings import FinanceEngineConfig, get_config
from agency_finance.readers.snapshot_reader import SnapshotReader
from agency_finance.services.accounts_service import AccountsService


@dataclass
class FinanceSession:
    """Options given to the command group.

    Attributes:
        snapshot: Snapshot path from --snapshot (falls back to SNAPSHOT_FILE)
        debug: Show stack traces for unexpected errors
    """

    snapshot: Optional[str] = None
    debug: bool = False

    def config(self) -> FinanceEngineConfig:
        try:
            return get_config()
        except PydanticValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration: {e}",
                recovery_hint="Check the environment variables and your .env file",
            )

    def accounts_service(self) -> AccountsService:
        """Load the snapshot and build a configured AccountsService.

        Raises:
            ConfigurationError: If no snapshot path is configured
        """
        config = self.config()
        path = self.snapshot or config.snapshot_file
        if not path:
            raise ConfigurationError(
                "No snapshot file given",
                recovery_hint="Pass --snapshot PATH or set SNAPSHOT_FILE",
            )
        store = SnapshotReader(path).load_store()
        return AccountsService.from_config(store, config)
