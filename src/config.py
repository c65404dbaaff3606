import os
from types import SimpleNamespace
from typing import Any, NamedTuple

from src.defaults import (DEFAULT_BACKUP_PATH, DEFAULT_DESTINATION_PATH,
                          DEFAULT_TARGET_PATH, DEFAULT_TMP_DIR)


class WorkflowContext(NamedTuple):
    """Read-only inputs of a single workflow run."""
    target_path: str
    backup_path: str
    destination_path: str
    tmp_dir: str
    dry_run: bool = False


class Config(SimpleNamespace):

    def __init__(self, **kwargs: Any) -> None:
        # Initialize all required keys in the configuration.  They key must *exist*
        # to avoid AttributeErrors and should be initialized to their default value
        super().__init__()
        self.target_path: str = DEFAULT_TARGET_PATH
        self.backup_path: str = DEFAULT_BACKUP_PATH
        self.destination_path: str = DEFAULT_DESTINATION_PATH
        self.tmp_dir: str = os.path.expanduser(DEFAULT_TMP_DIR)

        self.config_file = None
        self.log = None
        self.debug: bool = os.environ.get('LOGLEVEL') == "DEBUG"
        self.dry_run: bool = False
        self.quiet: bool = False
        self.__dict__.update(kwargs)

    def context(self) -> WorkflowContext:
        return WorkflowContext(
            target_path=self.target_path,
            backup_path=self.backup_path,
            destination_path=self.destination_path,
            tmp_dir=self.tmp_dir,
            dry_run=self.dry_run,
        )
