import logging
import os
from types import SimpleNamespace
from typing import Optional

import yaml

from src.config import Config
from src.defaults import DEFAULT_CONFIG_FILE_PATH, USER_CONFIG_FILE_PATH

logger = logging.getLogger('rename_sony_photos')

CONFIG_KEYS = ('target_path', 'backup_path', 'destination_path', 'tmp_dir')


def setup_logging(options: SimpleNamespace):
    """Configure logging."""
    root = logging.getLogger('')
    root.setLevel(logging.WARNING)
    formatter = logging.Formatter(
        '[%(asctime)s] - [%(levelname)s] - %(message)s', '%Y-%m-%d %H:%M:%S')
    ch = logging.StreamHandler()
    ch.setFormatter(formatter)
    root.addHandler(ch)
    if not options.quiet:
        logger.setLevel(options.debug and logging.DEBUG or logging.INFO)
    else:
        logger.setLevel(logging.WARNING)
    if options.log:
        logfile = os.path.expanduser(options.log)
        fh = logging.FileHandler(logfile)
        fh.setFormatter(formatter)
        logger.addHandler(fh)
    logger.debug("Debug logging output enabled.")


def find_config_path() -> Optional[str]:
    """
    Locate a configuration file, looking first in the working directory and then
    in ~/.config/rename-sony-photos.  Returns None when neither exists.
    """
    if os.path.exists(DEFAULT_CONFIG_FILE_PATH):
        return DEFAULT_CONFIG_FILE_PATH
    user_config = os.path.expanduser(USER_CONFIG_FILE_PATH)
    if os.path.exists(user_config):
        return user_config
    return None


def get_config_options(arg_options=None) -> Config:
    if arg_options is not None and arg_options.config_file:
        # Load specified
        logger.info(f"Loading configuration from {arg_options.config_file}...")
        return load_config(arg_options.config_file)

    default_config_path = find_config_path()
    if default_config_path:
        # None specified, but one exists on disk
        logger.info(f"Found configuration file {default_config_path}. Loading...")
        return load_config(default_config_path)
    # Defaults only
    return Config()


def read_yaml(file_path):
    """
    YAML loading routine that checks for existence of the file specified
    and then parses it using `safe_load` to prevent malicious payloads.

    If the specified configuration file does not exist, FileNotFoundError
    error will be raised
    """
    if file_path is not None:
        if os.path.exists(file_path):
            with open(file_path, "r") as f:
                try:
                    return yaml.safe_load(f)
                except yaml.YAMLError as e:
                    raise RuntimeError(f"Invalid YAML in {file_path}.  Please verify syntax of YAML content.") from e
        else:
            raise FileNotFoundError(f"Specified configuration file {file_path} does not exist")


def load_config(config_file_path) -> Config:
    """
    Configuration file parsing used to override default values and return a Config
    """
    file_config = read_yaml(config_file_path)
    if file_config:
        logger.info(f"Loaded configuration from {config_file_path}")
    else:
        logger.warning(f"No configuration details found in {config_file_path}")
        file_config = {}
    if not isinstance(file_config, dict):
        raise RuntimeError(f"Invalid configuration in {config_file_path}.  Expected a mapping of settings.")

    # Store reference to the filepath
    config = Config(config_file=config_file_path)

    # Load all supported configuration options, keeping defaults for absent ones
    for key in CONFIG_KEYS:
        value = file_config.get(key)
        if value:
            setattr(config, key, os.path.expanduser(str(value)))

    return config


def save_config(config: Config, config_file_path) -> None:
    """Write the path settings of ``config`` as YAML, readable only by the owner."""
    data = {key: getattr(config, key) for key in CONFIG_KEYS}
    with open(config_file_path, "w") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
    os.chmod(config_file_path, 0o600)
    logger.debug(f"Saved configuration to {config_file_path}")


def merge_options(defaults: SimpleNamespace, overrides: SimpleNamespace) -> SimpleNamespace:
    """
    Merge two namespaces, overriding the values in the 'defaults'
    namespace with those provided in the overrides that have key
    collisions.  The resulting namespace will have the superset of the
    two provided collections
    """
    options = dict(vars(defaults))
    options.update(vars(overrides))
    return Config(**options)
