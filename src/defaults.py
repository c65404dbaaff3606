import os

DEFAULT_TARGET_PATH = '/Volumes/1-1'
DEFAULT_BACKUP_PATH = '/Volumes/1-2'
DEFAULT_DESTINATION_PATH = '/Volumes/a7iii'
DEFAULT_TMP_DIR = os.path.join('~', 'Pictures', 'tmp')
DEFAULT_CONFIG_FILE_PATH = 'config.yaml'
USER_CONFIG_FILE_PATH = os.path.join('~', '.config', 'rename-sony-photos', 'config.yaml')
DCIM_DIR_NAME = 'DCIM'
DRY_RUN_PREFIX = '[DRY RUN]'
PROGRAM_DESCRIPTION = """\
Move photos off a Sony camera card and rename its date directories.
The camera stores images in DCIM sub-directories named 0YYMMDD0. This tool copies
them to a staging directory, renames each directory to YYYY-MM-DD, copies the result
to the destination volume, then clears the card and ejects it.
"""
