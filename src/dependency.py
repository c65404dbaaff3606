import logging
import shutil
import subprocess
import sys
from abc import ABC, abstractmethod

from src.exceptions import EjectFailure

logger = logging.getLogger('rename_sony_photos')

DISKUTIL = 'diskutil'


class VolumeEjector(ABC):
    """Something that can unmount and eject a removable volume by name."""

    supported = True

    @abstractmethod
    def eject(self, volume_name: str) -> None:
        ...


class DiskutilEjector(VolumeEjector):

    def __init__(self, runner=subprocess.run) -> None:
        self.runner = runner

    def eject(self, volume_name: str) -> None:
        try:
            result = self.runner([DISKUTIL, 'eject', volume_name],
                                 stdout=subprocess.PIPE,
                                 stderr=subprocess.STDOUT,
                                 text=True)
        except OSError as e:
            raise EjectFailure(f"failed to eject volume {volume_name}: {e}") from e
        if result.returncode != 0:
            raise EjectFailure(
                f"failed to eject volume {volume_name}: exit status {result.returncode}\n"
                f"Output: {result.stdout}")
        logger.info("Successfully ejected volume: %s", volume_name)


class NoopEjector(VolumeEjector):

    supported = False

    def eject(self, volume_name: str) -> None:
        logger.info("Eject not supported on %s, skipping %s", sys.platform, volume_name)


def get_volume_ejector() -> VolumeEjector:
    if sys.platform == 'darwin' and shutil.which(DISKUTIL) is not None:
        return DiskutilEjector()
    return NoopEjector()
