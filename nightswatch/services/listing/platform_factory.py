"""Platform Factory - SRP compliant platform detection and lister creation."""

import logging
import platform

from .directory_lister import DirectoryLister
from .volume_lister import BaseVolumeLister, PosixVolumeLister, WindowsVolumeLister


class ListerFactory:
    """Creates the OS listers for the current platform."""

    def detect_platform(self) -> str:
        """Detect current platform. Returns: windows, macos, or linux."""
        system = platform.system().lower()

        if system == "windows":
            return "windows"
        elif system == "darwin":
            return "macos"
        return "linux"

    def create_volume_lister(self) -> BaseVolumeLister:
        platform_name = self.detect_platform()
        logging.debug(f"Creating volume lister for platform: {platform_name}")

        if platform_name == "windows":
            return WindowsVolumeLister()
        return PosixVolumeLister()

    def create_directory_lister(self) -> DirectoryLister:
        return DirectoryLister()
