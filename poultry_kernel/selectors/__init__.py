"""Read-only selectors over kernel entities."""

from poultry_kernel.selectors.base import BaseSelector
from poultry_kernel.selectors.directory_selector import DirectorySelector

__all__ = ["BaseSelector", "DirectorySelector"]
