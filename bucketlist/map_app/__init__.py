"""BucketList GUI - lock screen, map of saved places and the place editor."""

from .gui import BucketListGUI

__all__ = ['BucketListGUI']
