"""Site adapters.

Importing this package registers every adapter with ``AdapterRegistry``.
"""

from .fivehundredpx import FiveHundredPxAdapter
from .flickr import FlickrAdapter
from .ipernity import IpernityAdapter
from .onex import OneXAdapter
from .photoshelter import PhotoShelterAdapter
from .pixoto import PixotoAdapter
from .seventytwodpi import SeventyTwoDpiAdapter
from .smugmug import SmugMugAdapter
from .triplej import TripleJAdapter
from .viewbug import ViewBugAdapter
from .youpic import YouPicAdapter

__all__ = [
    "FiveHundredPxAdapter",
    "FlickrAdapter",
    "IpernityAdapter",
    "OneXAdapter",
    "PhotoShelterAdapter",
    "PixotoAdapter",
    "SeventyTwoDpiAdapter",
    "SmugMugAdapter",
    "TripleJAdapter",
    "ViewBugAdapter",
    "YouPicAdapter",
]
