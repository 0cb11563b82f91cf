from .manifest_repository import ManifestRepository
from .tracking_repository import TrackingRepository

__all__ = [
    'ManifestRepository',
    'TrackingRepository'
]
