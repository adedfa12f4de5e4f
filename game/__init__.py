# game module
from .archer import AimEstimator, AimState
from .charge import ChargeController, ChargePhase
from .physics import LaunchFactory, Projectile, ProjectileSimulator
from .loop import FrameLoop
from .config import BowConfig, HandConfig, ViewConfig

__all__ = [
    'AimEstimator', 'AimState', 'ChargeController', 'ChargePhase',
    'LaunchFactory', 'Projectile', 'ProjectileSimulator', 'FrameLoop',
    'BowConfig', 'HandConfig', 'ViewConfig',
]
