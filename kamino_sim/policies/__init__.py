from .base import BasePlacementPolicy
from .kamino import KaminoPlacementPolicy
from .simple import FirstFitPlacementPolicy, SimplePlacementPolicy

POLICIES = {
    KaminoPlacementPolicy.name: KaminoPlacementPolicy,
    SimplePlacementPolicy.name: SimplePlacementPolicy,
    FirstFitPlacementPolicy.name: FirstFitPlacementPolicy,
}
