from .cache_store import CacheStore
from .patterns import DataAccessPatternGenerator, task_patterns, vm_patterns
from .policies import KaminoPlacementPolicy
from .scoring import CachePlacementScorer, ScoreComponents
from .simulator import CacheAccessSimulator

__version__ = "0.1.0"
