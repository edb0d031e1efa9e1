from .cache import OptionCache, RedisOptionCache
from .links import Collection, RemoteValuesLink
from .loader import LoadState, OptionLoader
from .sorting import HalSorting
