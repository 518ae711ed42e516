from weaktrie.version import __version__
from weaktrie.memoize import memoize, CacheInfo
from weaktrie.cachenode import CacheNode, UNTERMINATED, TERMINATED
