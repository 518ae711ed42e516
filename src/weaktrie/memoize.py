""" Memoize a function of any arity on the identity/value of its arguments.

    Usage:
    @weaktrie.memoize
    def my_func(foo, bar):
        ....

    @weaktrie.memoize(verbose=3)
    def my_noisy_func(foo, bar):
        ....

    my_func.clear_cache()
    my_func.cache_info()

    Each positional argument descends one level of a trie of CacheNodes.
    Objects are matched by identity and held weakly so that memoizing on
    an argument never keeps it alive. Primitives are matched by value.
    Results are only cached when the function returns; an exception leaves
    the node empty so the next identical call tries again.

    Arguments that refuse weak references (list, dict, tuple, ...) are held
    strongly, at most max_pinned of them per trie node, least recently used
    evicted first. max_pinned=0 never caches calls involving them.

    Not thread safe. Two threads making the same first call may both run
    the function and the last one to finish wins.
"""
import collections
import functools
import sys

from weaktrie.branches import DEFAULT_MAX_PINNED
from weaktrie.cachenode import CacheNode

CacheInfo = collections.namedtuple("CacheInfo", ["hits", "misses", "errors"])


class _KeywordMarker:
    """ Separates the positional part of a trie path from the keyword part """

    def __repr__(self):
        return "<keyword arguments>"


_KEYWORDS = _KeywordMarker()


def _verbose_write(verbose, level, name, message):
    if verbose >= level:
        print(" ".join(["memoize:", name, message]), file=sys.stderr)


def memoize(func=None, verbose=0, max_pinned=DEFAULT_MAX_PINNED):
    if func is None:
        return functools.partial(memoize, verbose=verbose, max_pinned=max_pinned)

    name = getattr(func, "__qualname__", repr(func))
    root = CacheNode()
    hits = misses = errors = 0

    @functools.wraps(func)
    def memoizer(*args, **kwargs):
        nonlocal hits, misses, errors
        node = root
        for arg in args:
            node = node.child(arg, max_pinned)

        if kwargs:
            node = node.child(_KEYWORDS, max_pinned)
            for key in sorted(kwargs):
                node = node.child(key).child(kwargs[key], max_pinned)

        if node.terminated:
            hits += 1
            _verbose_write(verbose, 4, name, "hit")
            return node.value

        misses += 1
        _verbose_write(verbose, 3, name, "miss")
        try:
            result = func(*args, **kwargs)
        except BaseException:
            errors += 1
            _verbose_write(verbose, 3, name, "raised, not cached")
            raise

        node.terminate(result)
        return result

    def clear_cache():
        """ Throw away every cached result and start again with an empty trie """
        nonlocal root, hits, misses, errors
        root = CacheNode()
        hits = misses = errors = 0
        _verbose_write(verbose, 3, name, "cache cleared")

    def cache_info():
        return CacheInfo(hits, misses, errors)

    def cache_root():
        """ Internal use.  The current root node, for inspection in tests and tools """
        return root

    memoizer.clear_cache = clear_cache
    memoizer.cache_info = cache_info
    memoizer.cache_root = cache_root
    return memoizer
