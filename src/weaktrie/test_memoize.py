import gc
import weakref

import pytest

import weaktrie
from weaktrie.memoize import memoize


class Thing:
    def __init__(self, value):
        self.value = value


class AlwaysEqual:
    """ Equal to everything.  Memoization must not be fooled by it. """

    def __eq__(self, other):
        return True

    def __hash__(self):
        return 0


class Recorder:
    """ A function that remembers every set of arguments it was called with """

    def __init__(self, result=None):
        self.calls = []
        self.result = result

    def __call__(self, *args, **kwargs):
        self.calls.append((args, kwargs))
        if self.result is None:
            return len(self.calls)
        return self.result


class TestIdentity:
    def test_same_object_hits(self):
        ff = Recorder()
        gg = memoize(ff)
        thing = Thing(1)
        assert gg(thing) == 1
        assert gg(thing) == 1
        assert len(ff.calls) == 1

    def test_structurally_equal_object_misses(self):
        ff = Recorder()
        gg = memoize(ff)
        first = {"a": 1}
        second = dict(first)
        assert gg(first) == 1
        assert gg(second) == 2
        assert gg(first) == 1
        assert len(ff.calls) == 2

    def test_custom_equality_is_ignored(self):
        ff = Recorder()
        gg = memoize(ff)
        assert gg(AlwaysEqual()) == 1
        assert gg(AlwaysEqual()) == 2

    def test_functions_are_matched_by_identity(self):
        ff = Recorder()
        gg = memoize(ff)
        assert gg(len) == 1
        assert gg(len) == 1
        assert gg(lambda: None) == 2

    def test_unweakrefable_arguments_still_memoize(self):
        ff = Recorder()
        gg = memoize(ff)
        items = [1, 2, 3]
        assert gg(items) == 1
        assert gg(items) == 1
        assert gg([1, 2, 3]) == 2


class TestPrimitives:
    def test_equal_values_hit(self):
        ff = Recorder()
        gg = memoize(ff)
        assert gg(1) == 1
        assert gg(1) == 1
        assert gg(2) == 2
        assert gg("abc") == 3
        assert gg("".join(["a", "bc"])) == 3
        assert gg(None) == 4
        assert gg(None) == 4

    def test_nan_matches_nan(self):
        ff = Recorder()
        gg = memoize(ff)
        assert gg(float("nan")) == 1
        assert gg(float("nan")) == 1
        assert len(ff.calls) == 1

    def test_signed_zeros_are_distinct(self):
        ff = Recorder()
        gg = memoize(ff)
        assert gg(0.0) == 1
        assert gg(-0.0) == 2
        assert gg(0.0) == 1

    def test_types_are_distinct(self):
        ff = Recorder()
        gg = memoize(ff)
        assert gg(1) == 1
        assert gg(1.0) == 2
        assert gg(True) == 3
        assert gg(1) == 1

    def test_large_ints(self):
        ff = Recorder()
        gg = memoize(ff)
        assert gg(10**30) == 1
        assert gg(10**30) == 1


class TestPaths:
    def test_arity_is_part_of_the_path(self):
        ff = Recorder()
        gg = memoize(ff)
        thing = Thing(1)
        assert gg(thing, 2) == 1
        assert gg(thing) == 2
        assert gg(thing, 2) == 1
        assert gg(thing) == 2

    def test_zero_arguments_cache_at_root(self):
        ff = Recorder()
        gg = memoize(ff)
        assert gg() == 1
        assert gg() == 1
        assert gg.cache_root().terminated

    def test_trailing_none_is_an_argument(self):
        ff = Recorder()
        gg = memoize(ff)
        assert gg(1) == 1
        assert gg(1, None) == 2

    def test_argument_order_matters(self):
        ff = Recorder()
        gg = memoize(ff)
        assert gg(1, 2) == 1
        assert gg(2, 1) == 2

    def test_none_result_is_cached(self):
        calls = []

        def ff(x):
            calls.append(x)

        gg = memoize(ff)
        assert gg(1) is None
        assert gg(1) is None
        assert calls == [1]


class TestKeywords:
    def test_keyword_order_does_not_matter(self):
        ff = Recorder()
        gg = memoize(ff)
        assert gg(a=1, b=2) == 1
        assert gg(b=2, a=1) == 1
        assert len(ff.calls) == 1

    def test_keywords_are_passed_through(self):
        def ff(a, b=10):
            return a - b

        gg = memoize(ff)
        assert gg(1, b=3) == -2
        assert gg(a=1) == -9

    def test_keywords_do_not_collide_with_positionals(self):
        ff = Recorder()
        gg = memoize(ff)
        assert gg(1, "a", 2) == 1
        assert gg(1, a=2) == 2
        assert gg(1, "a", 2) == 1

    def test_keyword_object_values_by_identity(self):
        ff = Recorder()
        gg = memoize(ff)
        thing = Thing(1)
        assert gg(x=thing) == 1
        assert gg(x=thing) == 1
        assert gg(x=Thing(1)) == 2


class TestErrors:
    def test_errors_are_not_cached(self):
        attempts = []

        def flaky(x):
            attempts.append(x)
            if len(attempts) == 1:
                raise RuntimeError("transient")
            return x * 2

        gg = memoize(flaky)
        with pytest.raises(RuntimeError, match="transient"):
            gg(21)
        assert gg(21) == 42
        assert gg(21) == 42
        assert attempts == [21, 21]

    def test_error_propagates_unchanged(self):
        err = ValueError("bad")

        def ff():
            raise err

        gg = memoize(ff)
        with pytest.raises(ValueError) as excinfo:
            gg()
        assert excinfo.value is err
        assert not gg.cache_root().terminated


class TestClearCache:
    def test_clear_forces_recompute(self):
        ff = Recorder()
        gg = memoize(ff)
        assert gg(1) == 1
        gg.clear_cache()
        assert gg(1) == 2
        assert len(ff.calls) == 2

    def test_clear_replaces_root(self):
        gg = memoize(Recorder())
        gg(1)
        old_root = gg.cache_root()
        gg.clear_cache()
        assert gg.cache_root() is not old_root
        assert gg.cache_root().primitive_branch is None

    def test_clear_during_call_writes_to_orphan(self):
        calls = []

        def ff(x):
            calls.append(x)
            if len(calls) == 1:
                gg.clear_cache()
            return x

        gg = memoize(ff)
        assert gg(5) == 5
        assert gg(5) == 5
        assert gg(5) == 5
        assert calls == [5, 5]


class TestCacheInfo:
    def test_counters(self):
        def ff(x):
            if x < 0:
                raise ValueError(x)
            return x

        gg = memoize(ff)
        gg(1)
        gg(1)
        gg(2)
        with pytest.raises(ValueError):
            gg(-1)
        assert gg.cache_info() == weaktrie.CacheInfo(hits=1, misses=3, errors=1)

    def test_clear_resets_counters(self):
        gg = memoize(Recorder())
        gg(1)
        gg(1)
        gg.clear_cache()
        assert gg.cache_info() == weaktrie.CacheInfo(0, 0, 0)


class TestReclamation:
    def test_cache_does_not_keep_argument_alive(self):
        gg = memoize(lambda thing: thing.value)
        thing = Thing(3)
        assert gg(thing) == 3
        ref = weakref.ref(thing)
        del thing
        gc.collect()
        assert ref() is None

    def test_object_entry_removed_after_collection(self):
        gg = memoize(lambda thing, n: thing.value + n)
        thing = Thing(3)
        gg(thing, 1)
        gg(thing, 2)
        assert len(gg.cache_root().object_branch) == 1
        del thing
        gc.collect()
        assert len(gg.cache_root().object_branch) == 0

    def test_new_object_after_collection_recomputes(self):
        calls = []

        def ff(thing):
            calls.append(thing.value)
            return thing.value

        gg = memoize(ff)
        for _ in range(5):
            gg(Thing(0))
            gc.collect()
        assert calls == [0, 0, 0, 0, 0]
        assert len(gg.cache_root().object_branch) == 0

    def test_pinned_container_is_released_once_evicted(self):
        gg = memoize(lambda pair: 1, max_pinned=2)
        thing = Thing(0)
        ref = weakref.ref(thing)
        gg((thing, 1))
        del thing
        gg([1])
        gg([2])
        gc.collect()
        assert ref() is None

    def test_no_pinning_never_keeps_contents_alive(self):
        gg = memoize(lambda pair: 1, max_pinned=0)
        thing = Thing(0)
        ref = weakref.ref(thing)
        assert gg((thing, 1)) == 1
        del thing
        gc.collect()
        assert ref() is None
        assert gg.cache_info().misses == 1

    def test_fresh_containers_stay_bounded(self):
        gg = memoize(lambda items: len(items), max_pinned=16)
        for ii in range(1000):
            gg([ii])
        gc.collect()
        assert len(gg.cache_root().object_branch) == 16

    def test_no_pinning_recomputes_containers(self):
        calls = []

        @memoize(max_pinned=0)
        def ff(items):
            calls.append(len(items))
            return len(items)

        items = [1, 2]
        assert ff(items) == 2
        assert ff(items) == 2
        assert calls == [2, 2]


class TestDecoration:
    def test_wraps(self):
        @memoize
        def documented(x):
            """ The docstring """
            return x

        assert documented.__name__ == "documented"
        assert documented.__doc__ == """ The docstring """
        assert documented.__wrapped__(4) == 4

    def test_decorator_with_verbose(self, capsys):
        @memoize(verbose=4)
        def noisy(x):
            return x

        noisy(1)
        noisy(1)
        noisy.clear_cache()
        err = capsys.readouterr().err
        assert "miss" in err
        assert "hit" in err
        assert "cache cleared" in err

    def test_method(self):
        class Widget:
            def __init__(self):
                self.computed = 0

            @memoize
            def area(self, scale):
                self.computed += 1
                return scale * 2

        w1 = Widget()
        w2 = Widget()
        assert w1.area(3) == 6
        assert w1.area(3) == 6
        assert w2.area(3) == 6
        assert w1.computed == 1
        assert w2.computed == 1

    def test_separate_wrappers_do_not_share(self):
        ff = Recorder()
        g1 = memoize(ff)
        g2 = memoize(ff)
        g1(1)
        g2(1)
        assert len(ff.calls) == 2
