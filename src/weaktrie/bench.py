""" Run a synthetic workload with and without memoization and report the difference """
import gc
import sys
import time

import psutil
from rich.console import Console
from rich.table import Table

import weaktrie.apptools
import weaktrie.cachenode
from weaktrie.memoize import memoize

KINDS = ("primitive", "object", "mixed")


class Payload:
    """ A reference-type argument.  Matched by identity, never by value. """

    __slots__ = ("value", "__weakref__")

    def __init__(self, value):
        self.value = value

    def __repr__(self):
        return f"Payload({self.value})"


def add_arguments(cap):
    cap.add("--arity", type=int, default=2, help="Number of arguments per call")
    cap.add(
        "--distinct",
        type=int,
        default=100,
        help="Number of distinct argument combinations",
    )
    cap.add(
        "--repeats",
        type=int,
        default=10,
        help="How many times each argument combination is called",
    )
    cap.add(
        "--kind",
        choices=KINDS,
        default="mixed",
        help="Argument kind. mixed alternates primitives and objects",
    )
    cap.add(
        "--work",
        type=int,
        default=2000,
        help="Loop iterations of fake work per argument in the wrapped function",
    )
    weaktrie.apptools.add_flag_argument(
        cap,
        name="reclaim",
        default=True,
        help="After the run, drop the object arguments and check their cache entries are collected.",
    )


def _validate(args):
    for name, minimum in (("arity", 0), ("distinct", 1), ("repeats", 1), ("work", 0)):
        value = getattr(args, name, None)
        if value is not None and value < minimum:
            raise ValueError(f"--{name} must be at least {minimum}, not {value}")


def build_calls(kind, arity, distinct):
    """ distinct tuples of arity arguments each """
    calls = []
    for ii in range(distinct):
        call = []
        for position in range(arity):
            value = ii * arity + position
            if kind == "object" or (kind == "mixed" and position % 2):
                call.append(Payload(value))
            else:
                call.append(value)
        calls.append(tuple(call))
    return calls


def make_workload(work):
    def workload(*args):
        total = len(args)
        for arg in args:
            seed = arg.value if isinstance(arg, Payload) else arg
            for ii in range(work):
                total = (total + seed * ii + 1) % 1000003
        return total

    return workload


def format_time(seconds):
    microseconds = seconds * 1_000_000
    if microseconds < 1000:
        return f"{microseconds:.0f}µs"
    elif microseconds < 1_000_000:
        return f"{microseconds / 1000:.1f}ms"
    return f"{seconds:.2f}s"


def format_bytes(count):
    sign = "-" if count < 0 else ""
    count = abs(count)
    for unit in ("B", "KiB", "MiB"):
        if count < 1024:
            return f"{sign}{count:.0f}{unit}"
        count /= 1024
    return f"{sign}{count:.1f}GiB"


def _timed(func, calls, repeats):
    start = time.perf_counter()
    results = [func(*call) for _ in range(repeats) for call in calls]
    return time.perf_counter() - start, results


def run(args):
    """ Returns a dict of measurements.  Raises RuntimeError if memoization changed any result. """
    workload = make_workload(args.work)
    memoized = memoize(workload, verbose=args.verbose)
    calls = build_calls(args.kind, args.arity, args.distinct)

    if args.verbose >= 1:
        print(f"Running {len(calls) * args.repeats} plain calls")
    plain_time, plain_results = _timed(workload, calls, args.repeats)

    process = psutil.Process()
    rss_before = process.memory_info().rss
    if args.verbose >= 1:
        print(f"Running {len(calls) * args.repeats} memoized calls")
    memo_time, memo_results = _timed(memoized, calls, args.repeats)
    rss_after = process.memory_info().rss

    if plain_results != memo_results:
        raise RuntimeError("Memoized results differ from the plain results")

    info = memoized.cache_info()
    results = {
        "kind": args.kind,
        "calls": len(memo_results),
        "hits": info.hits,
        "misses": info.misses,
        "plain_time": plain_time,
        "memo_time": memo_time,
        "speedup": plain_time / memo_time if memo_time > 0 else float("inf"),
        "rss_growth": rss_after - rss_before,
        "trie": weaktrie.cachenode.count_entries(memoized.cache_root()),
    }

    if args.reclaim:
        del calls
        del plain_results, memo_results
        gc.collect()
        results["after_reclaim"] = weaktrie.cachenode.count_entries(memoized.cache_root())
        if args.verbose >= 1:
            print("Dropped the arguments and ran a garbage collection")

    return results


def report(results, console=None):
    if console is None:
        console = Console()

    table = Table(title=f"weaktrie benchmark ({results['kind']} arguments)")
    table.add_column("measure")
    table.add_column("value", justify="right")
    table.add_row("calls", str(results["calls"]))
    table.add_row("hits", str(results["hits"]))
    table.add_row("misses", str(results["misses"]))
    table.add_row("plain time", format_time(results["plain_time"]))
    table.add_row("memoized time", format_time(results["memo_time"]))
    table.add_row("speedup", f"{results['speedup']:.1f}x")
    table.add_row("rss growth", format_bytes(results["rss_growth"]))
    trie = results["trie"]
    table.add_row("trie nodes", str(trie["nodes"]))
    table.add_row("object entries", str(trie["object_entries"]))
    table.add_row("primitive entries", str(trie["primitive_entries"]))
    if "after_reclaim" in results:
        table.add_row(
            "object entries after reclaim",
            str(results["after_reclaim"]["object_entries"]),
        )
    console.print(table)


def main(argv=None):
    cap = weaktrie.apptools.create_parser(
        "Benchmark weaktrie.memoize against the plain function"
    )
    add_arguments(cap)
    weaktrie.apptools.registercallback(_validate)

    try:
        args = weaktrie.apptools.parseargs(cap, argv)
        results = run(args)
    except (ValueError, RuntimeError) as err:
        sys.stderr.write(str(err) + "\n")
        return 1

    report(results)
    return 0
