""" The two kinds of child mapping a trie node can own.

    Reference-type arguments (functions, classes, instances, containers)
    are matched by identity and held weakly. Primitive arguments (None,
    numbers, strings, bytes) are matched by value and held strongly.
"""
import collections
import weakref

DEFAULT_MAX_PINNED = 128

PRIMITIVE_TYPES = frozenset(
    [
        type(None),
        bool,
        int,
        float,
        complex,
        str,
        bytes,
        type(Ellipsis),
        type(NotImplemented),
    ]
)


def is_primitive(arg):
    """ Is arg matched by value rather than by identity?
        Subclasses of the primitive types are deliberately excluded
        since they can redefine equality.
    """
    return type(arg) in PRIMITIVE_TYPES


def primitive_key(arg):
    """ The dictionary key for a primitive argument.

        The exact type is part of the key so that 1, 1.0 and True stay apart.
        Floats use their hex spelling so that nan matches nan and 0.0 does
        not match -0.0.
    """
    argtype = type(arg)
    if argtype is float:
        return (argtype, arg.hex())
    if argtype is complex:
        return (argtype, arg.real.hex(), arg.imag.hex())
    return (argtype, arg)


class _Pinned:
    """ Strong stand-in for a weakref to an object that refuses weakrefs """

    __slots__ = ("obj",)

    def __init__(self, obj):
        self.obj = obj

    def __call__(self):
        return self.obj


class ObjectBranch:
    """ Identity keyed mapping from argument to child node.

        Entries are stored as id(arg) -> (ref, node). The ref is a
        weakref.KeyedRef whose callback drops the entry once the argument
        is garbage collected, so the cache is never the reason an argument
        stays alive.

        Objects that cannot be weakly referenced (list, dict, tuple, ...)
        have to be held strongly, along with everything they contain. At
        most max_pinned of them are kept per branch, least recently used
        first out, and evicting one drops the whole subtree below it.
        With max_pinned=0 they are never stored, so calls with such an
        argument always recompute.
    """

    def __init__(self, max_pinned=DEFAULT_MAX_PINNED):
        self.max_pinned = max_pinned
        self._entries = {}
        self._pinned = collections.OrderedDict()

        def remove(keyedref, selfref=weakref.ref(self)):
            branch = selfref()
            if branch is None:
                return
            entry = branch._entries.get(keyedref.key)
            # The id may already belong to a newer argument
            if entry is not None and entry[0] is keyedref:
                del branch._entries[keyedref.key]

        self._remove = remove

    def __len__(self):
        return len(self._entries)

    def get(self, arg):
        argid = id(arg)
        entry = self._entries.get(argid)
        if entry is None:
            return None
        ref, node = entry
        if ref() is not arg:
            return None
        if argid in self._pinned:
            self._pinned.move_to_end(argid)
        return node

    def set(self, arg, node):
        argid = id(arg)
        try:
            ref = weakref.KeyedRef(arg, self._remove, argid)
        except TypeError:
            if self.max_pinned <= 0:
                return
            while len(self._pinned) >= self.max_pinned:
                oldid, _ = self._pinned.popitem(last=False)
                self._entries.pop(oldid, None)
            ref = _Pinned(arg)
            self._pinned[argid] = None
        self._entries[argid] = (ref, node)

    def nodes(self):
        return [node for ref, node in list(self._entries.values())]

    def pinned_count(self):
        """ How many entries are held strongly because the argument refused a weakref """
        return len(self._pinned)


class PrimitiveBranch:
    """ Value keyed mapping from argument to child node """

    def __init__(self):
        self._entries = {}

    def __len__(self):
        return len(self._entries)

    def get(self, arg):
        return self._entries.get(primitive_key(arg))

    def set(self, arg, node):
        self._entries[primitive_key(arg)] = node

    def nodes(self):
        return list(self._entries.values())
