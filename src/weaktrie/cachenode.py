""" A single point in the argument trie """
from weaktrie.branches import DEFAULT_MAX_PINNED, ObjectBranch, PrimitiveBranch, is_primitive

UNTERMINATED = 0
TERMINATED = 1


class CacheNode:
    """ One argument prefix of a memoized call.

        status is UNTERMINATED until a call with exactly this argument
        prefix completes, after which it is TERMINATED and value holds the
        result. Children live in one of two branches chosen by the kind of
        the next argument. Both branches are created on first use.
    """

    __slots__ = ("status", "value", "object_branch", "primitive_branch")

    def __init__(self):
        self.status = UNTERMINATED
        self.value = None
        self.object_branch = None
        self.primitive_branch = None

    @property
    def terminated(self):
        return self.status == TERMINATED

    def terminate(self, value):
        self.status = TERMINATED
        self.value = value

    def _branch_for(self, arg, max_pinned):
        if is_primitive(arg):
            if self.primitive_branch is None:
                self.primitive_branch = PrimitiveBranch()
            return self.primitive_branch

        if self.object_branch is None:
            self.object_branch = ObjectBranch(max_pinned)
        return self.object_branch

    def child(self, arg, max_pinned=DEFAULT_MAX_PINNED):
        """ The node one level down for arg, created if this is a new branch.
            max_pinned only matters when this call creates the object branch.
        """
        branch = self._branch_for(arg, max_pinned)
        node = branch.get(arg)
        if node is None:
            node = CacheNode()
            branch.set(arg, node)
        return node

    def children(self):
        for branch in (self.object_branch, self.primitive_branch):
            if branch is not None:
                yield from branch.nodes()

    def __repr__(self):
        if self.terminated:
            return f"CacheNode(TERMINATED, {self.value!r})"
        return "CacheNode(UNTERMINATED)"


def walk(root):
    """ Every node reachable from root, root included, depth first """
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(node.children())


def count_entries(root):
    """ Summarise the trie below root as a dict of counts """
    counts = {"nodes": 0, "terminated": 0, "object_entries": 0, "pinned_entries": 0, "primitive_entries": 0}
    for node in walk(root):
        counts["nodes"] += 1
        if node.terminated:
            counts["terminated"] += 1
        if node.object_branch is not None:
            counts["object_entries"] += len(node.object_branch)
            counts["pinned_entries"] += node.object_branch.pinned_count()
        if node.primitive_branch is not None:
            counts["primitive_entries"] += len(node.primitive_branch)
    return counts
