"""Filter trie for wildcard topic subscriptions.

Filters are stored one level per node. Each node owns its children through a
dict keyed by token and holds the subscribers whose filter ends at that node.
Nodes keep no reference to their parent; removal walks down recursively and
prunes empty nodes while the recursion unwinds.

Example:
    trie = FilterTrie()
    trie.insert("S1", ["a", "+", "c"])
    trie.insert("S2", ["a", "#"])
    trie.match(["a", "b", "c"])   # ["S2", "S1"] in some order
"""

from typing import Dict, Hashable, Iterator, List, Optional, Sequence, Set, Tuple

from .errors import InvalidFilterError
from .tokenizer import MULTI_LEVEL_WILDCARD, SINGLE_LEVEL_WILDCARD, WILDCARD_TOKENS


class TrieNode:
    """One filter level in the trie."""

    __slots__ = ("token", "children", "subscribers")

    def __init__(self, token: Optional[str] = None):
        self.token = token
        self.children: Dict[str, "TrieNode"] = {}
        self.subscribers: Set[Hashable] = set()

    def is_empty(self) -> bool:
        """A node with no subscribers and no children may be pruned."""
        return not self.subscribers and not self.children

    def __repr__(self):
        return (f"<TrieNode token={self.token!r} children={len(self.children)} "
                f"subscribers={len(self.subscribers)}>")


class FilterTrie:
    """Stores (subscriber, filter) bindings and matches topics against them.

    Not safe for concurrent use; see pytopic.locking for guarded wrappers.
    """

    def __init__(self):
        self.root = TrieNode()

    def insert(self, subscriber_id: Hashable, filter_tokens: Sequence[str]):
        """Bind subscriber_id to the filter. Inserting the same pair twice is a no-op.

        Missing levels are built as a detached chain and attached in one step,
        so a failure part-way through leaves the trie unchanged.

        Raises:
            InvalidFilterError: the filter is empty or '#' is not its last level.
        """
        tokens = list(filter_tokens)
        if not tokens:
            raise InvalidFilterError(tokens, "empty filter")
        if MULTI_LEVEL_WILDCARD in tokens[:-1]:
            raise InvalidFilterError(tokens, "multi-level wildcard must be the last level")

        node = self.root
        depth = 0
        for token in tokens:
            child = node.children.get(token)
            if child is None:
                break
            node = child
            depth += 1

        if depth == len(tokens):
            node.subscribers.add(subscriber_id)
            return

        branch = TrieNode(tokens[-1])
        branch.subscribers.add(subscriber_id)
        for token in reversed(tokens[depth:-1]):
            parent = TrieNode(token)
            parent.children[branch.token] = branch
            branch = parent
        node.children[branch.token] = branch

    def contains(self, subscriber_id: Hashable, filter_tokens: Sequence[str]) -> bool:
        """Whether subscriber_id is bound to exactly this filter."""
        node = self.root
        for token in filter_tokens:
            node = node.children.get(token)
            if node is None:
                return False
        return node is not self.root and subscriber_id in node.subscribers

    def remove(self, subscriber_id: Hashable, filter_tokens: Sequence[str]) -> bool:
        """Unbind subscriber_id from exactly this filter.

        Returns:
            True if the binding existed, False otherwise.
        """
        return self._remove(self.root, list(filter_tokens), 0, subscriber_id)

    def _remove(self, node: TrieNode, tokens: List[str], index: int,
                subscriber_id: Hashable) -> bool:
        if index == len(tokens):
            if subscriber_id not in node.subscribers:
                return False
            node.subscribers.remove(subscriber_id)
            return True

        token = tokens[index]
        child = node.children.get(token)
        if child is None:
            return False

        if not self._remove(child, tokens, index + 1, subscriber_id):
            return False

        if child.is_empty():
            del node.children[token]
        return True

    def remove_subscriber(self, subscriber_id: Hashable) -> int:
        """Unbind subscriber_id from every filter. Returns the number of bindings removed."""
        return self._remove_everywhere(self.root, subscriber_id)

    def _remove_everywhere(self, node: TrieNode, subscriber_id: Hashable) -> int:
        removed = 0
        if subscriber_id in node.subscribers:
            node.subscribers.remove(subscriber_id)
            removed += 1

        for token, child in list(node.children.items()):
            removed += self._remove_everywhere(child, subscriber_id)
            if child.is_empty():
                del node.children[token]
        return removed

    def match(self, topic_tokens: Sequence[str]) -> List[Hashable]:
        """Return subscribers of every filter matching the topic.

        A subscriber bound to several matching filters is returned once per filter.
        """
        return list(self.iter_match(topic_tokens))

    def iter_match(self, topic_tokens: Sequence[str]) -> Iterator[Hashable]:
        """Generator form of match(). Do not modify the trie while iterating."""
        return self._iter_match(self.root, list(topic_tokens), 0)

    def _iter_match(self, node: TrieNode, tokens: List[str], index: int) -> Iterator[Hashable]:
        # '#' also matches the parent level, so check it before the end-of-topic case
        multi = node.children.get(MULTI_LEVEL_WILDCARD)
        if multi is not None:
            yield from multi.subscribers

        if index == len(tokens):
            yield from node.subscribers
            return

        single = node.children.get(SINGLE_LEVEL_WILDCARD)
        if single is not None:
            yield from self._iter_match(single, tokens, index + 1)

        token = tokens[index]
        # wildcard characters in a topic are only reached through the branches above
        if token in WILDCARD_TOKENS:
            return

        child = node.children.get(token)
        if child is not None:
            yield from self._iter_match(child, tokens, index + 1)

    def filters(self) -> Iterator[Tuple[Tuple[str, ...], frozenset]]:
        """Yield (filter_tokens, subscribers) for every filter with subscribers."""
        for path, node in self._walk(self.root, ()):
            if node.subscribers:
                yield path, frozenset(node.subscribers)

    def _walk(self, node: TrieNode, path: Tuple[str, ...]) -> Iterator[Tuple[Tuple[str, ...], TrieNode]]:
        yield path, node
        for token in sorted(node.children):
            yield from self._walk(node.children[token], path + (token,))

    def node_count(self) -> int:
        """Number of nodes below the root."""
        return sum(1 for _ in self._walk(self.root, ())) - 1

    def is_empty(self) -> bool:
        return not self.root.children

    def clear(self):
        self.root.children.clear()
        self.root.subscribers.clear()

    def __len__(self):
        return sum(len(node.subscribers) for _, node in self._walk(self.root, ()))

    def __repr__(self):
        return f"<FilterTrie nodes={self.node_count()} bindings={len(self)}>"
