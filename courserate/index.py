"""
Ordered course index.

A height-balanced (AVL) binary search tree keyed by the lower-cased course
name. It supports:
- insert (duplicate names are a no-op)
- exact lookup in O(log n)
- substring and first-letter search
- sorted traversal

Lookups never raise: a missing key gives None or an empty list.
"""

from __future__ import annotations

from typing import Iterator, List, Optional

from courserate.model import Course


def _key(name: str) -> str:
    return name.lower()


class _Node:
    __slots__ = ("course", "key", "left", "right", "height", "max_len")

    def __init__(self, course: Course) -> None:
        self.course = course
        self.key = _key(course.name)
        self.left: Optional[_Node] = None
        self.right: Optional[_Node] = None
        self.height = 1
        # longest key in this subtree, used to skip subtrees in substring search
        self.max_len = len(self.key)


def _height(node: Optional[_Node]) -> int:
    return node.height if node is not None else 0


def _max_len(node: Optional[_Node]) -> int:
    return node.max_len if node is not None else 0


def _update(node: _Node) -> None:
    node.height = 1 + max(_height(node.left), _height(node.right))
    node.max_len = max(len(node.key), _max_len(node.left), _max_len(node.right))


def _balance(node: Optional[_Node]) -> int:
    if node is None:
        return 0
    return _height(node.left) - _height(node.right)


def _rotate_right(y: _Node) -> _Node:
    x = y.left
    assert x is not None
    y.left = x.right
    x.right = y
    _update(y)
    _update(x)
    return x


def _rotate_left(x: _Node) -> _Node:
    y = x.right
    assert y is not None
    x.right = y.left
    y.left = x
    _update(x)
    _update(y)
    return y


class OrderedCourseIndex:
    """
    AVL tree of courses ordered by case-insensitive name.
    """

    def __init__(self) -> None:
        self._root: Optional[_Node] = None
        self._size = 0

    # ---------- insert ----------

    def insert(self, course: Course) -> bool:
        """
        Insert a course. Returns False (and keeps the existing node) if a course
        with the same name, ignoring case, is already indexed.
        """
        inserted = [False]
        self._root = self._insert(self._root, course, _key(course.name), inserted)
        if inserted[0]:
            self._size += 1
        return inserted[0]

    def _insert(self, node: Optional[_Node], course: Course, key: str, inserted: list[bool]) -> _Node:
        if node is None:
            inserted[0] = True
            return _Node(course)

        if key < node.key:
            node.left = self._insert(node.left, course, key, inserted)
        elif key > node.key:
            node.right = self._insert(node.right, course, key, inserted)
        else:
            return node

        _update(node)
        balance = _balance(node)

        # Left-Left
        if balance > 1 and node.left is not None and key < node.left.key:
            return _rotate_right(node)

        # Right-Right
        if balance < -1 and node.right is not None and key > node.right.key:
            return _rotate_left(node)

        # Left-Right
        if balance > 1 and node.left is not None and key > node.left.key:
            node.left = _rotate_left(node.left)
            return _rotate_right(node)

        # Right-Left
        if balance < -1 and node.right is not None and key < node.right.key:
            node.right = _rotate_right(node.right)
            return _rotate_left(node)

        return node

    # ---------- lookups ----------

    def search_by_exact_name(self, name: str) -> Optional[Course]:
        key = _key(name)
        node = self._root
        while node is not None:
            if key == node.key:
                return node.course
            node = node.left if key < node.key else node.right
        return None

    def search_by_name(self, keyword: str) -> List[Course]:
        """
        All courses whose name contains keyword (case-insensitive), in name order.

        Substring containment is not an ordering predicate, so only subtrees
        whose longest name is shorter than the keyword can be skipped. In the
        worst case every node is visited.
        """
        needle = _key(keyword)
        results: List[Course] = []
        self._search_by_name(self._root, needle, results)
        return results

    def _search_by_name(self, node: Optional[_Node], needle: str, results: List[Course]) -> None:
        if node is None or node.max_len < len(needle):
            return
        self._search_by_name(node.left, needle, results)
        if needle in node.key:
            results.append(node.course)
        self._search_by_name(node.right, needle, results)

    def search_by_first_letter(self, letter: str) -> List[Course]:
        if not letter or not letter.strip():
            return []
        first = _key(letter.strip()[0])
        results: List[Course] = []
        self._search_by_first_letter(self._root, first, results)
        return results

    def _search_by_first_letter(self, node: Optional[_Node], letter: str, results: List[Course]) -> None:
        if node is None:
            return
        node_first = node.key[:1]
        if letter <= node_first:
            self._search_by_first_letter(node.left, letter, results)
        if node_first == letter:
            results.append(node.course)
        if letter >= node_first:
            self._search_by_first_letter(node.right, letter, results)

    # ---------- traversal ----------

    def sorted_traversal(self) -> List[Course]:
        return list(self)

    def __iter__(self) -> Iterator[Course]:
        # iterative in-order walk
        stack: List[_Node] = []
        node = self._root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node.course
            node = node.right

    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return self._root is None

    def height(self) -> int:
        return _height(self._root)
