"""Namespaced key layout for graph entities.

Every key the library reads or writes is produced here. With prefix ``ns`` and
separator ``:`` the layout is::

    ns:t                 total document count
    ns:t:<node>          corpus-wide frequency of a node
    ns:<id>              document adjacency (node -> weight)
    ns:<node>            node adjacency (document id -> weight)
    ns:<:<node>          directed next edges (node -> weight)
    ns:w:<id>            document weights (node -> tf-idf)
    ns:w:<node>          term weights (document id -> tf-idf)
    ns:^:<id>            raw document content

Node keys (``noun:cat``) are never namespaced when used as sorted-set members.
"""

from __future__ import annotations

from dataclasses import dataclass

from .nodes import Leaf


TOTAL = "t"
NEXT = "<"
WEIGHT = "w"
CONTENT = "^"

RESERVED = (TOTAL, NEXT, WEIGHT, CONTENT)

_GLOB_SPECIAL = set("*?[]\\")


def glob_escape(text: str) -> str:
    return "".join("\\" + ch if ch in _GLOB_SPECIAL else ch for ch in text)


@dataclass(frozen=True)
class KeyCodec:
    prefix: str = ""
    separator: str = ":"

    def format(self, *parts: Leaf | str | None) -> str:
        args: list[str] = []
        if self.prefix:
            args.append(self.prefix)
        for part in parts:
            if isinstance(part, Leaf):
                args.append(part.tag.lower())
                args.append(part.distinct or part.term.lower())
            elif part:
                args.append(part)
        return self.separator.join(args)

    def node_key(self, leaf: Leaf) -> str:
        return self.separator.join([leaf.tag.lower(), leaf.distinct or leaf.term.lower()])

    def reserved_prefixes(self) -> tuple[str, ...]:
        return tuple(self.format(p) + self.separator for p in RESERVED)

    def is_reserved(self, key: str) -> bool:
        return key.startswith(self.reserved_prefixes())

    def strip_prefix(self, key: str) -> str:
        if not self.prefix:
            return key
        head = self.prefix + self.separator
        return key[len(head):] if key.startswith(head) else key

    def is_qualified(self, term: str) -> bool:
        return self.separator in term

    def _glob_head(self) -> str:
        sep = glob_escape(self.separator)
        return glob_escape(self.prefix) + sep if self.prefix else ""

    def term_pattern(self, term: str) -> str:
        """Glob matching every namespaced key whose last component is `term`."""
        sep = glob_escape(self.separator)
        return self._glob_head() + "*" + sep + glob_escape(term)

    def content_pattern(self) -> str:
        sep = glob_escape(self.separator)
        return self._glob_head() + glob_escape(CONTENT) + sep + "*"

    def content_id(self, key: str) -> str:
        return key[len(self.format(CONTENT) + self.separator):]
