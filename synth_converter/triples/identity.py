"""
Identity Generator - fresh node identities for one conversion.

Blank node ids come from a monotonic counter (``b0``, ``b1``, ...), which
keeps serialization reproducible. Named nodes are derived from a hint plus a
per-hint counter, so two actions tagged "AddAction" become ``AddAction_1``
and ``AddAction_2``.

Counters live on the instance. Use one generator per conversion and never
share it between concurrent conversions.
"""

import logging
import re
from collections import Counter

from rdflib import BNode, URIRef

from .namespaces import NamespaceRegistry

logger = logging.getLogger(__name__)

_UNSAFE_LOCAL_CHARS = re.compile(r"[^A-Za-z0-9_\-]")


class IdentityGenerator:
    """Mints blank nodes and disambiguated named nodes."""

    def __init__(self, registry: NamespaceRegistry, resource_prefix: str = "catres"):
        """
        Initialize the generator.

        Args:
            registry: Namespace registry used to resolve synthesized IRIs
            resource_prefix: Registered prefix under which named nodes are minted
        """
        self.registry = registry
        self.resource_prefix = resource_prefix
        self._blank_count = 0
        self._hint_counts: Counter[str] = Counter()

    def new_blank_node(self) -> BNode:
        """Return a blank node whose id has never been handed out by this generator."""
        node = BNode(f"b{self._blank_count}")
        self._blank_count += 1
        return node

    def new_named_node(self, hint: str) -> URIRef:
        """
        Return a named node derived from ``hint``.

        The n-th request for the same hint yields ``<base><hint>_<n>``,
        starting at 1.

        Raises:
            UnknownPrefix: If the resource prefix is not registered
        """
        slug = _UNSAFE_LOCAL_CHARS.sub("_", hint.strip()) or "node"
        self._hint_counts[slug] += 1
        node = self.registry.resolve(self.resource_prefix, f"{slug}_{self._hint_counts[slug]}")
        logger.debug("Minted named node %s", node)
        return node

    @property
    def blank_nodes_minted(self) -> int:
        return self._blank_count

    @property
    def named_nodes_minted(self) -> int:
        return sum(self._hint_counts.values())

    def reset(self) -> None:
        """Forget every counter (start of a new conversion)."""
        self._blank_count = 0
        self._hint_counts.clear()
