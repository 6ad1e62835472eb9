"""Pattern usage tracking.

A PatternUsage tree records which locales the arms seen so far already
cover: root -> one node per language -> one node per region. It answers
two questions, in arm order: is the next arm reachable, and is the unit
exhaustive once every arm has been seen.

A node is fully used if its own flag is set, or if it has children and all
of them are fully used. Marking a node therefore covers its subtree, and
covering every region of a language covers the language.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from lexidict.syntax.ast import LocaleDef

from .patterns import AnyLocale, LangCase, RegionBinding, RegionCase, ResolvedPattern

__all__ = ["PatternUsage", "UsageNode"]


@dataclass(slots=True)
class UsageNode:
    """One node of the usage tree.

    Attributes:
        name: Language or region name ('Locale' for the root)
        children: Sub-nodes (languages of the root, regions of a language)
        used: Explicitly marked by an arm
    """

    name: str
    children: list[UsageNode] = field(default_factory=list)
    used: bool = False

    def is_used(self) -> bool:
        """Fully used: marked, or every child fully used."""
        return self.used or (bool(self.children) and all(c.is_used() for c in self.children))

    def child(self, name: str) -> UsageNode:
        """Child node named `name`.

        Raises:
            KeyError: If there is no such child
        """
        for node in self.children:
            if node.name == name:
                return node
        raise KeyError(name)


class PatternUsage:
    """Usage tree for one translation unit.

    Example:
        >>> usage = PatternUsage(parse_dict("enum Locale { De, En { Gb, Us } }").locale_def)
        >>> usage.use_region("En", "Gb")
        True
        >>> usage.use_lang("De")
        True
        >>> usage.is_exhausted
        False
        >>> usage.uncovered()
        [('En', 'Us')]
    """

    __slots__ = ("_root",)

    def __init__(self, locale_def: LocaleDef) -> None:
        self._root = UsageNode(
            name="Locale",
            children=[
                UsageNode(
                    name=lang.name.name,
                    children=[UsageNode(name=region.name) for region in lang.regions],
                )
                for lang in locale_def.langs
            ],
        )

    @property
    def is_exhausted(self) -> bool:
        """True when every locale is covered."""
        return self._root.is_used()

    def use_wildcard(self) -> bool:
        """Cover every locale. Returns False if the arm is unreachable."""
        if self.is_exhausted:
            return False
        self._root.used = True
        return True

    def use_lang(self, lang: str) -> bool:
        """Cover one language. Returns False if the arm is unreachable."""
        node = self._root.child(lang)
        if node.is_used() or self.is_exhausted:
            return False
        node.used = True
        return True

    def use_region(self, lang: str, region: str) -> bool:
        """Cover one region. Returns False if the arm is unreachable."""
        lang_node = self._root.child(lang)
        node = lang_node.child(region)
        if node.is_used() or lang_node.is_used() or self.is_exhausted:
            return False
        node.used = True
        return True

    def use(self, pattern: ResolvedPattern) -> bool:
        """Cover whatever a resolved pattern matches.

        A region binding matches every region of its language, so it covers
        the language node.

        Returns:
            False if the pattern is unreachable given the arms seen so far
        """
        match pattern:
            case AnyLocale():
                return self.use_wildcard()
            case LangCase(lang=lang) | RegionBinding(lang=lang):
                return self.use_lang(lang.name.name)
            case RegionCase(lang=lang, region=region):
                return self.use_region(lang.name.name, region)

    def uncovered(self) -> list[tuple[str, str | None]]:
        """Locales not covered yet, as (language, region) pairs.

        Languages without regions appear with region None.
        """
        if self._root.used:
            return []
        missing: list[tuple[str, str | None]] = []
        for lang in self._root.children:
            if lang.is_used():
                continue
            if not lang.children:
                missing.append((lang.name, None))
                continue
            missing.extend((lang.name, region.name) for region in lang.children if not region.is_used())
        return missing
