"""
Autolink rules.

Turn issue references in commit messages (`#123`, `gh-123`) into markdown
links. Providers supply the rules; callers run `linkify()` over the text.
"""

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

NUM_PLACEHOLDER = "<num>"


@dataclass(frozen=True)
class AutolinkReference:
    """A static `prefix<num>` rule rendered through a URL template."""

    prefix: str
    url: str
    title: str | None = None
    ignore_case: bool = False
    _pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        flags = re.IGNORECASE if self.ignore_case else 0
        pattern = re.compile(rf"(^|\s|\(|\[|\{{)({re.escape(self.prefix)}([0-9]+))\b", flags)
        object.__setattr__(self, "_pattern", pattern)

    def link_for(self, num: str) -> str:
        return self.url.replace(NUM_PLACEHOLDER, num)

    def linkify(self, text: str) -> str:
        def replace(match: re.Match[str]) -> str:
            lead, ref, num = match.groups()
            if self.title is None:
                return f"{lead}[{ref}]({self.link_for(num)})"
            title = self.title.replace(NUM_PLACEHOLDER, num)
            return f'{lead}[{ref}]({self.link_for(num)} "{title}")'

        return self._pattern.sub(replace, text)


@dataclass(frozen=True)
class DynamicAutolinkReference:
    """A free-text rewrite rule."""

    rewrite: Callable[[str], str]

    def linkify(self, text: str) -> str:
        return self.rewrite(text)


Autolink = AutolinkReference | DynamicAutolinkReference


def linkify(text: str, references: Sequence[Autolink]) -> str:
    """Apply every rule to `text`, in order."""
    for ref in references:
        text = ref.linkify(text)
    return text
