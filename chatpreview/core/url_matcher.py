"""
URL matching module - turn chat URLs into direct image download URLs
"""
from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

logger = logging.getLogger(__name__)

DIRECT_IMAGE_PATTERN = r"\.(png|jpg|jpeg|gif|svg)$"


class Resolver(ABC):
    """Derives a download URL from a URL its rule matched"""

    @abstractmethod
    def resolve(self, url: str) -> Optional[str]:
        """
        Resolve a matched URL

        Args:
            url: Raw URL as found in the chat line

        Returns:
            Download URL, or None if the URL lacks the expected structure
        """


class IdentityResolver(Resolver):
    """The URL already points at the image file"""

    def resolve(self, url: str) -> Optional[str]:
        return url

    def __repr__(self):
        return "IdentityResolver()"


class SegmentResolver(Resolver):
    """Extract one piece of the URL and substitute it into a template"""

    def __init__(self, extract: str, template: str, strip: str = ""):
        """
        Initialize resolver

        Args:
            extract: Regex whose first group is the segment to keep
            template: Download URL template with a ``{segment}`` field
            strip: Characters trimmed from the end of the segment
        """
        if "{segment}" not in template:
            raise ValueError(f"Resolver template lacks {{segment}}: {template}")
        self.extract = re.compile(extract)
        self.template = template
        self.strip = strip

    def resolve(self, url: str) -> Optional[str]:
        match = self.extract.search(url)
        if not match or not match.groups():
            return None

        segment = match.group(1) or ""
        if self.strip:
            segment = segment.rstrip(self.strip)
        if not segment:
            return None
        return self.template.format(segment=segment)

    def __repr__(self):
        return f"SegmentResolver({self.extract.pattern!r}, {self.template!r})"


LAST_SEGMENT = r"/([^/]+)$"

BUILTIN_RESOLVERS: Dict[str, Resolver] = {
    "imgur": SegmentResolver(LAST_SEGMENT, "http://imgur.com/download/{segment}"),
    "memecaptain": SegmentResolver(LAST_SEGMENT, "http://memecaptain.com/gend_images/{segment}"),
    "memecrunch": SegmentResolver(r"/meme/([^.]+)", "http://memecrunch.com/meme/{segment}/image.png"),
    "quickmeme": SegmentResolver(r"/meme/(.+)$", "http://i.qkme.me/{segment}.jpg", strip="/"),
    "direct": IdentityResolver(),
}

DEFAULT_RULES_CONFIG: List[Dict[str, Any]] = [
    {"name": "imgur", "pattern": r"https?://(www\.)?imgur\.com", "resolver": "imgur"},
    {"name": "memecaptain", "pattern": r"https?://(www\.)?memecaptain\.com/", "resolver": "memecaptain"},
    {"name": "memecrunch", "pattern": r"https?://(www\.)?memecrunch\.com/meme/", "resolver": "memecrunch"},
    {"name": "quickmeme", "pattern": r"https?://(www\.)?quickmeme\.com/meme/", "resolver": "quickmeme"},
    {"name": "direct", "pattern": DIRECT_IMAGE_PATTERN, "resolver": "direct"},
]


@dataclass(frozen=True)
class MatchRule:
    """Pattern and the resolver that handles URLs it finds"""

    name: str
    pattern: re.Pattern
    resolver: Resolver

    def matches(self, url: str) -> bool:
        return self.pattern.search(url) is not None


def build_rules(rules_config: Iterable[Mapping[str, Any]]) -> List[MatchRule]:
    """Compile rule configs into an ordered rule table.

    Each entry needs ``pattern`` and ``resolver``; ``resolver`` is either one
    of the built-in names or a mapping with ``extract``, ``template`` and an
    optional ``strip``. Entries with ``enabled: false`` are skipped. Order is
    kept, since the first matching rule wins.
    """

    compiled: List[MatchRule] = []
    for index, rule in enumerate(rules_config):
        if not rule.get("enabled", True):
            continue
        pattern = rule.get("pattern")
        if not pattern:
            raise ValueError(f"Rule #{index + 1} has no pattern")
        resolver = _build_resolver(rule.get("resolver"), index)
        compiled.append(
            MatchRule(
                name=str(rule.get("name") or f"rule-{index + 1}"),
                pattern=re.compile(pattern, re.IGNORECASE),
                resolver=resolver,
            )
        )
    return compiled


def default_rules() -> List[MatchRule]:
    """Built-in rule table"""
    return build_rules(DEFAULT_RULES_CONFIG)


def _build_resolver(spec: Union[str, Mapping[str, Any], None], index: int) -> Resolver:
    if isinstance(spec, str):
        try:
            return BUILTIN_RESOLVERS[spec]
        except KeyError:
            known = ", ".join(sorted(BUILTIN_RESOLVERS))
            raise ValueError(
                f"Rule #{index + 1}: unknown resolver {spec!r} (known: {known})"
            ) from None

    if isinstance(spec, Mapping):
        if not spec.get("extract") or not spec.get("template"):
            raise ValueError(f"Rule #{index + 1}: resolver needs 'extract' and 'template'")
        return SegmentResolver(
            extract=spec["extract"],
            template=spec["template"],
            strip=spec.get("strip", ""),
        )

    raise ValueError(f"Rule #{index + 1} has no resolver")


class UrlMatcher:
    """Ordered first-match dispatch over a rule table"""

    def __init__(self, rules: Optional[Iterable[MatchRule]] = None):
        """
        Initialize matcher

        Args:
            rules: Rule table in priority order (built-in table when omitted)
        """
        self.rules = list(rules) if rules is not None else default_rules()

    def match(self, url: str) -> Optional[MatchRule]:
        """Return the first rule whose pattern occurs in the URL"""
        for rule in self.rules:
            if rule.matches(url):
                return rule
        return None

    def resolve(self, url: str) -> Optional[str]:
        """
        Resolve a chat URL to a download URL

        Only the first matching rule is consulted, even when its resolver
        comes back empty.

        Args:
            url: Raw URL from a chat line

        Returns:
            Download URL, or None when nothing applies
        """
        rule = self.match(url)
        if rule is None:
            logger.debug("No image rule for %s", url)
            return None

        try:
            download_url = rule.resolver.resolve(url)
        except Exception:
            logger.warning("Resolver %s failed on %s", rule.name, url, exc_info=True)
            return None

        if download_url is None:
            logger.debug("Rule %s matched %s but resolved nothing", rule.name, url)
        return download_url
