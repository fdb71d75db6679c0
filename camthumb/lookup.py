# camthumb/lookup.py
"""
Camera name -> feed URI lookup table.

File format: whitespace separated tokens read in pairs, so both of these work:

    frontdoor rtsp://10.0.0.5/stream1
    garage    rtsp://10.0.0.6/stream1

    frontdoor rtsp://10.0.0.5/stream1 garage rtsp://10.0.0.6/stream1

Lines starting with '#' are ignored. A name that appears twice keeps its last URI.
The table is loaded once at startup and never changes afterwards.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Mapping, Tuple, Union

from .errors import LookupFileError, NameResolutionError
from .models import Feed

log = logging.getLogger(__name__)


def parse_lookup(text: str) -> Dict[str, str]:
    """
    Parse lookup file contents into a name -> URI dict.

    Raises:
        LookupFileError if a name has no URI after it.
    """
    tokens = []
    for line in text.splitlines():
        if line.lstrip().startswith("#"):
            continue
        tokens.extend(line.split())

    if len(tokens) % 2:
        raise LookupFileError(f"lookup entry {tokens[-1]!r} has no URI")

    return dict(zip(tokens[0::2], tokens[1::2]))


class NameLookup:
    """Read-only name resolver backed by a dict."""

    def __init__(self, entries: Mapping[str, str]) -> None:
        self._entries: Dict[str, str] = dict(entries)

    def resolve(self, name: str) -> Feed:
        """
        Return the Feed for name.

        Raises:
            NameResolutionError if the name is not in the table.
        """
        uri = self._entries.get(name)
        if uri is None:
            raise NameResolutionError(name)
        return Feed(name=name, uri=uri)

    def names(self) -> Tuple[str, ...]:
        """All known names, in file order."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries


def load_lookup(path: Union[str, Path]) -> NameLookup:
    """Load a lookup file from disk; raises LookupFileError if it can't be read or parsed."""
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise LookupFileError(f"cannot read lookup file {p}: {exc}") from exc

    lookup = NameLookup(parse_lookup(text))
    log.info("loaded %d camera feeds from %s", len(lookup), p)
    return lookup
