"""Call-scoped placeholder vault shielding finalized markup from later inline rules"""

import re


# Keys are `MARKER «run» MARKER`, the run spelling the fragment index with one
# Private Use Area code point per decimal digit. None of these characters are
# word characters, so no inline rule can match inside a key.
MARKER = '\uF8FF'
_RUN_BASE = 0xE000
KEY_CHARS = '\uE000-\uE009\uF8FF'

_KEY_RE = re.compile('\uF8FF([\uE000-\uE009]+)\uF8FF')


def _encode(index: int) -> str:
    return ''.join(chr(_RUN_BASE + int(d)) for d in str(index))


def _decode(run: str) -> int:
    return int(''.join(str(ord(c) - _RUN_BASE) for c in run))


class PlaceholderVault:
    """Flat registry mapping opaque keys to finalized markup fragments.

    One vault lives for exactly one compile call. Fragments are stored fully
    resolved (any keys inside them are restored on the way in), so a single
    non-recursive `restore` pass is enough at the end.
    """

    def __init__(self) -> None:
        self._fragments: list[str] = []

    def __len__(self) -> int:
        return len(self._fragments)

    def protect(self, markup: str) -> str:
        """Store markup and return the key that stands in for it."""
        self._fragments.append(self.restore(markup))
        return MARKER + _encode(len(self._fragments) - 1) + MARKER

    def reserve(self) -> str:
        """Return a key whose markup is supplied later via `fill`."""
        return self.protect('')

    def fill(self, key: str, markup: str) -> None:
        m = _KEY_RE.fullmatch(key)
        if m is None:
            raise KeyError(key)
        self._fragments[_decode(m.group(1))] = self.restore(markup)

    def restore(self, text: str) -> str:
        """Replace every key in text with its stored markup."""
        return _KEY_RE.sub(lambda m: self._fragments[_decode(m.group(1))], text)

    def shield(self, text: str) -> str:
        """Protect stray marker characters in author input so they cannot forge a key."""
        if MARKER not in text:
            return text
        return text.replace(MARKER, self.protect(MARKER))
