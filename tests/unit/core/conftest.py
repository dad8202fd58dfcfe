"""Shared fixtures for core unit tests"""

import pytest

from markchat.core.context import CompileContext
from markchat.core.inline import render_inline
from markchat.core.models import Definitions, LinkDefinition
from markchat.core.vault import PlaceholderVault


SAMPLE_MD = """\
[toc]

# Heading 1

A paragraph with **bold** text and a [reference][ref].[^note]

## Heading 2

- item one
  - nested item
- item two

| Left | Right |
|:-----|------:|
| a    |     b |

> Quoted *text*.

```python
print("hello")
```

*[HTML]: HyperText Markup Language
[ref]: https://example.com "Example"
[^note]: A note about HTML.
"""


@pytest.fixture(name="ctx")
def ctx_fixture():
    definitions = Definitions(
        body="",
        links={"md-guide": LinkDefinition(url="https://markdownguide.org", title="Markdown Guide")},
        abbreviations={"HTML": "HyperText Markup Language"},
    )
    return CompileContext(vault=PlaceholderVault(), definitions=definitions)


@pytest.fixture(name="render")
def render_fixture(ctx):
    """Render one inline fragment and resolve its vault keys."""
    def _render(text: str) -> str:
        return ctx.vault.restore(render_inline(ctx, text))
    return _render


@pytest.fixture(name="sample_md")
def sample_md_fixture() -> str:
    return SAMPLE_MD
