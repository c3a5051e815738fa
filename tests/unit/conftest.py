"""Shared test fixtures."""

import pytest

from rat_graph.core.render.renderer import DocumentRenderer
from tests.unit.fakes import FakeProvider, FakeUrlPrefixer

RAT_CONTENT = """# Rat

```todo
priority=1
- write parser
x write tokenizer
```
"""

WEB_CONTENT = """```todo
priority=3
tags=frontend,css
- fix layout
```
"""

PARSER_CONTENT = """Parser notes.

```todo
x all done
```
"""

ARCHIVE_CONTENT = """```todo
- old task
```
"""


@pytest.fixture
def provider() -> FakeProvider:
    """Graph with a projects subtree and an archive node.

    projects (Projects)
        web      weight 1, priority 3, tags
        rat      priority 1, one open and one done entry
            parser   only done entries
        zeta     empty
    archive      one open entry
    """
    p = FakeProvider()
    p.add("projects", name="Projects")
    p.add("projects/zeta")
    p.add("projects/rat", content=RAT_CONTENT)
    p.add("projects/web", content=WEB_CONTENT, weight=1)
    p.add("projects/rat/parser", content=PARSER_CONTENT)
    p.add("archive", content=ARCHIVE_CONTENT)
    return p


@pytest.fixture
def renderer(provider: FakeProvider) -> DocumentRenderer:
    return DocumentRenderer(provider, url_resolver=FakeUrlPrefixer(), version="1.2.3")
