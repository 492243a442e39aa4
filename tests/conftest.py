"""Pytest configuration and shared fixtures for the notemark test suite.

This module provides shared fixtures, test configuration, and Hypothesis
profiles used across the entire test suite.
"""

import os
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

from notemark.ast.nodes import Mark, Node, document, text_node

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - full parse/serialize pipeline")
    config.addinivalue_line("markers", "slow: Slow tests that may take several seconds")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")
    config.addinivalue_line("markers", "fuzzing: Property-based tests driven by Hypothesis")


@pytest.fixture
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty directory with no config environment.

    Returns
    -------
    Path
        The temporary working directory

    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("NOTEMARK_CONFIG", raising=False)
    return tmp_path


@pytest.fixture
def sample_note() -> str:
    """Provide a note exercising every construct the converter handles.

    Returns
    -------
    str
        Markup already in normalized form

    """
    return """# Weekly Sync

TODO send the agenda before [09:30]
DONE review [[Roadmap Q3]] with the team

## Discussion

Some **bold** and *italic* text, ~~struck~~, ==highlighted== and `code`.

- first point
- second point
  - nested detail

1. step one
2. step two

> quoted line

```python
print("hello")
```

| Owner | Task | Due |
| --- | --- | --- |
| Ana | Slides | [14:00] |
| Ben | Notes | Friday |

---

![diagram](.assets/diagram.png)
"""


@pytest.fixture
def make_paragraph():
    """Build a document holding one paragraph of text runs.

    Each run is a ``(text, marks)`` tuple where ``marks`` is a list of mark
    type names, outermost first.
    """

    def _make(*runs: tuple[str, list[str]]) -> Node:
        content = [text_node(text, [Mark(type=mark) for mark in marks]) for text, marks in runs]
        return document(Node("paragraph", content=content))

    return _make
