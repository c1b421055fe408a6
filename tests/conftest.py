"""Pytest configuration and shared fixtures for the md2visual test suite."""

import os
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

# Hypothesis profiles, selected with HYPOTHESIS_PROFILE
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - parser and compiler together")


@pytest.fixture
def png_image(tmp_path: Path) -> Path:
    """Create a real 40x30 PNG file.

    Returns
    -------
    Path
        Absolute path of the image inside ``tmp_path``

    """
    from PIL import Image

    path = tmp_path / "pixel.png"
    Image.new("RGB", (40, 30), color=(255, 0, 0)).save(path)
    return path


@pytest.fixture
def sample_markdown() -> str:
    """Markdown document exercising every supported kind."""
    return """# Sample Document

This is a **sample document** with _italic text_ and some `inline code`.

> A quote
>
> > nested

- Item 1
- [x] Done item
  1. nested ordered

```python
def hello_world():
    print("Hello, World!")
```

| Left | Right |
|:-----|------:|
| a    | b     |

---

$$
x^2
$$
"""
