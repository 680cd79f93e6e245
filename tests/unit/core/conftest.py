"""Shared fixtures for core unit tests"""

import pytest

from postpress.config import Settings


SAMPLE_POST = """\
---
title: Error handling without exceptions
date: 2019-03-04 10:00:00 +0100
categories: scala fp
tags:
  - either
  - validation
slides: https://slides.com/example/errors
---

Handling errors **functionally** means returning them as values.

```scala
// # not a heading
val result: Either[String, Int] = Right(42)
```

{% raw %}
<iframe src="//slides.com/example/errors/embed" width="576" height="420" allowfullscreen></iframe>
{% endraw %}

## Further reading

- [cats](https://typelevel.org/cats/)
"""


@pytest.fixture(name="sample_post")
def sample_post_fixture():
    return SAMPLE_POST


@pytest.fixture(name="settings")
def settings_fixture(tmp_path):
    return Settings(output_dir=str(tmp_path / "site"))
