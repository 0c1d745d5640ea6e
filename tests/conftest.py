from pathlib import Path

import pytest

from scaffprep.location import LOCATION_ANNOTATION
from scaffprep.models import TemplateDescriptor


class FakeClone:
    def __init__(self, fail: Exception | None = None) -> None:
        self.calls: list[tuple] = []
        self.fail = fail

    async def __call__(self, url, dest, credentials=None) -> None:
        self.calls.append((url, Path(dest), credentials))
        if self.fail is not None:
            raise self.fail
        (Path(dest) / "README.md").write_text("checked out\n", encoding="utf-8")


def make_template(location: str, name: str = "t1", path: str | None = None) -> TemplateDescriptor:
    return TemplateDescriptor(
        name=name, path=path, annotations={LOCATION_ANNOTATION: location}
    )


@pytest.fixture
def fake_clone() -> FakeClone:
    return FakeClone()
