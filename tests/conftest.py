"""Test configuration for AppDiff."""

import json
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

from appdiff.models.version import VersionRecord


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests.

    Yields:
        Path: A Path object pointing to the temporary directory.
            The directory is automatically cleaned up after the test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def version_rows():
    """Raw store rows for two packages, as the extractor writes them.

    ``version_code`` is text in the store, and the oldest camera row leaves
    its optional collections null.

    Returns:
        list[dict]: Rows in arbitrary order.
    """
    return [
        {
            "id": 1,
            "package_name": "com.example.camera",
            "app_name": "Snap Camera",
            "version_code": "100",
            "version_name": "1.0.0",
            "hash": "aa11",
            "permissions": ["android.permission.INTERNET", "android.permission.SEND_SMS"],
            "libraries": ["okhttp", "gson"],
            "strings": {"app_name": "Foo", "old_key": "Baz"},
            "security_issues": [],
            "extracted_at": "2024-01-10T12:00:00+00:00",
        },
        {
            "id": 2,
            "package_name": "com.example.camera",
            "app_name": "Snap Camera",
            "version_code": "110",
            "version_name": "1.1.0",
            "hash": "bb22",
            "permissions": ["android.permission.CAMERA", "android.permission.INTERNET"],
            "libraries": ["okhttp", "retrofit"],
            "strings": {"app_name": "Foo", "new_key": "Bar"},
            "security_issues": [{"type": "hardcoded_key", "file": "res/values/keys.xml"}],
            "extracted_at": "2024-02-10T12:00:00+00:00",
        },
        {
            "id": 3,
            "package_name": "com.example.camera",
            "app_name": "Snap Camera",
            "version_code": "99",
            "version_name": "0.9.0",
            "hash": "cc33",
            "permissions": None,
            "libraries": None,
            "strings": None,
            "extracted_at": "2023-12-01T12:00:00+00:00",
        },
        {
            "id": 4,
            "package_name": "org.sample.notes",
            "app_name": "Notes",
            "version_code": "7",
            "version_name": "7",
            "permissions": ["android.permission.READ_EXTERNAL_STORAGE"],
            "libraries": [],
            "strings": {"title": "Notes"},
            "extracted_at": "2024-03-01T08:00:00+00:00",
            "unknown_column": "ignored",
        },
    ]


@pytest.fixture
def records(version_rows):
    """Validated records built from ``version_rows``."""
    return [VersionRecord.model_validate(row) for row in version_rows]


@pytest.fixture
def camera_versions(records):
    """Camera package records, oldest to newest release."""
    camera = [r for r in records if r.package_name == "com.example.camera"]
    return sorted(camera, key=lambda r: r.version_code)


@pytest.fixture
def memory_store(records):
    """In-memory store preloaded with ``records``."""
    from appdiff.storage import InMemoryVersionStore
    return InMemoryVersionStore(records)


@pytest.fixture
def local_store(temp_dir, version_rows):
    """Local JSON store with ``version_rows`` written to disk.

    Returns:
        LocalVersionStore: Store rooted at the temporary directory.
    """
    from appdiff.storage import LocalVersionStore
    (temp_dir / "app_versions.json").write_text(json.dumps(version_rows), encoding="utf-8")
    return LocalVersionStore(temp_dir)


def make_record(version_code, **fields):
    """Build a record with sensible defaults for the fields a test does not care about."""
    data = {
        "id": version_code,
        "package_name": "com.example.app",
        "version_code": version_code,
        "version_name": f"{version_code}.0",
        "extracted_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }
    data.update(fields)
    return VersionRecord.model_validate(data)


@pytest.fixture
def record_factory():
    """Factory fixture for one-off records."""
    return make_record
