"""Pytest fixtures and test utilities."""
import json
import tempfile
from pathlib import Path

import pytest

from depmisuse.models import Component


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_components():
    """
    Declared dependencies of a small Android app.

    - okhttp: direct, used
    - timber: direct, unused
    - legacy-support-v4: direct, no classes (aggregator artifact)
    - okio: transitive via okhttp, used directly by the app
    - kotlin-stdlib: transitive, used but excluded
    - core: transitive, only platform classes used
    """
    return [
        Component("com.squareup.okhttp3:okhttp", ("okhttp3.OkHttpClient", "okhttp3.Request"), False),
        Component("com.jakewharton.timber:timber", ("timber.log.Timber",), False),
        Component("androidx.legacy:legacy-support-v4", (), False),
        Component("com.squareup.okio:okio", ("okio.Okio", "okio.Buffer", "okio.BufferedSource"), True),
        Component("org.jetbrains.kotlin:kotlin-stdlib", ("kotlin.Unit", "kotlin.jvm.functions.Function0"), True),
        Component("androidx.core:core", ("android.support.v4.app.INotificationSideChannel",), True),
    ]


@pytest.fixture
def sample_used_classes():
    """Class names referenced by the sample app's compiled output."""
    return frozenset({
        "okhttp3.OkHttpClient",
        "okio.Okio",
        "okio.Buffer",
        "kotlin.Unit",
        "android.support.v4.app.INotificationSideChannel",
        "com.example.app.MainActivity",
    })


@pytest.fixture
def declared_file(temp_dir, sample_components):
    """Write the sample components in the declared-dependencies format."""
    path = temp_dir / "declared-dependencies.json"
    path.write_text(json.dumps([c.to_dict() for c in sample_components]))
    return path


@pytest.fixture
def used_classes_file(temp_dir, sample_used_classes):
    """Write the sample used classes, one per line."""
    path = temp_dir / "used-classes.txt"
    path.write_text("\n".join(sorted(sample_used_classes)) + "\n")
    return path
