"""Shared fixtures for aarbind unit tests."""

import pytest

from aarbind.config import BuildConfig
from aarbind.packages import SourcePackage


@pytest.fixture
def android_sdk(tmp_path):
    """Create a minimal Android SDK with one platform and an NDK directory."""
    sdk = tmp_path / 'sdk'
    platform = sdk / 'platforms' / 'android-21'
    platform.mkdir(parents=True)
    (platform / 'android.jar').write_bytes(b'PK\x05\x06' + b'\x00' * 18)
    (sdk / 'ndk-bundle').mkdir()
    return sdk


@pytest.fixture
def make_config(android_sdk):
    """Factory for BuildConfig instances rooted at the fake SDK."""
    def _make(**options):
        environ = {'ANDROID_HOME': str(android_sdk), 'PATH': '/usr/bin'}
        return BuildConfig.from_environment(environ, **options)
    return _make


@pytest.fixture
def hello_package(tmp_path):
    """A bound Go package directory without assets."""
    pkg_dir = tmp_path / 'src' / 'hello'
    pkg_dir.mkdir(parents=True)
    (pkg_dir / 'hello.go').write_text('package hello\n')
    return SourcePackage(import_path='example.com/hello', name='hello', dir=pkg_dir)
