"""Shared fixtures for the ctpolicy tests."""

import pytest

from ctpolicy.stores import PROPERTIES_ENV_VAR, MappingPropertyStore, reset_default_store


@pytest.fixture(autouse=True)
def isolated_default_store(monkeypatch):
    """Keep the process-wide store and CTPOLICY_PROPERTIES out of every test."""
    monkeypatch.delenv(PROPERTIES_ENV_VAR, raising=False)
    reset_default_store()
    yield
    reset_default_store()


@pytest.fixture
def make_store():
    """Build a read-only store, with the global switch on unless enabled=False."""
    def _make(properties=None, enabled=True):
        props = dict(properties or {})
        if enabled:
            props.setdefault('conscrypt.ct.enable', 'true')
        return MappingPropertyStore(props)
    return _make


@pytest.fixture
def properties_file(tmp_path):
    """Write a properties file and return its path."""
    def _write(text, name='java.security'):
        path = tmp_path / name
        path.write_text(text, encoding='latin-1')
        return str(path)
    return _write
