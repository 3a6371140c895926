"""Tests for revision resolution."""

import pytest

from svbisect.core.resolver import RevisionResolver, parse_revision_token
from svbisect.exceptions import UnresolvableRevision

from tests.conftest import FakeOracle


@pytest.fixture
def resolver():
    return RevisionResolver(FakeOracle(current=85))


def test_parse_revision_token():
    """Test that only integers and symbolic keywords are accepted."""
    assert parse_revision_token("123") == "123"
    assert parse_revision_token("HEAD") == "HEAD"

    for text in ("", "r123", "-5", "head", "HEAD:1", "1.5"):
        with pytest.raises(ValueError):
            parse_revision_token(text)


def test_resolve_numbers_and_keywords(resolver):
    assert resolver.resolve("95") == 95
    assert resolver.resolve("HEAD") == 100
    assert resolver.resolve("BASE") == 85
    assert resolver.resolve("PREV") == 80


def test_resolve_outside_history(resolver):
    """Test that a revision missing from the history is unresolvable."""
    with pytest.raises(UnresolvableRevision) as excinfo:
        resolver.resolve("96")

    assert excinfo.value.token == "96"


def test_resolve_range_either_order(resolver):
    assert resolver.resolve_range("95:75") == (75, 95)
    assert resolver.resolve_range("75:95") == (75, 95)
    assert resolver.resolve_range("90") == (90, 90)
    assert resolver.resolve_range("HEAD:BASE") == (85, 100)


def test_resolve_range_malformed(resolver):
    with pytest.raises(ValueError):
        resolver.resolve_range("70:80:90")
    with pytest.raises(ValueError):
        resolver.resolve_range("70:")


def test_expand(resolver):
    """Test that ranges expand to history revisions only."""
    assert resolver.expand(75, 95) == [95, 90, 85, 80, 75]
    assert resolver.expand(90, 90) == [90]
