"""Tests for scope lookups."""

from typing import Any

import pytest

from hiera.scope import Missing, Present, Scope
from hiera.values import UNDEFINED, render


@pytest.mark.parametrize('values, expected', (
    pytest.param({'var': 'value'}, Present('value'), id='string'),
    pytest.param({'var': False}, Present(False), id='false'),
    pytest.param({'var': ''}, Present(''), id='empty string'),
    pytest.param({'var': 0}, Present(0), id='zero'),
    pytest.param({'var': None}, Missing.UNDEFINED, id='none'),
    pytest.param({'var': UNDEFINED}, Missing.UNDEFINED, id='undefined marker'),
    pytest.param({}, Missing.ABSENT, id='absent'),
))
def test_scope_fetch(values: dict[str, Any], expected: Present | Missing) -> None:
    """Tell apart values, undefined and absent variables."""
    assert Scope(values).fetch('var') == expected


def test_scope_wrap() -> None:
    """Wrap mappings and keep existing scopes."""
    scope = Scope({'var': 1})

    assert Scope.wrap(scope) is scope
    assert Scope.wrap(None) == {}
    assert isinstance(Scope.wrap({'var': 1}), Scope)


@pytest.mark.parametrize('value, expected', (
    pytest.param(False, 'false', id='false'),
    pytest.param(True, 'true', id='true'),
    pytest.param(42, '42', id='int'),
    pytest.param(1.5, '1.5', id='float'),
    pytest.param('text', 'text', id='str'),
))
def test_render(value: Any, expected: str) -> None:
    """Render scope values as text."""
    assert render(value) == expected


def test_undefined_repr() -> None:
    """Show the undefined marker by name."""
    assert repr(UNDEFINED) == 'UNDEFINED'
