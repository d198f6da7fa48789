"""pytest plugin exposing the fluent JSON assertion as a fixture.

Registered through the ``pytest11`` entry point, so installing the
package is enough::

    def test_orders(assert_json):
        assert_json(expected, response).any_order("items[*]").validate()
"""

import pytest

from .assertions import assert_json as _assert_json


@pytest.fixture
def assert_json():
    """Return the ``assert_json`` builder factory."""
    return _assert_json
