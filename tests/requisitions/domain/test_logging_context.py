"""Tests for the per-request logging context helpers."""

import structlog
from requisitions.utils.logging import add_context, clear_context


class TestLoggingContext:
    def teardown_method(self):
        clear_context()

    def test_add_context_binds_values(self):
        add_context(actor_id="cook-ana", path="/requisitions")
        bound = structlog.contextvars.get_contextvars()
        assert bound["actor_id"] == "cook-ana"
        assert bound["path"] == "/requisitions"

    def test_clear_context_drops_values(self):
        add_context(actor_id="cook-ana")
        clear_context()
        assert structlog.contextvars.get_contextvars() == {}
