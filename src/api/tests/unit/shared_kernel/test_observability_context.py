"""Unit tests for ObservationContext."""

from shared_kernel.observability_context import ObservationContext


class TestObservationContext:
    def test_as_dict_skips_unset_values(self):
        assert ObservationContext().as_dict() == {}

    def test_as_dict_includes_request_id_and_extra(self):
        context = ObservationContext(request_id="req-1", extra={"path": "/x"})

        assert context.as_dict() == {"request_id": "req-1", "path": "/x"}

    def test_with_extra_returns_new_context(self):
        context = ObservationContext(request_id="req-1")

        extended = context.with_extra(path="/telegram/api-key")

        assert extended.as_dict() == {
            "request_id": "req-1",
            "path": "/telegram/api-key",
        }
        assert context.extra == {}
