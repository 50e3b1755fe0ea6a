"""Unit tests for HTTP metrics route labelling."""
from types import SimpleNamespace
from welltrack.observability.middleware import route_template


def endpoint():
    return None


class TestRouteTemplate:
    """Test route_template label resolution."""

    def test_uses_full_route_template(self):
        """Test a route whose template covers the full path is used as-is."""
        scope = {
            "path": "/api/v1/analyze/42/results",
            "path_params": {"subject_id": "42"},
            "route": SimpleNamespace(path_format="/api/v1/analyze/{subject_id}/results"),
            "endpoint": endpoint,
        }

        assert route_template(scope) == "/api/v1/analyze/{subject_id}/results"

    def test_prefix_relative_template_is_rebuilt(self):
        """Test routes nested under a prefix still label with the full template."""
        scope = {
            "path": "/api/v1/analyze/42",
            "path_params": {"subject_id": "42"},
            "route": SimpleNamespace(path_format="/{subject_id}"),
            "endpoint": endpoint,
        }

        assert route_template(scope) == "/api/v1/analyze/{subject_id}"

    def test_route_without_path_uses_path_params(self):
        """Test routers that record no template fall back to parameter names."""
        scope = {
            "path": "/api/v1/activity/rest/17",
            "path_params": {"subject_id": "17"},
            "route": SimpleNamespace(path=None),
            "endpoint": endpoint,
        }

        assert route_template(scope) == "/api/v1/activity/rest/{subject_id}"

    def test_distinct_subjects_share_one_label(self):
        """Test label cardinality does not grow with subject ids."""
        labels = {
            route_template({
                "path": f"/api/v1/analyze/{subject}",
                "path_params": {"subject_id": str(subject)},
                "endpoint": endpoint,
            })
            for subject in range(50)
        }

        assert labels == {"/api/v1/analyze/{subject_id}"}

    def test_static_route_keeps_its_path(self):
        """Test routes without parameters are labelled by their path."""
        scope = {"path": "/api/v1/health", "path_params": {}, "endpoint": endpoint}

        assert route_template(scope) == "/api/v1/health"

    def test_unrouted_request_is_unmatched(self):
        """Test requests no route handled share the unmatched label."""
        assert route_template({"path": "/nope/123"}) == "unmatched"
