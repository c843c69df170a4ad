# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Resource Portal API:
# - test_models.py: Unit tests for Pydantic model validation
# - test_visibility_policy.py: The access table
# - test_*_service.py / test_resource_directory.py / test_delivery_broker.py:
#   service tests against in-memory fakes (fakes.py)
# - test_routes.py: Endpoint tests through FastAPI's TestClient
#
# Run tests with: pytest
# =============================================================================
