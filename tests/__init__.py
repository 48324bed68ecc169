# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Graphiste GPT API:
# - conftest.py: In-memory Supabase and Redis fakes, seeded plans
# - test_models.py: Pydantic model validation
# - test_credit_service.py / test_services.py: Credits, plans, payments, history
# - test_conversation.py: The poster wizard and its Redis store
# - test_agents.py / test_prompts.py / test_kie_client.py: AI and generation
# - test_webhooks.py / test_signatures.py: Payment provider webhooks
# - test_worker_tasks.py / test_api.py: Celery task and HTTP routes
#
# Run tests with: pytest
# =============================================================================
