"""
Game Maker Backend Test Suite

Test structure:
- unit/: Test components in isolation with mocks
- integration/: Full session flows with scripted agents
- e2e/: Real LLM tests (skipped without an API key)
- mocks/: Mock LLM client, scripted agents and sample documents
"""
