"""Mock responses for testing without API calls."""

# Free-text review in the shape Gemini returns for USER_PROMPT
MOCK_RESPONSE = """Summary: Adds a configuration loader that reads the API key and posts it to the billing service.

Issues:
- Bug: `loadConfig` returns undefined when the file is missing, callers dereference it without a check.
- Concern: the API key is written to the log on startup, which exposes a credential.

Suggestions:
- Suggestion: extract the retry loop into a helper so it can be unit tested.
- Consider: caching the parsed config instead of reading the file on every request.

The nested loop over all accounts is inefficient for large tenants.

Overall recommendation: request changes before merging."""
