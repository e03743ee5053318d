"""
Unit tests for the Moneytree LINK client.

Test individual components in isolation:
- Request builder (path resolution, bodies, options)
- Executor (429 retries, body replay, decoding, cancellation, cleanup)
- Response classifier and APIError formatting
- Backoff policy and retry config
- URL redaction
- Client options and endpoints (mocked transport)
"""
