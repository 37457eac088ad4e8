"""
scwprovider Test Suite

Unit tests for the Scaleway dynamic providers:
- API client, waiters and conversions
- Argument models, request builders and flatteners
- Provider check/diff/create/read/update/delete lifecycles
"""
