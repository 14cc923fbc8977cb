"""
Contracts (data models).

This folder defines the request/response shapes shared by the provider
adapters, the aggregator and the normalization pipeline:
- OSAGO quote request and per-provider payload schemas
- Provider results and the aggregated envelope
- Raw and canonical bank offerings

Adapters, the aggregator, the API and the refresh job all exchange these
models rather than ad-hoc dicts.
"""
