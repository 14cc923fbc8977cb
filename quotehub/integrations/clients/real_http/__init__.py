"""
Real HTTP integration clients.

These clients communicate with partner systems via httpx, e.g.:
- OSAGO provider calculation APIs
- machine translation APIs

Important:
- Provider adapters implement ProviderAdapter from quotehub/integrations/contracts/interfaces.py
- Every client accepts an httpx transport so tests can swap in httpx.MockTransport

Switching:
The selection of adapters happens in quotehub/services.py only.
"""
