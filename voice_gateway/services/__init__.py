"""
Services module for access control in the voice gateway.

Key components:
- stores: The credential and assistant store protocols consumed by the bridge,
  with in-memory implementations loaded from a JSON document.
- access_validator: API key validation (format, hash lookup, expiry, active
  flag, assistant scope) and the best-effort last-used update.

Usage examples:
```python
from pathlib import Path

from voice_gateway.services.access_validator import AccessValidator
from voice_gateway.services.stores import load_stores

credentials, resources = load_stores(Path("data/gateway.json"))
validator = AccessValidator(credentials, resources)
result = await validator.validate("ak_...", "assistant-uuid")
```
"""
