"""GUI adapter layer.

Thin Qt-shaped adapters over engine services.

Notes
-----
Adapters exist to:
- keep GUI code free of persistence details,
- keep store calls off the UI thread,
- hand engine result objects back to widgets through queued signals.
"""
