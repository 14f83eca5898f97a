"""Wi-Fi supplicant config provisioner.

Runs before the supplicant daemon starts and makes sure its runtime config
files exist:
- Seeded from a read-only template under /system or /vendor when absent
- Fixed 0660 permissions enforced on the result
- Never leaves a partially written config behind
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
