"""Extension layer: plugin system via pluggy.

Discovery: entry_points (pip-installed) in the ``domainapi.plugins`` group.
INVARIANT: Plugin failures are warnings, never errors.
"""

from domainapi.plugins.manager import PluginManager

__all__ = ["PluginManager"]
