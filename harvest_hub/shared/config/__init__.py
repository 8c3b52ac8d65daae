# 📄 File: harvest_hub/shared/config/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Contains the settings that tell Harvest Hub how to reach its database,
# image storage, and how to sign login tokens.
#
# 🧪 Purpose (Technical Summary):
# Configuration package initialization with exports for settings management
# and the Supabase client manager.
#
# 🔗 Dependencies:
# - settings.py (application settings)
# - supabase.py (Supabase client manager)
#
# 🔄 Connected Modules / Calls From:
# - harvest_hub.main (application startup)
# - All modules requiring configuration

"""
Configuration Management Package

Handles all application configuration including:
- Environment-based settings
- Supabase connection configuration
"""

from .settings import get_settings, Settings

__all__ = [
    "get_settings",
    "Settings",
]
