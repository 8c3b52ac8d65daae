# 📄 File: harvest_hub/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the 'harvest_hub' folder as our gardening app's code and records its version.
#
# 🧪 Purpose (Technical Summary):
# Package initialization with version metadata for the Harvest Hub FastAPI backend.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - main.py (application entry point)
# - pyproject.toml (project metadata)

"""
Harvest Hub - Garden and Crop Sharing Backend

Backend API for registering gardeners, tracking gardens and crops,
and sharing harvests with the community.
"""

__version__ = "1.0.0"
__title__ = "Harvest Hub API"
__description__ = "Garden and crop sharing backend"

__all__ = [
    "__version__",
    "__title__",
    "__description__",
]
