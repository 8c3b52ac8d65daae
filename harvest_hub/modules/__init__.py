"""
Harvest Hub feature modules.
"""
