"""
Igreja Conciliada - multi-tenant church administration
"""

__version__ = "1.0.0"
