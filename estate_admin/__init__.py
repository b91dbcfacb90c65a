"""
Estate Admin

Resource workflow engine for the real-estate investment admin console:
resource clients over the write/read API split, dependent selections,
conditional forms and the entity lifecycle manager.
"""

__version__ = "1.0.0"
