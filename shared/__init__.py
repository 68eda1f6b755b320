"""
KeyForge Shared Module
======================

Configuration, structured logging and console presentation shared by the
KeyForge generator, analyzer and command-line interface.
"""

from shared.config import ForgeConfig

__all__ = ["ForgeConfig"]
