"""
KeyForge Output
================

Rich console rendering and JSON report generation.
"""

from keyforge.output.console import ForgeConsoleOutput
from keyforge.output.report import ForgeReportGenerator, mask_secret

__all__ = ["ForgeConsoleOutput", "ForgeReportGenerator", "mask_secret"]
