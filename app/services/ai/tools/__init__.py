from app.services.ai.tools.base import Tool
from app.services.ai.tools.currency import CurrencyConversionTool
from app.services.ai.tools.registry import ToolRegistry

__all__ = ["CurrencyConversionTool", "Tool", "ToolRegistry"]
