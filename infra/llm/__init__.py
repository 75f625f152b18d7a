from .openai_tool_calling_client import OpenAIToolCallingClient

__all__ = ["OpenAIToolCallingClient"]
