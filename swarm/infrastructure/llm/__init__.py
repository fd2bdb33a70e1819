from .openai_client import OpenAICompletionClient

__all__ = ["OpenAICompletionClient"]
