"""LLM provider adapters.

Three concrete implementations of ILLMProvider
(eventsearch/interfaces/llm_provider.py):
    - AnthropicLLMProvider: Claude (Haiku by default)
    - OpenAILLMProvider: gpt-4o-mini, or any OpenAI-compatible API
    - OllamaLLMProvider: local models via an Ollama server

main.py picks the first configured one (Anthropic → OpenAI → Ollama).
With none configured, query expansion degrades to the original term.
"""

from eventsearch.providers.llm.anthropic_provider import AnthropicLLMProvider
from eventsearch.providers.llm.ollama_provider import OllamaLLMProvider
from eventsearch.providers.llm.openai_provider import OpenAILLMProvider

__all__ = ["AnthropicLLMProvider", "OllamaLLMProvider", "OpenAILLMProvider"]
