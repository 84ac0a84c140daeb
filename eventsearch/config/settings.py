"""Application settings loaded from environment variables via pydantic-settings.

Values are read from (highest priority first):

  1. Environment variables, e.g. ``SUPABASE_URL=https://xyz.supabase.co``
  2. A ``.env`` file in the working directory (local development)
  3. The defaults declared below

Field ``supabase_anon_key`` maps to env var ``SUPABASE_ANON_KEY`` and so
on; pydantic-settings matches case-insensitively.

An empty string means "not configured": provider selection in
``eventsearch.main`` skips providers with empty keys.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """eventsearch application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === LLM Providers (query expansion) ===
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-3-5-haiku-latest"
    openai_api_key: str = ""
    openai_base_url: str = ""  # OpenAI-compatible endpoints (TogetherAI, Groq, ...)
    openai_text_model: str = ""
    ollama_enabled: bool = False
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.1"

    # === Event store ===
    # With no Supabase URL the app serves from events_fixture_path instead.
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_events_table: str = "events"
    events_fixture_path: str = "data/events.json"
    store_timeout_seconds: float = 3.0

    # === Query expansion ===
    expansion_timeout_seconds: float = 1.5
    expansion_max_terms: int = 8
    expansion_cache_ttl_seconds: int = 300
    expansion_cache_max_size: int = 2048
    max_expansion_query_length: int = 80

    # === Search ===
    suggestion_limit: int = 6
    search_result_limit: int = 50
    max_search_query_length: int = 100

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"
    cors_origins: str = "*"  # comma-separated

    def get_available_llm_providers(self) -> list[str]:
        """Return LLM provider names that are configured, in priority order."""
        providers: list[str] = []
        if self.anthropic_api_key:
            providers.append("anthropic")
        if self.openai_api_key:
            providers.append("openai")
        if self.ollama_enabled and self.ollama_base_url:
            providers.append("ollama")
        return providers

    def get_cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
