from domain.errors import ConfigurationError
from services.ai.claude_service import ClaudeCompletionClient
from services.ai.openai_service import OpenAICompletionClient

PROVIDER_ALLOW = ("openai", "claude")


def get_completion_client(config, provider=None):
    """
    PROVIDER_DEFAULT(또는 provider 인자)에 맞는 completion client 생성.
    A missing API key is a server misconfiguration: ConfigurationError.
    """
    provider = (provider or config.get("PROVIDER_DEFAULT") or "openai").lower()
    if provider not in PROVIDER_ALLOW:
        provider = "openai"

    common = dict(
        timeout=float(config.get("UPSTREAM_TIMEOUT_SECONDS", 15)),
        temperature=float(config.get("COMPLETION_TEMPERATURE", 0.5)),
        max_tokens=int(config.get("COMPLETION_MAX_TOKENS", 400)),
    )

    if provider == "claude":
        api_key = config.get("ANTHROPIC_API_KEY")
        if not api_key:
            raise ConfigurationError("ANTHROPIC_API_KEY")
        return ClaudeCompletionClient(api_key, config.get("CLAUDE_MODEL") or "claude-3-5-haiku-latest", **common)

    api_key = config.get("OPENAI_API_KEY")
    if not api_key:
        raise ConfigurationError("OPENAI_API_KEY")
    return OpenAICompletionClient(api_key, config.get("OPENAI_MODEL") or "gpt-4o-mini", **common)
