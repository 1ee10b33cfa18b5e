"""Client options in, client config out: the types around the options builder."""

from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass
class ClientOptions:
    """Everything the options builder needs besides the API key."""

    model_options: dict = field(default_factory=dict)
    reverse_proxy_url: str = ""  # resolved base URL
    proxy: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    add_params: dict = field(default_factory=dict)
    drop_params: list[str] = field(default_factory=list)
    stream_rate: int | None = None
    # Display and conversation behaviour passed through untouched
    title_convo: bool = False
    title_model: str | None = None
    title_method: str | None = None
    summarize: bool = False
    summary_model: str | None = None
    model_display_label: str | None = None


@dataclass
class ClientConfig:
    llm_config: dict
    configuration_options: dict = field(default_factory=dict)
    tools: list = field(default_factory=list)
    use_legacy_content: bool = False
    endpoint_token_config: dict | None = None


# (api_key, options, endpoint_name) -> ClientConfig
OptionsBuilder = Callable[[str, ClientOptions, str], ClientConfig]
