"""Build client config for an OpenAI-compatible chat client."""

from endpoint_gateway.config.env import extract_env_variable
from endpoint_gateway.providers.base import ClientConfig, ClientOptions


def get_openai_config(api_key: str, options: ClientOptions, endpoint: str) -> ClientConfig:
    """Merge block params and caller model options into an llm config.

    Model options override the block's `add_params`; `drop_params` are removed
    last, so they win over both.
    """
    llm_config = {
        "streaming": True,
        **options.add_params,
        **options.model_options,
        "api_key": api_key,
    }
    for param in options.drop_params:
        llm_config.pop(param, None)

    configuration_options: dict = {}
    if options.reverse_proxy_url:
        configuration_options["base_url"] = options.reverse_proxy_url
    if options.headers:
        configuration_options["default_headers"] = {
            name: extract_env_variable(value) for name, value in options.headers.items()
        }
    if options.proxy:
        configuration_options["proxy"] = options.proxy

    return ClientConfig(llm_config=llm_config, configuration_options=configuration_options)
