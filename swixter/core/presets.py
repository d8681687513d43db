"""Built-in provider presets."""

from __future__ import annotations

from typing import Optional

from swixter.core.schema import CUSTOM_PRESET_ID, ProviderPreset


_ANTHROPIC_PRESET = ProviderPreset(
    id="anthropic",
    name="Anthropic",
    display_name="Anthropic (Official)",
    base_url="https://api.anthropic.com",
    default_models=[
        "claude-sonnet-4-20250514",
        "claude-3-5-sonnet-20241022",
        "claude-3-5-haiku-20241022",
        "claude-3-opus-20240229",
    ],
    auth_type="api-key",
    headers={"anthropic-version": "2023-06-01"},
    docs="https://docs.anthropic.com/",
    wire_api="responses",
    env_key="ANTHROPIC_API_KEY",
)

_OPENROUTER_PRESET = ProviderPreset(
    id="openrouter",
    name="OpenRouter",
    display_name="OpenRouter",
    base_url="https://openrouter.ai/api",
    default_models=["anthropic/claude-sonnet-4", "anthropic/claude-3.5-sonnet"],
    auth_type="bearer",
    docs="https://openrouter.ai/docs",
    wire_api="chat",
    env_key="OPENROUTER_API_KEY",
)

_OLLAMA_PRESET = ProviderPreset(
    id="ollama",
    name="Ollama",
    display_name="Ollama (Local models)",
    base_url="http://localhost:11434",
    default_models=[
        "qwen2.5-coder:7b",
        "qwen2.5-coder:14b",
        "qwen2.5-coder:32b",
        "qwen2.5:7b",
        "qwen2.5:14b",
    ],
    # No authentication; any placeholder key is accepted.
    auth_type="custom",
    docs="https://ollama.com/library",
    wire_api="chat",
    env_key="OLLAMA_API_KEY",
)

_DEEPSEEK_PRESET = ProviderPreset(
    id="deepseek",
    name="DeepSeek",
    display_name="DeepSeek",
    base_url="https://api.deepseek.com/anthropic",
    default_models=["deepseek-chat", "deepseek-reasoner"],
    auth_type="bearer",
    docs="https://api-docs.deepseek.com/",
    is_chinese=True,
    wire_api="chat",
    env_key="DEEPSEEK_API_KEY",
)

_MOONSHOT_PRESET = ProviderPreset(
    id="moonshot",
    name="Moonshot",
    display_name="Moonshot AI (Kimi)",
    base_url="https://api.moonshot.cn/anthropic",
    default_models=["kimi-k2-0905-preview", "kimi-k2-turbo-preview"],
    auth_type="bearer",
    docs="https://platform.moonshot.cn/docs",
    is_chinese=True,
    wire_api="chat",
    env_key="MOONSHOT_API_KEY",
)

_ZHIPU_PRESET = ProviderPreset(
    id="zhipu",
    name="Zhipu",
    display_name="Zhipu AI (GLM)",
    base_url="https://open.bigmodel.cn/api/anthropic",
    default_models=["glm-4.6", "glm-4.5", "glm-4.5-air"],
    auth_type="bearer",
    docs="https://docs.bigmodel.cn/",
    is_chinese=True,
    wire_api="chat",
    env_key="ZHIPU_API_KEY",
)

_QWEN_PRESET = ProviderPreset(
    id="qwen",
    name="Qwen",
    display_name="Alibaba Cloud DashScope (Qwen)",
    base_url="https://dashscope.aliyuncs.com/compatible-mode/v1",
    default_models=["qwen3-coder-plus", "qwen3-coder-flash"],
    auth_type="bearer",
    docs="https://help.aliyun.com/zh/model-studio/",
    is_chinese=True,
    wire_api="chat",
    env_key="DASHSCOPE_API_KEY",
)

# Template for third-party endpoints; callers supply the base URL.
_CUSTOM_PRESET = ProviderPreset(
    id=CUSTOM_PRESET_ID,
    name="Custom",
    display_name="Custom endpoint",
    base_url="",
    default_models=[],
    auth_type="bearer",
    wire_api="chat",
    env_key="OPENAI_API_KEY",
)

_BUILT_IN_PRESETS: tuple[ProviderPreset, ...] = (
    _ANTHROPIC_PRESET,
    _OPENROUTER_PRESET,
    _OLLAMA_PRESET,
    _DEEPSEEK_PRESET,
    _MOONSHOT_PRESET,
    _ZHIPU_PRESET,
    _QWEN_PRESET,
    _CUSTOM_PRESET,
)


def _copies(presets) -> list[ProviderPreset]:
    # Frozen models still hold mutable lists and dicts.
    return [preset.model_copy(deep=True) for preset in presets]


def get_built_in_presets() -> tuple[ProviderPreset, ...]:
    """Every built-in preset in catalog order, as independent copies."""
    return tuple(_copies(_BUILT_IN_PRESETS))


def get_preset_by_id(preset_id: str) -> Optional[ProviderPreset]:
    """Look up a built-in preset; ``None`` when the id is unknown."""
    for preset in _BUILT_IN_PRESETS:
        if preset.id == preset_id:
            return preset.model_copy(deep=True)
    return None


def is_built_in(preset_id: str) -> bool:
    return any(preset.id == preset_id for preset in _BUILT_IN_PRESETS)


def get_international_presets() -> list[ProviderPreset]:
    return _copies(
        preset
        for preset in _BUILT_IN_PRESETS
        if not preset.is_chinese and preset.id != CUSTOM_PRESET_ID
    )


def get_chinese_presets() -> list[ProviderPreset]:
    return _copies(preset for preset in _BUILT_IN_PRESETS if preset.is_chinese)
