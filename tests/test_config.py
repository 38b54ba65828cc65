import pytest

from app.config import Settings
from app.consultant.errors import ConfigurationError
from app.consultant.schemas import CheckName


def test_default_policy_is_jailbreak_only() -> None:
    policy = Settings(_env_file=None).guardrail_policy()
    assert [spec.name for spec in policy.guardrails] == [CheckName.JAILBREAK]
    assert policy.guardrails[0].config == {"model": "gpt-5-nano", "confidence_threshold": 0.7}


def test_pii_masking_adds_mask_only_check() -> None:
    policy = Settings(_env_file=None, pii_masking=True).guardrail_policy()
    spec = policy.pii_masking_spec()
    assert spec is not None
    assert spec.config == {
        "entities": ["EMAIL_ADDRESS", "PHONE_NUMBER", "CREDIT_CARD"],
        "block": False,
    }


def test_policy_json_overrides_defaults() -> None:
    settings = Settings(
        _env_file=None,
        guardrail_policy_json='{"guardrails": [{"name": "URL Filter", "config": {"url_allow_list": []}}]}',
    )
    assert [spec.name for spec in settings.guardrail_policy().guardrails] == [CheckName.URL_FILTER]


def test_missing_provider_key_fails_validation(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("AZURE_OPENAI_API_KEY", raising=False)
    with pytest.raises(ConfigurationError):
        Settings(_env_file=None, llm_provider="azure").validate_credentials()


def test_telegram_requires_token() -> None:
    settings = Settings(
        _env_file=None, llm_provider="openai", openai_api_key="sk-test", telegram_bot_token=""
    )
    settings.validate_credentials()
    with pytest.raises(ConfigurationError):
        settings.validate_credentials(telegram=True)
