import os
from dataclasses import dataclass

from order_notifier.errors import ConfigurationError

DEFAULT_REGION = 'sa-east-1'

_TRUE_VALUES = {'1', 'true', 'yes', 'on'}
_FALSE_VALUES = {'0', 'false', 'no', 'off'}


@dataclass(frozen=True)
class Settings:
    sns_topic_arn: str = ''
    email_sender: str = ''
    email_recipient: str = ''
    region: str = DEFAULT_REGION
    log_level: str = 'INFO'
    continue_on_error: bool = False
    report_batch_item_failures: bool = False


def load_settings(environ=None):
    """
    Read settings once from the environment (Lambda configuration).
    """
    env = os.environ if environ is None else environ
    return Settings(
        sns_topic_arn=env.get('SNS_TOPIC_ARN', '').strip(),
        email_sender=env.get('EMAIL_SENDER', '').strip(),
        email_recipient=env.get('EMAIL_RECIPIENT', '').strip(),
        region=env.get('AWS_REGION', '').strip() or DEFAULT_REGION,
        log_level=env.get('LOG_LEVEL', '').strip().upper() or 'INFO',
        continue_on_error=_env_bool(env, 'CONTINUE_ON_ERROR', False),
        report_batch_item_failures=_env_bool(env, 'REPORT_BATCH_ITEM_FAILURES', False),
    )


def _env_bool(env, name, default):
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    normalized = raw.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean value for {name}: {raw!r}")
