"""Secret environment variables: expansion, flattening and patch filtering.

The API never returns a secret in clear text. It answers with an argon2id
hash of the value, which is a display artifact and must never be sent back
as if it were the secret itself.
"""

from collections.abc import Mapping

from .api.container import Secret, SecretHashedValue

HASHED_PLACEHOLDER_PREFIX = "$argon2id"


def is_hashed_placeholder(value: str | None) -> bool:
    return value is not None and value.startswith(HASHED_PLACEHOLDER_PREFIX)


def expand_secrets(secrets: Mapping[str, str] | None) -> list[Secret]:
    """Declared secret map -> API secrets, sorted by key."""
    return [Secret(key=key, value=value) for key, value in sorted((secrets or {}).items())]


def flatten_secrets(secrets: list[SecretHashedValue] | None) -> dict[str, str] | None:
    """API hashed secrets -> ``{key: hashed_value}``."""
    if not secrets:
        return None
    return {secret.key: secret.hashed_value for secret in secrets}


def filter_secret_envs_to_patch(old: list[Secret], new: list[Secret]) -> list[Secret]:
    """Compute the secrets to send so the remote set matches ``new``.

    - every new secret whose value is not a hashed placeholder is created or updated
    - every old key missing from ``new`` is deleted (sent with ``value=None``)

    Args:
        old: Secrets of the previous state
        new: Desired secrets

    Returns:
        Secrets to put in the update request, never holding a hashed value
    """
    to_patch = [
        secret for secret in new if not is_hashed_placeholder(secret.value)
    ]

    new_keys = {secret.key for secret in new}
    to_patch.extend(
        Secret(key=secret.key, value=None)
        for secret in old
        if secret.key not in new_keys
    )
    return to_patch


def merge_state_secrets(
    declared: Mapping[str, str] | None,
    remote: list[SecretHashedValue] | None,
) -> dict[str, str] | None:
    """Secret map to keep in state after a read.

    Keys still present remotely keep the declared value so the next diff
    compares clear text with clear text; keys only known remotely (e.g. after
    an import) keep their hash, which the patch filter never resubmits.
    """
    hashed = flatten_secrets(remote)
    if hashed is None:
        return None
    declared = declared or {}
    return {key: declared.get(key, value) for key, value in hashed.items()}
