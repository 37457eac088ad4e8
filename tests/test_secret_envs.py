"""Tests for secret environment variable handling."""

from scwprovider.api.container import Secret, SecretHashedValue
from scwprovider.secret_envs import (
    expand_secrets,
    filter_secret_envs_to_patch,
    flatten_secrets,
    is_hashed_placeholder,
    merge_state_secrets,
)

HASH = "$argon2id$v=19$m=65536,t=1,p=2$c2FsdA$aGFzaA"


def _as_dict(secrets):
    return {secret.key: secret.value for secret in secrets}


def test_is_hashed_placeholder():
    assert is_hashed_placeholder(HASH)
    assert not is_hashed_placeholder("plain-value")
    assert not is_hashed_placeholder(None)


def test_expand_secrets_sorted():
    secrets = expand_secrets({"B": "2", "A": "1"})

    assert [secret.key for secret in secrets] == ["A", "B"]
    assert expand_secrets(None) == []


def test_flatten_secrets():
    hashed = [SecretHashedValue(key="TOKEN", hashed_value=HASH)]

    assert flatten_secrets(hashed) == {"TOKEN": HASH}
    assert flatten_secrets([]) is None


def test_filter_sends_new_and_changed_values():
    old = expand_secrets({"A": "1"})
    new = expand_secrets({"A": "2", "B": "3"})

    assert _as_dict(filter_secret_envs_to_patch(old, new)) == {"A": "2", "B": "3"}


def test_filter_deletes_removed_keys():
    """Test a key missing from the new set is sent with a null value."""
    old = expand_secrets({"A": "1", "GONE": "x"})
    new = expand_secrets({"A": "1"})

    patch = filter_secret_envs_to_patch(old, new)

    assert Secret(key="GONE", value=None) in patch
    assert _as_dict(patch) == {"A": "1", "GONE": None}


def test_filter_never_resubmits_hashed_values():
    """Test hashed placeholders read back from the API are never sent."""
    old = expand_secrets({"A": HASH, "B": HASH})
    new = expand_secrets({"A": HASH, "B": "new-value"})

    patch = filter_secret_envs_to_patch(old, new)

    assert all(not is_hashed_placeholder(secret.value) for secret in patch)
    assert _as_dict(patch) == {"B": "new-value"}


def test_merge_state_secrets_keeps_declared_clear_text():
    remote = [
        SecretHashedValue(key="A", hashed_value=HASH),
        SecretHashedValue(key="IMPORTED", hashed_value=HASH),
    ]

    merged = merge_state_secrets({"A": "clear", "REMOVED": "x"}, remote)

    assert merged == {"A": "clear", "IMPORTED": HASH}
    assert merge_state_secrets({"A": "clear"}, []) is None
