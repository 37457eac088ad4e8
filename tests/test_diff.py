"""Tests for change tracking between previous and new arguments."""

from scwprovider.diff import ChangeSet
from scwprovider.resources import ContainerArgs, DocumentDBPrivateNetworkEndpointArgs


def test_changeset_between_mappings():
    """Test changed fields are detected and unchanged ones are not."""
    changes = ChangeSet.between({"a": 1, "b": "x"}, {"a": 2, "b": "x"})

    assert changes.has_change("a")
    assert not changes.has_change("b")
    assert changes.changed == ["a"]
    assert changes.get_change("a") == (1, 2)
    assert bool(changes)


def test_changeset_on_create_counts_set_fields():
    """Test that with no previous state every set field counts as changed."""
    changes = ChangeSet.between(None, {"a": 1, "b": None})

    assert changes.changed == ["a"]


def test_changeset_restricted_fields():
    """Test only the requested fields are compared."""
    changes = ChangeSet.between({"a": 1, "b": 1}, {"a": 2, "b": 2}, fields=["b"])

    assert changes.changed == ["b"]
    assert not changes.has_change("a")
    assert changes.get_change("a") == (None, None)
    assert len(changes) == 1


def test_changeset_no_change_is_falsy():
    changes = ChangeSet.between({"a": 1}, {"a": 1})

    assert not changes
    assert repr(changes) == "ChangeSet(changed=[])"


def test_resource_changes_ignore_computed_outputs():
    """Test computed outputs stored next to inputs never show up as changes."""
    old = {"namespace_id": "fr-par/ns", "name": "app", "status": "ready", "domain_name": "x"}
    new = {"namespace_id": "fr-par/ns", "name": "app"}

    assert not ContainerArgs.changes(old, new)


def test_resource_changes_inherit_optional_computed_fields():
    """Test unset optional-computed inputs keep the value the API filled in."""
    old = {"namespace_id": "ns", "name": "app", "memory_limit": 256, "min_scale": 0}
    new = {"namespace_id": "ns", "name": "app"}

    changes = ContainerArgs.changes(old, new)

    assert not changes.has_change("memory_limit", "min_scale")


def test_resource_changes_explicit_value_overrides_computed():
    old = {"namespace_id": "ns", "name": "app", "memory_limit": 256}
    new = {"namespace_id": "ns", "name": "app", "memory_limit": 512}

    changes = ContainerArgs.changes(old, new)

    assert changes.changed == ["memory_limit"]
    assert changes.get_change("memory_limit") == (256, 512)


def test_resource_changes_inherit_nested_computed_fields():
    """Test dotted optional-computed paths reach into nested blocks."""
    old = {
        "instance_id": "fr-par/i",
        "private_network": {
            "id": "fr-par/pn",
            "ip_net": "10.0.0.2/24",
            "port": 27017,
            "hostname": "db.internal",
        },
    }
    new = {"instance_id": "fr-par/i", "private_network": {"id": "fr-par/pn"}}

    assert not DocumentDBPrivateNetworkEndpointArgs.changes(old, new)
