# Tests for the decode/encode engine in forge_client/schema.py.
# Covers field classification, coercion, synthetic overlay and both encode modes.
import pytest

from forge_client import models as m
from forge_client.errors import DecodeError, ProgrammerError
from forge_client.models import RESOURCES, resource_schema
from forge_client.schema import UNSET, EncodeMode, decode, encode, schema_for

DAEMON_PAYLOAD = {
    "id": 7,
    "server_id": 42,
    "command": "php worker",
    "user": "forge",
    "status": "running",
    "directory": "/home/forge",
    "created_at": "2024-01-01T00:00:00Z",
}


class TestSchemaFor:
    """Tests for field table construction."""

    def test_required_optional_synthetic_sets(self):
        """Test that a nested resource splits its fields correctly."""
        schema = schema_for(m.Daemon)
        assert "id" in schema.required
        assert "server_id" in schema.required
        assert "server_id" in schema.synthetic
        assert "command" in schema.required
        assert "processes" in schema.optional
        assert "startsecs" in schema.optional

    def test_user_email_is_required(self):
        """Test that account fields without defaults are required."""
        assert {"id", "name", "email"} <= schema_for(m.User).required

    def test_wire_override(self):
        """Test that a Python keyword field maps to its wire key."""
        schema = schema_for(m.RedirectRule)
        assert schema.wire_name("from_") == "from"
        assert schema.wire_name("to") == "to"

    def test_schema_is_memoized(self):
        """Test that the same schema object is returned twice."""
        assert schema_for(m.Site) is schema_for(m.Site)

    def test_non_dataclass_rejected(self):
        """Test that a plain class is a programmer error."""
        with pytest.raises(ProgrammerError):
            schema_for(dict)

    def test_resource_schema_lookup(self):
        """Test lookup by resource name."""
        assert resource_schema("FirewallRule").record is m.FirewallRule

    def test_resource_schema_unknown(self):
        """Test that an unknown resource name fails fast."""
        with pytest.raises(ProgrammerError, match="Unknown resource"):
            resource_schema("Spaceship")

    def test_every_registered_resource_builds(self):
        """Test that every response record has a valid field table."""
        for name in RESOURCES:
            assert resource_schema(name).resource == name


class TestDecode:
    """Tests for decode()."""

    def test_decodes_full_payload(self):
        """Test a plain decode with every field present."""
        daemon = decode(m.Daemon, DAEMON_PAYLOAD)
        assert daemon.id == 7
        assert daemon.server_id == 42
        assert daemon.directory == "/home/forge"

    def test_missing_required_field(self):
        """Test that a missing required field names resource and field."""
        payload = {"id": 1, "name": "Taylor"}
        with pytest.raises(DecodeError) as info:
            decode(m.User, payload)
        assert info.value.resource == "User"
        assert info.value.field == "email"
        assert info.value.received is None

    def test_null_required_field(self):
        """Test that null in a required field reports the null type."""
        with pytest.raises(DecodeError) as info:
            decode(m.User, {"id": 1, "name": "Taylor", "email": None})
        assert info.value.received == "null"

    def test_optional_absent_and_null_use_defaults(self, payload):
        """Test that optional fields fall back to their declared default."""
        rule = decode(m.FirewallRule, payload(m.FirewallRule, ip_address=None), {"server_id": 10})
        assert rule.ip_address is None
        site = decode(m.Site, payload(m.Site, aliases=None), {"server_id": 1})
        assert site.aliases == []
        assert site.tags == []
        assert site.repository is None

    def test_list_defaults_are_fresh(self, payload):
        """Test that two decodes do not share the same default list."""
        first = decode(m.Site, payload(m.Site, id=1), {"server_id": 1})
        second = decode(m.Site, payload(m.Site, id=2), {"server_id": 1})
        assert first.aliases is not second.aliases

    def test_unknown_keys_ignored(self):
        """Test that additive upstream fields are dropped silently."""
        payload = dict(DAEMON_PAYLOAD, brand_new_field={"x": 1})
        assert decode(m.Daemon, payload).id == 7

    def test_synthetic_overrides_payload(self):
        """Test that the URL value wins over a same-named wire key."""
        daemon = decode(m.Daemon, dict(DAEMON_PAYLOAD, server_id=999), {"server_id": 42})
        assert daemon.server_id == 42

    def test_synthetic_fills_missing_parent(self):
        """Test that a list item without server_id gets it from context."""
        payload = {"id": 1, "name": "ssh", "port": 22, "status": "active", "created_at": "x"}
        assert decode(m.FirewallRule, payload, {"server_id": 10}).server_id == 10

    def test_missing_synthetic_is_an_error(self):
        """Test that a nested record without parent context cannot decode."""
        with pytest.raises(DecodeError) as info:
            decode(m.FirewallRule, {"id": 1})
        assert info.value.field == "server_id"

    def test_input_not_mutated(self, payload):
        """Test that the caller's payload is left untouched."""
        raw = payload(m.FirewallRule)
        snapshot = dict(raw)
        decode(m.FirewallRule, raw, {"server_id": 10})
        assert raw == snapshot

    def test_int_coercion(self):
        """Test that integral strings decode as ints and bools do not."""
        assert decode(m.Recipe, {"id": "12", "name": "r", "user": "root", "created_at": "x"}).id == 12
        with pytest.raises(DecodeError) as info:
            decode(m.Recipe, {"id": True, "name": "r", "user": "root", "created_at": "x"})
        assert info.value.received == "boolean"

    def test_string_from_number(self):
        """Test that numbers are rendered as text for string fields."""
        region = decode(m.Region, {"id": "nyc1", "name": 42, "sizes": []})
        assert region.name == "42"

    def test_bool_from_zero_one(self, payload):
        """Test that 0/1 decode as booleans."""
        server = decode(m.Server, payload(m.Server, is_ready=1, revoked=0))
        assert server.is_ready is True
        assert server.revoked is False

    def test_type_mismatch_names_json_type(self):
        """Test that a wrong type reports the JSON type received."""
        with pytest.raises(DecodeError) as info:
            decode(m.Credential, {"id": 1, "name": ["a"], "type": "ocean2"})
        assert info.value.field == "name"
        assert info.value.received == "array"

    def test_list_item_type_checked(self, payload):
        """Test that array-of-int items are validated one by one."""
        with pytest.raises(DecodeError) as info:
            decode(m.DatabaseUser, payload(m.DatabaseUser, databases=[1, "two"]), {"server_id": 1})
        assert info.value.received == "string"

    def test_payload_must_be_object(self):
        """Test that a non-object payload is rejected."""
        with pytest.raises(DecodeError) as info:
            decode(m.User, ["not", "an", "object"])
        assert info.value.received == "array"

    def test_any_field_passthrough(self):
        """Test that loosely typed fields keep whatever upstream sends."""
        region = decode(m.Region, {"id": "nyc1", "name": "New York 1", "sizes": [{"id": "s-1vcpu-1gb"}]})
        assert region.sizes == [{"id": "s-1vcpu-1gb"}]

    def test_redirect_rule_from_key(self, payload):
        """Test decoding of the "from" wire key."""
        rule = decode(m.RedirectRule, payload(m.RedirectRule, **{"from": "/old", "to": "/new"}),
                      {"server_id": 1, "site_id": 2})
        assert rule.from_ == "/old"


class TestEncode:
    """Tests for encode()."""

    def test_prune_omits_unset(self):
        """Test that unset optionals are absent under prune-nulls."""
        request = m.CreateDaemon(command="php worker", directory="/home/forge")
        assert encode(request, EncodeMode.PRUNE_NULLS) == {
            "command": "php worker",
            "directory": "/home/forge",
            "user": "forge",
        }

    def test_keep_all_sends_null(self):
        """Test that unset optionals are null under keep-all."""
        request = m.CreateDaemon(command="php worker", directory="/home/forge")
        body = encode(request, EncodeMode.KEEP_ALL)
        assert body["processes"] is None
        assert body["startsecs"] is None
        assert list(body) == ["command", "directory", "user", "processes", "startsecs"]

    def test_prune_omits_explicit_none(self):
        """Test that an explicit None is also dropped under prune-nulls."""
        request = m.CreateFirewallRule(name="redis", port=6379, ip_address=None)
        assert "ip_address" not in encode(request)

    def test_wire_names_used(self):
        """Test that the body carries wire names, not attribute names."""
        body = encode(m.CreateRedirectRule(from_="/a", to="/b"))
        assert body == {"from": "/a", "to": "/b"}

    def test_lists_passed_through(self):
        """Test that list fields stay lists and tuples become lists."""
        assert encode(m.RunRecipe(servers=(1, 2))) == {"servers": [1, 2]}
        assert encode(m.CreateDatabaseUser(name="u", password="p", databases=[3]))["databases"] == [3]

    def test_unset_is_falsy_singleton(self):
        """Test the sentinel's identity and truthiness."""
        assert not UNSET
        assert repr(UNSET) == "UNSET"
        assert m.CreateSite(domain="a.com").aliases is UNSET


# (resource, wire key) for every required field of every response record.
REQUIRED_FIELDS = [
    (name, spec.wire)
    for name, record in RESOURCES.items()
    for spec in schema_for(record).fields
    if spec.required
]


class TestRequiredFields:
    """Every response record rejects a payload without one of its required fields."""

    @pytest.mark.parametrize("name", sorted(RESOURCES))
    def test_complete_payload_decodes(self, name, payload):
        """Test that a payload with just the required fields decodes."""
        record = RESOURCES[name]
        assert isinstance(decode(record, payload(record)), record)

    @pytest.mark.parametrize("name,wire", REQUIRED_FIELDS)
    def test_missing_field(self, name, wire, payload):
        """Test that dropping one required field names that field."""
        raw = payload(RESOURCES[name])
        del raw[wire]
        with pytest.raises(DecodeError) as info:
            decode(RESOURCES[name], raw)
        assert info.value.resource == name
        assert info.value.field == wire
        assert info.value.received is None

    @pytest.mark.parametrize("name,wire", REQUIRED_FIELDS)
    def test_null_field(self, name, wire, payload):
        """Test that a null required field is reported as null."""
        with pytest.raises(DecodeError) as info:
            decode(RESOURCES[name], payload(RESOURCES[name], **{wire: None}))
        assert info.value.field == wire
        assert info.value.received == "null"

    def test_site_requires_its_core_fields(self):
        """Test the fields Forge always sends for a site."""
        assert {"name", "directory", "status", "project_type", "is_secured", "created_at"} <= \
            schema_for(m.Site).required
        assert "repository" in schema_for(m.Site).optional


class TestRoundTrip:
    """Decode → encode → decode stability."""

    @pytest.mark.parametrize("name", sorted(RESOURCES))
    def test_response_record_round_trip(self, name, payload):
        """Test that re-encoding a decoded record decodes to an equal record."""
        record = RESOURCES[name]
        first = decode(record, payload(record))
        body = encode(first, EncodeMode.KEEP_ALL)
        assert decode(record, body) == first

    def test_keep_all_writes_every_wire_key(self, payload):
        """Test that optionals come back as null and keyword fields under their wire name."""
        rule = decode(m.RedirectRule, payload(m.RedirectRule, **{"from": "/a"}))
        body = encode(rule, EncodeMode.KEEP_ALL)
        assert body["from"] == "/a"
        assert "from_" not in body

    def test_nginx_template_request_round_trip(self):
        """Test that a create body built from a decoded template decodes to the same record."""
        first = decode(m.NginxTemplate, {"id": 4, "name": "laravel", "content": "server {}"}, {"server_id": 9})
        body = encode(m.CreateNginxTemplate(name=first.name, content=first.content))
        second = decode(m.NginxTemplate, dict(body, id=first.id), {"server_id": 9})
        assert second == first
