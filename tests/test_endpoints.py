# Tests for the endpoint descriptor table in forge_client/endpoints.py.
# Covers path rendering, registry lookups and the per-endpoint configuration.
import pytest

from forge_client import models as m
from forge_client.endpoints import ENDPOINTS, INTEGRATIONS, Endpoint, ResponseKind, get_endpoint, namespaces
from forge_client.errors import ProgrammerError
from forge_client.schema import EncodeMode, schema_for


class TestEndpointRecord:
    """Tests for a single Endpoint."""

    def test_params_derived_from_template(self):
        """Test that placeholders are read in template order."""
        endpoint = get_endpoint("workers", "restart")
        assert endpoint.params == ("server_id", "site_id", "worker_id")

    def test_render_path(self):
        """Test decimal substitution of IDs."""
        endpoint = get_endpoint("daemons", "get")
        assert endpoint.render_path((42, 7)) == "/servers/42/daemons/7"

    def test_render_path_arity(self):
        """Test that a wrong number of IDs is a programmer error."""
        with pytest.raises(ProgrammerError, match="expects 2"):
            get_endpoint("daemons", "get").render_path((42,))

    def test_render_path_rejects_non_int(self):
        """Test that IDs must be integers."""
        with pytest.raises(ProgrammerError):
            get_endpoint("servers", "get").render_path(("42",))
        with pytest.raises(ProgrammerError):
            get_endpoint("servers", "get").render_path((True,))

    def test_synthetic_must_be_a_placeholder(self):
        """Test that declaring a synthetic source outside the path fails."""
        with pytest.raises(ProgrammerError):
            Endpoint("x", "list", "GET", "/things", response=m.Daemon,
                     kind=ResponseKind.COLLECTION, unwrap_key="things", synthetic=("server_id",))

    def test_synthetic_values(self):
        """Test that only declared placeholders are re-injected."""
        endpoint = get_endpoint("sites", "get")
        assert endpoint.synthetic_values((3, 9)) == {"server_id": 3}


class TestRegistry:
    """Tests for the ENDPOINTS table."""

    def test_unknown_endpoint(self):
        """Test that an unknown pair fails fast."""
        with pytest.raises(ProgrammerError, match="Unknown endpoint"):
            get_endpoint("daemons", "teleport")

    def test_keys_unique(self):
        """Test that no operation was registered twice."""
        assert len(ENDPOINTS) == len({e.key for e in ENDPOINTS.values()})

    def test_every_namespace_present(self):
        """Test that every resource namespace is covered."""
        expected = {
            "servers", "sites", "daemons", "jobs", "databases", "database_users", "certificates",
            "firewall", "monitors", "workers", "webhooks", "ssh_keys", "security_rules",
            "redirect_rules", "backups", "recipes", "credentials", "user", "regions",
            "nginx_templates", "php", "services", "integrations",
        }
        assert expected == set(namespaces())

    def test_synthetic_fields_exist_on_records(self):
        """Test that every re-injected placeholder is a synthetic field of the record."""
        for endpoint in ENDPOINTS.values():
            if endpoint.response is None:
                continue
            synthetic = schema_for(endpoint.response).synthetic
            assert set(endpoint.synthetic) == set(synthetic), endpoint.key

    def test_request_bodies_only_on_writes(self):
        """Test that GET endpoints never declare a request record."""
        for endpoint in ENDPOINTS.values():
            if endpoint.method == "GET":
                assert endpoint.request is None, endpoint.key


class TestConfiguration:
    """Spot checks of the per-endpoint data."""

    @pytest.mark.parametrize("namespace, operation, mode", [
        ("daemons", "create", EncodeMode.PRUNE_NULLS),
        ("firewall", "create", EncodeMode.PRUNE_NULLS),
        ("backups", "update", EncodeMode.PRUNE_NULLS),
        ("recipes", "update", EncodeMode.PRUNE_NULLS),
        ("servers", "update", EncodeMode.KEEP_ALL),
        ("databases", "create", EncodeMode.KEEP_ALL),
        ("certificates", "obtain_letsencrypt", EncodeMode.KEEP_ALL),
    ])
    def test_encode_modes(self, namespace, operation, mode):
        """Test the prune/keep-all assignment."""
        assert get_endpoint(namespace, operation).encode_mode is mode

    @pytest.mark.parametrize("namespace, operation, key", [
        ("firewall", "list", "rules"),
        ("database_users", "list", "users"),
        ("ssh_keys", "get", "key"),
        ("security_rules", "list", "security_rules"),
        ("redirect_rules", "get", "rule"),
        ("backups", "get", "backup"),
        ("php", "list", None),
    ])
    def test_unwrap_keys(self, namespace, operation, key):
        """Test unwrap keys that differ from the namespace name."""
        assert get_endpoint(namespace, operation).unwrap_key == key

    @pytest.mark.parametrize("namespace, operation, key", [
        ("servers", "reconnect", "public_key"),
        ("servers", "log", "content"),
        ("jobs", "output", "output"),
        ("certificates", "signing_request", "csr"),
        ("workers", "output", "output"),
        ("sites", "deployment_output", "output"),
        ("sites", "deployment_script", None),
        ("sites", "deployment_log", None),
        ("sites", "env_file", None),
        ("sites", "nginx_config", None),
    ])
    def test_text_endpoints(self, namespace, operation, key):
        """Test that scalar-string endpoints are declared as text."""
        endpoint = get_endpoint(namespace, operation)
        assert endpoint.kind is ResponseKind.TEXT
        assert endpoint.unwrap_key == key

    def test_service_reboots(self):
        """Test the fixed per-service reboot paths."""
        for service in ("mysql", "nginx", "postgres", "php"):
            endpoint = get_endpoint("services", f"reboot_{service}")
            assert endpoint.method == "POST"
            assert endpoint.render_path((5,)) == f"/servers/5/{service}/reboot"

    def test_integrations(self):
        """Test that every integration has get, enable and disable on one path."""
        for name, slug in INTEGRATIONS.items():
            paths = {get_endpoint("integrations", f"{verb}_{name}").render_path((1, 2))
                     for verb in ("get", "enable", "disable")}
            assert paths == {f"/servers/1/sites/2/integrations/{slug}"}
            assert get_endpoint("integrations", f"disable_{name}").method == "DELETE"

    def test_integration_options(self):
        """Test that only Octane and maintenance mode take an enable body."""
        assert get_endpoint("integrations", "enable_octane").request is m.EnableOctane
        assert get_endpoint("integrations", "enable_maintenance").request is m.EnableMaintenance
        assert get_endpoint("integrations", "enable_horizon").request is None

    @pytest.mark.parametrize("namespace, operation, method, path", [
        ("backups", "restore_backup", "POST", "/servers/1/backup-configurations/2/backups/3"),
        ("backups", "delete_backup", "DELETE", "/servers/1/backup-configurations/2/backups/3"),
        ("sites", "deployment", "GET", "/servers/1/sites/2/deployment-history/3"),
        ("sites", "get_command", "GET", "/servers/1/sites/2/commands/3"),
        ("certificates", "activate", "POST", "/servers/1/sites/2/certificates/3/activate"),
        ("workers", "output", "GET", "/servers/1/sites/2/workers/3/output"),
    ])
    def test_three_id_paths(self, namespace, operation, method, path):
        """Test endpoints addressed by three IDs."""
        endpoint = get_endpoint(namespace, operation)
        assert endpoint.method == method
        assert endpoint.render_path((1, 2, 3)) == path

    def test_site_settings_endpoints(self):
        """Test a sample of the per-site settings endpoints."""
        assert get_endpoint("sites", "aliases").unwrap_key == "aliases"
        assert get_endpoint("sites", "update_load_balancing").request is m.UpdateLoadBalancing
        assert get_endpoint("sites", "update_git_repository").encode_mode is EncodeMode.PRUNE_NULLS
        assert get_endpoint("sites", "install_wordpress").render_path((1, 2)) == "/servers/1/sites/2/wordpress"
        assert get_endpoint("services", "start").request is m.ManageService
