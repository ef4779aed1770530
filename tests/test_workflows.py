# Tests for the markdown playbooks in forge_tools/workflows.py.
import re

import pytest

from forge_tools import workflows
from forge_tools.handlers import TOOLS

BUILDERS = (
    lambda: workflows.deploy_application("1", "2"),
    workflows.troubleshoot_deployment,
    workflows.deploy_laravel_app,
    workflows.migrate_site,
    workflows.ssl_renewal,
    workflows.setup_laravel_site,
    workflows.setup_new_server,
)

# Names that look like tools in the playbooks but are arguments or fields.
NOT_TOOLS = {
    "server_id", "site_id", "is_ready", "expires_at", "project_type", "php_version",
    "database_type", "used_memory", "cpu_load", "database_name", "troubleshoot_deployment",
}


class TestToolReferences:
    """Every tool a playbook tells the agent to call must exist."""

    @pytest.mark.parametrize("build", BUILDERS)
    def test_named_tools_exist(self, build):
        """Test that snake_case verbs in the text are registered tools."""
        text = build()
        verbs = ("list", "get", "create", "update", "delete", "deploy", "enable", "obtain", "activate",
                 "install", "restart", "reset", "set", "clone", "server", "ssl")
        names = set(re.findall(r"\b(?:%s)_[a-z_]+\b" % "|".join(verbs), text)) - NOT_TOOLS
        assert names
        assert names <= set(TOOLS), names - set(TOOLS)


class TestDeployApplication:

    def test_ids_in_steps(self):
        """Test that the IDs are filled into the steps."""
        text = workflows.deploy_application("12", "34")
        assert "server_id=12 and site_id=34" in text

    def test_migrations_toggle(self):
        """Test the migration line both ways."""
        assert "Database migrations run" in workflows.deploy_application("1", "2")
        assert "will NOT run" in workflows.deploy_application("1", "2", run_migrations=False)


class TestTroubleshootDeployment:

    def test_discovery_step_without_ids(self):
        """Test that missing IDs start with finding the deployment."""
        text = workflows.troubleshoot_deployment()
        assert "## Step 1: Identify the failed deployment" in text
        assert "Target:" not in text

    def test_target_with_ids(self):
        """Test that known IDs skip the discovery step."""
        text = workflows.troubleshoot_deployment("5", "6")
        assert "Target: server 5, site 6." in text
        assert "## Step 1" not in text

    def test_error_type(self):
        """Test that a reported error type is echoed."""
        text = workflows.troubleshoot_deployment("5", "6", error_type="composer")
        assert "error of type: composer" in text
        assert "error of type" not in workflows.troubleshoot_deployment("5", "6")


class TestDeployLaravelApp:

    def test_named_server_and_site(self):
        """Test that given names replace the questions."""
        text = workflows.deploy_laravel_app("web-1", "example.com")
        assert 'Find the server "web-1"' in text
        assert 'Find the site "example.com"' in text

    def test_show_logs(self):
        """Test the closing log line."""
        assert "Show the deployment log" in workflows.deploy_laravel_app()
        assert "Show the deployment log" not in workflows.deploy_laravel_app(show_logs=False)


class TestMigrateSite:

    def test_database_section(self):
        """Test that the database steps follow include_database."""
        assert "## Database" in workflows.migrate_site()
        assert "## Database" not in workflows.migrate_site(include_database=False)

    def test_known_servers_and_site(self):
        """Test that the identify sections drop out when everything is known."""
        text = workflows.migrate_site("1", "2", "example.com")
        assert "## Identify the servers" not in text
        assert "## Identify the site" not in text

    def test_mentions_clone_site(self):
        """Test that the playbook points at the one-call clone."""
        assert "clone_site" in workflows.migrate_site()


class TestSslRenewal:

    def test_custom_certificate_section(self):
        """Test that only a custom certificate gets the CSR steps."""
        assert "## Custom certificate" in workflows.ssl_renewal(certificate_type="custom")
        assert "## Custom certificate" not in workflows.ssl_renewal()

    def test_target(self):
        """Test that known IDs replace the search."""
        text = workflows.ssl_renewal("3", "4")
        assert "Target: server 3, site 4." in text
        assert "## Find the certificate" not in text


class TestSetupLaravelSite:

    def test_defaults(self):
        """Test scheduler on and a queue worker instead of Horizon."""
        text = workflows.setup_laravel_site()
        assert "## Scheduler" in text
        assert "## Queue worker" in text
        assert "## Horizon" not in text
        assert "## Choose a server" in text

    def test_horizon_without_scheduler(self):
        """Test the Horizon and scheduler toggles."""
        text = workflows.setup_laravel_site("1", with_horizon=True, with_scheduler=False)
        assert "## Horizon" in text
        assert "## Queue worker" not in text
        assert "## Scheduler" not in text
        assert "## Choose a server" not in text

    def test_domain_in_cron(self):
        """Test that the domain fills the schedule:run path."""
        text = workflows.setup_laravel_site(domain="example.com", repository="acme/app")
        assert "/home/forge/example.com/artisan schedule:run" in text
        assert "repository=acme/app" in text


class TestSetupNewServer:

    def test_summary_lines(self):
        """Test the closing summary of the chosen options."""
        text = workflows.setup_new_server("ocean2", "ams3", server_type="web", php_version="php83",
                                          database="postgres")
        assert "Server type: web" in text
        assert "PHP version: php83" in text
        assert "Database: postgres" in text
        assert "## Choose a provider" not in text
        assert "## Choose a region" not in text

    def test_discovery_sections(self):
        """Test that missing provider and region add the discovery steps."""
        text = workflows.setup_new_server()
        assert "## Choose a provider" in text
        assert "## Choose a region" in text
        assert "Server type: app" in text
