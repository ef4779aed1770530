# Tests for the site-scoped tools in forge_tools/site_tools.py.
import json

import pytest

from forge_client import models as m
from forge_client.endpoints import INTEGRATIONS
from forge_tools.handlers import TOOLS, run_tool

SITE = {"server_id": 1, "site_id": 2}


def run(name, arguments, client):
    return json.loads(run_tool(name, arguments, client))


class TestSites:
    """Site lifecycle and settings."""

    def test_create_site_defaults(self, client, transport, payload):
        """Test that the project type defaults to php and unset fields go out as null."""
        transport.add("POST", "/servers/1/sites", {"site": payload(m.Site, id=9, name="example.com")})
        result = run("create_site", {"server_id": 1, "domain": "example.com", "directory": "/public"}, client)
        body = transport.last["body"]
        assert body["domain"] == "example.com"
        assert body["project_type"] == "php"
        assert body["directory"] == "/public"
        assert body["aliases"] is None
        assert result["site"]["id"] == 9

    def test_create_site_project_type_choices(self, client, transport):
        """Test that an unknown project type never reaches Forge."""
        result = run("create_site", {"server_id": 1, "domain": "a.com", "project_type": "rails"}, client)
        assert result["error"] == "Invalid input"
        assert transport.calls == []

    def test_change_php_version(self, client, transport):
        """Test the PHP switch body."""
        run("change_php_version", dict(SITE, version="php84"), client)
        assert transport.last["method"] == "PUT"
        assert transport.last["path"] == "/servers/1/sites/2/php"
        assert transport.last["body"] == {"version": "php84"}

    def test_list_aliases(self, client, transport):
        """Test that the alias list is unwrapped and counted."""
        transport.add("GET", "/servers/1/sites/2/aliases", {"aliases": ["www.example.com"]})
        assert run("list_aliases", SITE, client) == {
            "success": True, "count": 1, "aliases": ["www.example.com"],
        }

    def test_update_load_balancing(self, client, transport):
        """Test the balancing body with its default method."""
        result = run("update_load_balancing", dict(SITE, servers=[{"id": 12, "weight": 5}]), client)
        assert transport.last["body"] == {"servers": [{"id": 12, "weight": 5}], "method": "round_robin"}
        assert result["message"] == "Load balancing updated (round_robin, 1 server(s))"

    def test_update_load_balancing_needs_ids(self, client, transport):
        """Test that every upstream must name a server."""
        result = run("update_load_balancing", dict(SITE, servers=[{"weight": 5}]), client)
        assert result == {"success": False, "error": "Every server needs an integer id"}
        assert transport.calls == []

    def test_install_wordpress_prunes_password(self, client, transport):
        """Test that a left-out password is not sent."""
        run("install_wordpress", dict(SITE, database="wp", user="wp"), client)
        assert transport.last["body"] == {"database": "wp", "user": "wp"}

    def test_get_site_log(self, client, transport):
        """Test that the log answer is passed through."""
        transport.add("GET", "/servers/1/sites/2/log", {"content": "[error] boom"})
        assert run("get_site_log", SITE, client)["log"] == {"content": "[error] boom"}


class TestDeployments:
    """Deployment tools."""

    def test_deploy_site(self, client, transport):
        """Test the deploy trigger."""
        result = run("deploy_site", SITE, client)
        assert transport.last["path"] == "/servers/1/sites/2/deployment/deploy"
        assert result["success"] is True

    def test_deployment_history(self, client, transport, payload):
        """Test that deployments carry both parent IDs."""
        transport.add("GET", "/servers/1/sites/2/deployment-history", {"deployments": [
            payload(m.Deployment, id=9, status="finished"),
        ]})
        result = run("list_deployment_history", SITE, client)
        assert result["count"] == 1
        assert result["deployments"][0]["site_id"] == 2

    def test_deployment_output(self, client, transport):
        """Test the output of one past deployment."""
        transport.add("GET", "/servers/1/sites/2/deployment-history/9/output", {"output": "Done."})
        assert run("get_deployment_output", dict(SITE, deployment_id=9), client)["output"] == "Done."

    def test_deployment_script_is_plain_text(self, client, transport):
        """Test that the script body is returned as is."""
        transport.add("GET", "/servers/1/sites/2/deployment/script", "cd /home/forge/example.com\ngit pull")
        assert run("get_deployment_script", SITE, client)["script"] == "cd /home/forge/example.com\ngit pull"

    def test_empty_deployment_log(self, client, transport):
        """Test that no log yet is reported as null."""
        assert run("get_deployment_log", SITE, client)["log"] is None

    def test_update_deployment_script(self, client, transport):
        """Test that the whole script is sent as content."""
        run("update_deployment_script", dict(SITE, content="git pull"), client)
        assert transport.last["method"] == "PUT"
        assert transport.last["body"] == {"content": "git pull"}

    def test_failure_emails(self, client, transport):
        """Test the failure email body."""
        result = run("set_deployment_failure_emails", dict(SITE, emails=["ops@example.com"]), client)
        assert transport.last["body"] == {"emails": ["ops@example.com"]}
        assert result["message"] == "1 failure email address(es) set"


class TestGit:
    """Repository tools."""

    def test_install_git_repository(self, client, transport):
        """Test the keep-all install body."""
        run("install_git_repository", dict(SITE, provider="github", repository="acme/app", branch="main"), client)
        assert transport.last["body"] == {"provider": "github", "repository": "acme/app", "branch": "main",
                                          "composer": None}

    def test_update_git_repository_needs_a_field(self, client, transport):
        """Test that an update with nothing to change is refused."""
        result = run("update_git_repository", SITE, client)
        assert result == {"success": False, "error": "Give at least one of provider, repository or branch"}
        assert transport.calls == []

    def test_update_git_repository_prunes(self, client, transport):
        """Test that only the given fields are sent."""
        run("update_git_repository", dict(SITE, branch="develop"), client)
        assert transport.last["body"] == {"branch": "develop"}

    def test_create_deploy_key(self, client, transport):
        """Test that the generated key is passed on."""
        transport.add("POST", "/servers/1/sites/2/deploy-key", {"key": "ssh-ed25519 AAAA"})
        assert run("create_deploy_key", SITE, client)["deploy_key"] == {"key": "ssh-ed25519 AAAA"}


class TestCommandsAndFiles:
    """Site commands and whole-file config tools."""

    def test_execute_site_command(self, client, transport, payload):
        """Test that the queued command is returned with its IDs."""
        transport.add("POST", "/servers/1/sites/2/commands", {"command": payload(
            m.SiteCommand, id=5, command="php artisan cache:clear")})
        result = run("execute_site_command", dict(SITE, command="php artisan cache:clear"), client)
        assert transport.last["body"] == {"command": "php artisan cache:clear"}
        assert result["command"]["id"] == 5
        assert result["command"]["server_id"] == 1

    def test_env_file_round_trip(self, client, transport):
        """Test reading and replacing the .env file."""
        transport.add("GET", "/servers/1/sites/2/env", "APP_ENV=production\n")
        assert run("get_env_file", SITE, client)["content"] == "APP_ENV=production\n"
        run("update_env_file", dict(SITE, content="APP_ENV=staging\n"), client)
        assert transport.last["path"] == "/servers/1/sites/2/env"
        assert transport.last["body"] == {"content": "APP_ENV=staging\n"}

    def test_nginx_config(self, client, transport):
        """Test the Nginx config read."""
        transport.add("GET", "/servers/1/sites/2/nginx", "server {}")
        assert run("get_nginx_config", SITE, client)["content"] == "server {}"


class TestCertificatesAndWorkers:
    """Certificate and queue worker tools."""

    def test_obtain_certificate(self, client, transport, payload):
        """Test the Let's Encrypt request body."""
        transport.add("POST", "/servers/1/sites/2/certificates/letsencrypt",
                      {"certificate": payload(m.Certificate, id=9, domain="example.com")})
        result = run("obtain_letsencrypt_certificate", dict(SITE, domains=["example.com"]), client)
        assert transport.last["body"] == {"domains": ["example.com"]}
        assert result["certificate"]["site_id"] == 2

    def test_obtain_certificate_needs_a_domain(self, client, transport):
        """Test that an empty domain list is rejected."""
        assert run("obtain_letsencrypt_certificate", dict(SITE, domains=[]), client)["error"] == "Invalid input"

    def test_signing_request(self, client, transport):
        """Test that the CSR is unwrapped."""
        transport.add("GET", "/servers/1/sites/2/certificates/4/csr", {"csr": "-----BEGIN CERTIFICATE REQUEST-----"})
        assert run("get_certificate_signing_request", dict(SITE, certificate_id=4), client)["csr"].startswith("-----")

    def test_activate_certificate(self, client, transport):
        """Test the activation path."""
        run("activate_certificate", dict(SITE, certificate_id=4), client)
        assert transport.last["path"] == "/servers/1/sites/2/certificates/4/activate"

    def test_create_worker(self, client, transport, payload):
        """Test that unset worker options are pruned."""
        transport.add("POST", "/servers/1/sites/2/workers", {"worker": payload(m.Worker, id=3)})
        run("create_worker", dict(SITE, connection="redis", tries=3), client)
        assert transport.last["body"] == {"connection": "redis", "queue": "default", "tries": 3}

    def test_worker_output(self, client, transport):
        """Test the worker output path."""
        transport.add("GET", "/servers/1/sites/2/workers/3/output", {"output": "Processing"})
        assert run("get_worker_output", dict(SITE, worker_id=3), client)["output"] == "Processing"


class TestRules:
    """Webhooks, security rules and redirect rules."""

    def test_create_redirect_rule(self, client, transport, payload):
        """Test that the rule body uses the "from" wire key."""
        transport.add("POST", "/servers/1/sites/2/redirect-rules",
                      {"rule": payload(m.RedirectRule, id=4, **{"from": "/old"})})
        result = run("create_redirect_rule", dict(SITE, from_path="/old", to_url="/new", type="permanent"), client)
        assert transport.last["body"] == {"from": "/old", "to": "/new", "type": "permanent"}
        assert result["rule"]["from"] == "/old"

    def test_create_security_rule(self, client, transport, payload):
        """Test the basic-auth rule body."""
        transport.add("POST", "/servers/1/sites/2/security-rules", {"rule": payload(m.SecurityRule, id=6)})
        credentials = [{"username": "admin", "password": "secret"}]
        run("create_security_rule", dict(SITE, name="admin area", path="/admin", credentials=credentials), client)
        assert transport.last["body"] == {"name": "admin area", "path": "/admin", "credentials": credentials}

    def test_create_webhook(self, client, transport, payload):
        """Test the webhook body."""
        transport.add("POST", "/servers/1/sites/2/webhooks", {"webhook": payload(m.Webhook, id=3)})
        run("create_webhook", dict(SITE, url="https://example.com/hook"), client)
        assert transport.last["body"] == {"url": "https://example.com/hook"}


class TestIntegrations:
    """Laravel integration toggles."""

    @pytest.mark.parametrize("name,slug", sorted(INTEGRATIONS.items()))
    def test_get_and_disable(self, client, transport, name, slug):
        """Test that every integration has a status and a disable tool on its own path."""
        transport.add("GET", f"/servers/1/sites/2/integrations/{slug}", {"enabled": True})
        assert run(f"get_{name}", SITE, client) == {"success": True, "integration": name,
                                                     "status": {"enabled": True}}
        run(f"disable_{name}", SITE, client)
        assert transport.last["method"] == "DELETE"
        assert transport.last["path"] == f"/servers/1/sites/2/integrations/{slug}"

    def test_plain_enable_has_no_body(self, client, transport):
        """Test an integration enabled without options."""
        run("enable_scheduler", SITE, client)
        assert transport.last["path"] == "/servers/1/sites/2/integrations/laravel-scheduler"
        assert transport.last["body"] is None

    def test_enable_tools(self):
        """Test that every integration can be enabled."""
        assert {f"enable_{name}" for name in INTEGRATIONS} <= set(TOOLS)

    def test_octane_defaults(self, client, transport):
        """Test that Octane starts with swoole and automatic workers."""
        result = run("enable_octane", SITE, client)
        assert transport.last["body"] == {"server": "swoole", "workers": "auto"}
        assert result["message"] == "Octane enabled (swoole, workers=auto)"

    def test_octane_numeric_workers(self, client, transport):
        """Test that a numeric worker count is sent as a number."""
        run("enable_octane", dict(SITE, server="frankenphp", workers="8"), client)
        assert transport.last["body"] == {"server": "frankenphp", "workers": 8}

    @pytest.mark.parametrize("workers", ["many", "0", "-2"])
    def test_octane_bad_workers(self, client, transport, workers):
        """Test that the worker count must be "auto" or a positive number."""
        result = run("enable_octane", dict(SITE, workers=workers), client)
        assert result == {"success": False, "error": 'workers must be "auto" or a positive number'}
        assert transport.calls == []

    def test_maintenance_options(self, client, transport):
        """Test that maintenance options are sent only when given."""
        run("enable_maintenance", dict(SITE, secret="let-me-in"), client)
        assert transport.last["path"] == "/servers/1/sites/2/integrations/laravel-maintenance"
        assert transport.last["body"] == {"secret": "let-me-in"}
