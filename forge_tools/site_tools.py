# =============================================================================
# forge_tools/site_tools.py  —  Site-level Tools
# =============================================================================
#
# Everything that hangs off a site on a server:
#
#   sites, deployments, git, one-off commands, config files (.env, Nginx),
#   certificates, queue workers, webhooks, security/redirect rules and the
#   Laravel integrations (Horizon, Octane, Reverb, Pulse, Inertia,
#   maintenance mode, the scheduler)
#
# Config-file tools move whole files: get_* returns the full text and
# update_* replaces it.  Always read before you write.
# =============================================================================

from forge_client import models as m
from forge_client.endpoints import INTEGRATIONS
from forge_tools.handlers import (
    SERVER_ID,
    SITE_FIELDS,
    SITE_ID,
    ToolInputError,
    id_param,
    optional,
    to_wire,
    tool,
)
from forge_tools.validation import Param

DEPLOYMENT_ID = id_param("deployment_id", "deployment")
COMMAND_ID = id_param("command_id", "command")
CERTIFICATE_ID = id_param("certificate_id", "certificate")
WORKER_ID = id_param("worker_id", "worker")
WEBHOOK_ID = id_param("webhook_id", "webhook")
RULE_ID = id_param("rule_id", "rule")

_CONTENT = Param("content", "string", description="The complete new file content")


def _ids(values: dict) -> tuple:
    return values["server_id"], values["site_id"]


# =============================================================================
# Sites
# =============================================================================
@tool("list_sites", "List the sites installed on a server.", SERVER_ID)
def list_sites(client, values):
    sites = client.call("sites", "list", values["server_id"])
    return {"count": len(sites), "sites": to_wire(sites, SITE_FIELDS)}


@tool("get_site", "Get the details of one site.", SERVER_ID, SITE_ID)
def get_site(client, values):
    return {"site": to_wire(client.call("sites", "get", *_ids(values)))}


@tool(
    "create_site",
    "Create a site (an Nginx virtual host) on a server.",
    SERVER_ID,
    Param("domain", "string", max_length=255, description='The site domain (e.g. "example.com")'),
    Param("project_type", "string", required=False, default="php",
          choices=("php", "html", "symfony", "symfony_dev", "symfony_four"),
          description='Project type (defaults to "php", which covers Laravel)'),
    Param("aliases", "array", required=False, items="string", description="Additional domains"),
    Param("directory", "string", required=False, description='Web directory (e.g. "/public")'),
    Param("isolated", "boolean", required=False, description="Run the site as its own Unix user"),
    Param("username", "string", required=False, description="The isolated user name"),
    Param("database", "string", required=False, description="Create a database with this name"),
    Param("php_version", "string", required=False, description='PHP version (e.g. "php83")'),
    Param("nginx_template", "integer", required=False, minimum=1, description="Nginx template ID to use"),
    read_only=False,
)
def create_site(client, values):
    request = m.CreateSite(
        domain=values["domain"],
        project_type=values["project_type"],
        **{name: optional(values, name) for name in
           ("aliases", "directory", "isolated", "username", "database", "php_version", "nginx_template")},
    )
    site = client.call("sites", "create", values["server_id"], request=request)
    return {"message": "Site created", "site": to_wire(site, SITE_FIELDS)}


@tool(
    "update_site",
    "Change a site's domain, web directory, PHP version or aliases.",
    SERVER_ID,
    SITE_ID,
    Param("name", "string", required=False, max_length=255, description="The new domain"),
    Param("directory", "string", required=False, description="The new web directory"),
    Param("php_version", "string", required=False, description="The new PHP version"),
    Param("aliases", "array", required=False, items="string", description="The complete alias list"),
    Param("wildcards", "boolean", required=False, description="Answer for every subdomain"),
    Param("isolated", "boolean", required=False, description="Run the site as its own Unix user"),
    read_only=False,
)
def update_site(client, values):
    request = m.UpdateSite(**{name: optional(values, name) for name in
                              ("directory", "name", "php_version", "aliases", "wildcards", "isolated")})
    site = client.call("sites", "update", *_ids(values), request=request)
    return {"message": "Site updated", "site": to_wire(site, SITE_FIELDS)}


@tool("delete_site", "Delete a site and its files. This cannot be undone.", SERVER_ID, SITE_ID, read_only=False)
def delete_site(client, values):
    client.call("sites", "delete", *_ids(values))
    return {"message": f"Site {values['site_id']} deleted"}


@tool("change_php_version", "Switch the PHP version a site runs on.", SERVER_ID, SITE_ID,
      Param("version", "string", description='The PHP version (e.g. "php83")'), read_only=False)
def change_php_version(client, values):
    client.call("sites", "change_php_version", *_ids(values), request=m.ChangePhpVersion(version=values["version"]))
    return {"message": f"Site {values['site_id']} now runs {values['version']}"}


@tool("get_site_log", "Get the application log of a site.", SERVER_ID, SITE_ID)
def get_site_log(client, values):
    return {"log": client.call("sites", "log", *_ids(values))}


@tool("clear_site_log", "Empty the application log of a site.", SERVER_ID, SITE_ID, read_only=False)
def clear_site_log(client, values):
    client.call("sites", "clear_log", *_ids(values))
    return {"message": "Site log cleared"}


@tool("list_aliases", "List the alias domains of a site.", SERVER_ID, SITE_ID)
def list_aliases(client, values):
    aliases = client.call("sites", "aliases", *_ids(values)) or []
    return {"count": len(aliases), "aliases": aliases}


@tool("update_aliases", "Replace the alias domains of a site.", SERVER_ID, SITE_ID,
      Param("aliases", "array", items="string", description="The complete alias list"), read_only=False)
def update_aliases(client, values):
    client.call("sites", "update_aliases", *_ids(values), request=m.UpdateAliases(aliases=list(values["aliases"])))
    return {"message": "Aliases updated", "aliases": values["aliases"]}


@tool("get_load_balancing", "Get the load-balancing setup of a load-balancer site.", SERVER_ID, SITE_ID)
def get_load_balancing(client, values):
    return {"balancing": client.call("sites", "load_balancing", *_ids(values))}


@tool(
    "update_load_balancing",
    "Set the servers a load-balancer site forwards to.",
    SERVER_ID,
    SITE_ID,
    Param("servers", "array", items="object", min_items=1,
          description='Upstream servers: [{"id": 12, "weight": 5}, ...]'),
    Param("method", "string", required=False, default="round_robin",
          choices=("round_robin", "least_connections", "ip_hash"), description="Balancing method"),
    read_only=False,
)
def update_load_balancing(client, values):
    for upstream in values["servers"]:
        if not isinstance(upstream.get("id"), int) or isinstance(upstream.get("id"), bool):
            raise ToolInputError("Every server needs an integer id")
    request = m.UpdateLoadBalancing(servers=list(values["servers"]), method=values["method"])
    client.call("sites", "update_load_balancing", *_ids(values), request=request)
    return {"message": f"Load balancing updated ({values['method']}, {len(values['servers'])} server(s))"}


@tool(
    "install_wordpress",
    "Install WordPress on a site.",
    SERVER_ID,
    SITE_ID,
    Param("database", "string", description="The database WordPress uses"),
    Param("user", "string", description="The database user WordPress connects as"),
    Param("password", "string", required=False, description="The database user's password"),
    read_only=False,
)
def install_wordpress(client, values):
    request = m.InstallWordPress(database=values["database"], user=values["user"],
                                 password=optional(values, "password"))
    client.call("sites", "install_wordpress", *_ids(values), request=request)
    return {"message": "WordPress installation started"}


@tool("uninstall_wordpress", "Remove WordPress from a site.", SERVER_ID, SITE_ID, read_only=False)
def uninstall_wordpress(client, values):
    client.call("sites", "uninstall_wordpress", *_ids(values))
    return {"message": "WordPress removed"}


@tool("install_phpmyadmin", "Install phpMyAdmin on a site.", SERVER_ID, SITE_ID, read_only=False)
def install_phpmyadmin(client, values):
    client.call("sites", "install_phpmyadmin", *_ids(values))
    return {"message": "phpMyAdmin installation started"}


@tool("uninstall_phpmyadmin", "Remove phpMyAdmin from a site.", SERVER_ID, SITE_ID, read_only=False)
def uninstall_phpmyadmin(client, values):
    client.call("sites", "uninstall_phpmyadmin", *_ids(values))
    return {"message": "phpMyAdmin removed"}


@tool("get_packages_auth", "Get the Composer package credentials (auth.json) of a site.", SERVER_ID, SITE_ID)
def get_packages_auth(client, values):
    return {"packages": client.call("sites", "packages_auth", *_ids(values))}


@tool("update_packages_auth", "Replace the Composer package credentials (auth.json) of a site.",
      SERVER_ID, SITE_ID,
      Param("packages", "object", description='e.g. {"repo.packagist.com": {"username": ..., "password": ...}}'),
      read_only=False)
def update_packages_auth(client, values):
    client.call("sites", "update_packages_auth", *_ids(values),
                request=m.UpdatePackagesAuth(packages=values["packages"]))
    return {"message": "Package credentials updated"}


# =============================================================================
# Deployments
# =============================================================================
@tool("deploy_site", "Trigger a deployment of a site using its deployment script.",
      SERVER_ID, SITE_ID, read_only=False)
def deploy_site(client, values):
    client.call("sites", "deploy", *_ids(values))
    return {"message": "Deployment triggered. Use list_deployment_history to follow its status."}


@tool("enable_quick_deploy", "Deploy the site automatically on every push to its branch.",
      SERVER_ID, SITE_ID, read_only=False)
def enable_quick_deploy(client, values):
    client.call("sites", "enable_quick_deploy", *_ids(values))
    return {"message": "Quick deploy enabled"}


@tool("disable_quick_deploy", "Stop deploying the site on every push.", SERVER_ID, SITE_ID, read_only=False)
def disable_quick_deploy(client, values):
    client.call("sites", "disable_quick_deploy", *_ids(values))
    return {"message": "Quick deploy disabled"}


@tool("list_deployment_history", "List recent deployments of a site, newest first.", SERVER_ID, SITE_ID)
def list_deployment_history(client, values):
    deployments = client.call("sites", "deployment_history", *_ids(values))
    return {"count": len(deployments), "deployments": to_wire(deployments)}


@tool("get_deployment", "Get one deployment from a site's history.", SERVER_ID, SITE_ID, DEPLOYMENT_ID)
def get_deployment(client, values):
    deployment = client.call("sites", "deployment", *_ids(values), values["deployment_id"])
    return {"deployment": to_wire(deployment)}


@tool("get_deployment_output", "Get the output of one deployment from a site's history.",
      SERVER_ID, SITE_ID, DEPLOYMENT_ID)
def get_deployment_output(client, values):
    return {"output": client.call("sites", "deployment_output", *_ids(values), values["deployment_id"])}


@tool("get_deployment_log", "Get the log of the latest deployment of a site.", SERVER_ID, SITE_ID)
def get_deployment_log(client, values):
    log = client.call("sites", "deployment_log", *_ids(values))
    return {"log": log or None}


@tool("get_deployment_script", "Get the deployment script of a site.", SERVER_ID, SITE_ID)
def get_deployment_script(client, values):
    return {"script": client.call("sites", "deployment_script", *_ids(values))}


@tool("update_deployment_script", "Replace the deployment script of a site.", SERVER_ID, SITE_ID,
      Param("content", "string", description="The complete new deployment script"), read_only=False)
def update_deployment_script(client, values):
    client.call("sites", "update_deployment_script", *_ids(values), request=m.FileContent(content=values["content"]))
    return {"message": "Deployment script updated"}


@tool("reset_deployment_state", "Clear a deployment that is stuck in the deploying state.",
      SERVER_ID, SITE_ID, read_only=False)
def reset_deployment_state(client, values):
    client.call("sites", "reset_deployment_state", *_ids(values))
    return {"message": "Deployment state reset"}


@tool("set_deployment_failure_emails", "Set who is emailed when a deployment of the site fails.",
      SERVER_ID, SITE_ID, Param("emails", "array", items="string", description="Email addresses"),
      read_only=False)
def set_deployment_failure_emails(client, values):
    request = m.SetDeploymentFailureEmails(emails=list(values["emails"]))
    client.call("sites", "set_deployment_failure_emails", *_ids(values), request=request)
    return {"message": f"{len(values['emails'])} failure email address(es) set"}


# =============================================================================
# Git
# =============================================================================
_PROVIDERS = ("github", "gitlab", "gitlab-custom", "bitbucket", "custom")


@tool(
    "install_git_repository",
    "Attach a git repository to a site and pull it.",
    SERVER_ID,
    SITE_ID,
    Param("provider", "string", choices=_PROVIDERS, description="Where the repository is hosted"),
    Param("repository", "string", description='The repository ("owner/repo")'),
    Param("branch", "string", required=False, description="Branch to deploy (defaults to the repository default)"),
    Param("composer", "boolean", required=False, description="Run composer install after cloning"),
    read_only=False,
)
def install_git_repository(client, values):
    request = m.InstallGitRepository(
        provider=values["provider"],
        repository=values["repository"],
        branch=optional(values, "branch"),
        composer=optional(values, "composer"),
    )
    client.call("sites", "install_git_repository", *_ids(values), request=request)
    return {"message": f"Installing {values['repository']}"}


@tool(
    "update_git_repository",
    "Point a site at a different repository or branch.",
    SERVER_ID,
    SITE_ID,
    Param("provider", "string", required=False, choices=_PROVIDERS, description="Where the repository is hosted"),
    Param("repository", "string", required=False, description='The repository ("owner/repo")'),
    Param("branch", "string", required=False, description="Branch to deploy"),
    read_only=False,
)
def update_git_repository(client, values):
    if not any(name in values for name in ("provider", "repository", "branch")):
        raise ToolInputError("Give at least one of provider, repository or branch")
    request = m.UpdateGitRepository(provider=optional(values, "provider"),
                                    repository=optional(values, "repository"),
                                    branch=optional(values, "branch"))
    client.call("sites", "update_git_repository", *_ids(values), request=request)
    return {"message": "Git repository updated"}


@tool("destroy_git_repository", "Detach the git repository from a site.", SERVER_ID, SITE_ID, read_only=False)
def destroy_git_repository(client, values):
    client.call("sites", "destroy_git_repository", *_ids(values))
    return {"message": "Git repository removed"}


@tool("create_deploy_key", "Generate a deploy key for the site. Add it to the repository host.",
      SERVER_ID, SITE_ID, read_only=False)
def create_deploy_key(client, values):
    return {"deploy_key": client.call("sites", "create_deploy_key", *_ids(values))}


@tool("delete_deploy_key", "Delete the deploy key of a site.", SERVER_ID, SITE_ID, read_only=False)
def delete_deploy_key(client, values):
    client.call("sites", "delete_deploy_key", *_ids(values))
    return {"message": "Deploy key deleted"}


# =============================================================================
# Commands
# =============================================================================
@tool("execute_site_command", "Run a one-off command in a site's directory.", SERVER_ID, SITE_ID,
      Param("command", "string", description='The command (e.g. "php artisan cache:clear")'), read_only=False)
def execute_site_command(client, values):
    command = client.call("sites", "execute_command", *_ids(values),
                          request=m.ExecuteSiteCommand(command=values["command"]))
    return {"message": "Command queued. Use get_site_command for its output.", "command": to_wire(command)}


@tool("get_site_command", "Get a site command with its status and output.", SERVER_ID, SITE_ID, COMMAND_ID)
def get_site_command(client, values):
    return {"command": to_wire(client.call("sites", "get_command", *_ids(values), values["command_id"]))}


@tool("list_command_history", "List the commands run on a site.", SERVER_ID, SITE_ID)
def list_command_history(client, values):
    commands = client.call("sites", "command_history", *_ids(values))
    return {"count": len(commands), "commands": to_wire(commands, ("id", "command", "status", "created_at"))}


# =============================================================================
# Config files
# =============================================================================
@tool("get_env_file", "Get the .env file of a site.", SERVER_ID, SITE_ID)
def get_env_file(client, values):
    return {"content": client.call("sites", "env_file", *_ids(values))}


@tool("update_env_file", "Replace the .env file of a site.", SERVER_ID, SITE_ID, _CONTENT, read_only=False)
def update_env_file(client, values):
    client.call("sites", "update_env_file", *_ids(values), request=m.FileContent(content=values["content"]))
    return {"message": ".env updated. Clear the config cache for it to take effect."}


@tool("get_nginx_config", "Get the Nginx configuration of a site.", SERVER_ID, SITE_ID)
def get_nginx_config(client, values):
    return {"content": client.call("sites", "nginx_config", *_ids(values))}


@tool("update_nginx_config", "Replace the Nginx configuration of a site. Run test_nginx afterwards.",
      SERVER_ID, SITE_ID, _CONTENT, read_only=False)
def update_nginx_config(client, values):
    client.call("sites", "update_nginx_config", *_ids(values), request=m.FileContent(content=values["content"]))
    return {"message": "Nginx configuration updated"}


# =============================================================================
# Certificates
# =============================================================================
@tool("list_certificates", "List the SSL certificates of a site.", SERVER_ID, SITE_ID)
def list_certificates(client, values):
    certificates = client.call("certificates", "list", *_ids(values))
    return {"count": len(certificates), "certificates": to_wire(certificates)}


@tool("get_certificate", "Get one SSL certificate.", SERVER_ID, SITE_ID, CERTIFICATE_ID)
def get_certificate(client, values):
    return {"certificate": to_wire(client.call("certificates", "get", *_ids(values), values["certificate_id"]))}


@tool("get_certificate_signing_request", "Get the CSR of a certificate.", SERVER_ID, SITE_ID, CERTIFICATE_ID)
def get_certificate_signing_request(client, values):
    return {"csr": client.call("certificates", "signing_request", *_ids(values), values["certificate_id"])}


@tool(
    "obtain_letsencrypt_certificate",
    "Request a free Let's Encrypt certificate for one or more domains of a site.",
    SERVER_ID,
    SITE_ID,
    Param("domains", "array", items="string", min_items=1, description='Domains to cover (e.g. ["example.com"])'),
    read_only=False,
)
def obtain_letsencrypt_certificate(client, values):
    request = m.ObtainLetsEncryptCertificate(domains=list(values["domains"]))
    certificate = client.call("certificates", "obtain_letsencrypt", *_ids(values), request=request)
    return {"message": "Certificate requested; activation can take a minute", "certificate": to_wire(certificate)}


@tool("activate_certificate", "Make a certificate the one the site serves.",
      SERVER_ID, SITE_ID, CERTIFICATE_ID, read_only=False)
def activate_certificate(client, values):
    client.call("certificates", "activate", *_ids(values), values["certificate_id"])
    return {"message": f"Certificate {values['certificate_id']} activated"}


@tool("delete_certificate", "Delete a certificate.", SERVER_ID, SITE_ID, CERTIFICATE_ID, read_only=False)
def delete_certificate(client, values):
    client.call("certificates", "delete", *_ids(values), values["certificate_id"])
    return {"message": f"Certificate {values['certificate_id']} deleted"}


# =============================================================================
# Queue workers
# =============================================================================
@tool("list_workers", "List the queue workers of a site.", SERVER_ID, SITE_ID)
def list_workers(client, values):
    workers = client.call("workers", "list", *_ids(values))
    return {"count": len(workers), "workers": to_wire(workers)}


@tool("get_worker", "Get one queue worker.", SERVER_ID, SITE_ID, WORKER_ID)
def get_worker(client, values):
    return {"worker": to_wire(client.call("workers", "get", *_ids(values), values["worker_id"]))}


@tool(
    "create_worker",
    "Create a queue worker for a site.",
    SERVER_ID,
    SITE_ID,
    Param("connection", "string", description='Queue connection (e.g. "redis", "database", "sqs")'),
    Param("queue", "string", required=False, default="default", description="Queue name(s), comma separated"),
    Param("timeout", "integer", required=False, minimum=0, description="Seconds a job may run"),
    Param("sleep", "integer", required=False, minimum=0, description="Seconds to sleep when no job is available"),
    Param("tries", "integer", required=False, minimum=1, description="Attempts before a job is failed"),
    Param("processes", "integer", required=False, minimum=1, description="Number of worker processes"),
    Param("daemon", "boolean", required=False, description="Run the worker as a daemon"),
    Param("php_version", "string", required=False, description="PHP version to run the worker with"),
    read_only=False,
)
def create_worker(client, values):
    request = m.CreateWorker(
        connection=values["connection"],
        queue=values["queue"],
        **{name: optional(values, name) for name in
           ("timeout", "sleep", "tries", "processes", "daemon", "php_version")},
    )
    worker = client.call("workers", "create", *_ids(values), request=request)
    return {"message": "Worker created", "worker": to_wire(worker)}


@tool("restart_worker", "Restart a queue worker.", SERVER_ID, SITE_ID, WORKER_ID, read_only=False)
def restart_worker(client, values):
    client.call("workers", "restart", *_ids(values), values["worker_id"])
    return {"message": f"Worker {values['worker_id']} restarted"}


@tool("delete_worker", "Delete a queue worker.", SERVER_ID, SITE_ID, WORKER_ID, read_only=False)
def delete_worker(client, values):
    client.call("workers", "delete", *_ids(values), values["worker_id"])
    return {"message": f"Worker {values['worker_id']} deleted"}


@tool("get_worker_output", "Get the recent output of a queue worker.", SERVER_ID, SITE_ID, WORKER_ID)
def get_worker_output(client, values):
    return {"output": client.call("workers", "output", *_ids(values), values["worker_id"])}


# =============================================================================
# Webhooks
# =============================================================================
@tool("list_webhooks", "List the deployment webhooks of a site.", SERVER_ID, SITE_ID)
def list_webhooks(client, values):
    webhooks = client.call("webhooks", "list", *_ids(values))
    return {"count": len(webhooks), "webhooks": to_wire(webhooks)}


@tool("get_webhook", "Get one deployment webhook.", SERVER_ID, SITE_ID, WEBHOOK_ID)
def get_webhook(client, values):
    return {"webhook": to_wire(client.call("webhooks", "get", *_ids(values), values["webhook_id"]))}


@tool("create_webhook", "Register a URL that Forge calls after every deployment of a site.",
      SERVER_ID, SITE_ID, Param("url", "string", max_length=2048, description="The webhook URL"),
      read_only=False)
def create_webhook(client, values):
    webhook = client.call("webhooks", "create", *_ids(values), request=m.CreateWebhook(url=values["url"]))
    return {"message": "Webhook created", "webhook": to_wire(webhook)}


@tool("delete_webhook", "Delete a deployment webhook.", SERVER_ID, SITE_ID, WEBHOOK_ID, read_only=False)
def delete_webhook(client, values):
    client.call("webhooks", "delete", *_ids(values), values["webhook_id"])
    return {"message": f"Webhook {values['webhook_id']} deleted"}


# =============================================================================
# Security (basic auth) rules
# =============================================================================
@tool("list_security_rules", "List the password-protected paths of a site.", SERVER_ID, SITE_ID)
def list_security_rules(client, values):
    rules = client.call("security_rules", "list", *_ids(values))
    return {"count": len(rules), "rules": to_wire(rules, ("id", "site_id", "name", "path", "created_at"))}


@tool("get_security_rule", "Get one security rule.", SERVER_ID, SITE_ID, RULE_ID)
def get_security_rule(client, values):
    return {"rule": to_wire(client.call("security_rules", "get", *_ids(values), values["rule_id"]))}


@tool(
    "create_security_rule",
    "Protect a path of a site with HTTP basic auth.",
    SERVER_ID,
    SITE_ID,
    Param("name", "string", max_length=255, description="A label for the rule"),
    Param("path", "string", required=False, description='The path to protect (the whole site when left out)'),
    Param("credentials", "array", required=False, items="object",
          description='[{"username": "...", "password": "..."}]'),
    read_only=False,
)
def create_security_rule(client, values):
    request = m.CreateSecurityRule(name=values["name"], path=optional(values, "path"),
                                   credentials=optional(values, "credentials"))
    rule = client.call("security_rules", "create", *_ids(values), request=request)
    return {"message": "Security rule created", "rule": to_wire(rule, ("id", "site_id", "name", "path"))}


@tool("delete_security_rule", "Delete a security rule.", SERVER_ID, SITE_ID, RULE_ID, read_only=False)
def delete_security_rule(client, values):
    client.call("security_rules", "delete", *_ids(values), values["rule_id"])
    return {"message": f"Security rule {values['rule_id']} deleted"}


# =============================================================================
# Redirect rules
# =============================================================================
@tool("list_redirect_rules", "List the redirect rules of a site.", SERVER_ID, SITE_ID)
def list_redirect_rules(client, values):
    rules = client.call("redirect_rules", "list", *_ids(values))
    return {"count": len(rules), "rules": to_wire(rules)}


@tool("get_redirect_rule", "Get one redirect rule.", SERVER_ID, SITE_ID, RULE_ID)
def get_redirect_rule(client, values):
    return {"rule": to_wire(client.call("redirect_rules", "get", *_ids(values), values["rule_id"]))}


@tool(
    "create_redirect_rule",
    "Redirect a path of a site to another URL.",
    SERVER_ID,
    SITE_ID,
    Param("from_path", "string", description='The path to redirect (e.g. "/old")'),
    Param("to_url", "string", description="Where to send the visitor"),
    Param("type", "string", required=False, choices=("redirect", "permanent"),
          description='"redirect" (302) or "permanent" (301)'),
    read_only=False,
)
def create_redirect_rule(client, values):
    request = m.CreateRedirectRule(from_=values["from_path"], to=values["to_url"], type=optional(values, "type"))
    rule = client.call("redirect_rules", "create", *_ids(values), request=request)
    return {"message": "Redirect rule created", "rule": to_wire(rule)}


@tool("delete_redirect_rule", "Delete a redirect rule.", SERVER_ID, SITE_ID, RULE_ID, read_only=False)
def delete_redirect_rule(client, values):
    client.call("redirect_rules", "delete", *_ids(values), values["rule_id"])
    return {"message": f"Redirect rule {values['rule_id']} deleted"}


# =============================================================================
# Integrations
# =============================================================================
# Seven Laravel integrations share one get / enable / disable shape.  Octane
# and maintenance mode take options on enable, so they are declared by hand.
# =============================================================================
_LABELS = {
    "horizon": "Horizon",
    "octane": "Octane",
    "reverb": "Reverb",
    "pulse": "Pulse",
    "inertia": "Inertia SSR",
    "maintenance": "maintenance mode",
    "scheduler": "the Laravel scheduler",
}


def _get_integration(name):
    def handler(client, values):
        return {"integration": name, "status": client.call("integrations", f"get_{name}", *_ids(values))}
    return handler


def _toggle_integration(operation, message):
    def handler(client, values):
        client.call("integrations", operation, *_ids(values))
        return {"message": message}
    return handler


for _name in INTEGRATIONS:
    _label = _LABELS[_name]
    tool(f"get_{_name}", f"Get the {_label} status of a site.", SERVER_ID, SITE_ID)(_get_integration(_name))
    tool(f"disable_{_name}", f"Disable {_label} for a site.", SERVER_ID, SITE_ID, read_only=False)(
        _toggle_integration(f"disable_{_name}", f"{_label} disabled"))
    if _name not in ("octane", "maintenance"):
        tool(f"enable_{_name}", f"Enable {_label} for a site.", SERVER_ID, SITE_ID, read_only=False)(
            _toggle_integration(f"enable_{_name}", f"{_label} enabled"))


@tool(
    "enable_octane",
    "Run a site on Laravel Octane.",
    SERVER_ID,
    SITE_ID,
    Param("server", "string", required=False, default="swoole", choices=("swoole", "roadrunner", "frankenphp"),
          description='Octane server (defaults to "swoole")'),
    Param("workers", "string", required=False, default="auto",
          description='Worker count, or "auto" for one per CPU core'),
    read_only=False,
)
def enable_octane(client, values):
    workers = values["workers"]
    if workers != "auto":
        if not workers.isdigit() or int(workers) < 1:
            raise ToolInputError('workers must be "auto" or a positive number')
        workers = int(workers)
    client.call("integrations", "enable_octane", *_ids(values),
                request=m.EnableOctane(server=values["server"], workers=workers))
    return {"message": f"Octane enabled ({values['server']}, workers={workers})"}


@tool(
    "enable_maintenance",
    "Put a site into maintenance mode (php artisan down).",
    SERVER_ID,
    SITE_ID,
    Param("secret", "string", required=False, description="Secret path segment that bypasses maintenance mode"),
    Param("refresh", "string", required=False, description="Seconds after which the page refreshes"),
    read_only=False,
)
def enable_maintenance(client, values):
    request = m.EnableMaintenance(secret=optional(values, "secret"), refresh=optional(values, "refresh"))
    client.call("integrations", "enable_maintenance", *_ids(values), request=request)
    return {"message": "Maintenance mode enabled"}
