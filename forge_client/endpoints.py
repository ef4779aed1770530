# =============================================================================
# forge_client/endpoints.py  —  Endpoint Descriptors (the "verbs")
# =============================================================================
#
# Every Forge operation is ONE static Endpoint record below.  An endpoint does
# not *do* anything; it declares:
#
#   method + path        → what goes on the wire ("/servers/{server_id}/daemons")
#   request + encode_mode → which record builds the body, and how nulls travel
#   response + kind       → how the JSON answer is turned back into records
#   unwrap_key            → the top-level key the answer is nested under
#   synthetic             → which path placeholders get written into each
#                           decoded item (the upstream list payloads omit the
#                           parent IDs they were fetched under)
#
# forge_client/client.py is the only code that interprets these records.
#
# ENCODE MODES:
#   Most creates prune nulls; servers, sites, databases and a few others
#   send every field.  The choice is data, not logic: change it here if the
#   live API disagrees.
# =============================================================================

import enum
import re
from dataclasses import dataclass, field
from typing import Optional

from forge_client import models as m
from forge_client.errors import ProgrammerError
from forge_client.schema import EncodeMode

_PLACEHOLDER = re.compile(r"\{(\w+)\}")

PRUNE = EncodeMode.PRUNE_NULLS
KEEP = EncodeMode.KEEP_ALL


class ResponseKind(enum.Enum):
    RESOURCE = "resource"        # {"daemon": {...}}        → one record
    COLLECTION = "collection"    # {"daemons": [{...}, ...]} → Collection
    TEXT = "text"                # {"output": "..."}        → str
    RAW = "raw"                  # any JSON, returned as-is
    NONE = "none"                # 2xx means success        → None


@dataclass(frozen=True)
class Endpoint:
    """A static description of one Forge API operation."""

    namespace: str
    operation: str
    method: str
    path: str
    request: Optional[type] = None
    encode_mode: EncodeMode = PRUNE
    response: Optional[type] = None
    kind: ResponseKind = ResponseKind.NONE
    unwrap_key: Optional[str] = None
    synthetic: tuple = ()
    params: tuple = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "params", tuple(_PLACEHOLDER.findall(self.path)))
        unknown = [name for name in self.synthetic if name not in self.params]
        if unknown:
            raise ProgrammerError(
                f"{self.namespace}.{self.operation}: synthetic {unknown} not in path {self.path}"
            )
        if self.kind in (ResponseKind.RESOURCE, ResponseKind.COLLECTION) and self.response is None:
            raise ProgrammerError(f"{self.namespace}.{self.operation}: {self.kind.value} needs a response record")

    @property
    def key(self) -> tuple:
        return (self.namespace, self.operation)

    def render_path(self, path_params) -> str:
        """Substitute the ordered IDs into the path template.

        Raises:
            ProgrammerError: If the number of IDs does not match the template,
                or an ID is not an integer.
        """
        values = tuple(path_params)
        if len(values) != len(self.params):
            raise ProgrammerError(
                f"{self.namespace}.{self.operation} expects {len(self.params)} path "
                f"parameter(s) {list(self.params)}, got {len(values)}"
            )
        for name, value in zip(self.params, values):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ProgrammerError(f"Path parameter '{name}' must be an int, got {value!r}")
        bound = dict(zip(self.params, values))
        return _PLACEHOLDER.sub(lambda match: str(bound[match.group(1)]), self.path)

    def synthetic_values(self, path_params) -> dict:
        """The {placeholder: id} pairs to overlay onto each decoded item."""
        bound = dict(zip(self.params, path_params))
        return {name: bound[name] for name in self.synthetic}


# -----------------------------------------------------------------------------
# Builders
# -----------------------------------------------------------------------------
# Small helpers so the table below reads as one line of facts per operation.

def _list(ns, op, path, record, key, synthetic=()) -> Endpoint:
    return Endpoint(ns, op, "GET", path, response=record,
                    kind=ResponseKind.COLLECTION, unwrap_key=key, synthetic=synthetic)


def _get(ns, op, path, record, key, synthetic=()) -> Endpoint:
    return Endpoint(ns, op, "GET", path, response=record,
                    kind=ResponseKind.RESOURCE, unwrap_key=key, synthetic=synthetic)


def _write(ns, op, method, path, request, mode, record=None, key=None, synthetic=()) -> Endpoint:
    kind = ResponseKind.RESOURCE if record is not None else ResponseKind.NONE
    return Endpoint(ns, op, method, path, request=request, encode_mode=mode,
                    response=record, kind=kind, unwrap_key=key, synthetic=synthetic)


def _text(ns, op, method, path, key) -> Endpoint:
    return Endpoint(ns, op, method, path, kind=ResponseKind.TEXT, unwrap_key=key)


def _action(ns, op, method, path) -> Endpoint:
    return Endpoint(ns, op, method, path)


_S = "/servers/{server_id}"
_SITE = _S + "/sites/{site_id}"
_SRV = ("server_id",)
_SRV_SITE = ("server_id", "site_id")

# Laravel integrations toggled per site: operation suffix → URL slug.
INTEGRATIONS = {
    "horizon": "horizon",
    "octane": "octane",
    "reverb": "reverb",
    "pulse": "pulse",
    "inertia": "inertia",
    "maintenance": "laravel-maintenance",
    "scheduler": "laravel-scheduler",
}

# Integrations whose enable call carries a body.
_ENABLE_REQUESTS = {"octane": m.EnableOctane, "maintenance": m.EnableMaintenance}


def _integrations() -> list:
    endpoints = []
    for name, slug in INTEGRATIONS.items():
        path = f"{_SITE}/integrations/{slug}"
        endpoints.append(Endpoint("integrations", f"get_{name}", "GET", path, kind=ResponseKind.RAW))
        if name in _ENABLE_REQUESTS:
            endpoints.append(_write("integrations", f"enable_{name}", "POST", path, _ENABLE_REQUESTS[name], PRUNE))
        else:
            endpoints.append(_action("integrations", f"enable_{name}", "POST", path))
        endpoints.append(_action("integrations", f"disable_{name}", "DELETE", path))
    return endpoints


# =============================================================================
# The registry
# =============================================================================
_ALL = [
    # --- servers -------------------------------------------------------------
    _list("servers", "list", "/servers", m.Server, "servers"),
    _get("servers", "get", _S, m.Server, "server"),
    _write("servers", "create", "POST", "/servers", m.CreateServer, KEEP, m.Server, "server"),
    _write("servers", "update", "PUT", _S, m.UpdateServer, KEEP, m.Server, "server"),
    _action("servers", "delete", "DELETE", _S),
    _action("servers", "reboot", "POST", _S + "/reboot"),
    _text("servers", "reconnect", "POST", _S + "/reconnect", "public_key"),
    _action("servers", "reactivate", "POST", _S + "/reactivate"),
    _action("servers", "revoke_access", "POST", _S + "/revoke"),
    _action("servers", "update_database_password", "PUT", _S + "/database-password"),
    _list("servers", "list_events", _S + "/events", m.Event, "events", _SRV),
    _text("servers", "event_output", "GET", _S + "/events/{event_id}", "output"),
    _text("servers", "log", "GET", _S + "/logs", "content"),

    # --- sites ---------------------------------------------------------------
    _list("sites", "list", _S + "/sites", m.Site, "sites", _SRV),
    _get("sites", "get", _SITE, m.Site, "site", _SRV),
    _write("sites", "create", "POST", _S + "/sites", m.CreateSite, KEEP, m.Site, "site", _SRV),
    _write("sites", "update", "PUT", _SITE, m.UpdateSite, KEEP, m.Site, "site", _SRV),
    _action("sites", "delete", "DELETE", _SITE),
    _action("sites", "deploy", "POST", _SITE + "/deployment/deploy"),
    _action("sites", "enable_quick_deploy", "POST", _SITE + "/deployment"),
    _action("sites", "disable_quick_deploy", "DELETE", _SITE + "/deployment"),
    _list("sites", "deployment_history", _SITE + "/deployment-history",
          m.Deployment, "deployments", _SRV_SITE),
    _text("sites", "deployment_output", "GET",
          _SITE + "/deployment-history/{deployment_id}/output", "output"),
    _write("sites", "install_git_repository", "POST", _SITE + "/git", m.InstallGitRepository, KEEP),
    _write("sites", "change_php_version", "PUT", _SITE + "/php", m.ChangePhpVersion, KEEP),
    _write("sites", "execute_command", "POST", _SITE + "/commands", m.ExecuteSiteCommand, KEEP,
           m.SiteCommand, "command", _SRV_SITE),
    _get("sites", "get_command", _SITE + "/commands/{command_id}", m.SiteCommand, "command", _SRV_SITE),
    _list("sites", "command_history", _SITE + "/commands", m.SiteCommand, "commands", _SRV_SITE),
    _get("sites", "deployment", _SITE + "/deployment-history/{deployment_id}",
         m.Deployment, "deployment", _SRV_SITE),
    # The deployment script, deployment log, Nginx config and .env come back
    # as a plain-text body, hence no unwrap key.
    _text("sites", "deployment_script", "GET", _SITE + "/deployment/script", None),
    _write("sites", "update_deployment_script", "PUT", _SITE + "/deployment/script", m.FileContent, KEEP),
    _text("sites", "deployment_log", "GET", _SITE + "/deployment/log", None),
    _action("sites", "reset_deployment_state", "POST", _SITE + "/deployment/reset"),
    _write("sites", "set_deployment_failure_emails", "POST", _SITE + "/deployment-failure-emails",
           m.SetDeploymentFailureEmails, KEEP),
    _write("sites", "update_git_repository", "PUT", _SITE + "/git", m.UpdateGitRepository, PRUNE),
    _action("sites", "destroy_git_repository", "DELETE", _SITE + "/git"),
    Endpoint("sites", "create_deploy_key", "POST", _SITE + "/deploy-key", kind=ResponseKind.RAW),
    _action("sites", "delete_deploy_key", "DELETE", _SITE + "/deploy-key"),
    _text("sites", "nginx_config", "GET", _SITE + "/nginx", None),
    _write("sites", "update_nginx_config", "PUT", _SITE + "/nginx", m.FileContent, KEEP),
    _text("sites", "env_file", "GET", _SITE + "/env", None),
    _write("sites", "update_env_file", "PUT", _SITE + "/env", m.FileContent, KEEP),
    Endpoint("sites", "log", "GET", _SITE + "/log", kind=ResponseKind.RAW),
    _action("sites", "clear_log", "DELETE", _SITE + "/log"),
    Endpoint("sites", "aliases", "GET", _SITE + "/aliases", kind=ResponseKind.RAW, unwrap_key="aliases"),
    _write("sites", "update_aliases", "PUT", _SITE + "/aliases", m.UpdateAliases, KEEP),
    Endpoint("sites", "load_balancing", "GET", _SITE + "/balancing", kind=ResponseKind.RAW),
    _write("sites", "update_load_balancing", "PUT", _SITE + "/balancing", m.UpdateLoadBalancing, KEEP),
    _write("sites", "install_wordpress", "POST", _SITE + "/wordpress", m.InstallWordPress, PRUNE),
    _action("sites", "uninstall_wordpress", "DELETE", _SITE + "/wordpress"),
    _action("sites", "install_phpmyadmin", "POST", _SITE + "/phpmyadmin"),
    _action("sites", "uninstall_phpmyadmin", "DELETE", _SITE + "/phpmyadmin"),
    Endpoint("sites", "packages_auth", "GET", _SITE + "/packages", kind=ResponseKind.RAW),
    _write("sites", "update_packages_auth", "PUT", _SITE + "/packages", m.UpdatePackagesAuth, KEEP),

    # --- site integrations ---------------------------------------------------
    *_integrations(),

    # --- daemons -------------------------------------------------------------
    _list("daemons", "list", _S + "/daemons", m.Daemon, "daemons", _SRV),
    _get("daemons", "get", _S + "/daemons/{daemon_id}", m.Daemon, "daemon", _SRV),
    _write("daemons", "create", "POST", _S + "/daemons", m.CreateDaemon, PRUNE, m.Daemon, "daemon", _SRV),
    _action("daemons", "restart", "POST", _S + "/daemons/{daemon_id}/restart"),
    _action("daemons", "delete", "DELETE", _S + "/daemons/{daemon_id}"),

    # --- scheduled jobs ------------------------------------------------------
    _list("jobs", "list", _S + "/jobs", m.Job, "jobs", _SRV),
    _get("jobs", "get", _S + "/jobs/{job_id}", m.Job, "job", _SRV),
    _write("jobs", "create", "POST", _S + "/jobs", m.CreateJob, PRUNE, m.Job, "job", _SRV),
    _action("jobs", "delete", "DELETE", _S + "/jobs/{job_id}"),
    _text("jobs", "output", "GET", _S + "/jobs/{job_id}/output", "output"),

    # --- databases -----------------------------------------------------------
    _list("databases", "list", _S + "/databases", m.Database, "databases", _SRV),
    _get("databases", "get", _S + "/databases/{database_id}", m.Database, "database", _SRV),
    _write("databases", "create", "POST", _S + "/databases", m.CreateDatabase, KEEP,
           m.Database, "database", _SRV),
    _action("databases", "delete", "DELETE", _S + "/databases/{database_id}"),
    _action("databases", "sync", "POST", _S + "/databases/sync"),

    _list("database_users", "list", _S + "/database-users", m.DatabaseUser, "users", _SRV),
    _get("database_users", "get", _S + "/database-users/{user_id}", m.DatabaseUser, "user", _SRV),
    _write("database_users", "create", "POST", _S + "/database-users", m.CreateDatabaseUser, KEEP,
           m.DatabaseUser, "user", _SRV),
    _write("database_users", "update", "PUT", _S + "/database-users/{user_id}", m.UpdateDatabaseUser,
           KEEP, m.DatabaseUser, "user", _SRV),
    _action("database_users", "delete", "DELETE", _S + "/database-users/{user_id}"),

    # --- certificates --------------------------------------------------------
    _list("certificates", "list", _SITE + "/certificates", m.Certificate, "certificates", _SRV_SITE),
    _get("certificates", "get", _SITE + "/certificates/{certificate_id}",
         m.Certificate, "certificate", _SRV_SITE),
    _write("certificates", "obtain_letsencrypt", "POST", _SITE + "/certificates/letsencrypt",
           m.ObtainLetsEncryptCertificate, KEEP, m.Certificate, "certificate", _SRV_SITE),
    _action("certificates", "activate", "POST", _SITE + "/certificates/{certificate_id}/activate"),
    _text("certificates", "signing_request", "GET", _SITE + "/certificates/{certificate_id}/csr", "csr"),
    _action("certificates", "delete", "DELETE", _SITE + "/certificates/{certificate_id}"),

    # --- firewall ------------------------------------------------------------
    _list("firewall", "list", _S + "/firewall-rules", m.FirewallRule, "rules", _SRV),
    _get("firewall", "get", _S + "/firewall-rules/{rule_id}", m.FirewallRule, "rule", _SRV),
    _write("firewall", "create", "POST", _S + "/firewall-rules", m.CreateFirewallRule, PRUNE,
           m.FirewallRule, "rule", _SRV),
    _action("firewall", "delete", "DELETE", _S + "/firewall-rules/{rule_id}"),

    # --- monitors ------------------------------------------------------------
    _list("monitors", "list", _S + "/monitors", m.Monitor, "monitors", _SRV),
    _get("monitors", "get", _S + "/monitors/{monitor_id}", m.Monitor, "monitor", _SRV),
    _write("monitors", "create", "POST", _S + "/monitors", m.CreateMonitor, PRUNE,
           m.Monitor, "monitor", _SRV),
    _action("monitors", "delete", "DELETE", _S + "/monitors/{monitor_id}"),

    # --- queue workers -------------------------------------------------------
    _list("workers", "list", _SITE + "/workers", m.Worker, "workers", _SRV_SITE),
    _get("workers", "get", _SITE + "/workers/{worker_id}", m.Worker, "worker", _SRV_SITE),
    _write("workers", "create", "POST", _SITE + "/workers", m.CreateWorker, PRUNE,
           m.Worker, "worker", _SRV_SITE),
    _action("workers", "restart", "POST", _SITE + "/workers/{worker_id}/restart"),
    _action("workers", "delete", "DELETE", _SITE + "/workers/{worker_id}"),
    _text("workers", "output", "GET", _SITE + "/workers/{worker_id}/output", "output"),

    # --- deployment webhooks -------------------------------------------------
    _list("webhooks", "list", _SITE + "/webhooks", m.Webhook, "webhooks", _SRV_SITE),
    _get("webhooks", "get", _SITE + "/webhooks/{webhook_id}", m.Webhook, "webhook", _SRV_SITE),
    _write("webhooks", "create", "POST", _SITE + "/webhooks", m.CreateWebhook, KEEP,
           m.Webhook, "webhook", _SRV_SITE),
    _action("webhooks", "delete", "DELETE", _SITE + "/webhooks/{webhook_id}"),

    # --- ssh keys ------------------------------------------------------------
    _list("ssh_keys", "list", _S + "/keys", m.SSHKey, "keys", _SRV),
    _get("ssh_keys", "get", _S + "/keys/{key_id}", m.SSHKey, "key", _SRV),
    _write("ssh_keys", "create", "POST", _S + "/keys", m.CreateSSHKey, KEEP, m.SSHKey, "key", _SRV),
    _action("ssh_keys", "delete", "DELETE", _S + "/keys/{key_id}"),

    # --- security (basic auth) rules -----------------------------------------
    _list("security_rules", "list", _SITE + "/security-rules", m.SecurityRule,
          "security_rules", _SRV_SITE),
    _get("security_rules", "get", _SITE + "/security-rules/{rule_id}", m.SecurityRule, "rule", _SRV_SITE),
    _write("security_rules", "create", "POST", _SITE + "/security-rules", m.CreateSecurityRule, PRUNE,
           m.SecurityRule, "rule", _SRV_SITE),
    _action("security_rules", "delete", "DELETE", _SITE + "/security-rules/{rule_id}"),

    # --- redirect rules ------------------------------------------------------
    _list("redirect_rules", "list", _SITE + "/redirect-rules", m.RedirectRule,
          "redirect_rules", _SRV_SITE),
    _get("redirect_rules", "get", _SITE + "/redirect-rules/{rule_id}", m.RedirectRule, "rule", _SRV_SITE),
    _write("redirect_rules", "create", "POST", _SITE + "/redirect-rules", m.CreateRedirectRule, PRUNE,
           m.RedirectRule, "rule", _SRV_SITE),
    _action("redirect_rules", "delete", "DELETE", _SITE + "/redirect-rules/{rule_id}"),

    # --- backups -------------------------------------------------------------
    _list("backups", "list", _S + "/backup-configurations", m.BackupConfiguration, "backups", _SRV),
    _get("backups", "get", _S + "/backup-configurations/{backup_id}",
         m.BackupConfiguration, "backup", _SRV),
    _write("backups", "create", "POST", _S + "/backup-configurations", m.CreateBackupConfiguration,
           PRUNE, m.BackupConfiguration, "backup", _SRV),
    _write("backups", "update", "PUT", _S + "/backup-configurations/{backup_id}",
           m.UpdateBackupConfiguration, PRUNE, m.BackupConfiguration, "backup", _SRV),
    _action("backups", "delete", "DELETE", _S + "/backup-configurations/{backup_id}"),
    _action("backups", "restore_backup", "POST",
            _S + "/backup-configurations/{backup_id}/backups/{archive_id}"),
    _action("backups", "delete_backup", "DELETE",
            _S + "/backup-configurations/{backup_id}/backups/{archive_id}"),

    # --- recipes (account level) ---------------------------------------------
    _list("recipes", "list", "/recipes", m.Recipe, "recipes"),
    _get("recipes", "get", "/recipes/{recipe_id}", m.Recipe, "recipe"),
    _write("recipes", "create", "POST", "/recipes", m.CreateRecipe, KEEP, m.Recipe, "recipe"),
    _write("recipes", "update", "PUT", "/recipes/{recipe_id}", m.UpdateRecipe, PRUNE, m.Recipe, "recipe"),
    _action("recipes", "delete", "DELETE", "/recipes/{recipe_id}"),
    _write("recipes", "run", "POST", "/recipes/{recipe_id}/run", m.RunRecipe, KEEP),

    # --- account -------------------------------------------------------------
    _list("credentials", "list", "/credentials", m.Credential, "credentials"),
    _get("user", "get", "/user", m.User, "user"),
    _list("regions", "list", "/regions", m.Region, "regions"),

    # --- nginx templates -----------------------------------------------------
    _list("nginx_templates", "list", _S + "/nginx/templates", m.NginxTemplate, "templates", _SRV),
    _get("nginx_templates", "get", _S + "/nginx/templates/{template_id}",
         m.NginxTemplate, "template", _SRV),
    _get("nginx_templates", "default", _S + "/nginx/templates/default", m.NginxTemplate, "template", _SRV),
    _write("nginx_templates", "create", "POST", _S + "/nginx/templates", m.CreateNginxTemplate, KEEP,
           m.NginxTemplate, "template", _SRV),
    _write("nginx_templates", "update", "PUT", _S + "/nginx/templates/{template_id}",
           m.UpdateNginxTemplate, PRUNE, m.NginxTemplate, "template", _SRV),
    _action("nginx_templates", "delete", "DELETE", _S + "/nginx/templates/{template_id}"),

    # --- php -----------------------------------------------------------------
    # The version list is a bare JSON array, hence no unwrap key.
    _list("php", "list", _S + "/php", m.PhpVersion, None),
    _write("php", "install", "POST", _S + "/php", m.PhpVersionRequest, KEEP),
    _write("php", "update", "PATCH", _S + "/php/update", m.PhpVersionRequest, KEEP),
    _action("php", "enable_opcache", "POST", _S + "/php/opcache"),
    _action("php", "disable_opcache", "DELETE", _S + "/php/opcache"),

    # --- services ------------------------------------------------------------
    _action("services", "reboot_mysql", "POST", _S + "/mysql/reboot"),
    _action("services", "reboot_nginx", "POST", _S + "/nginx/reboot"),
    _action("services", "reboot_postgres", "POST", _S + "/postgres/reboot"),
    _action("services", "reboot_php", "POST", _S + "/php/reboot"),
    _action("services", "stop_mysql", "POST", _S + "/mysql/stop"),
    _action("services", "stop_nginx", "POST", _S + "/nginx/stop"),
    _action("services", "stop_postgres", "POST", _S + "/postgres/stop"),
    Endpoint("services", "test_nginx", "GET", _S + "/nginx/test", kind=ResponseKind.RAW),
    _write("services", "start", "POST", _S + "/services/start", m.ManageService, KEEP),
    _write("services", "stop", "POST", _S + "/services/stop", m.ManageService, KEEP),
    _write("services", "restart", "POST", _S + "/services/restart", m.ManageService, KEEP),
    _write("services", "install_blackfire", "POST", _S + "/blackfire/install", m.InstallBlackfire, KEEP),
    _action("services", "remove_blackfire", "DELETE", _S + "/blackfire/remove"),
    _write("services", "install_papertrail", "POST", _S + "/papertrail/install", m.InstallPapertrail, KEEP),
    _action("services", "remove_papertrail", "DELETE", _S + "/papertrail/remove"),
]

ENDPOINTS: dict = {endpoint.key: endpoint for endpoint in _ALL}


def get_endpoint(namespace: str, operation: str) -> Endpoint:
    """Look up an endpoint by (namespace, operation).

    Raises:
        ProgrammerError: If no such endpoint is registered.
    """
    try:
        return ENDPOINTS[(namespace, operation)]
    except KeyError:
        raise ProgrammerError(f"Unknown endpoint '{namespace}.{operation}'") from None


def namespaces() -> list:
    """All namespaces, in registration order."""
    return list(dict.fromkeys(namespace for namespace, _ in ENDPOINTS))
