# =============================================================================
# forge_client/models.py  —  Records (the "nouns" of the Forge API)
# =============================================================================
#
# Every dataclass here is BOTH a typed record and a schema declaration.
# forge_client/schema.py reads the field list, the annotations and the
# defaults to decide how a payload is decoded or a body is encoded:
#
#   - no default              → required on decode (missing or null = DecodeError)
#   - Optional[...] = None    → optional, null/missing decodes to None
#   - list = field(...)       → optional, null/missing decodes to []
#   - synthetic_field()       → injected from the URL (server_id, site_id)
#   - UNSET default           → request field the caller may leave out
#
# Response records are keyword-only, so a required field may follow the
# synthetic parent IDs and the optional ones; field order is free.
#
# Response records are named after the resource (Daemon, FirewallRule, ...).
# Request records are named after the operation (CreateDaemon, UpdateServer).
# =============================================================================

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from forge_client.errors import ProgrammerError
from forge_client.schema import UNSET, ResourceSchema, schema_for, synthetic_field, wire_field

record = dataclass(frozen=True, kw_only=True)


# -----------------------------------------------------------------------------
# Collection: a decoded list response
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Collection:
    """Ordered items of one record type, as found under `key` in the payload."""

    key: str                           # wire key the array sat under ("daemons")
    items: tuple = ()

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index):
        return self.items[index]


# =============================================================================
# Account-level resources
# =============================================================================
@record
class User:
    """The account that owns the API token."""

    id: int
    name: str
    email: str
    card_last_four: Optional[str] = None
    # Forge reports provider links and billing flags as strings, not booleans
    connected_to_github: Optional[str] = None
    connected_to_gitlab: Optional[str] = None
    connected_to_bitbucket: Optional[str] = None
    connected_to_bitbucket_two: Optional[str] = None
    connected_to_digitalocean: Optional[str] = None
    connected_to_linode: Optional[str] = None
    connected_to_vultr: Optional[str] = None
    connected_to_aws: Optional[str] = None
    connected_to_hetzner: Optional[str] = None
    ready_for_billing: Optional[str] = None
    stripe_is_active: Optional[str] = None
    can_create_servers: Optional[bool] = None


@record
class Credential:
    """A server-provider credential (DigitalOcean token, AWS keys, ...)."""

    id: int
    name: str
    type: str


@record
class Region:
    id: str                            # "nyc1", "ams3", ...
    name: str
    sizes: Any                         # {"s-1vcpu-1gb": {"id": ..., "name": ...}} or a list


@record
class Recipe:
    """A reusable bash script that can be run on many servers."""

    id: int
    name: str
    user: str
    created_at: str
    key: Optional[str] = None
    script: Optional[str] = None


# =============================================================================
# Servers
# =============================================================================
@record
class Server:
    id: int
    name: str
    type: str                          # "app", "web", "database", "worker", ...
    provider: str
    size: str
    region: str
    ubuntu_version: str
    ssh_port: int
    revoked: bool
    is_ready: bool
    tags: list
    network: list[int]
    created_at: str
    credential_id: Optional[int] = None
    identifier: Optional[str] = None
    db_status: Optional[str] = None
    redis_status: Optional[str] = None
    php_version: Optional[str] = None
    php_cli_version: Optional[str] = None
    opcache_status: Optional[str] = None
    database_type: Optional[str] = None
    ip_address: Optional[str] = None
    private_ip_address: Optional[str] = None
    local_public_key: Optional[str] = None
    blackfire_status: Optional[str] = None
    papertrail_status: Optional[str] = None
    sudo_password: Optional[str] = None       # only returned on create
    database_password: Optional[str] = None   # only returned on create


@record
class Event:
    """An entry in a server's provisioning/activity log."""

    id: int
    server_id: int = synthetic_field()
    run_as: str
    description: str
    status: str
    created_at: str
    output: Optional[str] = None


@dataclass(frozen=True)
class CreateServer:
    credential_id: int
    name: str
    size: str
    region: str
    provider: str = "ocean2"
    php_version: Optional[str] = UNSET
    database: Optional[str] = UNSET
    database_type: Optional[str] = UNSET
    load_balancer: Optional[bool] = UNSET
    network: Optional[list[int]] = UNSET


@dataclass(frozen=True)
class UpdateServer:
    name: Optional[str] = UNSET
    size: Optional[str] = UNSET
    ip_address: Optional[str] = UNSET
    private_ip_address: Optional[str] = UNSET
    max_upload_size: Optional[int] = UNSET
    network: Optional[list[int]] = UNSET


# =============================================================================
# Sites
# =============================================================================
@record
class Site:
    id: int
    server_id: int = synthetic_field()
    name: str
    directory: str
    wildcards: bool
    status: str
    quick_deploy: bool
    project_type: str
    username: str
    is_secured: bool
    created_at: str
    aliases: list[str] = field(default_factory=list)
    repository: Optional[str] = None
    repository_provider: Optional[str] = None
    repository_branch: Optional[str] = None
    repository_status: Optional[str] = None
    deployment_status: Optional[str] = None
    app: Optional[str] = None
    app_status: Optional[str] = None
    hipchat_room: Optional[str] = None
    slack_channel: Optional[str] = None
    telegram_chat_id: Optional[int] = None
    telegram_chat_title: Optional[str] = None
    telegram_secret: Optional[str] = None
    teams_webhook_url: Optional[str] = None
    discord_webhook_url: Optional[str] = None
    balancing_status: Optional[str] = None
    deployment_url: Optional[str] = None
    php_version: Optional[str] = None
    web_directory: Optional[str] = None
    tags: list = field(default_factory=list)
    failure_deployment_emails: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CreateSite:
    domain: str
    project_type: str = "php"
    aliases: Optional[list[str]] = UNSET
    directory: Optional[str] = UNSET
    isolated: Optional[bool] = UNSET
    username: Optional[str] = UNSET
    database: Optional[str] = UNSET
    php_version: Optional[str] = UNSET
    nginx_template: Optional[int] = UNSET


@dataclass(frozen=True)
class UpdateSite:
    directory: Optional[str] = UNSET
    name: Optional[str] = UNSET
    php_version: Optional[str] = UNSET
    aliases: Optional[list[str]] = UNSET
    wildcards: Optional[bool] = UNSET
    isolated: Optional[bool] = UNSET


@record
class Deployment:
    id: int
    server_id: int = synthetic_field()
    site_id: int = synthetic_field()
    type: int
    status: str
    created_at: str
    commit_hash: Optional[str] = None
    commit_author: Optional[str] = None
    commit_message: Optional[str] = None
    started_at: Optional[str] = None
    ended_at: Optional[str] = None


@record
class SiteCommand:
    """A one-off command executed inside a site's directory."""

    id: int
    server_id: int = synthetic_field()
    site_id: int = synthetic_field()
    command: str
    status: Optional[str] = None
    output: Optional[str] = None
    created_at: Optional[str] = None


@dataclass(frozen=True)
class ExecuteSiteCommand:
    command: str


@dataclass(frozen=True)
class InstallGitRepository:
    provider: str                      # "github", "gitlab", "bitbucket", "custom"
    repository: str                    # "owner/repo"
    branch: Optional[str] = UNSET
    composer: Optional[bool] = UNSET


@dataclass(frozen=True)
class UpdateGitRepository:
    provider: Optional[str] = UNSET
    repository: Optional[str] = UNSET
    branch: Optional[str] = UNSET


@dataclass(frozen=True)
class ChangePhpVersion:
    version: str                       # "php83"


@dataclass(frozen=True)
class FileContent:
    """Body of the endpoints that replace a whole file (deploy script, Nginx config, .env)."""

    content: str


@dataclass(frozen=True)
class UpdateAliases:
    aliases: list[str]


@dataclass(frozen=True)
class UpdateLoadBalancing:
    servers: list[dict]                # [{"id": 12, "weight": 5}, ...]
    method: str = "round_robin"        # "round_robin", "least_connections", "ip_hash"


@dataclass(frozen=True)
class InstallWordPress:
    database: str
    user: str
    password: Optional[str] = UNSET


@dataclass(frozen=True)
class UpdatePackagesAuth:
    packages: dict                     # composer auth.json "http-basic" section


@dataclass(frozen=True)
class SetDeploymentFailureEmails:
    emails: list[str]


@dataclass(frozen=True)
class EnableMaintenance:
    secret: Optional[str] = UNSET
    refresh: Optional[str] = UNSET


@dataclass(frozen=True)
class EnableOctane:
    server: str = "swoole"             # "swoole", "roadrunner", "frankenphp"
    workers: Union[int, str] = "auto"


# =============================================================================
# Server-scoped resources
# =============================================================================
@record
class Daemon:
    """A supervisor-managed long-running process."""

    id: int
    server_id: int = synthetic_field()
    command: str
    user: str
    status: str
    directory: str
    created_at: str
    processes: Optional[int] = None
    startsecs: Optional[int] = None


@dataclass(frozen=True)
class CreateDaemon:
    command: str
    directory: str
    user: str = "forge"
    processes: Optional[int] = UNSET
    startsecs: Optional[int] = UNSET


@record
class Job:
    """A scheduled (cron) job."""

    id: int
    server_id: int = synthetic_field()
    command: str
    user: str
    frequency: str
    cron: str
    status: str
    created_at: str


@dataclass(frozen=True)
class CreateJob:
    command: str
    frequency: str                     # "minutely", "hourly", "nightly", ..., "custom"
    user: str = "forge"
    minute: Optional[str] = UNSET      # the five cron parts, only for "custom"
    hour: Optional[str] = UNSET
    day: Optional[str] = UNSET
    month: Optional[str] = UNSET
    weekday: Optional[str] = UNSET


@record
class Database:
    id: int
    server_id: int = synthetic_field()
    name: str
    status: str
    created_at: str


@dataclass(frozen=True)
class CreateDatabase:
    name: str
    user: Optional[str] = UNSET
    password: Optional[str] = UNSET


@record
class DatabaseUser:
    id: int
    server_id: int = synthetic_field()
    name: str
    status: str
    created_at: str
    databases: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class CreateDatabaseUser:
    name: str
    password: str
    databases: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class UpdateDatabaseUser:
    databases: list[int]


@record
class FirewallRule:
    id: int
    server_id: int = synthetic_field()
    name: str
    port: int
    status: str
    created_at: str
    ip_address: Optional[str] = None


@dataclass(frozen=True)
class CreateFirewallRule:
    name: str
    port: Union[int, str]              # a single port or a range like "8000-8010"
    ip_address: Optional[str] = UNSET


@record
class Monitor:
    id: int
    server_id: int = synthetic_field()
    status: str
    type: str                          # "disk", "used_memory", "cpu_load", ...
    operator: str
    threshold: int
    minutes: int
    state: str
    state_changed_at: str


@dataclass(frozen=True)
class CreateMonitor:
    type: str
    operator: Optional[str] = UNSET
    threshold: Optional[int] = UNSET
    minutes: Optional[int] = UNSET
    notify: Optional[str] = UNSET


@record
class SSHKey:
    id: int
    server_id: int = synthetic_field()
    name: str
    status: str
    created_at: str
    username: Optional[str] = None


@dataclass(frozen=True)
class CreateSSHKey:
    name: str
    key: str
    username: Optional[str] = UNSET


@record
class BackupConfiguration:
    id: int
    server_id: int = synthetic_field()
    provider: str
    provider_name: str
    time: str
    created_at: str
    day_of_week: Optional[int] = None
    last_backup_time: Optional[str] = None
    databases: list = field(default_factory=list)
    backups: list = field(default_factory=list)


@dataclass(frozen=True)
class CreateBackupConfiguration:
    provider: str                      # "s3", "spaces", "custom"
    frequency: str = "daily"
    databases: Optional[list[int]] = UNSET
    credentials: Optional[dict] = UNSET
    directory: Optional[str] = UNSET
    email: Optional[str] = UNSET
    retention: Optional[int] = UNSET
    time: Optional[str] = UNSET
    day: Optional[int] = UNSET


@dataclass(frozen=True)
class UpdateBackupConfiguration:
    provider: Optional[str] = UNSET
    frequency: Optional[str] = UNSET
    databases: Optional[list[int]] = UNSET
    credentials: Optional[dict] = UNSET
    directory: Optional[str] = UNSET
    email: Optional[str] = UNSET
    retention: Optional[int] = UNSET
    time: Optional[str] = UNSET
    day: Optional[int] = UNSET


@record
class NginxTemplate:
    id: int
    server_id: int = synthetic_field()
    name: str
    content: str


@dataclass(frozen=True)
class CreateNginxTemplate:
    name: str
    content: str


@dataclass(frozen=True)
class UpdateNginxTemplate:
    name: Optional[str] = UNSET
    content: Optional[str] = UNSET


@record
class PhpVersion:
    version: str                       # "php83"
    displayable_version: str           # "PHP 8.3"
    status: str
    used_as_default: bool
    used_on_cli: bool


@dataclass(frozen=True)
class PhpVersionRequest:
    version: str


@dataclass(frozen=True)
class InstallBlackfire:
    # Blackfire's own server credentials, not the Forge server ID in the path
    server_id: str
    server_token: str


@dataclass(frozen=True)
class InstallPapertrail:
    host: str                          # "logs.papertrailapp.com:12345"


@dataclass(frozen=True)
class ManageService:
    service: str                       # "nginx", "mysql", "postgres", "redis", ...


# =============================================================================
# Site-scoped resources
# =============================================================================
@record
class Certificate:
    id: int
    server_id: int = synthetic_field()
    site_id: int = synthetic_field()
    domain: str
    status: str
    type: str
    active: bool
    created_at: str
    request_status: Optional[str] = None
    expires_at: Optional[str] = None
    activation_error: Optional[str] = None


@dataclass(frozen=True)
class ObtainLetsEncryptCertificate:
    domains: list[str]


@record
class Worker:
    """A queue worker attached to a site."""

    id: int
    server_id: int = synthetic_field()
    site_id: int = synthetic_field()
    connection: str
    command: str
    queue: str
    timeout: int
    sleep: int
    tries: int
    environment: str
    daemon: int                        # 0 or 1
    status: str
    created_at: str


@dataclass(frozen=True)
class CreateWorker:
    connection: str                    # "redis", "database", "sqs", ...
    queue: str = "default"
    timeout: Optional[int] = UNSET
    sleep: Optional[int] = UNSET
    tries: Optional[int] = UNSET
    processes: Optional[int] = UNSET
    daemon: Optional[bool] = UNSET
    force: Optional[bool] = UNSET
    php_version: Optional[str] = UNSET


@record
class Webhook:
    """A URL Forge calls after every deployment of a site."""

    id: int
    server_id: int = synthetic_field()
    site_id: int = synthetic_field()
    url: str
    created_at: str


@dataclass(frozen=True)
class CreateWebhook:
    url: str


@record
class SecurityRule:
    """HTTP basic-auth protection for a path of a site."""

    id: int
    server_id: int = synthetic_field()
    site_id: int = synthetic_field()
    name: str
    path: str
    credentials: str
    created_at: str


@dataclass(frozen=True)
class CreateSecurityRule:
    name: str
    path: Optional[str] = UNSET
    credentials: Optional[list[dict]] = UNSET   # [{"username": ..., "password": ...}]


@record
class RedirectRule:
    id: int
    server_id: int = synthetic_field()
    site_id: int = synthetic_field()
    from_: str = wire_field("from")
    to: str
    type: str                          # "redirect" or "permanent"
    status: str
    created_at: str


@dataclass(frozen=True)
class CreateRedirectRule:
    from_: str = wire_field("from")
    to: str = wire_field("to")
    type: Optional[str] = UNSET


# -----------------------------------------------------------------------------
# Recipes (account-level, request side)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class CreateRecipe:
    name: str
    script: str
    user: str = "root"


@dataclass(frozen=True)
class UpdateRecipe:
    name: Optional[str] = UNSET
    user: Optional[str] = UNSET
    script: Optional[str] = UNSET


@dataclass(frozen=True)
class RunRecipe:
    servers: list[int]
    notify: Optional[bool] = UNSET


# =============================================================================
# Registry
# =============================================================================
# Resource name → response record.  resource_schema() is the lookup the rest
# of the code (and humans in a REPL) use to inspect a field table.
RESOURCES: dict[str, type] = {
    cls.__name__: cls
    for cls in (
        User, Credential, Region, Recipe, Server, Event, Site, Deployment,
        SiteCommand, Daemon, Job, Database, DatabaseUser, FirewallRule,
        Monitor, SSHKey, BackupConfiguration, NginxTemplate, PhpVersion,
        Certificate, Worker, Webhook, SecurityRule, RedirectRule,
    )
}


def resource_schema(name: str) -> ResourceSchema:
    """Return the field table of a resource by name (e.g. "Daemon").

    Raises:
        ProgrammerError: If no such resource exists.
    """
    try:
        record = RESOURCES[name]
    except KeyError:
        raise ProgrammerError(f"Unknown resource '{name}'") from None
    return schema_for(record)
