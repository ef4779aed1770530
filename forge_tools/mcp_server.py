# =============================================================================
# forge_tools/mcp_server.py  —  FastMCP Tool Server
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Advertises the Forge tools, workflow prompts and reference guides over
#   MCP.  Each tool function below is a typed signature for the agent to
#   read; the body hands the arguments to forge_tools.handlers.run_tool(),
#   which validates them, calls Forge and renders the JSON answer.
#
# HOW IT WORKS (the flow):
#   1. The ADK agent decides it needs Forge data (e.g. the daemons of a server)
#   2. It calls a tool by name via MCP (e.g. "list_daemons")
#   3. FastMCP routes the call to the function registered below
#   4. run_tool() validates → ForgeClient.call() → JSON text
#   5. The agent receives {"success": true, ...} or {"success": false, "error": ...}
#
# TWO WAYS A TOOL GETS HERE:
#   - Tools that take nothing but a server_id (and maybe a site_id) share one
#     of three signatures, so they are registered in a loop at the bottom
#     from the registry's own description.
#   - Every other tool has its own typed function in this file.
#   ADVERTISED collects both, so a test can check nothing was left out.
#
# TOOL NAMING CONVENTIONS:
#   - list_* / get_*   → read-only
#   - create_*, update_*, delete_*, enable_*, disable_*, restart_*, reboot_*,
#     deploy_*, run_*, install_* → change the server
#
# PROMPTS:    forge_tools/workflows.py (deploy, migrate, SSL, setup, ...)
# RESOURCES:  forge_tools/guides/*.md, served under forge:// URIs
#
# RUNNING THIS SERVER:
#   a) Standalone:  python -m forge_tools.mcp_server
#   b) Spawned by the agent via stdio transport (forge_agent/forge_agent.py)
# =============================================================================

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastmcp import FastMCP

from forge_client import ForgeClient, ForgeError, load_settings
from forge_tools import workflows
from forge_tools.handlers import TOOLS, error_response, run_tool

load_dotenv()

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because stdout carries the MCP JSON stream.
#
# ANSI COLOR CODES:
#     - CYAN for incoming requests (tool name + parameters)
#     - GREEN for the response JSON
#     - YELLOW for intermediate status messages
# =============================================================================

_CYAN = "\033[36m"     # Requests (tool calls with params)
_GREEN = "\033[32m"    # Responses (JSON output)
_YELLOW = "\033[33m"   # Status/progress messages
_RESET = "\033[0m"

logging.basicConfig(
    level=os.environ.get("FORGE_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)

# Never echoed to the log.
_SECRETS = {"password", "content", "credentials", "packages", "blackfire_server_token", "secret"}


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items() if k not in _SECRETS and v is not None)
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: str) -> str:
    """Log the tool response compactly in GREEN, then return it."""
    logging.info(f"{_GREEN}  ← {tool_name} response: {' '.join(result.split())}{_RESET}")
    return result


# =============================================================================
# Forge client (built on first use)
# =============================================================================
# Building it lazily lets the server start (and list its tools) even when
# FORGE_API_TOKEN is missing; every call then answers with the config error.
_client: Optional[ForgeClient] = None


def _get_client() -> ForgeClient:
    global _client
    if _client is None:
        _client = ForgeClient.from_settings(load_settings())
    return _client


def _run(tool_name: str, **arguments) -> str:
    _log_request(tool_name, **arguments)
    if not TOOLS[tool_name].read_only:
        _log_status("this call changes server state")
    try:
        client = _get_client()
    except ForgeError as exc:
        _log_status(f"client unavailable: {exc}")
        return _log_response(tool_name, error_response(str(exc)))

    arguments = {k: v for k, v in arguments.items() if v is not None}
    return _log_response(tool_name, run_tool(tool_name, arguments, client))


mcp = FastMCP("forge-ops")

ADVERTISED: set = set()


def _tool(fn):
    """Advertise a typed tool function under its own name."""
    ADVERTISED.add(fn.__name__)
    return mcp.tool()(fn)


# =============================================================================
# Servers
# =============================================================================
@_tool
def create_server(
    credential_id: int,
    name: str,
    size: str,
    region: str,
    provider: Optional[str] = None,
    php_version: Optional[str] = None,
    database_type: Optional[str] = None,
    database_name: Optional[str] = None,
    load_balancer: Optional[bool] = None,
) -> str:
    """Provision a new server with a cloud provider.

    Takes several minutes and costs money at the provider.  Only call this
    after the user confirmed size, region and provider.

    Args:
        credential_id: Provider credential ID (from list_credentials).
        name: Server name (letters, digits, dashes, underscores).
        size: Provider plan, e.g. "s-1vcpu-1gb".
        region: Provider region (from list_regions), e.g. "nyc3".
        provider: ocean2, aws, linode, hetzner, vultr or custom (default ocean2).
        php_version: e.g. "php83".
        database_type: mysql8, mysql57, mariadb, postgres or postgres15.
        database_name: First database to create (needs database_type).
        load_balancer: Create the server as a load balancer.

    Returns:
        JSON with the new server.  sudo_password and database_password are
        only ever returned here; tell the user to store them.
    """
    return _run("create_server", credential_id=credential_id, name=name, size=size, region=region,
                provider=provider, php_version=php_version, database_type=database_type,
                database_name=database_name, load_balancer=load_balancer)


@_tool
def update_server(
    server_id: int,
    name: Optional[str] = None,
    size: Optional[str] = None,
    ip_address: Optional[str] = None,
    private_ip_address: Optional[str] = None,
    max_upload_size: Optional[int] = None,
    network: Optional[list[int]] = None,
) -> str:
    """Update a server's name, size, addresses, upload limit or network.

    Args:
        server_id: The unique ID of the Forge server.
        network: IDs of servers this one may talk to over the private network.
    """
    return _run("update_server", server_id=server_id, name=name, size=size, ip_address=ip_address,
                private_ip_address=private_ip_address, max_upload_size=max_upload_size, network=network)


@_tool
def get_event_output(server_id: int, event_id: int) -> str:
    """Get the output of one server event (from list_events)."""
    return _run("get_event_output", server_id=server_id, event_id=event_id)


# =============================================================================
# Services
# =============================================================================
@_tool
def install_blackfire(server_id: int, blackfire_server_id: str, blackfire_server_token: str) -> str:
    """Install the Blackfire profiler on a server.

    Args:
        server_id: The unique ID of the Forge server.
        blackfire_server_id: The Blackfire server ID from the Blackfire account.
        blackfire_server_token: The Blackfire server token.
    """
    return _run("install_blackfire", server_id=server_id, blackfire_server_id=blackfire_server_id,
                blackfire_server_token=blackfire_server_token)


@_tool
def install_papertrail(server_id: int, host: str) -> str:
    """Ship the server's logs to Papertrail.

    Args:
        server_id: The unique ID of the Forge server.
        host: The Papertrail log destination, e.g. "logs.papertrailapp.com:12345".
    """
    return _run("install_papertrail", server_id=server_id, host=host)


def _service_tool(name: str):
    def manage(server_id: int, service: str) -> str:
        return _run(name, server_id=server_id, service=service)
    return manage


for _name in ("start_service", "stop_service", "restart_service"):
    ADVERTISED.add(_name)
    mcp.tool(name=_name, description=TOOLS[_name].description +
             " service is one of nginx, mysql, postgres, redis, php, supervisor, memcached, "
             "beanstalk or meilisearch.")(_service_tool(_name))


# =============================================================================
# Daemons
# =============================================================================
@_tool
def get_daemon(server_id: int, daemon_id: int) -> str:
    """Get one supervisor daemon."""
    return _run("get_daemon", server_id=server_id, daemon_id=daemon_id)


@_tool
def create_daemon(
    server_id: int,
    command: str,
    directory: str,
    user: Optional[str] = None,
    processes: Optional[int] = None,
    startsecs: Optional[int] = None,
) -> str:
    """Create a long-running daemon managed by supervisor.

    Args:
        server_id: The unique ID of the Forge server.
        command: The command to run (e.g. "php artisan horizon").
        directory: The directory the command runs in (e.g. "/home/forge/example.com").
        user: Unix user to run as (defaults to "forge").
        processes: Number of processes, 1-10 (defaults to 1).
        startsecs: Seconds the process must stay up to count as started.
    """
    return _run("create_daemon", server_id=server_id, command=command, directory=directory,
                user=user, processes=processes, startsecs=startsecs)


@_tool
def restart_daemon(server_id: int, daemon_id: int) -> str:
    """Restart a daemon.

    Args:
        server_id: The unique ID of the Forge server.
        daemon_id: The daemon ID (from list_daemons).
    """
    return _run("restart_daemon", server_id=server_id, daemon_id=daemon_id)


@_tool
def delete_daemon(server_id: int, daemon_id: int) -> str:
    """Delete a daemon and stop its processes.

    Args:
        server_id: The unique ID of the Forge server.
        daemon_id: The daemon ID (from list_daemons).
    """
    return _run("delete_daemon", server_id=server_id, daemon_id=daemon_id)


# =============================================================================
# Scheduled jobs
# =============================================================================
@_tool
def get_scheduled_job(server_id: int, job_id: int) -> str:
    """Get one scheduled job."""
    return _run("get_scheduled_job", server_id=server_id, job_id=job_id)


@_tool
def create_scheduled_job(
    server_id: int,
    command: str,
    frequency: str,
    user: Optional[str] = None,
    minute: Optional[str] = None,
    hour: Optional[str] = None,
    day: Optional[str] = None,
    month: Optional[str] = None,
    weekday: Optional[str] = None,
) -> str:
    """Schedule a command to run periodically.

    Args:
        server_id: The unique ID of the Forge server.
        command: The command to run (e.g. "php /home/forge/app/artisan schedule:run").
        frequency: minutely, hourly, nightly, weekly, monthly, reboot or custom.
        user: Unix user to run as (defaults to "forge").
        minute: Cron minute field; all five fields are required when frequency is custom.
        hour: Cron hour field.
        day: Cron day-of-month field.
        month: Cron month field.
        weekday: Cron day-of-week field.
    """
    return _run("create_scheduled_job", server_id=server_id, command=command, frequency=frequency, user=user,
                minute=minute, hour=hour, day=day, month=month, weekday=weekday)


@_tool
def delete_scheduled_job(server_id: int, job_id: int) -> str:
    """Delete a scheduled job."""
    return _run("delete_scheduled_job", server_id=server_id, job_id=job_id)


@_tool
def get_job_output(server_id: int, job_id: int) -> str:
    """Get the output of the most recent run of a scheduled job.

    Args:
        server_id: The unique ID of the Forge server.
        job_id: The scheduled job ID (from list_scheduled_jobs).
    """
    return _run("get_job_output", server_id=server_id, job_id=job_id)


# =============================================================================
# Databases
# =============================================================================
@_tool
def get_database(server_id: int, database_id: int) -> str:
    """Get one database."""
    return _run("get_database", server_id=server_id, database_id=database_id)


@_tool
def create_database(
    server_id: int,
    name: str,
    user: Optional[str] = None,
    password: Optional[str] = None,
) -> str:
    """Create a database, optionally with a user that can access it.

    Args:
        server_id: The unique ID of the Forge server.
        name: The database name.
        user: Also create a database user with this name.
        password: Password for that user.
    """
    return _run("create_database", server_id=server_id, name=name, user=user, password=password)


@_tool
def delete_database(server_id: int, database_id: int) -> str:
    """Delete a database and all of its data.  Cannot be undone."""
    return _run("delete_database", server_id=server_id, database_id=database_id)


@_tool
def get_database_user(server_id: int, user_id: int) -> str:
    """Get one database user and the databases it can access."""
    return _run("get_database_user", server_id=server_id, user_id=user_id)


@_tool
def create_database_user(server_id: int, name: str, password: str, databases: Optional[list[int]] = None) -> str:
    """Create a database user.

    Args:
        server_id: The unique ID of the Forge server.
        name: The user name.
        password: The user's password.
        databases: IDs of the databases the user may access.
    """
    return _run("create_database_user", server_id=server_id, name=name, password=password, databases=databases)


@_tool
def update_database_user(server_id: int, user_id: int, databases: list[int]) -> str:
    """Replace the list of databases a database user can access."""
    return _run("update_database_user", server_id=server_id, user_id=user_id, databases=databases)


@_tool
def delete_database_user(server_id: int, user_id: int) -> str:
    """Delete a database user."""
    return _run("delete_database_user", server_id=server_id, user_id=user_id)


# =============================================================================
# Firewall
# =============================================================================
@_tool
def get_firewall_rule(server_id: int, rule_id: int) -> str:
    """Get one firewall rule."""
    return _run("get_firewall_rule", server_id=server_id, rule_id=rule_id)


@_tool
def create_firewall_rule(server_id: int, name: str, port: int, ip_address: Optional[str] = None) -> str:
    """Open a port in the server firewall.

    Args:
        server_id: The unique ID of the Forge server.
        name: A label for the rule (e.g. "redis").
        port: The port to open (1-65535).
        ip_address: Only allow traffic from this IP address (default: any).
    """
    return _run("create_firewall_rule", server_id=server_id, name=name, port=port, ip_address=ip_address)


@_tool
def delete_firewall_rule(server_id: int, rule_id: int) -> str:
    """Delete a firewall rule.

    Args:
        server_id: The unique ID of the Forge server.
        rule_id: The firewall rule ID (from list_firewall_rules).
    """
    return _run("delete_firewall_rule", server_id=server_id, rule_id=rule_id)


# =============================================================================
# Monitors
# =============================================================================
@_tool
def get_monitor(server_id: int, monitor_id: int) -> str:
    """Get one monitor and its current state."""
    return _run("get_monitor", server_id=server_id, monitor_id=monitor_id)


@_tool
def create_monitor(
    server_id: int,
    type: str,
    operator: Optional[str] = None,
    threshold: Optional[int] = None,
    minutes: Optional[int] = None,
    notify: Optional[str] = None,
) -> str:
    """Alert when a server resource crosses a threshold.

    Args:
        server_id: The unique ID of the Forge server.
        type: disk, used_memory, cpu_load or free_memory.
        operator: gte or lte.
        threshold: The value to compare against (percent or load).
        minutes: How long the condition must hold before alerting.
        notify: Email address to notify.
    """
    return _run("create_monitor", server_id=server_id, type=type, operator=operator,
                threshold=threshold, minutes=minutes, notify=notify)


@_tool
def delete_monitor(server_id: int, monitor_id: int) -> str:
    """Delete a monitor."""
    return _run("delete_monitor", server_id=server_id, monitor_id=monitor_id)


# =============================================================================
# SSH keys
# =============================================================================
@_tool
def get_ssh_key(server_id: int, key_id: int) -> str:
    """Get one SSH key."""
    return _run("get_ssh_key", server_id=server_id, key_id=key_id)


@_tool
def create_ssh_key(server_id: int, name: str, key: str, username: Optional[str] = None) -> str:
    """Add a public SSH key to a server.

    Args:
        server_id: The unique ID of the Forge server.
        name: A label for the key (e.g. the owner's name).
        key: The public key ("ssh-ed25519 AAAA...").
        username: Unix user to install it for (defaults to "forge").
    """
    return _run("create_ssh_key", server_id=server_id, name=name, key=key, username=username)


@_tool
def delete_ssh_key(server_id: int, key_id: int) -> str:
    """Remove an SSH key from a server."""
    return _run("delete_ssh_key", server_id=server_id, key_id=key_id)


# =============================================================================
# PHP
# =============================================================================
@_tool
def install_php(server_id: int, version: str) -> str:
    """Install an additional PHP version (e.g. "php84") on a server."""
    return _run("install_php", server_id=server_id, version=version)


@_tool
def update_php(server_id: int, version: str) -> str:
    """Update an installed PHP version to its latest patch release."""
    return _run("update_php", server_id=server_id, version=version)


# =============================================================================
# Backups
# =============================================================================
@_tool
def get_backup_configuration(server_id: int, backup_id: int) -> str:
    """Get one backup configuration and its recent backups."""
    return _run("get_backup_configuration", server_id=server_id, backup_id=backup_id)


@_tool
def create_backup_configuration(
    server_id: int,
    provider: str,
    frequency: Optional[str] = None,
    databases: Optional[list[int]] = None,
    credentials: Optional[dict] = None,
    directory: Optional[str] = None,
    email: Optional[str] = None,
    retention: Optional[int] = None,
    time: Optional[str] = None,
    day: Optional[int] = None,
) -> str:
    """Back up databases to object storage on a schedule.

    Args:
        server_id: The unique ID of the Forge server.
        provider: s3, spaces or custom.
        frequency: hourly, daily, weekly or custom (default daily).
        databases: IDs of the databases to back up.
        credentials: Storage credentials (key, secret, region, bucket).
        directory: Directory inside the bucket.
        email: Address to notify on failure.
        retention: Number of backups to keep.
        time: Time of day for daily and weekly backups ("03:00").
        day: Day of the week for weekly backups (0-6).
    """
    return _run("create_backup_configuration", server_id=server_id, provider=provider, frequency=frequency,
                databases=databases, credentials=credentials, directory=directory, email=email,
                retention=retention, time=time, day=day)


@_tool
def update_backup_configuration(
    server_id: int,
    backup_id: int,
    provider: Optional[str] = None,
    frequency: Optional[str] = None,
    databases: Optional[list[int]] = None,
    credentials: Optional[dict] = None,
    directory: Optional[str] = None,
    email: Optional[str] = None,
    retention: Optional[int] = None,
    time: Optional[str] = None,
    day: Optional[int] = None,
) -> str:
    """Change a backup configuration.  Only the given fields change."""
    return _run("update_backup_configuration", server_id=server_id, backup_id=backup_id, provider=provider,
                frequency=frequency, databases=databases, credentials=credentials, directory=directory,
                email=email, retention=retention, time=time, day=day)


@_tool
def delete_backup_configuration(server_id: int, backup_id: int) -> str:
    """Delete a backup configuration."""
    return _run("delete_backup_configuration", server_id=server_id, backup_id=backup_id)


@_tool
def restore_backup(server_id: int, backup_id: int, archive_id: int) -> str:
    """Restore one stored backup into its databases.  Current data is overwritten.

    Args:
        server_id: The unique ID of the Forge server.
        backup_id: The backup configuration ID.
        archive_id: The stored backup to restore (from get_backup_configuration).
    """
    return _run("restore_backup", server_id=server_id, backup_id=backup_id, archive_id=archive_id)


@_tool
def delete_backup(server_id: int, backup_id: int, archive_id: int) -> str:
    """Delete one stored backup."""
    return _run("delete_backup", server_id=server_id, backup_id=backup_id, archive_id=archive_id)


# =============================================================================
# Nginx templates
# =============================================================================
@_tool
def get_nginx_template(server_id: int, template_id: int) -> str:
    """Get one Nginx template with its content."""
    return _run("get_nginx_template", server_id=server_id, template_id=template_id)


@_tool
def create_nginx_template(server_id: int, name: str, content: str) -> str:
    """Save an Nginx server block as a reusable template."""
    return _run("create_nginx_template", server_id=server_id, name=name, content=content)


@_tool
def update_nginx_template(server_id: int, template_id: int, name: Optional[str] = None,
                          content: Optional[str] = None) -> str:
    """Rename an Nginx template or replace its content."""
    return _run("update_nginx_template", server_id=server_id, template_id=template_id, name=name, content=content)


@_tool
def delete_nginx_template(server_id: int, template_id: int) -> str:
    """Delete an Nginx template."""
    return _run("delete_nginx_template", server_id=server_id, template_id=template_id)


# =============================================================================
# Recipes
# =============================================================================
@_tool
def get_recipe(recipe_id: int) -> str:
    """Get one recipe with its script."""
    return _run("get_recipe", recipe_id=recipe_id)


@_tool
def create_recipe(name: str, script: str, user: Optional[str] = None) -> str:
    """Save a bash script as a recipe.

    Args:
        name: The recipe name.
        script: The bash script.
        user: Unix user the script runs as (defaults to "root").
    """
    return _run("create_recipe", name=name, script=script, user=user)


@_tool
def update_recipe(recipe_id: int, name: Optional[str] = None, user: Optional[str] = None,
                  script: Optional[str] = None) -> str:
    """Change a recipe's name, user or script."""
    return _run("update_recipe", recipe_id=recipe_id, name=name, user=user, script=script)


@_tool
def delete_recipe(recipe_id: int) -> str:
    """Delete a recipe."""
    return _run("delete_recipe", recipe_id=recipe_id)


@_tool
def run_recipe(recipe_id: int, servers: list[int], notify: Optional[bool] = None) -> str:
    """Run a recipe on one or more servers.

    Args:
        recipe_id: The recipe ID (from list_recipes).
        servers: IDs of the servers to run it on.
        notify: Email the account owner when the run finishes.
    """
    return _run("run_recipe", recipe_id=recipe_id, servers=servers, notify=notify)


# =============================================================================
# Sites
# =============================================================================
@_tool
def create_site(
    server_id: int,
    domain: str,
    project_type: Optional[str] = None,
    aliases: Optional[list[str]] = None,
    directory: Optional[str] = None,
    isolated: Optional[bool] = None,
    username: Optional[str] = None,
    database: Optional[str] = None,
    php_version: Optional[str] = None,
    nginx_template: Optional[int] = None,
) -> str:
    """Create a site (an Nginx virtual host) on a server.

    Args:
        server_id: The unique ID of the Forge server.
        domain: The site domain (e.g. "example.com").
        project_type: php, html, symfony, symfony_dev or symfony_four (default php, which covers Laravel).
        aliases: Additional domains.
        directory: Web directory, "/public" for Laravel.
        isolated: Run the site as its own Unix user.
        username: The isolated user name.
        database: Create a database with this name.
        php_version: e.g. "php83".
        nginx_template: Nginx template ID (from list_nginx_templates).
    """
    return _run("create_site", server_id=server_id, domain=domain, project_type=project_type, aliases=aliases,
                directory=directory, isolated=isolated, username=username, database=database,
                php_version=php_version, nginx_template=nginx_template)


@_tool
def update_site(
    server_id: int,
    site_id: int,
    name: Optional[str] = None,
    directory: Optional[str] = None,
    php_version: Optional[str] = None,
    aliases: Optional[list[str]] = None,
    wildcards: Optional[bool] = None,
    isolated: Optional[bool] = None,
) -> str:
    """Change a site's domain, web directory, PHP version or aliases.

    Args:
        server_id: The unique ID of the Forge server.
        site_id: The unique ID of the site.
        name: The new domain.
        aliases: The complete alias list (replaces the current one).
        wildcards: Answer for every subdomain.
    """
    return _run("update_site", server_id=server_id, site_id=site_id, name=name, directory=directory,
                php_version=php_version, aliases=aliases, wildcards=wildcards, isolated=isolated)


@_tool
def change_php_version(server_id: int, site_id: int, version: str) -> str:
    """Switch the PHP version a site runs on (e.g. "php84")."""
    return _run("change_php_version", server_id=server_id, site_id=site_id, version=version)


@_tool
def update_aliases(server_id: int, site_id: int, aliases: list[str]) -> str:
    """Replace the alias domains of a site."""
    return _run("update_aliases", server_id=server_id, site_id=site_id, aliases=aliases)


@_tool
def update_load_balancing(server_id: int, site_id: int, servers: list[dict], method: Optional[str] = None) -> str:
    """Set the servers a load-balancer site forwards to.

    Args:
        server_id: The unique ID of the load-balancer server.
        site_id: The load-balancer site.
        servers: Upstreams, e.g. [{"id": 12, "weight": 5}, {"id": 13, "weight": 5}].
        method: round_robin, least_connections or ip_hash (default round_robin).
    """
    return _run("update_load_balancing", server_id=server_id, site_id=site_id, servers=servers, method=method)


@_tool
def install_wordpress(server_id: int, site_id: int, database: str, user: str,
                      password: Optional[str] = None) -> str:
    """Install WordPress on a site.

    Args:
        server_id: The unique ID of the Forge server.
        site_id: The unique ID of the site.
        database: The database WordPress uses.
        user: The database user WordPress connects as.
        password: That user's password.
    """
    return _run("install_wordpress", server_id=server_id, site_id=site_id, database=database,
                user=user, password=password)


@_tool
def update_packages_auth(server_id: int, site_id: int, packages: dict) -> str:
    """Replace the Composer credentials (auth.json) of a site.

    Args:
        server_id: The unique ID of the Forge server.
        site_id: The unique ID of the site.
        packages: e.g. {"repo.packagist.com": {"username": "...", "password": "..."}}.
    """
    return _run("update_packages_auth", server_id=server_id, site_id=site_id, packages=packages)


# =============================================================================
# Deployments
# =============================================================================
@_tool
def get_deployment(server_id: int, site_id: int, deployment_id: int) -> str:
    """Get one deployment from a site's history."""
    return _run("get_deployment", server_id=server_id, site_id=site_id, deployment_id=deployment_id)


@_tool
def get_deployment_output(server_id: int, site_id: int, deployment_id: int) -> str:
    """Get the output of one deployment from a site's history.

    Use get_deployment_log for the latest deployment instead.
    """
    return _run("get_deployment_output", server_id=server_id, site_id=site_id, deployment_id=deployment_id)


@_tool
def update_deployment_script(server_id: int, site_id: int, content: str) -> str:
    """Replace the deployment script of a site.

    Read it with get_deployment_script first and send back the complete
    script; there is no partial update.
    """
    return _run("update_deployment_script", server_id=server_id, site_id=site_id, content=content)


@_tool
def set_deployment_failure_emails(server_id: int, site_id: int, emails: list[str]) -> str:
    """Set who is emailed when a deployment of the site fails."""
    return _run("set_deployment_failure_emails", server_id=server_id, site_id=site_id, emails=emails)


# =============================================================================
# Git
# =============================================================================
@_tool
def install_git_repository(server_id: int, site_id: int, provider: str, repository: str,
                           branch: Optional[str] = None, composer: Optional[bool] = None) -> str:
    """Attach a git repository to a site and pull it.

    Args:
        server_id: The unique ID of the Forge server.
        site_id: The unique ID of the site.
        provider: github, gitlab, gitlab-custom, bitbucket or custom.
        repository: "owner/repo".
        branch: Branch to deploy (defaults to the repository default).
        composer: Run composer install after cloning.
    """
    return _run("install_git_repository", server_id=server_id, site_id=site_id, provider=provider,
                repository=repository, branch=branch, composer=composer)


@_tool
def update_git_repository(server_id: int, site_id: int, provider: Optional[str] = None,
                          repository: Optional[str] = None, branch: Optional[str] = None) -> str:
    """Point a site at a different repository or branch.  Give at least one field."""
    return _run("update_git_repository", server_id=server_id, site_id=site_id, provider=provider,
                repository=repository, branch=branch)


# =============================================================================
# Commands
# =============================================================================
@_tool
def execute_site_command(server_id: int, site_id: int, command: str) -> str:
    """Run a one-off command in a site's directory (e.g. "php artisan cache:clear").

    The command is queued; read its output with get_site_command.
    """
    return _run("execute_site_command", server_id=server_id, site_id=site_id, command=command)


@_tool
def get_site_command(server_id: int, site_id: int, command_id: int) -> str:
    """Get a site command with its status and output."""
    return _run("get_site_command", server_id=server_id, site_id=site_id, command_id=command_id)


# =============================================================================
# Config files
# =============================================================================
@_tool
def update_env_file(server_id: int, site_id: int, content: str) -> str:
    """Replace the .env file of a site.

    Read it with get_env_file first and send back the complete file.
    """
    return _run("update_env_file", server_id=server_id, site_id=site_id, content=content)


@_tool
def update_nginx_config(server_id: int, site_id: int, content: str) -> str:
    """Replace the Nginx configuration of a site.

    Read it with get_nginx_config first.  Run test_nginx afterwards.
    """
    return _run("update_nginx_config", server_id=server_id, site_id=site_id, content=content)


# =============================================================================
# Certificates
# =============================================================================
@_tool
def get_certificate(server_id: int, site_id: int, certificate_id: int) -> str:
    """Get one SSL certificate."""
    return _run("get_certificate", server_id=server_id, site_id=site_id, certificate_id=certificate_id)


@_tool
def get_certificate_signing_request(server_id: int, site_id: int, certificate_id: int) -> str:
    """Get the CSR of a certificate, to send to a certificate authority."""
    return _run("get_certificate_signing_request", server_id=server_id, site_id=site_id,
                certificate_id=certificate_id)


@_tool
def obtain_letsencrypt_certificate(server_id: int, site_id: int, domains: list[str]) -> str:
    """Request a free Let's Encrypt certificate for a site.

    The domains must already point at the server's IP address.

    Args:
        server_id: The unique ID of the Forge server.
        site_id: The unique ID of the site.
        domains: The domains to cover (e.g. ["example.com", "www.example.com"]).
    """
    return _run("obtain_letsencrypt_certificate", server_id=server_id, site_id=site_id, domains=domains)


@_tool
def activate_certificate(server_id: int, site_id: int, certificate_id: int) -> str:
    """Make a certificate the one the site serves."""
    return _run("activate_certificate", server_id=server_id, site_id=site_id, certificate_id=certificate_id)


@_tool
def delete_certificate(server_id: int, site_id: int, certificate_id: int) -> str:
    """Delete a certificate."""
    return _run("delete_certificate", server_id=server_id, site_id=site_id, certificate_id=certificate_id)


# =============================================================================
# Queue workers
# =============================================================================
@_tool
def get_worker(server_id: int, site_id: int, worker_id: int) -> str:
    """Get one queue worker."""
    return _run("get_worker", server_id=server_id, site_id=site_id, worker_id=worker_id)


@_tool
def create_worker(
    server_id: int,
    site_id: int,
    connection: str,
    queue: Optional[str] = None,
    timeout: Optional[int] = None,
    sleep: Optional[int] = None,
    tries: Optional[int] = None,
    processes: Optional[int] = None,
    daemon: Optional[bool] = None,
    php_version: Optional[str] = None,
) -> str:
    """Create a queue worker for a site.

    Args:
        server_id: The unique ID of the Forge server.
        site_id: The unique ID of the site.
        connection: Queue connection (e.g. "redis", "database", "sqs").
        queue: Queue name(s), comma separated (defaults to "default").
        timeout: Seconds a job may run before it is killed.
        sleep: Seconds to sleep when the queue is empty.
        tries: Attempts before a job is marked failed.
        processes: Number of worker processes.
        daemon: Run the worker as a daemon.
        php_version: PHP version to run the worker with.
    """
    return _run("create_worker", server_id=server_id, site_id=site_id, connection=connection, queue=queue,
                timeout=timeout, sleep=sleep, tries=tries, processes=processes, daemon=daemon,
                php_version=php_version)


@_tool
def restart_worker(server_id: int, site_id: int, worker_id: int) -> str:
    """Restart a queue worker (e.g. after a deployment changed job code).

    Args:
        server_id: The unique ID of the Forge server.
        site_id: The unique ID of the site.
        worker_id: The worker ID (from list_workers).
    """
    return _run("restart_worker", server_id=server_id, site_id=site_id, worker_id=worker_id)


@_tool
def delete_worker(server_id: int, site_id: int, worker_id: int) -> str:
    """Delete a queue worker."""
    return _run("delete_worker", server_id=server_id, site_id=site_id, worker_id=worker_id)


@_tool
def get_worker_output(server_id: int, site_id: int, worker_id: int) -> str:
    """Get the recent output of a queue worker."""
    return _run("get_worker_output", server_id=server_id, site_id=site_id, worker_id=worker_id)


# =============================================================================
# Webhooks, security rules, redirect rules
# =============================================================================
@_tool
def get_webhook(server_id: int, site_id: int, webhook_id: int) -> str:
    """Get one deployment webhook."""
    return _run("get_webhook", server_id=server_id, site_id=site_id, webhook_id=webhook_id)


@_tool
def create_webhook(server_id: int, site_id: int, url: str) -> str:
    """Register a URL that Forge calls after every deployment of a site.

    Args:
        server_id: The unique ID of the Forge server.
        site_id: The unique ID of the site.
        url: The URL to call.
    """
    return _run("create_webhook", server_id=server_id, site_id=site_id, url=url)


@_tool
def delete_webhook(server_id: int, site_id: int, webhook_id: int) -> str:
    """Delete a deployment webhook."""
    return _run("delete_webhook", server_id=server_id, site_id=site_id, webhook_id=webhook_id)


@_tool
def get_security_rule(server_id: int, site_id: int, rule_id: int) -> str:
    """Get one security (basic auth) rule."""
    return _run("get_security_rule", server_id=server_id, site_id=site_id, rule_id=rule_id)


@_tool
def create_security_rule(server_id: int, site_id: int, name: str, path: Optional[str] = None,
                         credentials: Optional[list[dict]] = None) -> str:
    """Protect a path of a site with HTTP basic auth.

    Args:
        server_id: The unique ID of the Forge server.
        site_id: The unique ID of the site.
        name: A label for the rule.
        path: The path to protect (the whole site when left out).
        credentials: [{"username": "...", "password": "..."}].
    """
    return _run("create_security_rule", server_id=server_id, site_id=site_id, name=name, path=path,
                credentials=credentials)


@_tool
def delete_security_rule(server_id: int, site_id: int, rule_id: int) -> str:
    """Delete a security rule."""
    return _run("delete_security_rule", server_id=server_id, site_id=site_id, rule_id=rule_id)


@_tool
def get_redirect_rule(server_id: int, site_id: int, rule_id: int) -> str:
    """Get one redirect rule."""
    return _run("get_redirect_rule", server_id=server_id, site_id=site_id, rule_id=rule_id)


@_tool
def create_redirect_rule(server_id: int, site_id: int, from_path: str, to_url: str,
                         type: Optional[str] = None) -> str:
    """Redirect a path of a site to another URL.

    Args:
        server_id: The unique ID of the Forge server.
        site_id: The unique ID of the site.
        from_path: The path to redirect (e.g. "/old").
        to_url: Where to send the visitor.
        type: "redirect" (302) or "permanent" (301).
    """
    return _run("create_redirect_rule", server_id=server_id, site_id=site_id, from_path=from_path,
                to_url=to_url, type=type)


@_tool
def delete_redirect_rule(server_id: int, site_id: int, rule_id: int) -> str:
    """Delete a redirect rule."""
    return _run("delete_redirect_rule", server_id=server_id, site_id=site_id, rule_id=rule_id)


# =============================================================================
# Integrations with options
# =============================================================================
@_tool
def enable_octane(server_id: int, site_id: int, server: Optional[str] = None, workers: Optional[str] = None) -> str:
    """Run a site on Laravel Octane.

    Args:
        server_id: The unique ID of the Forge server.
        site_id: The unique ID of the site.
        server: swoole, roadrunner or frankenphp (default swoole).
        workers: Worker count as a number, or "auto" for one per CPU core (default "auto").
    """
    return _run("enable_octane", server_id=server_id, site_id=site_id, server=server, workers=workers)


@_tool
def enable_maintenance(server_id: int, site_id: int, secret: Optional[str] = None,
                       refresh: Optional[str] = None) -> str:
    """Put a site into maintenance mode (php artisan down).

    Args:
        server_id: The unique ID of the Forge server.
        site_id: The unique ID of the site.
        secret: Path segment that bypasses maintenance mode for the team.
        refresh: Seconds after which the maintenance page reloads.
    """
    return _run("enable_maintenance", server_id=server_id, site_id=site_id, secret=secret, refresh=refresh)


# =============================================================================
# Composite tools with options
# =============================================================================
# These combine several Forge calls so the agent gets a verdict in one
# round-trip instead of five.  server_health_check and site_status_dashboard
# only need IDs and are registered with the other ID-only tools below.
# =============================================================================
@_tool
def ssl_expiration_check(days_threshold: Optional[int] = None, server_id: Optional[int] = None) -> str:
    """Find active SSL certificates that are expired or expiring soon.

    Args:
        days_threshold: Flag certificates expiring within this many days (default 30).
        server_id: Only check this server (default: every server in the account).
    """
    return _run("ssl_expiration_check", days_threshold=days_threshold, server_id=server_id)


@_tool
def bulk_deploy(deployments: list[dict]) -> str:
    """Deploy several sites at once and report each result.

    Args:
        deployments: Targets, e.g. [{"server_id": 1, "site_id": 2}, {"server_id": 3, "site_id": 4}].

    Returns:
        JSON with success (true only if every deployment was triggered), a
        summary (total, successful, failed) and one entry per target.
    """
    return _run("bulk_deploy", deployments=deployments)


@_tool
def clone_site(
    source_server_id: int,
    source_site_id: int,
    target_server_id: int,
    new_domain: str,
    clone_workers: Optional[bool] = None,
    clone_jobs: Optional[bool] = None,
    clone_ssl: Optional[bool] = None,
) -> str:
    """Recreate a site under a new domain, optionally on another server.

    Copies the repository, the deployment script (with the domain replaced),
    queue workers and the site's scheduled jobs, then requests a Let's
    Encrypt certificate.  The .env and the database are NOT copied.

    Args:
        source_server_id: Server of the site to copy.
        source_site_id: The site to copy.
        target_server_id: Server to create the copy on.
        new_domain: Domain of the new site.
        clone_workers: Copy queue workers (default true).
        clone_jobs: Copy scheduled jobs that mention the site (default true).
        clone_ssl: Request a certificate for the new domain (default true).
    """
    return _run("clone_site", source_server_id=source_server_id, source_site_id=source_site_id,
                target_server_id=target_server_id, new_domain=new_domain, clone_workers=clone_workers,
                clone_jobs=clone_jobs, clone_ssl=clone_ssl)


# =============================================================================
# ID-only tools
# =============================================================================
# list_servers, list_sites, deploy_site, server_health_check, the service
# reboots, the integration toggles, ...: everything whose only arguments are
# the server and site IDs.
# =============================================================================
def _account_tool(name: str):
    def call() -> str:
        return _run(name)
    return call


def _server_tool(name: str):
    def call(server_id: int) -> str:
        return _run(name, server_id=server_id)
    return call


def _site_tool(name: str):
    def call(server_id: int, site_id: int) -> str:
        return _run(name, server_id=server_id, site_id=site_id)
    return call


_SHAPES = {
    (): _account_tool,
    ("server_id",): _server_tool,
    ("server_id", "site_id"): _site_tool,
}

for _name, _definition in TOOLS.items():
    _factory = _SHAPES.get(tuple(param.name for param in _definition.params))
    if _name in ADVERTISED or _factory is None:
        continue
    ADVERTISED.add(_name)
    mcp.tool(name=_name, description=_definition.description)(_factory(_name))


# =============================================================================
# Prompts
# =============================================================================
@mcp.prompt()
def deploy_application(server_id: str, site_id: str, run_migrations: bool = True) -> str:
    """A step-by-step guide for safely deploying a site."""
    return workflows.deploy_application(server_id, site_id, run_migrations)


@mcp.prompt()
def troubleshoot_deployment(server_id: str = "", site_id: str = "", error_type: str = "") -> str:
    """A workflow for diagnosing a failed deployment."""
    return workflows.troubleshoot_deployment(server_id, site_id, error_type)


@mcp.prompt()
def deploy_laravel_app(server_name: str = "", site_domain: str = "", show_logs: bool = True) -> str:
    """Deploy a Laravel application and watch the deployment log for known failures."""
    return workflows.deploy_laravel_app(server_name, site_domain, show_logs)


@mcp.prompt()
def migrate_site(source_server_id: str = "", target_server_id: str = "", site_domain: str = "",
                 include_database: bool = True) -> str:
    """Move a site from one server to another with a DNS cutover."""
    return workflows.migrate_site(source_server_id, target_server_id, site_domain, include_database)


@mcp.prompt()
def ssl_renewal(server_id: str = "", site_id: str = "", certificate_type: str = "letsencrypt") -> str:
    """Renew or replace the SSL certificate of a site."""
    return workflows.ssl_renewal(server_id, site_id, certificate_type)


@mcp.prompt()
def setup_laravel_site(server_id: str = "", domain: str = "", repository: str = "",
                       with_horizon: bool = False, with_scheduler: bool = True) -> str:
    """Set up a new Laravel site end to end: repository, .env, database, SSL, queues."""
    return workflows.setup_laravel_site(server_id, domain, repository, with_horizon, with_scheduler)


@mcp.prompt()
def setup_new_server(provider: str = "", region: str = "", server_type: str = "app",
                     php_version: str = "php84", database: str = "mysql8") -> str:
    """Provision and secure a new server."""
    return workflows.setup_new_server(provider, region, server_type, php_version, database)


# =============================================================================
# Resources
# =============================================================================
# Reference guides the agent can read on demand instead of carrying them in
# its system prompt.  URI → (file under guides/, name, description).
# =============================================================================
GUIDES_DIR = Path(__file__).with_name("guides")

GUIDES = {
    "forge://docs/api": ("api.md", "forge-api-docs", "Laravel Forge API reference."),
    "forge://docs/deployment": ("deployment.md", "deployment-guidelines",
                                "Guidelines for deploying applications with Forge."),
    "forge://best-practices/deployment": ("deployment-best-practices.md", "Laravel Deployment Best Practices",
                                          "Deploying Laravel on Forge safely, with and without downtime."),
    "forge://troubleshooting/common-errors": ("troubleshooting.md", "Common Forge Issues & Solutions",
                                              "Diagnosing and fixing common Forge problems."),
    "forge://best-practices/security": ("security-best-practices.md", "Laravel Forge Security Best Practices",
                                        "Security settings for Laravel applications on Forge."),
    "forge://guides/php-upgrade": ("php-upgrade.md", "PHP Version Upgrade Guide",
                                   "Upgrading PHP on Forge servers and sites."),
    "forge://guides/queue-workers": ("queue-workers.md", "Queue Worker Management Guide",
                                     "Configuring and running Laravel queue workers on Forge."),
    "forge://guides/nginx-optimization": ("nginx-optimization.md", "Nginx Optimization Guide",
                                          "Nginx tuning for Laravel sites on Forge."),
    "forge://guides/security-hardening": ("security-hardening.md", "Server Security Hardening Guide",
                                          "Hardening SSH, the firewall and services on Forge servers."),
}


def read_guide(uri: str) -> str:
    """Return the markdown of one guide by its forge:// URI."""
    filename = GUIDES[uri][0]
    return (GUIDES_DIR / filename).read_text(encoding="utf-8")


def _guide(uri: str):
    def read() -> str:
        return read_guide(uri)
    return read


for _uri, (_filename, _title, _description) in GUIDES.items():
    mcp.resource(_uri, name=_title, description=_description, mime_type="text/markdown")(_guide(_uri))


# =============================================================================
# Server entry point
# =============================================================================
if __name__ == "__main__":
    mcp.run()
