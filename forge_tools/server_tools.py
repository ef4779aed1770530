# =============================================================================
# forge_tools/server_tools.py  —  Server-level Tools
# =============================================================================
#
# Everything that hangs off a server (or off the account itself):
#
#   servers, services, daemons, scheduled jobs, databases + users,
#   firewall rules, monitors, SSH keys, PHP versions, backups,
#   Nginx templates, recipes, credentials, the user and regions
#
# Each handler makes one ForgeClient call and returns a plain dict; the
# boundary in handlers.run_tool() adds "success" and renders the JSON.
# =============================================================================

from forge_client import models as m
from forge_tools.handlers import (
    SERVER_FIELDS,
    SERVER_ID,
    ToolInputError,
    id_param,
    optional,
    to_wire,
    tool,
)
from forge_tools.validation import Param

DAEMON_ID = id_param("daemon_id", "daemon")
JOB_ID = id_param("job_id", "scheduled job")
DATABASE_ID = id_param("database_id", "database")
DATABASE_USER_ID = id_param("user_id", "database user")
RULE_ID = id_param("rule_id", "firewall rule")
MONITOR_ID = id_param("monitor_id", "monitor")
KEY_ID = id_param("key_id", "SSH key")
BACKUP_ID = id_param("backup_id", "backup configuration")
TEMPLATE_ID = id_param("template_id", "Nginx template")
RECIPE_ID = id_param("recipe_id", "recipe")


# =============================================================================
# Servers
# =============================================================================
@tool("list_servers", "List all servers in the Forge account.")
def list_servers(client, values):
    servers = client.call("servers", "list")
    return {"count": len(servers), "servers": to_wire(servers, SERVER_FIELDS)}


@tool("get_server", "Get the details of one server.", SERVER_ID)
def get_server(client, values):
    return {"server": to_wire(client.call("servers", "get", values["server_id"]))}


@tool(
    "create_server",
    "Provision a new server with a cloud provider. Takes several minutes and incurs provider costs.",
    Param("credential_id", "integer", minimum=1, description="Your cloud provider credential ID from Forge"),
    Param("name", "string", max_length=255, description="Server name (alphanumeric, dashes, underscores only)"),
    Param("size", "string", description='Server size/plan (e.g. "s-1vcpu-1gb" for DigitalOcean)'),
    Param("region", "string", description='Provider region (e.g. "nyc3", "us-east-1")'),
    Param("provider", "string", required=False, default="ocean2",
          choices=("ocean2", "aws", "linode", "hetzner", "vultr", "custom"),
          description='Cloud provider (defaults to "ocean2", DigitalOcean)'),
    Param("php_version", "string", required=False, description='PHP version (e.g. "php83")'),
    Param("database_type", "string", required=False,
          choices=("mysql8", "mysql57", "mariadb", "postgres", "postgres15"),
          description="Database server to install"),
    Param("database_name", "string", required=False, max_length=64,
          description="Name of the first database (only with database_type)"),
    Param("load_balancer", "boolean", required=False, description="Create the server as a load balancer"),
    read_only=False,
)
def create_server(client, values):
    if "database_name" in values and "database_type" not in values:
        raise ToolInputError("database_name requires database_type")
    request = m.CreateServer(
        credential_id=values["credential_id"],
        name=values["name"],
        size=values["size"],
        region=values["region"],
        provider=values["provider"],
        php_version=optional(values, "php_version"),
        database=optional(values, "database_name"),
        database_type=optional(values, "database_type"),
        load_balancer=optional(values, "load_balancer"),
    )
    server = client.call("servers", "create", request=request)
    result = {"message": "Server provisioning started", "server": to_wire(server, SERVER_FIELDS)}
    # Only returned once, on create
    if server.sudo_password:
        result["sudo_password"] = server.sudo_password
    if server.database_password:
        result["database_password"] = server.database_password
    return result


@tool(
    "update_server",
    "Update a server's name, size, addresses or upload limit.",
    SERVER_ID,
    Param("name", "string", required=False, max_length=255, description="New server name"),
    Param("size", "string", required=False, description="New server size designation"),
    Param("ip_address", "string", required=False, description="Updated IP address"),
    Param("private_ip_address", "string", required=False, description="Updated private IP address"),
    Param("max_upload_size", "integer", required=False, minimum=1, description="Maximum upload size in MB"),
    Param("network", "array", required=False, items="integer",
          description="IDs of the servers this one may reach over the private network"),
    read_only=False,
)
def update_server(client, values):
    request = m.UpdateServer(
        name=optional(values, "name"),
        size=optional(values, "size"),
        ip_address=optional(values, "ip_address"),
        private_ip_address=optional(values, "private_ip_address"),
        max_upload_size=optional(values, "max_upload_size"),
        network=optional(values, "network"),
    )
    server = client.call("servers", "update", values["server_id"], request=request)
    return {"message": "Server updated", "server": to_wire(server, SERVER_FIELDS)}


@tool("delete_server", "Delete a server from Forge and the provider. This cannot be undone.",
      SERVER_ID, read_only=False)
def delete_server(client, values):
    client.call("servers", "delete", values["server_id"])
    return {"message": f"Server {values['server_id']} deleted"}


@tool("reboot_server", "Reboot a server. The server is unavailable for a few minutes.",
      SERVER_ID, read_only=False)
def reboot_server(client, values):
    client.call("servers", "reboot", values["server_id"])
    return {"message": f"Server {values['server_id']} is rebooting"}


@tool("get_server_log", "Get the recent server log.", SERVER_ID)
def get_server_log(client, values):
    return {"content": client.call("servers", "log", values["server_id"])}


@tool("list_events", "List the provisioning and activity events of a server.", SERVER_ID)
def list_events(client, values):
    events = client.call("servers", "list_events", values["server_id"])
    return {"count": len(events), "events": to_wire(events, ("id", "server_id", "description", "status",
                                                              "run_as", "created_at"))}


@tool("get_event_output", "Get the output of one server event.", SERVER_ID, id_param("event_id", "event"))
def get_event_output(client, values):
    return {"output": client.call("servers", "event_output", values["server_id"], values["event_id"])}


@tool("revoke_server_access", "Revoke Forge's SSH access to a server.", SERVER_ID, read_only=False)
def revoke_server_access(client, values):
    client.call("servers", "revoke_access", values["server_id"])
    return {"message": f"Forge access to server {values['server_id']} revoked"}


@tool("reconnect_server",
      "Generate a new public key for a server whose access was revoked. Add the key to the server "
      "as the forge user, then call reactivate_server.",
      SERVER_ID, read_only=False)
def reconnect_server(client, values):
    return {"public_key": client.call("servers", "reconnect", values["server_id"])}


@tool("reactivate_server", "Reactivate a server after its public key has been re-added.",
      SERVER_ID, read_only=False)
def reactivate_server(client, values):
    client.call("servers", "reactivate", values["server_id"])
    return {"message": f"Server {values['server_id']} reactivated"}


@tool("update_database_password", "Sync the database password Forge stores for a server.",
      SERVER_ID, read_only=False)
def update_database_password(client, values):
    client.call("servers", "update_database_password", values["server_id"])
    return {"message": "Database password updated"}


# =============================================================================
# Services
# =============================================================================
_SERVICES = ("nginx", "mysql", "postgres", "redis", "php", "supervisor", "memcached", "beanstalk", "meilisearch")


def _service_action(operation: str, message: str):
    def handler(client, values):
        client.call("services", operation, values["server_id"])
        return {"message": message}
    return handler


for _name, _operation, _description, _message in (
    ("reboot_mysql", "reboot_mysql", "Restart MySQL on a server.", "MySQL is restarting"),
    ("reboot_nginx", "reboot_nginx", "Restart Nginx on a server.", "Nginx is restarting"),
    ("reboot_postgres", "reboot_postgres", "Restart PostgreSQL on a server.", "PostgreSQL is restarting"),
    ("reboot_php", "reboot_php", "Restart PHP-FPM on a server.", "PHP-FPM is restarting"),
    ("stop_mysql", "stop_mysql", "Stop MySQL on a server. Sites using it go down.", "MySQL stopped"),
    ("stop_nginx", "stop_nginx", "Stop Nginx on a server. Every site goes offline.", "Nginx stopped"),
    ("stop_postgres", "stop_postgres", "Stop PostgreSQL on a server.", "PostgreSQL stopped"),
    ("remove_blackfire", "remove_blackfire", "Remove the Blackfire profiler from a server.", "Blackfire removed"),
    ("remove_papertrail", "remove_papertrail", "Remove Papertrail log shipping from a server.",
     "Papertrail removed"),
):
    tool(_name, _description, SERVER_ID, read_only=False)(_service_action(_operation, _message))


@tool("test_nginx", "Test the Nginx configuration of a server without reloading it.", SERVER_ID)
def test_nginx(client, values):
    return {"result": client.call("services", "test_nginx", values["server_id"])}


def _manage_service(operation: str):
    def handler(client, values):
        client.call("services", operation, values["server_id"], request=m.ManageService(service=values["service"]))
        return {"message": f"{values['service']}: {operation} requested"}
    return handler


_SERVICE = Param("service", "string", choices=_SERVICES, description="The service to manage")

for _operation, _description in (
    ("start", "Start a service on a server."),
    ("stop", "Stop a service on a server."),
    ("restart", "Restart a service on a server."),
):
    tool(f"{_operation}_service", _description, SERVER_ID, _SERVICE, read_only=False)(_manage_service(_operation))


@tool(
    "install_blackfire",
    "Install the Blackfire profiler agent on a server.",
    SERVER_ID,
    Param("blackfire_server_id", "string", description="Blackfire server ID (from your Blackfire account)"),
    Param("blackfire_server_token", "string", description="Blackfire server token"),
    read_only=False,
)
def install_blackfire(client, values):
    request = m.InstallBlackfire(server_id=values["blackfire_server_id"],
                                 server_token=values["blackfire_server_token"])
    client.call("services", "install_blackfire", values["server_id"], request=request)
    return {"message": "Blackfire installation started"}


@tool(
    "install_papertrail",
    "Ship a server's logs to Papertrail.",
    SERVER_ID,
    Param("host", "string", description='Papertrail log destination (e.g. "logs.papertrailapp.com:12345")'),
    read_only=False,
)
def install_papertrail(client, values):
    client.call("services", "install_papertrail", values["server_id"],
                request=m.InstallPapertrail(host=values["host"]))
    return {"message": "Papertrail installation started"}


# =============================================================================
# Daemons
# =============================================================================
@tool("list_daemons", "List the supervisor daemons on a server.", SERVER_ID)
def list_daemons(client, values):
    daemons = client.call("daemons", "list", values["server_id"])
    return {"count": len(daemons), "daemons": to_wire(daemons)}


@tool("get_daemon", "Get one supervisor daemon.", SERVER_ID, DAEMON_ID)
def get_daemon(client, values):
    return {"daemon": to_wire(client.call("daemons", "get", values["server_id"], values["daemon_id"]))}


@tool(
    "create_daemon",
    "Create a long-running supervisor daemon (e.g. a queue worker or Horizon).",
    SERVER_ID,
    Param("command", "string", description='The command to run (e.g. "php artisan horizon")'),
    Param("directory", "string", description="The directory the command runs in"),
    Param("user", "string", required=False, max_length=255, default="forge",
          description='Unix user to run the daemon as (defaults to "forge")'),
    Param("processes", "integer", required=False, minimum=1, maximum=10,
          description="Number of processes to run (defaults to 1, max 10)"),
    Param("startsecs", "integer", required=False, minimum=0,
          description="Seconds the process must stay up to count as started"),
    read_only=False,
)
def create_daemon(client, values):
    request = m.CreateDaemon(
        command=values["command"],
        directory=values["directory"],
        user=values["user"],
        processes=optional(values, "processes"),
        startsecs=optional(values, "startsecs"),
    )
    daemon = client.call("daemons", "create", values["server_id"], request=request)
    return {"message": "Daemon created successfully", "daemon": to_wire(daemon)}


@tool("restart_daemon", "Restart a daemon.", SERVER_ID, DAEMON_ID, read_only=False)
def restart_daemon(client, values):
    client.call("daemons", "restart", values["server_id"], values["daemon_id"])
    return {"message": f"Daemon {values['daemon_id']} restarted"}


@tool("delete_daemon", "Delete a daemon and stop its processes.", SERVER_ID, DAEMON_ID, read_only=False)
def delete_daemon(client, values):
    client.call("daemons", "delete", values["server_id"], values["daemon_id"])
    return {"message": f"Daemon {values['daemon_id']} deleted"}


# =============================================================================
# Scheduled jobs
# =============================================================================
_FREQUENCIES = ("minutely", "hourly", "nightly", "weekly", "monthly", "reboot", "custom")
_CRON_PARTS = ("minute", "hour", "day", "month", "weekday")


@tool("list_scheduled_jobs", "List the scheduled (cron) jobs of a server.", SERVER_ID)
def list_scheduled_jobs(client, values):
    jobs = client.call("jobs", "list", values["server_id"])
    return {"count": len(jobs), "jobs": to_wire(jobs)}


@tool("get_scheduled_job", "Get one scheduled job.", SERVER_ID, JOB_ID)
def get_scheduled_job(client, values):
    return {"job": to_wire(client.call("jobs", "get", values["server_id"], values["job_id"]))}


@tool(
    "create_scheduled_job",
    "Schedule a command on a server.",
    SERVER_ID,
    Param("command", "string", description='The command to run (e.g. "php artisan schedule:run")'),
    Param("frequency", "string", choices=_FREQUENCIES, description="How often the command runs"),
    Param("user", "string", required=False, max_length=255, default="forge",
          description='Unix user to run as (defaults to "forge")'),
    Param("minute", "string", required=False, description='Minute (0-59 or *), for "custom" only'),
    Param("hour", "string", required=False, description='Hour (0-23 or *), for "custom" only'),
    Param("day", "string", required=False, description='Day of month (1-31 or *), for "custom" only'),
    Param("month", "string", required=False, description='Month (1-12 or *), for "custom" only'),
    Param("weekday", "string", required=False, description='Day of week (0-7 or *), for "custom" only'),
    read_only=False,
)
def create_scheduled_job(client, values):
    if values["frequency"] == "custom":
        missing = [part for part in _CRON_PARTS if part not in values]
        if missing:
            raise ToolInputError(f"A custom frequency needs {', '.join(missing)}")
    request = m.CreateJob(
        command=values["command"],
        frequency=values["frequency"],
        user=values["user"],
        **{part: optional(values, part) for part in _CRON_PARTS},
    )
    job = client.call("jobs", "create", values["server_id"], request=request)
    return {"message": "Scheduled job created", "job": to_wire(job)}


@tool("delete_scheduled_job", "Delete a scheduled job.", SERVER_ID, JOB_ID, read_only=False)
def delete_scheduled_job(client, values):
    client.call("jobs", "delete", values["server_id"], values["job_id"])
    return {"message": f"Scheduled job {values['job_id']} deleted"}


@tool("get_job_output", "Get the output of the last run of a scheduled job.", SERVER_ID, JOB_ID)
def get_job_output(client, values):
    return {"output": client.call("jobs", "output", values["server_id"], values["job_id"])}


# =============================================================================
# Databases + database users
# =============================================================================
@tool("list_databases", "List the databases on a server.", SERVER_ID)
def list_databases(client, values):
    databases = client.call("databases", "list", values["server_id"])
    return {"count": len(databases), "databases": to_wire(databases)}


@tool("get_database", "Get one database.", SERVER_ID, DATABASE_ID)
def get_database(client, values):
    return {"database": to_wire(client.call("databases", "get", values["server_id"], values["database_id"]))}


@tool(
    "create_database",
    "Create a database, optionally with a user that can access it.",
    SERVER_ID,
    Param("name", "string", max_length=64, description="The database name"),
    Param("user", "string", required=False, max_length=64, description="Create a user with this name"),
    Param("password", "string", required=False, description="Password for the new user"),
    read_only=False,
)
def create_database(client, values):
    request = m.CreateDatabase(
        name=values["name"],
        user=optional(values, "user"),
        password=optional(values, "password"),
    )
    database = client.call("databases", "create", values["server_id"], request=request)
    return {"message": "Database created", "database": to_wire(database)}


@tool("delete_database", "Delete a database and all of its data.", SERVER_ID, DATABASE_ID, read_only=False)
def delete_database(client, values):
    client.call("databases", "delete", values["server_id"], values["database_id"])
    return {"message": f"Database {values['database_id']} deleted"}


@tool("sync_databases", "Sync Forge's database list with the databases that exist on the server.",
      SERVER_ID, read_only=False)
def sync_databases(client, values):
    client.call("databases", "sync", values["server_id"])
    return {"message": "Database sync started"}


@tool("list_database_users", "List the database users on a server.", SERVER_ID)
def list_database_users(client, values):
    users = client.call("database_users", "list", values["server_id"])
    return {"count": len(users), "users": to_wire(users)}


@tool("get_database_user", "Get one database user.", SERVER_ID, DATABASE_USER_ID)
def get_database_user(client, values):
    return {"user": to_wire(client.call("database_users", "get", values["server_id"], values["user_id"]))}


@tool(
    "create_database_user",
    "Create a database user with access to the given databases.",
    SERVER_ID,
    Param("name", "string", max_length=64, description="The user name"),
    Param("password", "string", description="The user's password"),
    Param("databases", "array", required=False, items="integer", description="IDs of databases to grant"),
    read_only=False,
)
def create_database_user(client, values):
    request = m.CreateDatabaseUser(
        name=values["name"],
        password=values["password"],
        databases=list(values.get("databases", [])),
    )
    user = client.call("database_users", "create", values["server_id"], request=request)
    return {"message": "Database user created", "user": to_wire(user)}


@tool(
    "update_database_user",
    "Replace the set of databases a database user can access.",
    SERVER_ID,
    DATABASE_USER_ID,
    Param("databases", "array", items="integer", description="IDs of the databases to grant"),
    read_only=False,
)
def update_database_user(client, values):
    request = m.UpdateDatabaseUser(databases=list(values["databases"]))
    user = client.call("database_users", "update", values["server_id"], values["user_id"], request=request)
    return {"message": "Database user updated", "user": to_wire(user)}


@tool("delete_database_user", "Delete a database user.", SERVER_ID, DATABASE_USER_ID, read_only=False)
def delete_database_user(client, values):
    client.call("database_users", "delete", values["server_id"], values["user_id"])
    return {"message": f"Database user {values['user_id']} deleted"}


# =============================================================================
# Firewall
# =============================================================================
@tool("list_firewall_rules", "List the firewall rules of a server.", SERVER_ID)
def list_firewall_rules(client, values):
    rules = client.call("firewall", "list", values["server_id"])
    return {"count": len(rules), "rules": to_wire(rules)}


@tool("get_firewall_rule", "Get one firewall rule.", SERVER_ID, RULE_ID)
def get_firewall_rule(client, values):
    return {"rule": to_wire(client.call("firewall", "get", values["server_id"], values["rule_id"]))}


@tool(
    "create_firewall_rule",
    "Open a port in the server firewall, optionally for a single IP address.",
    SERVER_ID,
    Param("name", "string", max_length=255, description='A label for the rule (e.g. "redis")'),
    Param("port", "integer", minimum=1, maximum=65535, description="The port to open"),
    Param("ip_address", "string", required=False, description="Restrict the rule to this IP address"),
    read_only=False,
)
def create_firewall_rule(client, values):
    request = m.CreateFirewallRule(
        name=values["name"],
        port=values["port"],
        ip_address=optional(values, "ip_address"),
    )
    rule = client.call("firewall", "create", values["server_id"], request=request)
    return {"message": "Firewall rule created", "rule": to_wire(rule)}


@tool("delete_firewall_rule", "Delete a firewall rule.", SERVER_ID, RULE_ID, read_only=False)
def delete_firewall_rule(client, values):
    client.call("firewall", "delete", values["server_id"], values["rule_id"])
    return {"message": f"Firewall rule {values['rule_id']} deleted"}


# =============================================================================
# Monitors
# =============================================================================
@tool("list_monitors", "List the resource monitors (disk, memory, CPU) of a server.", SERVER_ID)
def list_monitors(client, values):
    monitors = client.call("monitors", "list", values["server_id"])
    return {"count": len(monitors), "monitors": to_wire(monitors)}


@tool("get_monitor", "Get one monitor.", SERVER_ID, MONITOR_ID)
def get_monitor(client, values):
    return {"monitor": to_wire(client.call("monitors", "get", values["server_id"], values["monitor_id"]))}


@tool(
    "create_monitor",
    "Alert when a server metric crosses a threshold.",
    SERVER_ID,
    Param("type", "string", choices=("disk", "used_memory", "cpu_load", "free_memory"),
          description="The metric to watch"),
    Param("operator", "string", required=False, choices=("gte", "lte"), description="Comparison operator"),
    Param("threshold", "integer", required=False, minimum=0, description="Threshold value (percent)"),
    Param("minutes", "integer", required=False, minimum=1, description="Minutes the condition must hold"),
    Param("notify", "string", required=False, description="Email address to notify"),
    read_only=False,
)
def create_monitor(client, values):
    request = m.CreateMonitor(
        type=values["type"],
        operator=optional(values, "operator"),
        threshold=optional(values, "threshold"),
        minutes=optional(values, "minutes"),
        notify=optional(values, "notify"),
    )
    monitor = client.call("monitors", "create", values["server_id"], request=request)
    return {"message": "Monitor created", "monitor": to_wire(monitor)}


@tool("delete_monitor", "Delete a monitor.", SERVER_ID, MONITOR_ID, read_only=False)
def delete_monitor(client, values):
    client.call("monitors", "delete", values["server_id"], values["monitor_id"])
    return {"message": f"Monitor {values['monitor_id']} deleted"}


# =============================================================================
# SSH keys
# =============================================================================
@tool("list_ssh_keys", "List the SSH keys installed on a server.", SERVER_ID)
def list_ssh_keys(client, values):
    keys = client.call("ssh_keys", "list", values["server_id"])
    return {"count": len(keys), "keys": to_wire(keys)}


@tool("get_ssh_key", "Get one SSH key.", SERVER_ID, KEY_ID)
def get_ssh_key(client, values):
    return {"key": to_wire(client.call("ssh_keys", "get", values["server_id"], values["key_id"]))}


@tool(
    "create_ssh_key",
    "Install a public SSH key on a server.",
    SERVER_ID,
    Param("name", "string", max_length=255, description="A label for the key"),
    Param("key", "string", description="The public key (ssh-ed25519 AAAA...)"),
    Param("username", "string", required=False, description='Unix user to install it for (defaults to "forge")'),
    read_only=False,
)
def create_ssh_key(client, values):
    request = m.CreateSSHKey(name=values["name"], key=values["key"], username=optional(values, "username"))
    key = client.call("ssh_keys", "create", values["server_id"], request=request)
    return {"message": "SSH key installed", "key": to_wire(key)}


@tool("delete_ssh_key", "Remove an SSH key from a server.", SERVER_ID, KEY_ID, read_only=False)
def delete_ssh_key(client, values):
    client.call("ssh_keys", "delete", values["server_id"], values["key_id"])
    return {"message": f"SSH key {values['key_id']} deleted"}


# =============================================================================
# PHP
# =============================================================================
_PHP_VERSION = Param("version", "string", description='The PHP version (e.g. "php83")')


@tool("list_php_versions", "List the PHP versions installed on a server.", SERVER_ID)
def list_php_versions(client, values):
    versions = client.call("php", "list", values["server_id"])
    return {"count": len(versions), "versions": to_wire(versions)}


@tool("install_php", "Install an additional PHP version on a server.", SERVER_ID, _PHP_VERSION, read_only=False)
def install_php(client, values):
    client.call("php", "install", values["server_id"], request=m.PhpVersionRequest(version=values["version"]))
    return {"message": f"{values['version']} installation started"}


@tool("update_php", "Update an installed PHP version to its latest patch release.",
      SERVER_ID, _PHP_VERSION, read_only=False)
def update_php(client, values):
    client.call("php", "update", values["server_id"], request=m.PhpVersionRequest(version=values["version"]))
    return {"message": f"{values['version']} update started"}


@tool("enable_opcache", "Enable OPcache on a server.", SERVER_ID, read_only=False)
def enable_opcache(client, values):
    client.call("php", "enable_opcache", values["server_id"])
    return {"message": "OPcache enabled"}


@tool("disable_opcache", "Disable OPcache on a server.", SERVER_ID, read_only=False)
def disable_opcache(client, values):
    client.call("php", "disable_opcache", values["server_id"])
    return {"message": "OPcache disabled"}


# =============================================================================
# Backups
# =============================================================================
_BACKUP_PARAMS = (
    Param("frequency", "string", required=False, choices=("hourly", "daily", "weekly", "custom"),
          description="How often to back up"),
    Param("databases", "array", required=False, items="integer", description="IDs of the databases to back up"),
    Param("credentials", "object", required=False, description="Storage credentials (key, secret, region, bucket)"),
    Param("directory", "string", required=False, description="Directory inside the bucket"),
    Param("email", "string", required=False, description="Address to notify on failure"),
    Param("retention", "integer", required=False, minimum=1, description="Number of backups to keep"),
    Param("time", "string", required=False, description='Time of day for daily/weekly backups ("03:00")'),
    Param("day", "integer", required=False, minimum=0, maximum=6, description="Day of week for weekly backups"),
)


def _backup_fields(values: dict) -> dict:
    return {name: optional(values, name) for name in
            ("databases", "credentials", "directory", "email", "retention", "time", "day")}


@tool("list_backup_configurations", "List the database backup configurations of a server.", SERVER_ID)
def list_backup_configurations(client, values):
    backups = client.call("backups", "list", values["server_id"])
    return {"count": len(backups), "backups": to_wire(backups)}


@tool("get_backup_configuration", "Get one backup configuration and its recent backups.", SERVER_ID, BACKUP_ID)
def get_backup_configuration(client, values):
    return {"backup": to_wire(client.call("backups", "get", values["server_id"], values["backup_id"]))}


@tool(
    "create_backup_configuration",
    "Schedule database backups to object storage.",
    SERVER_ID,
    Param("provider", "string", choices=("s3", "spaces", "custom"), description="Storage provider"),
    *_BACKUP_PARAMS,
    read_only=False,
)
def create_backup_configuration(client, values):
    request = m.CreateBackupConfiguration(
        provider=values["provider"],
        frequency=values.get("frequency", "daily"),
        **_backup_fields(values),
    )
    backup = client.call("backups", "create", values["server_id"], request=request)
    return {"message": "Backup configuration created", "backup": to_wire(backup)}


@tool(
    "update_backup_configuration",
    "Change a backup configuration. Only the given fields change.",
    SERVER_ID,
    BACKUP_ID,
    Param("provider", "string", required=False, choices=("s3", "spaces", "custom"), description="Storage provider"),
    *_BACKUP_PARAMS,
    read_only=False,
)
def update_backup_configuration(client, values):
    request = m.UpdateBackupConfiguration(
        provider=optional(values, "provider"),
        frequency=optional(values, "frequency"),
        **_backup_fields(values),
    )
    backup = client.call("backups", "update", values["server_id"], values["backup_id"], request=request)
    return {"message": "Backup configuration updated", "backup": to_wire(backup)}


@tool("delete_backup_configuration", "Delete a backup configuration.", SERVER_ID, BACKUP_ID, read_only=False)
def delete_backup_configuration(client, values):
    client.call("backups", "delete", values["server_id"], values["backup_id"])
    return {"message": f"Backup configuration {values['backup_id']} deleted"}


_ARCHIVE_ID = id_param("archive_id", "backup")


@tool("restore_backup", "Restore one backup into its databases. Current data is overwritten.",
      SERVER_ID, BACKUP_ID, _ARCHIVE_ID, read_only=False)
def restore_backup(client, values):
    client.call("backups", "restore_backup", values["server_id"], values["backup_id"], values["archive_id"])
    return {"message": f"Restore of backup {values['archive_id']} started"}


@tool("delete_backup", "Delete one stored backup.", SERVER_ID, BACKUP_ID, _ARCHIVE_ID, read_only=False)
def delete_backup(client, values):
    client.call("backups", "delete_backup", values["server_id"], values["backup_id"], values["archive_id"])
    return {"message": f"Backup {values['archive_id']} deleted"}


# =============================================================================
# Nginx templates
# =============================================================================
@tool("list_nginx_templates", "List the Nginx templates of a server.", SERVER_ID)
def list_nginx_templates(client, values):
    templates = client.call("nginx_templates", "list", values["server_id"])
    return {"count": len(templates), "templates": to_wire(templates, ("id", "server_id", "name"))}


@tool("get_nginx_template", "Get one Nginx template with its content.", SERVER_ID, TEMPLATE_ID)
def get_nginx_template(client, values):
    return {"template": to_wire(client.call("nginx_templates", "get", values["server_id"], values["template_id"]))}


@tool("get_nginx_default_template", "Get the server's default Nginx template.", SERVER_ID)
def get_nginx_default_template(client, values):
    return {"template": to_wire(client.call("nginx_templates", "default", values["server_id"]))}


@tool(
    "create_nginx_template",
    "Create an Nginx template new sites can be built from.",
    SERVER_ID,
    Param("name", "string", max_length=255, description="The template name"),
    Param("content", "string", description="The Nginx configuration"),
    read_only=False,
)
def create_nginx_template(client, values):
    request = m.CreateNginxTemplate(name=values["name"], content=values["content"])
    template = client.call("nginx_templates", "create", values["server_id"], request=request)
    return {"message": "Nginx template created", "template": to_wire(template)}


@tool(
    "update_nginx_template",
    "Rename an Nginx template or replace its content.",
    SERVER_ID,
    TEMPLATE_ID,
    Param("name", "string", required=False, max_length=255, description="The new name"),
    Param("content", "string", required=False, description="The new Nginx configuration"),
    read_only=False,
)
def update_nginx_template(client, values):
    request = m.UpdateNginxTemplate(name=optional(values, "name"), content=optional(values, "content"))
    template = client.call("nginx_templates", "update", values["server_id"], values["template_id"], request=request)
    return {"message": "Nginx template updated", "template": to_wire(template)}


@tool("delete_nginx_template", "Delete an Nginx template.", SERVER_ID, TEMPLATE_ID, read_only=False)
def delete_nginx_template(client, values):
    client.call("nginx_templates", "delete", values["server_id"], values["template_id"])
    return {"message": f"Nginx template {values['template_id']} deleted"}


# =============================================================================
# Recipes
# =============================================================================
@tool("list_recipes", "List the recipes (reusable bash scripts) in the account.")
def list_recipes(client, values):
    recipes = client.call("recipes", "list")
    return {"count": len(recipes), "recipes": to_wire(recipes, ("id", "name", "user", "created_at"))}


@tool("get_recipe", "Get one recipe with its script.", RECIPE_ID)
def get_recipe(client, values):
    return {"recipe": to_wire(client.call("recipes", "get", values["recipe_id"]))}


@tool(
    "create_recipe",
    "Save a bash script as a recipe.",
    Param("name", "string", max_length=255, description="The recipe name"),
    Param("script", "string", description="The bash script"),
    Param("user", "string", required=False, default="root", description='User to run as (defaults to "root")'),
    read_only=False,
)
def create_recipe(client, values):
    request = m.CreateRecipe(name=values["name"], script=values["script"], user=values["user"])
    return {"message": "Recipe created", "recipe": to_wire(client.call("recipes", "create", request=request))}


@tool(
    "update_recipe",
    "Change a recipe's name, user or script.",
    RECIPE_ID,
    Param("name", "string", required=False, max_length=255, description="The new name"),
    Param("user", "string", required=False, description="The new user"),
    Param("script", "string", required=False, description="The new script"),
    read_only=False,
)
def update_recipe(client, values):
    request = m.UpdateRecipe(name=optional(values, "name"), user=optional(values, "user"),
                             script=optional(values, "script"))
    recipe = client.call("recipes", "update", values["recipe_id"], request=request)
    return {"message": "Recipe updated", "recipe": to_wire(recipe)}


@tool("delete_recipe", "Delete a recipe.", RECIPE_ID, read_only=False)
def delete_recipe(client, values):
    client.call("recipes", "delete", values["recipe_id"])
    return {"message": f"Recipe {values['recipe_id']} deleted"}


@tool(
    "run_recipe",
    "Run a recipe on one or more servers.",
    RECIPE_ID,
    Param("servers", "array", items="integer", min_items=1, description="IDs of the servers to run the recipe on"),
    Param("notify", "boolean", required=False, description="Email the output when the run finishes"),
    read_only=False,
)
def run_recipe(client, values):
    request = m.RunRecipe(servers=list(values["servers"]), notify=optional(values, "notify"))
    client.call("recipes", "run", values["recipe_id"], request=request)
    return {"message": f"Recipe {values['recipe_id']} started on {len(values['servers'])} server(s)"}


# =============================================================================
# Account
# =============================================================================
@tool("list_credentials", "List the server-provider credentials linked to the account.")
def list_credentials(client, values):
    credentials = client.call("credentials", "list")
    return {"count": len(credentials), "credentials": to_wire(credentials)}


@tool("get_user", "Get the account that owns the API token.")
def get_user(client, values):
    return {"user": to_wire(client.call("user", "get"))}


@tool("list_regions", "List the regions servers can be provisioned in.")
def list_regions(client, values):
    regions = client.call("regions", "list")
    return {"count": len(regions), "regions": to_wire(regions, ("id", "name"))}
