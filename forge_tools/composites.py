# =============================================================================
# forge_tools/composites.py  —  Multi-call Tools
# =============================================================================
#
# These tools answer a question (or run a workflow) that needs several Forge
# calls.  Unlike the one-call tools they catch ForgeError themselves:
#
#   - the PRIMARY call (the server, the site, the source site) must succeed,
#     otherwise the whole tool fails through the normal boundary
#   - SECONDARY calls are attempted one by one; a failure is recorded and
#     the tool carries on with what it has
#
#   server_health_check    → readiness, monitors, events, sites, daemons, workers
#   ssl_expiration_check   → active certificates bucketed by expiry
#   site_status_dashboard  → one site: repo, SSL, deployments, workers, jobs
#   bulk_deploy            → trigger many deployments, report each one
#   clone_site             → recreate a site (git, script, workers, jobs, SSL)
# =============================================================================

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from forge_client import models as m
from forge_client.errors import ForgeError
from forge_client.models import Collection
from forge_tools.handlers import SERVER_ID, SITE_ID, ToolInputError, to_wire, tool
from forge_tools.validation import Param

logger = logging.getLogger(__name__)


def _attempt(client, errors: list, label: str, namespace: str, operation: str, *ids):
    """Run one secondary call; on failure record it and return an empty Collection."""
    try:
        return client.call(namespace, operation, *ids)
    except ForgeError as exc:
        logger.warning("%s failed: %s", label, exc)
        errors.append({"call": label, "error": str(exc)})
        return Collection(key=namespace)


def _first(items, count: int) -> Collection:
    return Collection(key="", items=tuple(items)[:count])


# =============================================================================
# Composite: server_health_check
# =============================================================================
@tool("server_health_check",
      "Summarise the health of a server: readiness, monitors, recent events, sites, daemons and queue workers.",
      SERVER_ID)
def server_health_check(client, values):
    server_id = values["server_id"]
    server = client.call("servers", "get", server_id)
    errors = []

    monitors = _attempt(client, errors, "monitors", "monitors", "list", server_id)
    events = _attempt(client, errors, "events", "servers", "list_events", server_id)
    sites = _attempt(client, errors, "sites", "sites", "list", server_id)
    daemons = _attempt(client, errors, "daemons", "daemons", "list", server_id)
    workers = []
    for site in sites:
        workers.extend(_attempt(client, errors, f"workers of site {site.id}",
                                "workers", "list", server_id, site.id))

    issues = []
    warnings = []
    if not server.is_ready:
        issues.append("Server is not ready")
    if server.revoked:
        issues.append("Forge access to the server has been revoked")
    if not monitors:
        warnings.append("No monitors configured")
    for monitor in monitors:
        if monitor.state.upper() == "ALERT":
            issues.append(f"Monitor {monitor.id} ({monitor.type}) is alerting")
    pending = [site for site in sites if site.status != "installed"]
    if pending:
        warnings.append(f"{len(pending)} site(s) not fully installed")
    for site in sites:
        if site.deployment_status == "failed":
            issues.append(f"Last deployment of {site.name} failed")

    if issues:
        status = "critical"
    elif warnings or errors:
        status = "warning"
    else:
        status = "healthy"

    return {
        "health_status": status,
        "server": to_wire(server, ("id", "name", "ip_address", "provider", "region", "size",
                                   "php_version", "database_type", "is_ready")),
        "summary": {
            "total_sites": len(sites),
            "active_sites": len(sites) - len(pending),
            "total_monitors": len(monitors),
            "total_daemons": len(daemons),
            "total_workers": len(workers),
            "recent_events": len(events),
        },
        "issues": issues,
        "warnings": warnings,
        "errors": errors,
        "monitors": to_wire(_first(monitors, 5), ("id", "type", "status", "state")),
        "recent_events": to_wire(_first(events, 5), ("id", "description", "status", "created_at")),
    }


# =============================================================================
# Composite: ssl_expiration_check
# =============================================================================
def _parse_timestamp(raw: str) -> Optional[datetime]:
    """Forge sends "2025-01-31 12:00:00" or ISO-8601; naive times are UTC."""
    try:
        parsed = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@tool(
    "ssl_expiration_check",
    "Check active SSL certificates across sites and flag the ones expired or expiring soon.",
    Param("days_threshold", "integer", required=False, minimum=1, default=30,
          description="Flag certificates expiring within this many days (default 30)"),
    Param("server_id", "integer", required=False, minimum=1,
          description="Only check this server (default: every server)"),
)
def ssl_expiration_check(client, values):
    threshold_days = values["days_threshold"]
    if "server_id" in values:
        servers = [client.call("servers", "get", values["server_id"])]
    else:
        servers = list(client.call("servers", "list"))

    now = datetime.now(timezone.utc)
    threshold = now + timedelta(days=threshold_days)
    expired, expiring, healthy, errors = [], [], [], []

    for server in servers:
        try:
            sites = client.call("sites", "list", server.id)
        except ForgeError as exc:
            errors.append({"server_id": server.id, "error": str(exc)})
            continue

        for site in sites:
            try:
                certificates = client.call("certificates", "list", server.id, site.id)
            except ForgeError as exc:
                errors.append({"server_id": server.id, "site_id": site.id, "error": str(exc)})
                continue

            for cert in certificates:
                if not cert.active:
                    continue
                info = {
                    "server_id": server.id,
                    "server_name": server.name,
                    "site_id": site.id,
                    "site_domain": site.name,
                    "certificate_id": cert.id,
                    "domain": cert.domain,
                    "type": cert.type,
                    "expires_at": cert.expires_at,
                }
                if not cert.expires_at:
                    healthy.append(info)
                    continue
                expiry = _parse_timestamp(cert.expires_at)
                if expiry is None:
                    errors.append({"server_id": server.id, "site_id": site.id,
                                   "error": f"Unrecognised expiry date {cert.expires_at!r}"})
                    continue

                info["days_until_expiry"] = (expiry - now).days
                if expiry < now:
                    expired.append(info)
                elif expiry <= threshold:
                    expiring.append(info)
                else:
                    healthy.append(info)

    expiring.sort(key=lambda info: info["days_until_expiry"])
    return {
        "threshold_days": threshold_days,
        "summary": {
            "total_checked": len(expired) + len(expiring) + len(healthy),
            "expired": len(expired),
            "expiring_soon": len(expiring),
            "healthy": len(healthy),
            "errors": len(errors),
        },
        "action_required": bool(expired or expiring),
        "expired_certificates": expired,
        "expiring_soon_certificates": expiring,
        "healthy_certificates": healthy[:10],
        "errors": errors,
    }


# =============================================================================
# Composite: site_status_dashboard
# =============================================================================
@tool("site_status_dashboard",
      "One-look overview of a site: repository, SSL, latest deployments, queue workers and scheduled jobs.",
      SERVER_ID, SITE_ID)
def site_status_dashboard(client, values):
    server_id, site_id = values["server_id"], values["site_id"]
    site = client.call("sites", "get", server_id, site_id)
    errors = []

    certificates = _attempt(client, errors, "certificates", "certificates", "list", server_id, site_id)
    deployments = _attempt(client, errors, "deployment history", "sites", "deployment_history",
                           server_id, site_id)
    workers = _attempt(client, errors, "workers", "workers", "list", server_id, site_id)
    jobs = _attempt(client, errors, "scheduled jobs", "jobs", "list", server_id)

    active = next((cert for cert in certificates if cert.active), None)
    site_jobs = [job for job in jobs if site.name in job.command]
    latest = deployments[0] if deployments else None

    return {
        "site": to_wire(site, ("id", "name", "status", "directory", "php_version", "quick_deploy", "created_at")),
        "repository": {
            "provider": site.repository_provider,
            "repository": site.repository,
            "branch": site.repository_branch,
        } if site.repository else None,
        "ssl": {
            "status": "active" if active else "none",
            "expires_at": active.expires_at if active else None,
            "total_certificates": len(certificates),
        },
        "deployment": to_wire(latest, ("id", "status", "ended_at")) if latest else None,
        "workers": {
            "total": len(workers),
            "list": to_wire(workers, ("id", "connection", "queue", "status")),
        },
        "scheduled_jobs": {
            "total": len(site_jobs),
            "list": [{"id": job.id, "command": job.command, "frequency": job.frequency} for job in site_jobs],
        },
        "recent_deployments": to_wire(_first(deployments, 5), ("id", "status", "ended_at")),
        "errors": errors,
    }


# =============================================================================
# Composite: bulk_deploy
# =============================================================================
@tool(
    "bulk_deploy",
    "Deploy several sites at once, across one or more servers, and report each result.",
    Param("deployments", "array", items="object", min_items=1,
          description='Targets: [{"server_id": 1, "site_id": 2}, ...]'),
    read_only=False,
)
def bulk_deploy(client, values):
    targets = []
    for index, target in enumerate(values["deployments"]):
        ids = (target.get("server_id"), target.get("site_id"))
        if not all(isinstance(i, int) and not isinstance(i, bool) and i >= 1 for i in ids):
            raise ToolInputError(f"deployments[{index}] needs a positive integer server_id and site_id")
        targets.append(ids)

    results = []
    for server_id, site_id in targets:
        entry = {"server_id": server_id, "site_id": site_id, "site_name": None}
        try:
            site = client.call("sites", "get", server_id, site_id)
            entry["site_name"] = site.name
            client.call("sites", "deploy", server_id, site_id)
        except ForgeError as exc:
            logger.warning("bulk deploy of site %s on server %s failed: %s", site_id, server_id, exc)
            entry.update(status="failed", message=str(exc))
        else:
            entry.update(status="triggered", message="Deployment triggered")
        results.append(entry)

    failed = sum(1 for entry in results if entry["status"] == "failed")
    return {
        "success": failed == 0,
        "summary": {"total": len(results), "successful": len(results) - failed, "failed": failed},
        "deployments": results,
    }


# =============================================================================
# Composite: clone_site
# =============================================================================
# Only the source lookup and the site creation are fatal.  Every later step
# is recorded as success/failed and the clone carries on.
# =============================================================================
def _job_request(job, source_name: str, new_domain: str) -> m.CreateJob:
    command = job.command.replace(source_name, new_domain)
    if job.frequency != "custom":
        return m.CreateJob(command=command, frequency=job.frequency, user=job.user)
    minute, hour, day, month, weekday = job.cron.split()
    return m.CreateJob(command=command, frequency="custom", user=job.user,
                       minute=minute, hour=hour, day=day, month=month, weekday=weekday)


@tool(
    "clone_site",
    "Recreate a site under a new domain (optionally on another server): repository, deployment script, "
    "queue workers, scheduled jobs and a Let's Encrypt certificate.",
    Param("source_server_id", "integer", minimum=1, description="Server of the site to copy"),
    Param("source_site_id", "integer", minimum=1, description="The site to copy"),
    Param("target_server_id", "integer", minimum=1, description="Server to create the copy on"),
    Param("new_domain", "string", max_length=255, description="Domain of the new site"),
    Param("clone_workers", "boolean", required=False, default=True, description="Copy queue workers (default true)"),
    Param("clone_jobs", "boolean", required=False, default=True, description="Copy scheduled jobs (default true)"),
    Param("clone_ssl", "boolean", required=False, default=True,
          description="Request a Let's Encrypt certificate (default true)"),
    read_only=False,
)
def clone_site(client, values):
    source_server, source_site_id = values["source_server_id"], values["source_site_id"]
    target_server, new_domain = values["target_server_id"], values["new_domain"]
    steps = []

    def step(action, run):
        try:
            message = run()
        except ForgeError as exc:
            logger.warning("clone step %s failed: %s", action, exc)
            steps.append({"action": action, "status": "failed", "message": str(exc)})
        else:
            steps.append({"action": action, "status": "success", "message": message})

    try:
        source = client.call("sites", "get", source_server, source_site_id)
        steps.append({"action": "get_source_site", "status": "success",
                      "message": f"Found source site {source.name}"})
        new_site = client.call("sites", "create", target_server, request=m.CreateSite(
            domain=new_domain,
            project_type=source.project_type or "php",
            directory=source.directory or "/public",
            php_version=source.php_version or m.UNSET,
        ))
    except ForgeError as exc:
        return {"success": False, "error": str(exc), "steps_completed": steps}
    steps.append({"action": "create_site", "status": "success", "message": f"Created {new_domain}",
                  "site_id": new_site.id})
    target = (target_server, new_site.id)

    if source.repository:
        def install_git():
            client.call("sites", "install_git_repository", *target, request=m.InstallGitRepository(
                provider=source.repository_provider or "github",
                repository=source.repository,
                branch=source.repository_branch or m.UNSET,
            ))
            return f"Installed {source.repository}"
        step("install_git", install_git)

    def copy_script():
        script = client.call("sites", "deployment_script", source_server, source_site_id)
        content = script.replace(source.name, new_domain)
        client.call("sites", "update_deployment_script", *target, request=m.FileContent(content=content))
        return "Deployment script copied with the new domain"
    step("copy_deployment_script", copy_script)

    if values["clone_workers"]:
        def copy_workers():
            workers = client.call("workers", "list", source_server, source_site_id)
            for worker in workers:
                client.call("workers", "create", *target, request=m.CreateWorker(
                    connection=worker.connection, queue=worker.queue,
                    timeout=worker.timeout, sleep=worker.sleep, tries=worker.tries,
                ))
            return f"Cloned {len(workers)} worker(s)"
        step("clone_workers", copy_workers)

    if values["clone_jobs"]:
        def copy_jobs():
            jobs = [job for job in client.call("jobs", "list", source_server) if source.name in job.command]
            for job in jobs:
                client.call("jobs", "create", target_server, request=_job_request(job, source.name, new_domain))
            return f"Cloned {len(jobs)} scheduled job(s)"
        step("clone_jobs", copy_jobs)

    if values["clone_ssl"]:
        def obtain_ssl():
            client.call("certificates", "obtain_letsencrypt", *target,
                        request=m.ObtainLetsEncryptCertificate(domains=[new_domain]))
            return f"Certificate requested for {new_domain}"
        step("obtain_ssl", obtain_ssl)

    return {
        "success": all(entry["status"] == "success" for entry in steps),
        "new_site": {"server_id": target_server, "site_id": new_site.id, "domain": new_domain},
        "source_site": {"server_id": source_server, "site_id": source_site_id, "domain": source.name},
        "steps": steps,
        "next_steps": [
            "Review the .env file with get_env_file / update_env_file",
            "Create a database if the site needs one (create_database)",
            "Deploy the site with deploy_site",
            "Point DNS for the new domain at the target server",
        ],
    }
