# =============================================================================
# forge_tools/workflows.py  —  Workflow Prompts
# =============================================================================
#
# Step-by-step playbooks the MCP server offers as prompts.  Each builder is a
# plain function returning markdown, so mcp_server.py only has to expose it.
#
# Arguments are optional where the workflow can discover the value itself
# (e.g. no server_id → start with list_servers).  Tool names in the text are
# the names the agent actually sees.
# =============================================================================


def deploy_application(server_id: str, site_id: str, run_migrations: bool = True) -> str:
    migration_step = (
        "- Database migrations run as part of the deployment script"
        if run_migrations
        else "- Database migrations will NOT run (migrate manually afterwards)"
    )
    return f"""# Deployment Guide

You are about to deploy an application with Laravel Forge.

## Pre-Deployment Checklist

1. Verify the target
   - Server ID: {server_id}
   - Site ID: {site_id}
2. Before deploying, make sure that:
   - Tests pass and the code has been reviewed
   - A database backup exists if migrations change data
3. The deployment will:
   - Pull the latest code from the configured branch
   - Install Composer dependencies
   {migration_step}
   - Restart PHP-FPM

## Steps

1. Call get_site with server_id={server_id} and site_id={site_id} to confirm the repository and branch.
2. Call deploy_site with the same IDs.
3. Call list_deployment_history to confirm the deployment finished.
4. If the site runs queue workers, call restart_worker for each of them.

## Rollback

If the deployment fails, read the failing deployment in list_deployment_history,
revert the offending commit and deploy again.
"""


def troubleshoot_deployment(server_id: str = "", site_id: str = "", error_type: str = "") -> str:
    workflow = "# Deployment Troubleshooting Workflow\n\n"
    if not server_id or not site_id:
        workflow += (
            "## Step 1: Identify the failed deployment\n\n"
            "1. Call list_servers to find the server\n"
            "2. Call list_sites to find the site\n"
            "3. Call list_deployment_history to find the failed deployment\n\n"
        )
    else:
        workflow += f"Target: server {server_id}, site {site_id}.\n\n"

    workflow += (
        "## Step 2: Read what went wrong\n\n"
        "1. Call get_deployment_log for the latest deployment\n"
        "2. Call get_deployment_output for an older one from the history\n\n"
        "## Step 3: Check the server\n\n"
        "1. Call server_health_check for the server\n"
        "2. Check list_monitors for disk or memory alerts\n\n"
        "## Step 4: Common causes\n\n"
        "- Composer: memory limits, private packages without credentials (update_packages_auth)\n"
        "- NPM: Node version mismatch, out-of-memory builds\n"
        "- Permissions: storage/ and bootstrap/cache not writable by forge\n"
        "- Migrations: wrong database credentials, a half-applied migration\n"
        "- Git: deploy key missing on the repository (create_deploy_key)\n"
        "- Stuck in \"deploying\": reset_deployment_state, then deploy again\n"
    )
    if error_type:
        workflow += f"\nThe user reported an error of type: {error_type}. Start with the matching cause above.\n"
    return workflow


def deploy_laravel_app(server_name: str = "", site_domain: str = "", show_logs: bool = True) -> str:
    workflow = "# Complete Laravel Application Deployment\n\n"
    if not server_name:
        workflow += "1. Call list_servers and ask the user which server to use\n"
    else:
        workflow += f"1. Find the server \"{server_name}\" with list_servers\n"
    if not site_domain:
        workflow += "2. Call list_sites for that server and ask which site to deploy\n\n"
    else:
        workflow += f"2. Find the site \"{site_domain}\" with list_sites\n\n"

    workflow += """## Pre-Deployment

3. Call get_deployment_script and show it to the user
4. If the script runs migrations, warn about possible downtime

## Deploy

5. Call deploy_site
6. Wait a few seconds for the deployment to start

## Monitor

7. Call get_deployment_log and look for the usual failures:
   - "composer install failed" → raise the Composer memory limit or timeout
   - "Migration failed" → check the database credentials in the .env
   - "npm install failed" → check the Node version
   - "Permission denied" → fix storage/ and bootstrap/cache permissions

## Afterwards

8. On success, report the deployment time and suggest a smoke test
9. On failure, explain the error and suggest the matching fix
"""
    if show_logs:
        workflow += "\nShow the deployment log to the user once it is available.\n"
    return workflow


def migrate_site(source_server_id: str = "", target_server_id: str = "", site_domain: str = "",
                 include_database: bool = True) -> str:
    workflow = "# Site Migration Workflow\n\n"
    if not source_server_id or not target_server_id:
        workflow += """## Identify the servers

1. Call list_servers
2. Pick the SOURCE server (where the site lives now) and the TARGET server
3. Both must report is_ready: true

"""
    if not site_domain:
        workflow += """## Identify the site

1. Call list_sites on the source server
2. Call get_site for the site to migrate

"""
    workflow += """## Record the current setup

1. PHP version, web directory, repository and branch (get_site)
2. Queue workers (list_workers), cron jobs (list_scheduled_jobs), daemons (list_daemons)

## Recreate the site

The clone_site tool performs these steps in one call; do them by hand when
you need to change anything on the way.

1. create_site on the target with the same domain, PHP version and directory
2. install_git_repository with the same repository and branch
3. get_deployment_script on the source, update_deployment_script on the target
"""
    if include_database:
        workflow += """
## Database

1. list_databases on the source
2. create_database and create_database_user on the target
3. Dump on the source and import on the target (over SSH, or with a recipe):
   mysqldump -u forge -p database_name > backup.sql
   mysql -u forge -p database_name < backup.sql
"""
    workflow += """
## Environment

1. get_env_file on the source
2. update_env_file on the target, changing database credentials and any
   server-specific values

## SSL, workers and jobs

1. obtain_letsencrypt_certificate on the target
2. create_worker, create_scheduled_job and create_daemon to match the source

## Deploy and switch over

1. deploy_site on the target and check get_deployment_log
2. Test the target (hosts file or a temporary domain)
3. Point DNS at the target server and watch both servers while it propagates

## Clean up (after verification)

1. delete_scheduled_job and delete_worker on the source
2. Keep the source site for 24-48 hours, then delete_site

## Rollback

Keep the source running, point DNS back at it, fix the target and retry.
"""
    return workflow


def ssl_renewal(server_id: str = "", site_id: str = "", certificate_type: str = "letsencrypt") -> str:
    workflow = "# SSL Certificate Renewal Workflow\n\n"
    if not server_id or not site_id:
        workflow += """## Find the certificate

1. Call ssl_expiration_check to see every certificate that needs attention
2. Or walk list_servers → list_sites → list_certificates

"""
    else:
        workflow += f"Target: server {server_id}, site {site_id}.\n\n"
    workflow += """## Check the current certificate

1. Call get_certificate: note expires_at, type and domain
2. Problems to look for: expired or expiring within 30 days, wrong domain

## Let's Encrypt

Let's Encrypt certificates renew themselves.  When renewal failed:

1. DNS must point at this server
2. Port 80 must be open (list_firewall_rules)
3. No redirect rule may block /.well-known/acme-challenge (list_redirect_rules)

Then call obtain_letsencrypt_certificate with every domain the site serves,
www and non-www included, and confirm with list_certificates.

## Activate

1. activate_certificate makes the new certificate the one the site serves
2. get_site should now show the site as secured

## Common errors

- "Challenge failed": DNS or port 80, see above
- "Too many certificates already issued": Let's Encrypt rate limit, wait and retry
- "Unauthorized": domain ownership check failed, check A and AAAA records

## Clean up

delete_certificate for old certificates once the new one is active.
"""
    if certificate_type == "custom":
        workflow += """
## Custom certificate

1. get_certificate_signing_request for the CSR
2. Submit it to your certificate authority
3. Install the signed certificate in the Forge dashboard
4. activate_certificate
"""
    return workflow


def setup_laravel_site(server_id: str = "", domain: str = "", repository: str = "",
                       with_horizon: bool = False, with_scheduler: bool = True) -> str:
    workflow = "# Complete Laravel Site Setup\n\n"
    if not server_id:
        workflow += """## Choose a server

Call list_servers and pick one with a suitable PHP version, enough memory and
the right region.

"""
    domain_text = domain or "your domain"
    repository_text = repository or "owner/repository"
    workflow += f"""## Create the site

1. create_site with domain={domain_text}, project_type=php, directory=/public
2. get_site until status is "installed"

## Connect the repository

1. install_git_repository with repository={repository_text} and the branch to deploy
2. For a private repository: create_deploy_key and add the key to the repository host

## Configure

1. create_database (the name must match DB_DATABASE)
2. get_env_file, then update_env_file with APP_ENV=production, APP_DEBUG=false,
   APP_URL and the database, cache and queue settings
3. get_deployment_script, then update_deployment_script so it runs
   composer install --no-dev, migrate --force, optimize and queue:restart

## SSL

1. obtain_letsencrypt_certificate for the domain and its www alias
2. list_certificates to confirm it is active
"""
    if with_scheduler:
        workflow += """
## Scheduler

enable_scheduler, or create_scheduled_job with
command="php /home/forge/{domain}/artisan schedule:run" and frequency=minutely
""".replace("{domain}", domain_text)
    if with_horizon:
        workflow += """
## Horizon

enable_horizon, or create_daemon with command="php artisan horizon" in the
site directory
"""
    else:
        workflow += """
## Queue worker

create_worker with connection=redis, queue=default, processes=2
"""
    workflow += """
## First deployment

1. deploy_site
2. get_deployment_log; when it fails, use the troubleshoot_deployment prompt

## Keep an eye on it

1. set_deployment_failure_emails for the team
2. create_backup_configuration for the database
3. enable_quick_deploy to deploy on every push (optional)
"""
    return workflow


def setup_new_server(provider: str = "", region: str = "", server_type: str = "app",
                     php_version: str = "php84", database: str = "mysql8") -> str:
    workflow = "# Complete Server Setup Workflow\n\n"
    if not provider:
        workflow += """## Choose a provider

1. Call list_credentials to see the linked provider accounts
2. Ask which provider to use (DigitalOcean, AWS, Linode, Vultr, Hetzner or custom)

"""
    if not region:
        workflow += """## Choose a region

1. Call list_regions
2. Recommend the region closest to the users, keeping data residency in mind

"""
    workflow += f"""## Create the server

1. create_server with the chosen provider, region, a size (1GB for small apps,
   2GB or more for production), php_version={php_version} and
   database_type={database}
2. Provisioning takes 5-10 minutes; keep the sudo and database passwords it returns

## Verify

1. get_server until is_ready is true
2. list_events if provisioning seems stuck
3. Note the IP address for DNS

## Secure it

1. create_firewall_rule to limit SSH (port 22) to known addresses
2. create_ssh_key for each team member

## Monitor it

1. create_monitor for disk, used_memory and cpu_load
2. server_health_check once everything is in place

## Afterwards

- create_backup_configuration for the databases
- install_blackfire or install_papertrail if the team uses them

Server type: {server_type}
PHP version: {php_version}
Database: {database}
"""
    return workflow
