"""Google Pub/Sub subscriber constants."""

SUBSCRIPTION_NAME_FORMAT = "projects/{project}/subscriptions/{name}"

# Lease auto-extension when explicit credentials are configured. Zero leaves the
# processing deadline entirely to the application.
EXPLICIT_CREDENTIALS_MAX_LEASE_SECONDS = 0


def format_subscription_name(project: str, name: str) -> str:
    return SUBSCRIPTION_NAME_FORMAT.format(project=project, name=name)
