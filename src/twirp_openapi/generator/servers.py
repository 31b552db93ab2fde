"""Server URL templates for SaaS deployments."""

from typing import Any


def saas_server(application: str, infomaker: bool = False) -> dict[str, Any]:
    """Build the server entry for an application.

    With ``infomaker`` the top domain becomes a variable that also allows
    infomaker.io.
    """
    server: dict[str, Any] = {
        "url": f"https://{application}-{{region}}.saas-{{env}}.navigacloud.com",
        "variables": {
            "region": {
                "default": "eu-west-1",
                "description": "the API region",
            },
            "env": {
                "default": "stage",
                "enum": ["stage", "prod", "dev"],
            },
        },
    }

    if infomaker:
        server["url"] = f"https://{application}-{{region}}.saas-{{env}}.{{domain}}"
        server["variables"]["domain"] = {
            "default": "navigacloud.com",
            "enum": ["navigacloud.com", "infomaker.io"],
            "description": "the regional top domain",
        }

    return server
