"""Panel provisioning abstraction.

Defines the PanelProvisioner protocol that a Pterodactyl application API
client would conform to. The server service works against this interface,
not a specific client, so the simulated provisioner can be swapped out
without touching the server bookkeeping.
"""

import random
from typing import Protocol

from pterodeck.db.models import PanelConnection, ServerTemplate
from pterodeck.logging_config import get_logger

logger = get_logger(__name__)

SIMULATED_ID_MIN = 1000
SIMULATED_ID_MAX = 10999


class ProvisioningError(Exception):
    """The panel rejected the request or did not answer in time."""


class PanelProvisioner(Protocol):
    """Interface for creating servers on a panel.

    Receives the connection so it can resolve the panel URL and API key
    without global state.
    """

    async def create_server(
        self, conn: PanelConnection, template: ServerTemplate, server_name: str
    ) -> int:
        """Create a server and return the panel-assigned server ID.

        Raises ProvisioningError on rejection or timeout.
        """
        ...


class SimulatedProvisioner:
    """Stand-in provisioner that fabricates a panel server ID.

    Makes no network calls and never fails.
    """

    async def create_server(
        self, conn: PanelConnection, template: ServerTemplate, server_name: str
    ) -> int:
        server_id = random.randint(SIMULATED_ID_MIN, SIMULATED_ID_MAX)
        logger.debug(
            "Simulated panel server creation",
            connection_id=conn.id,
            egg_id=template.egg_id,
            server_name=server_name,
            pterodactyl_server_id=server_id,
        )
        return server_id


_provisioner: PanelProvisioner = SimulatedProvisioner()


def get_provisioner() -> PanelProvisioner:
    """FastAPI dependency returning the configured provisioner."""
    return _provisioner
