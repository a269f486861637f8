"""pterodeck: provisioning console for Pterodactyl-hosted servers."""

__version__ = "0.1.0"
