import logging
import os

from lxdprov import ProvisioningClient, RouteTable
from lxdprov.config import load_settings


def main():
    # Configure logging
    logging.basicConfig(level=logging.INFO, format='%(message)s')
    log = logging.getLogger(__name__)

    routes_file = os.path.join(os.path.dirname(__file__), "routes.example.json")
    server = {
        "serverhostname": os.getenv("LXD_HOST", "localhost"),
        "serverport": os.getenv("LXD_PORT", "8443"),
        "serversecure": "true",
        "serveraccesshash": os.getenv("LXD_TOKEN", ""),
    }

    with ProvisioningClient(routes=RouteTable.from_file(routes_file), settings=load_settings()) as client:
        log.info("Step 1: Testing connection...")
        log.info(f"   {client.test_connection(server)}")

        log.info("Step 2: Creating container...")
        params = dict(server, hostname="cloud1", cores="2", memory="4", storage="40")
        log.info(f"   {client.create_account(params)}")

        log.info("Step 3: Reading usage...")
        usage = client.get_usage(params)
        log.info(f"   {usage.payload if usage.success else usage.reason}")

        log.info("Step 4: Terminating container...")
        log.info(f"   {client.terminate_account(params)}")


if __name__ == "__main__":
    main()
