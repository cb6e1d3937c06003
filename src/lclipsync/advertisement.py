#!/usr/bin/env python3
"""DNS-SD advertisement of a running relay.

The relay publishes one record of the configured type so clients can
find it with a browse, and retracts it on shutdown.
"""

from __future__ import annotations

import logging
import socket

from zeroconf import Error as ZeroconfError
from zeroconf import ServiceInfo
from zeroconf.asyncio import AsyncZeroconf

from lclipsync.constants import APP_TAG
from lclipsync.discovery import service_type_name

logger = logging.getLogger(__name__)


class ServiceAdvertiser:
    """Publishes and retracts the relay's advertisement record.

    Attributes:
        service_info: The published record, or None when not published.
    """

    def __init__(
        self,
        service_name: str,
        service_type: str,
        port: int,
        addresses: list[str],
    ) -> None:
        self.service_name = service_name
        self.service_type = service_type
        self.port = port
        self.addresses = addresses
        self.service_info: ServiceInfo | None = None
        self._aiozc: AsyncZeroconf | None = None

    def build_service_info(self) -> ServiceInfo:
        """Create the record describing this relay."""
        type_name = service_type_name(self.service_type)
        return ServiceInfo(
            type_name,
            f"{self.service_name}.{type_name}",
            port=self.port,
            properties={"app": APP_TAG},
            server=f"{socket.gethostname()}.local.",
            parsed_addresses=self.addresses,
        )

    async def publish(self) -> bool:
        """Announce the relay on the local network.

        A failure is logged and the relay keeps serving clients that know
        its address.

        Returns:
            True if the record was registered.
        """
        info = self.build_service_info()
        try:
            self._aiozc = AsyncZeroconf()
            announce = await self._aiozc.async_register_service(
                info, allow_name_change=True
            )
            await announce
        except (OSError, ZeroconfError) as e:
            logger.warning("Failed to advertise relay: %s", e)
            await self._close()
            return False

        self.service_info = info
        logger.info(
            "Advertising %s on port %d (%s)",
            info.name, self.port, ", ".join(self.addresses) or "no addresses",
        )
        return True

    async def retract(self) -> None:
        """Withdraw the record and release the zeroconf instance.

        Safe to call when nothing was published or more than once.
        """
        if self.service_info is not None and self._aiozc is not None:
            try:
                goodbye = await self._aiozc.async_unregister_service(self.service_info)
                await goodbye
                logger.info("Withdrew advertisement %s", self.service_info.name)
            except (OSError, ZeroconfError) as e:
                logger.warning("Failed to withdraw advertisement: %s", e)
        self.service_info = None
        await self._close()

    async def _close(self) -> None:
        if self._aiozc is not None:
            await self._aiozc.async_close()
            self._aiozc = None
