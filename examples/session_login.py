"""Example: offline session, status check, then optional online login."""

from __future__ import annotations

import asyncio
import os

from authme import AuthMeConfig, LoginError, configure_logging, create_session_service


def install_in_host(session) -> None:
    print("Host now uses session for", session.display_name)


async def main() -> None:
    config = AuthMeConfig.from_env()
    configure_logging(config.log_level)

    async with create_session_service(config, sink=install_in_host) as service:
        service.login_offline(os.getenv("AUTHME_OFFLINE_NAME", "Player"))
        print("Offline session status:", (await service.get_status()).value)

        username = os.getenv("AUTHME_USERNAME")
        password = os.getenv("AUTHME_PASSWORD")
        if username and password:
            try:
                session = await service.login(username, password)
            except LoginError as exc:
                print("Login failed:", exc.reason)
            else:
                print("Logged in as", session.display_name)
                print("Session status:", (await service.get_status()).value)


if __name__ == "__main__":
    asyncio.run(main())
