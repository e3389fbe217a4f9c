import asyncio

import logging
from barterpy.account import Account
from barterpy.exceptions import RequestError, SessionExpiredError
import config

EMAIL = config.EMAIL
PASSWORD = config.PASSWORD


async def main():
    logging.getLogger().setLevel(logging.DEBUG)
    logging.debug("Demo started")

    # Restore the session stored in the OS keychain, if any
    account = Account()
    try:
        user = await account.connect()
        if user is None:
            if not EMAIL or not PASSWORD:
                logging.error("Set BARTER_EMAIL and BARTER_PASSWORD to log in")
                return
            user = await account.login(EMAIL, PASSWORD)
        logging.debug("Signed in as %s (%s)", user.display_name, user.username)

        feed = await account.api.get_discovery_feed()
        logging.debug("Discovery feed:")
        for listing in feed:
            logging.debug("\t%s: %s ($%s)", listing.id, listing.title, listing.estimated_value)

        for offer in await account.api.get_received_offers():
            logging.debug("\tOffer %s [%s]", offer.id, offer.status)

        # Keep alive and refresh periodically
        while True:
            await asyncio.sleep(300)
            await account.refresh_user()
    except SessionExpiredError:
        logging.error("Session expired, log in again")
    except RequestError as err:
        logging.error("Request failed: %s", err)
    finally:
        await account.disconnect()


if __name__ == "__main__":
    logging.basicConfig()
    asyncio.run(main())
