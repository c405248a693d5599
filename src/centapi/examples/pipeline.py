import asyncio
import logging

from centapi.client.client import Client
from centapi.client.config import ClientConfig
from centapi.shared.errors import ApiError, CentError


async def main():
    logging.basicConfig(level=logging.INFO)
    logging.getLogger("centapi").setLevel(logging.DEBUG)

    config = ClientConfig.from_env()
    if not config.addr:
        config.addr = "http://127.0.0.1:8000/api"

    async with Client(config) as client:
        channel = "test_channel"

        try:
            result = await client.publish(channel, {"input": "test"})
            logging.info(f"Publish successful: {result}")

            history = await client.history(channel, limit=20)
            logging.info(f"History fetch successful: {history}")

            channels = [f"test_channel_{i}" for i in range(10)]
            broadcast = await client.broadcast(channels, {"date": "2024-12-28"})
            logging.info(f"Broadcasted to {len(broadcast.responses)} channels")
        except ApiError as e:
            logging.error(f"Server rejected command: {e}")
        except CentError as e:
            logging.error(f"Request failed: {e}")

        pipe = client.pipe()
        for _ in range(10):
            pipe.add_publish("chan3", {"input": "test1"})

        try:
            batch = await client.send_pipe(pipe)
        except CentError as e:
            logging.error(f"An error occurred while sending pipe: {e}")
            return

        for index, error in batch.errors:
            logging.warning(f"Command {index} failed: {error}")
        logging.info(f"Sent {len(batch)} commands in one HTTP request")


if __name__ == "__main__":
    asyncio.run(main())
