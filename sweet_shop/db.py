from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from sweet_shop.core.config import Settings

def create_client(settings: Settings) -> AsyncIOMotorClient:
    # motor connects lazily, so this never blocks on a missing server
    return AsyncIOMotorClient(settings.mongo_uri, uuidRepresentation="standard")

def get_database(client: AsyncIOMotorClient, settings: Settings) -> AsyncIOMotorDatabase:
    return client[settings.db_name]
