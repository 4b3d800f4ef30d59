from app.database.memory_store import MemoryStore, InMemoryStore
