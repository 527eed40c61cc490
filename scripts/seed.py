#!/usr/bin/env python3
"""
Seed script: provisions a demo user with its default eval config.
Run after migrations: python scripts/seed.py
"""

import asyncio
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from evalpulse.auth.middleware import hash_api_key
from evalpulse.database import async_session_maker, engine
from evalpulse.storage.repositories import get_user_by_api_key_hash, provision_user


API_KEY = "sk_demo_evalpulse_12345"  # Demo API key - print this for user
DEMO_EMAIL = "demo@evalpulse.local"


async def seed():
    async with async_session_maker() as session:
        api_key_hash = hash_api_key(API_KEY)
        user = await get_user_by_api_key_hash(session, api_key_hash)
        if user:
            print("User already exists, using existing.")
        else:
            user = await provision_user(session, DEMO_EMAIL, api_key_hash, full_name="Demo User")
            await session.commit()
            print(f"Provisioned user {user.user_id} with default eval config.")
    await engine.dispose()

    print("Seed complete!")
    print(f"API Key: {API_KEY}")
    print(f"Use: Authorization: Bearer {API_KEY}")
    print("Example: curl -X POST http://localhost:8000/v1/ingest-eval \\")
    print('  -H "Authorization: Bearer ' + API_KEY + '" \\')
    print('  -H "Content-Type: application/json" \\')
    print('  -d \'{"interaction_id":"int_demo_1","prompt":"Hi","response":"Hello!","score":0.92,"latency_ms":140,"flags":["high-confidence"]}\'')


if __name__ == "__main__":
    asyncio.run(seed())
