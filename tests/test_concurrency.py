import asyncio

import httpx
import pytest

from config import Settings
from main import create_app


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.mark.anyio
async def test_register_does_not_block_other_requests(tmp_path):
    settings = Settings(
        SECRET_KEY="test-secret-key",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'expense_tracker.db'}",
        # slow enough that the hash outlives the second request
        PASSWORD_HASH_ROUNDS=40,
        _env_file=None,
    )
    app = create_app(settings)

    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            register = asyncio.create_task(
                client.post("/register", json={"username": "bob", "password": "pw"})
            )
            await asyncio.sleep(0.1)

            response = await client.get("/")
            assert response.status_code == 401
            assert not register.done()

            assert (await register).status_code == 201
