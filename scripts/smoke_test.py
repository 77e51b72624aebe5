"""
End-to-end smoke test against a running server.

    uvicorn app.main:app --reload
    python scripts/smoke_test.py [BASE_URL]

Walks the whole booking flow: register customer and worker, discover the
worker, book, accept, pay, complete, rate, and check the admin stats.
"""
import asyncio
import random
import string
import sys

import httpx

BASE_URL = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8000/api/v1"
ADMIN_EMAIL = "admin@emergency.com"
ADMIN_PASSWORD = "admin123456"


def random_string(length=8):
    return ''.join(random.choices(string.ascii_lowercase, k=length))


async def login(client: httpx.AsyncClient, email: str, password: str) -> dict:
    resp = await client.post(f"{BASE_URL}/auth/login/json", json={"email": email, "password": password})
    resp.raise_for_status()
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


async def run_smoke_test():
    async with httpx.AsyncClient(timeout=30.0) as client:
        print(f"Starting smoke test against {BASE_URL}")

        resp = await client.get(f"{BASE_URL}/health")
        if resp.status_code != 200:
            print(f"Health check failed: {resp.status_code} {resp.text}")
            return
        print("Health check passed")

        suffix = random_string()
        customer_email = f"customer_{suffix}@example.com"
        worker_email = f"worker_{suffix}@example.com"
        password = "password123"

        # 1. Register customer and worker
        resp = await client.post(f"{BASE_URL}/auth/register", json={
            "email": customer_email, "password": password,
            "name": f"Customer {suffix}", "role": "user", "phone": "9000000000",
        })
        if resp.status_code != 200:
            print(f"Customer signup failed: {resp.status_code} - {resp.text}")
            return
        print("[1] Customer registered")

        resp = await client.post(f"{BASE_URL}/auth/register", json={
            "email": worker_email, "password": password,
            "name": f"Worker {suffix}", "role": "worker", "occupation": "gardener",
            "hourly_rate": 400, "advance_payment": 100,
        })
        if resp.status_code != 200:
            print(f"Worker signup failed: {resp.status_code} - {resp.text}")
            return
        worker_id = resp.json()["user"]["id"]
        print("[1] Worker registered")

        customer_headers = await login(client, customer_email, password)
        worker_headers = await login(client, worker_email, password)

        # 2. Discover
        resp = await client.get(f"{BASE_URL}/workers/service/gardener")
        if worker_id not in [w["id"] for w in resp.json()]:
            print("New worker not listed under gardener")
            return
        print("[2] Worker discovered by service type")

        # 3. Book
        resp = await client.post(f"{BASE_URL}/requests/", headers=customer_headers, json={
            "worker_id": worker_id, "service_type": "gardener",
            "description": "Lawn overgrown", "location": "Gachibowli",
            "scheduled_time": "2026-12-31T10:00", "payment_method": "cash",
        })
        if resp.status_code != 200:
            print(f"Booking failed: {resp.status_code} - {resp.text}")
            return
        request_id = resp.json()["id"]
        print(f"[3] Request created: {request_id}")

        # 4. Lifecycle + payment
        for step, (path, body, headers) in enumerate([
            ("status", {"status": "accepted"}, worker_headers),
            ("payment", {"payment_status": "advance_paid"}, customer_headers),
            ("status", {"status": "completed"}, worker_headers),
            ("payment", {"payment_status": "paid"}, customer_headers),
        ], start=1):
            resp = await client.put(f"{BASE_URL}/requests/{request_id}/{path}", json=body, headers=headers)
            if resp.status_code != 200:
                print(f"Step 4.{step} ({path} {body}) failed: {resp.status_code} - {resp.text}")
                return
        print("[4] Request accepted, completed and paid")

        # 5. Rate
        resp = await client.post(
            f"{BASE_URL}/workers/{worker_id}/rating",
            json={"rating": 5, "review": "Great job"}, headers=customer_headers,
        )
        print(f"[5] Worker rating now {resp.json()['rating']}")

        # 6. Admin view
        admin_headers = await login(client, ADMIN_EMAIL, ADMIN_PASSWORD)
        resp = await client.get(f"{BASE_URL}/dashboard/admin/stats", headers=admin_headers)
        print(f"[6] Admin stats: {resp.json()}")
        print("Smoke test passed")


if __name__ == "__main__":
    asyncio.run(run_smoke_test())
