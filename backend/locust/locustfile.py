"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Test overbooking
  locust -f locustfile.py --tags throughput   # Test room list cache
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests
"""

import random
import string
from datetime import date, timedelta

from locust import HttpUser, task, between, tag, events

PASSWORD = "loadtest123"
INVENTORY = 10

# Shared state, filled by the first user to finish setup
CONCURRENCY_ROOM_ID = None
LODGING_IDS = []

STAY_START = date.today() + timedelta(days=30)
STAY_END = STAY_START + timedelta(days=2)


def random_email():
    return f"load_{random.randint(10000, 99999)}_{random.randint(0, 9999)}@test.com"


def random_username():
    return "u_" + "".join(random.choices(string.ascii_lowercase, k=8))


def register_guest(client) -> dict:
    email = random_email()
    client.post("/api/v1/auth/register", json={
        "email": email,
        "username": random_username(),
        "password": PASSWORD,
    })
    resp = client.post("/api/v1/auth/login", json={"email": email, "password": PASSWORD})
    if resp.status_code != 200:
        return {}
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


def setup_contested_room(client) -> None:
    """A business with one lodging and a room of INVENTORY units."""
    global CONCURRENCY_ROOM_ID

    email = random_email()
    client.post("/api/v1/auth/business/register", json={
        "email": email,
        "password": PASSWORD,
        "business_name": "Load Test Hotel",
    })
    resp = client.post("/api/v1/auth/business/login", json={"email": email, "password": PASSWORD})
    if resp.status_code != 200:
        return
    headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}

    resp = client.post("/api/v1/lodgings/", json={
        "name": "Contested Lodging",
        "address": "1 Load St",
        "region": "Seoul",
    }, headers=headers)
    if resp.status_code != 201:
        return
    lodging_id = resp.json()["id"]
    LODGING_IDS.append(lodging_id)

    resp = client.post(f"/api/v1/lodgings/{lodging_id}/rooms", json={
        "name": "Last Double",
        "capacity_max": 2,
        "price": "120.00",
        "inventory_count": INVENTORY,
    }, headers=headers)
    if resp.status_code == 201:
        CONCURRENCY_ROOM_ID = resp.json()["id"]
        print(f"\nCreated room {CONCURRENCY_ROOM_ID} with {INVENTORY} units\n")


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print(f"SETUP: guests will race for {INVENTORY} units of one room")
    print("=" * 60)


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Concurrency - 100 guests -> 10 units, same dates

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After test, verify:
      SELECT COUNT(*) FROM bookings
      WHERE room_id = X AND booking_status IN ('pending', 'confirmed');
    Should be <= 10
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        if CONCURRENCY_ROOM_ID is None:
            setup_contested_room(self.client)
        self.headers = register_guest(self.client)

    @tag("concurrency")
    @task
    def book_contested_room(self):
        if CONCURRENCY_ROOM_ID is None or not self.headers:
            return

        with self.client.post("/api/v1/bookings/",
            json={
                "room_id": CONCURRENCY_ROOM_ID,
                "adult": 2,
                "checkin_date": STAY_START.isoformat(),
                "checkout_date": STAY_END.isoformat(),
            },
            headers=self.headers,
            catch_response=True
        ) as resp:
            if resp.status_code == 201:
                resp.success()
            elif resp.status_code == 409:
                resp.success()  # Expected: fully booked
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - room list cache effectiveness

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: REDIS_ENABLED=false, run again

    Compare avg response time, requests/sec and P95/P99 latency.
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_rooms_cached(self):
        if not LODGING_IDS:
            return
        lodging_id = random.choice(LODGING_IDS)
        self.client.get(f"/api/v1/lodgings/{lodging_id}/rooms",
            name="/api/v1/lodgings/{id}/rooms [cached]")

    @tag("throughput", "read")
    @task(3)
    def get_room_detail(self):
        if CONCURRENCY_ROOM_ID is not None:
            self.client.get(f"/api/v1/rooms/{CONCURRENCY_ROOM_ID}",
                name="/api/v1/rooms/{id}")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.headers = register_guest(self.client)

    @tag("edge")
    @task
    def unknown_room(self):
        with self.client.post("/api/v1/bookings/",
            json={
                "room_id": 999999,
                "checkin_date": STAY_START.isoformat(),
                "checkout_date": STAY_END.isoformat(),
            },
            headers=self.headers,
            catch_response=True
        ) as resp:
            if resp.status_code == 404:
                resp.success()
            else:
                resp.failure(f"Expected 404, got {resp.status_code}")

    @tag("edge")
    @task
    def reversed_dates(self):
        with self.client.post("/api/v1/bookings/",
            json={
                "room_id": CONCURRENCY_ROOM_ID or 1,
                "checkin_date": STAY_END.isoformat(),
                "checkout_date": STAY_START.isoformat(),
            },
            headers=self.headers,
            catch_response=True
        ) as resp:
            if resp.status_code == 422:
                resp.success()
            else:
                resp.failure(f"Expected 422, got {resp.status_code}")

    @tag("edge")
    @task
    def too_many_guests(self):
        if CONCURRENCY_ROOM_ID is None:
            return
        with self.client.post("/api/v1/bookings/",
            json={
                "room_id": CONCURRENCY_ROOM_ID,
                "adult": 9,
                "checkin_date": STAY_START.isoformat(),
                "checkout_date": STAY_END.isoformat(),
            },
            headers=self.headers,
            catch_response=True
        ) as resp:
            if resp.status_code == 400:
                resp.success()
            else:
                resp.failure(f"Expected 400, got {resp.status_code}")
