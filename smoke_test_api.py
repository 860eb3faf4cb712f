"""
Smoke Test for the Projects API - Ownership Isolation & Admin Override

Tests:
1. Register/login two users (A and B)
2. Create a project as A
3. Verify B cannot see A's project in their list
4. Verify B gets 403 on get/patch/delete of A's project
5. Verify B gets 403 on the admin endpoints
6. Verify the seeded admin can list and delete A's project

Run: python smoke_test_api.py

Requirements:
- API running on localhost:8000 (or BASE_URL env var)
- Seed data loaded (python -m projects_api.seed) for test 6
"""

import os
import sys
import uuid
from typing import Any, Dict, Optional

import requests

BASE_URL = os.getenv("BASE_URL", "http://localhost:8000")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "Admin@1234")


class TestResult:
    def __init__(self):
        self.passed = 0
        self.failed = 0
        self.tests = []

    def add_pass(self, name: str, detail: str = ""):
        self.passed += 1
        self.tests.append(("PASS", name, detail))
        print(f"PASS: {name}")
        if detail:
            print(f"  -> {detail}")

    def add_fail(self, name: str, detail: str = ""):
        self.failed += 1
        self.tests.append(("FAIL", name, detail))
        print(f"FAIL: {name}")
        if detail:
            print(f"  -> {detail}")

    def expect_status(self, name: str, resp: requests.Response, expected: int):
        if resp.status_code == expected:
            self.add_pass(name, f"got {expected}")
        else:
            self.add_fail(name, f"expected {expected}, got {resp.status_code}: {resp.text[:200]}")

    def summary(self):
        print("\n" + "=" * 60)
        print(f"SMOKE TEST SUMMARY: {self.passed} passed, {self.failed} failed")
        print("=" * 60)
        return self.failed == 0


def auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def login(email: str, password: str) -> Optional[Dict[str, Any]]:
    resp = requests.post(f"{BASE_URL}/auth/login", json={"email": email, "password": password})
    if resp.status_code != 200:
        return None
    return resp.json()["data"]


def register(email: str, password: str, name: str) -> Optional[Dict[str, Any]]:
    """Register a new user, falling back to login if the email is taken."""
    resp = requests.post(
        f"{BASE_URL}/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    if resp.status_code == 201:
        return resp.json()["data"]
    if resp.status_code == 409:
        return login(email, password)
    return None


def create_project(token: str, title: str) -> Optional[str]:
    resp = requests.post(
        f"{BASE_URL}/projects",
        json={"title": title, "description": "created by smoke test"},
        headers=auth_headers(token),
    )
    if resp.status_code == 201:
        return resp.json()["data"]["id"]
    return None


def main():
    result = TestResult()
    suffix = uuid.uuid4().hex[:8]

    print("=" * 60)
    print(f"SMOKE TEST: Projects API ({BASE_URL})")
    print("=" * 60)
    print()

    # Test 1: Setup
    print("TEST 1: Setup - Register two users")
    print("-" * 60)

    user_a = register(f"smoke_a_{suffix}@example.com", "password123", "Smoke A")
    user_b = register(f"smoke_b_{suffix}@example.com", "password123", "Smoke B")

    if not user_a or not user_b:
        result.add_fail("Setup", "Failed to register/login test users")
        result.summary()
        return 1

    result.add_pass("Setup", f"A={user_a['user']['id']}, B={user_b['user']['id']}")
    print()

    # Test 2: Create project as A
    print("TEST 2: Create project as A")
    print("-" * 60)

    project_id = create_project(user_a["token"], f"Smoke Project {suffix}")
    if not project_id:
        result.add_fail("Project Creation", "Failed to create project as A")
        result.summary()
        return 1

    result.add_pass("Project Creation", f"Created project ID={project_id}")
    print()

    # Test 3: B's list excludes A's project
    print("TEST 3: Ownership Isolation - List")
    print("-" * 60)

    headers_b = auth_headers(user_b["token"])
    resp = requests.get(f"{BASE_URL}/projects", headers=headers_b)
    if resp.status_code == 200:
        items = resp.json()["data"]["items"]
        if any(p["id"] == project_id for p in items):
            result.add_fail("Isolation - List", "B can see A's project!")
        else:
            result.add_pass("Isolation - List", "B cannot see A's project")
    else:
        result.add_fail("Isolation - List", f"Unexpected status {resp.status_code}")
    print()

    # Test 4: B cannot touch A's project
    print("TEST 4: Ownership Isolation - Get/Patch/Delete")
    print("-" * 60)

    url = f"{BASE_URL}/projects/{project_id}"
    result.expect_status("Isolation - Get", requests.get(url, headers=headers_b), 403)
    result.expect_status("Isolation - Patch", requests.patch(url, json={"status": "done"}, headers=headers_b), 403)
    result.expect_status("Isolation - Delete", requests.delete(url, headers=headers_b), 403)
    result.expect_status(
        "Missing project",
        requests.get(f"{BASE_URL}/projects/does-not-exist-{suffix}", headers=headers_b),
        404,
    )
    print()

    # Test 5: B is not an admin
    print("TEST 5: RBAC - Non-admin on admin routes")
    print("-" * 60)

    result.expect_status("RBAC - Admin list", requests.get(f"{BASE_URL}/admin/projects", headers=headers_b), 403)
    result.expect_status("RBAC - No token", requests.get(f"{BASE_URL}/admin/projects"), 401)
    print()

    # Test 6: Admin override
    print("TEST 6: Admin - List and delete any project")
    print("-" * 60)

    admin = login(ADMIN_EMAIL, ADMIN_PASSWORD)
    if not admin:
        print("SKIP: admin login failed; run python -m projects_api.seed first")
    else:
        headers_admin = auth_headers(admin["token"])
        resp = requests.get(f"{BASE_URL}/admin/projects?limit=50", headers=headers_admin)
        if resp.status_code == 200 and "owner" in (resp.json()["data"]["items"] or [{}])[0]:
            result.add_pass("Admin - List", f"total={resp.json()['data']['total']}")
        else:
            result.add_fail("Admin - List", f"Unexpected response {resp.status_code}")

        result.expect_status(
            "Admin - Delete",
            requests.delete(f"{BASE_URL}/admin/projects/{project_id}", headers=headers_admin),
            200,
        )
        result.expect_status("Admin - Deleted is gone", requests.get(url, headers=auth_headers(user_a["token"])), 404)
    print()

    success = result.summary()
    return 0 if success else 1


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\nTest interrupted by user")
        sys.exit(1)
    except requests.ConnectionError as e:
        print(f"\n\nERROR: cannot reach {BASE_URL}: {e}")
        sys.exit(1)
