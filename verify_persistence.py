import time
import subprocess
import httpx
import sys
import os
import signal

BASE_URL = "http://127.0.0.1:8000"
API_PREFIX = "/api"
LICENSE_NUMBER = "PERSIST-0001"
SERVER_CMD = [sys.executable, "-m", "uvicorn", "backend.app.main:app", "--host", "127.0.0.1", "--port", "8000"]


class VerificationError(Exception):
    pass


def wait_for_server(retries=10, delay=2):
    url = f"{BASE_URL}/health"
    print(f"Waiting for server at {url}...")
    for _ in range(retries):
        try:
            resp = httpx.get(url)
            if resp.status_code == 200:
                print("✅ Server is up!")
                return True
        except httpx.TransportError:
            pass
        time.sleep(delay)
    print("❌ Server failed to start.")
    return False


def stop(proc):
    proc.send_signal(signal.SIGTERM)
    proc.wait()


def run_verification():
    # 1. Start Server (First Run)
    print("\n--- [Step 1] Starting Server (Initial) ---")
    proc = subprocess.Popen(
        SERVER_CMD,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env={**os.environ, "DB_ECHO": "True"}  # Enable echo to see SQL
    )

    try:
        if not wait_for_server():
            server_logs = proc.communicate(timeout=2)
            print("Server Stdout:", server_logs[0].decode())
            print("Server Stderr:", server_logs[1].decode())
            raise VerificationError("Server start failed")

        # 2. Register Driver and Vehicle
        print("\n--- [Step 2] Registering Driver + Vehicle (Persistence Test) ---")
        resp = httpx.post(f"{BASE_URL}{API_PREFIX}/drivers", json={
            "fullName": "Persistence Check",
            "contactNumber": "000-0000",
            "licenseNumber": LICENSE_NUMBER,
            "address": "1 Durable Way",
        })

        if resp.status_code == 400 and "licenseNumber" in resp.text:
            print("⚠️ Driver already exists (persistence working from previous run?)")
        elif resp.status_code == 201:
            driver_id = resp.json()["id"]
            print(f"✅ Driver Registered Successfully ({driver_id})")
            resp = httpx.post(f"{BASE_URL}{API_PREFIX}/vehicles", json={
                "registrationNumber": f"{LICENSE_NUMBER}-V",
                "owner": driver_id,
                "vehicleType": "Car",
                "model": "Persistence",
            })
            if resp.status_code != 201:
                raise VerificationError(f"Vehicle registration failed: {resp.status_code} {resp.text}")
            print("✅ Vehicle Registered Successfully")
        else:
            print(f"❌ Registration Failed: {resp.status_code} {resp.text}")
            raise VerificationError("Registration failed")

    finally:
        print("\n--- [Step 3] Stopping Server ---")
        stop(proc)

    time.sleep(2)  # Wait for port release

    # 3. Restart Server
    print("\n--- [Step 4] Restarting Server (Verification) ---")
    proc2 = subprocess.Popen(SERVER_CMD, stdout=subprocess.PIPE, stderr=subprocess.PIPE)

    try:
        if not wait_for_server():
            raise VerificationError("Server restart failed")

        # 4. Look the records up again
        print("\n--- [Step 5] Reading Back (Post-Restart) ---")
        resp = httpx.get(f"{BASE_URL}{API_PREFIX}/drivers", params={"search": LICENSE_NUMBER})
        drivers = resp.json() if resp.status_code == 200 else []
        if not drivers:
            raise VerificationError(f"Driver missing after restart: {resp.status_code} {resp.text}")
        print("✅ Driver Persisted")

        resp = httpx.get(f"{BASE_URL}{API_PREFIX}/drivers/{drivers[0]['id']}/vehicles")
        vehicles = resp.json() if resp.status_code == 200 else []
        if vehicles and vehicles[0]["owner"]:
            print("✅ Vehicle Persisted with owner reference intact")
        else:
            print(f"❌ Vehicle Check Failed: {resp.status_code} {resp.text}")

    finally:
        print("\n--- [Step 6] Stopping Server ---")
        stop(proc2)


if __name__ == "__main__":
    run_verification()
