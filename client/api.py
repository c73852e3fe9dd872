import os, requests
from dotenv import load_dotenv
load_dotenv()
API = os.getenv("API_BASE_URL", "http://localhost:8000")
API_KEY = os.getenv("APP_API_KEY", "")
IDENTITY_HEADER = os.getenv("IDENTITY_HEADER", "X-Authenticated-User")
S = requests.Session(); S.headers.update({"Content-Type":"application/json"})

def _who(user: str | None) -> dict:
    return {IDENTITY_HEADER: user} if user else {}

def healthz():   r=S.get(f"{API}/healthz",timeout=10); r.raise_for_status(); return r.json()
def whoami(user: str | None = None):
    r = S.get(f"{API}/current-user", headers=_who(user), timeout=10); r.raise_for_status(); return r.json()
def lookup(city: str):
    r = S.get(f"{API}/api/city", params={"city": city}, timeout=60)
    r.raise_for_status()
    return r.json()

def save(record: dict, user: str | None):
    headers = {"x-api-key": API_KEY, **_who(user)}
    r = S.post(f"{API}/api/save-city-data", json=record, headers=headers, timeout=30)
    r.raise_for_status()
    return r.json()

def history(city: str, user: str | None):
    r=S.get(f"{API}/api/history",params={"city":city},headers=_who(user),timeout=30); r.raise_for_status(); return r.json()
