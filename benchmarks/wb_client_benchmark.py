import time, sys
from concurrent.futures import ThreadPoolExecutor

import requests
from requests.adapters import HTTPAdapter

BASE = sys.argv[1] if len(sys.argv) > 1 else "http://127.0.0.1:8080"
CLIENTS = int(sys.argv[2]) if len(sys.argv) > 2 else 10
N = int(sys.argv[3]) if len(sys.argv) > 3 else 1_000

def make_session():
    s = requests.Session()
    adapter = HTTPAdapter(pool_connections=CLIENTS, pool_maxsize=CLIENTS, max_retries=0)
    s.mount("http://", adapter)
    s.headers.update({"Connection": "keep-alive"})
    return s

def worker(n: int) -> list[int]:
    s = make_session()
    seen = []
    for _ in range(n):
        r = s.post(f"{BASE}/api/count", timeout=10)
        r.raise_for_status()
        seen.append(r.json()["count"])
    return seen

def check(counts: list[int]) -> tuple[int, int, bool]:
    """First and last count, and whether they form one run without gaps or repeats."""
    if not counts:
        return 0, 0, True
    ordered = sorted(counts)
    first, last = ordered[0], ordered[-1]
    return first, last, ordered == list(range(first, first + len(ordered)))

def main():
    t0 = time.perf_counter()

    with ThreadPoolExecutor(max_workers=CLIENTS) as ex:
        futures = [ex.submit(worker, N) for _ in range(CLIENTS)]
        counts = [c for f in futures for c in f.result()]

    dt = time.perf_counter() - t0
    total = CLIENTS * N
    rps = total / dt if dt > 0 else float("inf")
    first, last, ok = check(counts)

    print(f"clients={CLIENTS} calls_per_client={N} total_calls={total}", flush=True)
    print(f"time_sec={dt:.6f} rps={rps:.2f}", flush=True)
    print(f"count_first={first} count_last={last} distinct={len(set(counts))} ok={ok}", flush=True)

if __name__ == "__main__":
    main()
