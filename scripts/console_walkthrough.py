import time
import requests
import argparse

DEFAULT_URL = "http://127.0.0.1:8000"


def normalize_url(url: str) -> str:
    url = (url or "").strip().rstrip("/")
    if "0.0.0.0" in url:
        url = url.replace("0.0.0.0", "127.0.0.1")
    return url


def call(method, url, path, payload=None):
    r = requests.request(method, url + path, json=payload, timeout=10)
    r.raise_for_status()
    return r.json()


def show(title, out):
    result = out.get("result") or {}
    print(f"[{title}] {result.get('status', '-')}: {result.get('message', '')}")


def watch(url, title, seconds):
    print(f"\n=== {title} ({seconds}s) ===")
    end = time.time() + seconds
    while time.time() < end:
        state = call("GET", url, "/state")
        grid = "".join(slot["glyph"] or "." for slot in state["health_grid"])
        print(f"  health [{grid}]  metrics poll active={state['polling']['metrics']['active']}")
        time.sleep(1)
    print("done.")


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--url", default=DEFAULT_URL, help="Base URL of the scheduler console")
    ap.add_argument("--username", default="")
    ap.add_argument("--password", default="")
    ap.add_argument("--public-key", action="store_true", help="Log in with the bundled sample public key")
    ap.add_argument("--interval", type=int, default=2)
    ap.add_argument("--watch", type=int, default=10)
    ap.add_argument("--save", action="store_true", help="Submit the current strategy form")
    args = ap.parse_args()

    url = normalize_url(args.url)
    print(f"[walkthrough] Using URL: {url}")

    show("health", call("POST", url, "/health/check"))

    if args.public_key:
        key = call("GET", url, "/auth/sample-key")["public_key"]
        out = call("POST", url, "/auth/public-key", {"public_key": key})
    else:
        out = call("POST", url, "/auth/password", {"username": args.username, "password": args.password})
    show("login", out)

    show("health auto-refresh", call("POST", url, "/health/auto", {"interval_s": args.interval}))
    show("metrics auto-refresh", call("POST", url, "/metrics/auto", {"interval_s": args.interval}))
    watch(url, "POLLING", args.watch)

    show("pod pids", call("POST", url, "/pods/pids"))
    show("strategies", call("POST", url, "/strategies/fetch"))

    if args.save:
        show("save", call("POST", url, "/strategies/save"))

    print("\nClearing token (metrics polling must stop)...")
    show("logout", call("POST", url, "/auth/clear"))
    state = call("GET", url, "/state")
    print("metrics poll active after logout:", state["polling"]["metrics"]["active"])

    show("health auto-refresh", call("POST", url, "/health/auto", {"interval_s": args.interval}))

    print("\n✅ Walkthrough complete.")


if __name__ == "__main__":
    main()
