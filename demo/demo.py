"""
provider-sim demo: send one chat completion to a running simulator with httpx.

Usage:
    python -m provider_sim --api-key sk-poc-hardcoded-api-key-for-testing &
    python demo.py --api-key sk-poc-hardcoded-api-key-for-testing

Exit codes:
    0  success
    1  request rejected (401) or other error
"""

import argparse
import sys

import httpx

SIM_BASE_URL = "http://localhost:8000"
MODEL = "gpt-4-external"
PROMPT = "Say hello in one sentence."


def main() -> None:
    parser = argparse.ArgumentParser(description="provider-sim demo")
    parser.add_argument("--api-key", required=True, help="Key sent in X-Provider-Api-Key")
    parser.add_argument("--base-url", default=SIM_BASE_URL, help="Simulator base URL")
    args = parser.parse_args()

    try:
        resp = httpx.post(
            f"{args.base_url}/v1/chat/completions",
            headers={"X-Provider-Api-Key": args.api_key},
            json={"model": MODEL, "messages": [{"role": "user", "content": PROMPT}]},
            timeout=10,
        )
        resp.raise_for_status()
    except httpx.HTTPStatusError as exc:
        if exc.response.status_code == 401:
            # 401 bodies carry the provider error envelope
            error = exc.response.json()["error"]
            print(f"Rejected ({error['code']}): {error['message']}", file=sys.stderr)
        else:
            status = exc.response.status_code
            print(f"HTTP error {status}: {exc.response.text}", file=sys.stderr)
        sys.exit(1)
    except httpx.HTTPError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    body = resp.json()
    print(body["choices"][0]["message"]["content"])
    print(f"model={body['model']} usage={body['usage']}")


if __name__ == "__main__":
    main()
