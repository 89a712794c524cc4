# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Interactive walkthrough: authorize an athlete, then read activities.

Usage::

    python examples/quickstart.py

You are prompted for the application's client ID and secret (see
https://www.strava.com/settings/api) and for the authorization code from the
redirect URL.
"""

import json
import logging
import sys
from pathlib import Path

# Add src to PYTHONPATH for local runs
sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from strava_client import (
    StravaClient,
    StravaConfig,
    StravaError,
    StravaRateLimitError,
    StravaTokens,
    TelemetryConfig,
)


def save_tokens(tokens: StravaTokens) -> None:
    Path("strava_tokens.json").write_text(
        json.dumps(
            {
                "access_token": tokens.access_token,
                "refresh_token": tokens.refresh_token,
                "expires_at": tokens.expires_at,
            }
        )
    )
    print(f"Saved refreshed tokens (valid until {tokens.expires_at_datetime.isoformat()})")


def load_tokens():
    path = Path("strava_tokens.json")
    if not path.exists():
        return None
    return StravaTokens(**json.loads(path.read_text()))


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    client_id = input("Client ID: ").strip()
    client_secret = input("Client secret: ").strip()
    if not client_id or not client_secret:
        print("Client ID and secret are required; exiting.")
        sys.exit(1)

    config = StravaConfig(
        on_token_refresh=save_tokens,
        telemetry=TelemetryConfig(
            on_response=lambda info: print(f"  {info.method} {info.url} -> {info.status} ({info.duration_ms:.0f}ms)")
        ),
    )

    with StravaClient(client_id, client_secret, redirect_uri="http://localhost/exchange_token", config=config) as client:
        tokens = load_tokens()
        if tokens is not None:
            client.set_tokens(tokens)
        else:
            print("Open this URL, approve access, then paste the 'code' parameter from the redirect:")
            print(client.get_authorization_url(scope="read,activity:read_all"))
            code = input("Code: ").strip()
            response = client.exchange_authorization_code(code)
            save_tokens(response.to_tokens())

        try:
            athlete = client.athletes.get()
            print(f"Hello {athlete['firstname']} {athlete['lastname']}")

            print("Ten most recent activities:")
            for i, activity in enumerate(client.activities.iterate(per_page=10)):
                if i == 10:
                    break
                print(f"  {activity['start_date_local'][:10]}  {activity['name']}  {activity['distance'] / 1000:.1f} km")
        except StravaRateLimitError as exc:
            print(f"Rate limited; retry after {exc.retry_after} seconds")
        except StravaError as exc:
            print(f"Request failed [{exc.code}]: {exc.message}")

        info = client.get_rate_limit_info()
        if info is not None:
            print(
                f"Rate limit: {info.short_term.usage}/{info.short_term.limit} (15 min), "
                f"{info.long_term.usage}/{info.long_term.limit} (daily)"
            )


if __name__ == "__main__":
    main()
