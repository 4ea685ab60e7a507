"""Run the Day-Ahead forecast email job once, outside the web app."""

import argparse
import asyncio
import sys

from forecast_mailer.config import get_settings
from forecast_mailer.services.auth_service import UpstreamTokenError
from forecast_mailer.services.forecast_job import ForecastEmailJob
from forecast_mailer.services.forecast_service import UpstreamFetchError


def main() -> int:
    parser = argparse.ArgumentParser(description="Email the Day-Ahead forecast CSVs now")
    parser.add_argument(
        "--recipients",
        help="Comma separated recipients (overrides EMAIL_RECIPIENTS)",
    )
    parser.add_argument(
        "--strategy",
        choices=["individual", "batch"],
        help="Send one email per recipient or one email to all of them",
    )
    parser.add_argument(
        "--sources",
        help="Comma separated forecast sources (default: wind,solar)",
    )
    parser.add_argument(
        "--delay",
        type=float,
        help="Seconds to wait between sends",
    )
    args = parser.parse_args()

    overrides = {}
    if args.recipients is not None:
        overrides["email_recipients"] = args.recipients
    if args.strategy:
        overrides["recipient_strategy"] = args.strategy
    if args.sources:
        overrides["forecast_sources"] = [s.strip().lower() for s in args.sources.split(",") if s.strip()]
    if args.delay is not None:
        overrides["send_delay_seconds"] = args.delay
    config = get_settings().model_copy(update=overrides)

    try:
        summary = asyncio.run(ForecastEmailJob(config).run())
    except UpstreamTokenError as e:
        print(f"OCF token error: {e}", file=sys.stderr)
        return 1
    except UpstreamFetchError as e:
        print(f"OCF {e.source} forecast CSV fetch error: {e.detail}", file=sys.stderr)
        return 1

    print(summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
